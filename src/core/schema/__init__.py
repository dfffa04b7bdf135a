"""
Raw, canonical and dimensional table schemas.
"""

from .canonical import CANONICAL_SCHEMAS, SILVER_SCHEMA
from .gold import DIM_CUSTOMERS, DIM_PRODUCTS, FACT_SALES, GOLD_SCHEMA, GOLD_SCHEMAS
from .raw import (
    CRM_CUST_INFO,
    CRM_PRD_INFO,
    CRM_SALES_DETAILS,
    ERP_CUST_AZ12,
    ERP_LOC_A101,
    ERP_PX_CAT_G1V2,
    RAW_SCHEMAS,
)

__all__ = [
    "CRM_CUST_INFO",
    "CRM_PRD_INFO",
    "CRM_SALES_DETAILS",
    "ERP_CUST_AZ12",
    "ERP_LOC_A101",
    "ERP_PX_CAT_G1V2",
    "RAW_SCHEMAS",
    "CANONICAL_SCHEMAS",
    "SILVER_SCHEMA",
    "DIM_CUSTOMERS",
    "DIM_PRODUCTS",
    "FACT_SALES",
    "GOLD_SCHEMA",
    "GOLD_SCHEMAS",
]
