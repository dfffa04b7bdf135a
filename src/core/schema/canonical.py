"""
Schemas of the canonical (silver) tables produced by the transformation engine.

Canonical tables keep the raw table names; they live in the ``silver``
warehouse schema.
"""

from pyspark.sql.types import (
    DateType,
    IntegerType,
    StringType,
    StructField,
    StructType,
)

from .raw import (
    CRM_CUST_INFO,
    CRM_PRD_INFO,
    CRM_SALES_DETAILS,
    ERP_CUST_AZ12,
    ERP_LOC_A101,
    ERP_PX_CAT_G1V2,
    RAW_ERP_CATEGORY_SCHEMA,
)

SILVER_SCHEMA = "silver"

CANONICAL_CUSTOMER_SCHEMA = StructType([
    StructField("cst_id", IntegerType(), False),
    StructField("cst_key", StringType(), True),
    StructField("cst_firstname", StringType(), True),
    StructField("cst_lastname", StringType(), True),
    StructField("cst_marital_status", StringType(), False),
    StructField("cst_gndr", StringType(), False),
    StructField("cst_create_date", DateType(), True),
])

CANONICAL_PRODUCT_SCHEMA = StructType([
    StructField("prd_id", IntegerType(), True),
    StructField("cat_id", StringType(), True),
    StructField("prd_key", StringType(), True),
    StructField("prd_nm", StringType(), True),
    StructField("prd_cost", IntegerType(), False),
    StructField("prd_line", StringType(), False),
    StructField("prd_start_dt", DateType(), True),
    StructField("prd_end_dt", DateType(), True),
])

CANONICAL_SALES_SCHEMA = StructType([
    StructField("sls_ord_num", StringType(), True),
    StructField("sls_prd_key", StringType(), True),
    StructField("sls_cust_id", IntegerType(), True),
    StructField("sls_order_dt", DateType(), True),
    StructField("sls_ship_dt", DateType(), True),
    StructField("sls_due_dt", DateType(), True),
    StructField("sls_sales", IntegerType(), True),
    StructField("sls_quantity", IntegerType(), True),
    StructField("sls_price", IntegerType(), True),
])

CANONICAL_ERP_CUSTOMER_SCHEMA = StructType([
    StructField("cid", StringType(), True),
    StructField("bdate", DateType(), True),
    StructField("gen", StringType(), False),
])

CANONICAL_ERP_LOCATION_SCHEMA = StructType([
    StructField("cid", StringType(), True),
    StructField("country", StringType(), False),
])

CANONICAL_ERP_CATEGORY_SCHEMA = RAW_ERP_CATEGORY_SCHEMA

CANONICAL_SCHEMAS: dict[str, StructType] = {
    CRM_CUST_INFO: CANONICAL_CUSTOMER_SCHEMA,
    CRM_PRD_INFO: CANONICAL_PRODUCT_SCHEMA,
    CRM_SALES_DETAILS: CANONICAL_SALES_SCHEMA,
    ERP_CUST_AZ12: CANONICAL_ERP_CUSTOMER_SCHEMA,
    ERP_LOC_A101: CANONICAL_ERP_LOCATION_SCHEMA,
    ERP_PX_CAT_G1V2: CANONICAL_ERP_CATEGORY_SCHEMA,
}
