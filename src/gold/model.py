"""
Dimensional model assembly: canonical (silver) snapshot -> dimensions and fact.
"""

from pyspark.sql import DataFrame

from src.core.errors import TransformationError
from src.core.rules.mapping_config import UNKNOWN_LABEL
from src.core.schema.gold import DIM_CUSTOMERS, DIM_PRODUCTS, FACT_SALES
from src.core.schema.raw import (
    CRM_CUST_INFO,
    CRM_PRD_INFO,
    CRM_SALES_DETAILS,
    ERP_CUST_AZ12,
    ERP_LOC_A101,
    ERP_PX_CAT_G1V2,
)
from src.observability.logger import get_logger, log_operation

from .dimensions import build_dim_customers, build_dim_products
from .facts import build_fact_sales

logger = get_logger(__name__)


class DimensionalModel:
    """
    Builds dim_customers, dim_products and fact_sales for one run.

    Both dimensions are assembled before the fact, so the fact always
    resolves against the dimensions of the same canonical snapshot.
    """

    def __init__(self, unknown_label: str = UNKNOWN_LABEL):
        self.unknown_label = unknown_label

    def build(self, canonical: dict[str, DataFrame]) -> dict[str, DataFrame]:
        """
        Assemble the gold tables.

        Args:
            canonical: Canonical table name -> DataFrame

        Returns:
            Gold table name -> DataFrame (dimensions first, then the fact)

        Raises:
            TransformationError: If a canonical set the model needs is absent
        """
        for table in (CRM_CUST_INFO, CRM_PRD_INFO, CRM_SALES_DETAILS, ERP_CUST_AZ12, ERP_LOC_A101, ERP_PX_CAT_G1V2):
            if table not in canonical:
                raise TransformationError(table, "canonical set is absent from the snapshot")

        gold: dict[str, DataFrame] = {}

        with log_operation("build dimension", logger=logger, entity=DIM_CUSTOMERS):
            gold[DIM_CUSTOMERS] = build_dim_customers(
                canonical[CRM_CUST_INFO],
                canonical[ERP_CUST_AZ12],
                canonical[ERP_LOC_A101],
                unknown_label=self.unknown_label,
            )

        with log_operation("build dimension", logger=logger, entity=DIM_PRODUCTS):
            gold[DIM_PRODUCTS] = build_dim_products(canonical[CRM_PRD_INFO], canonical[ERP_PX_CAT_G1V2])

        with log_operation("build fact", logger=logger, entity=FACT_SALES):
            gold[FACT_SALES] = build_fact_sales(
                canonical[CRM_SALES_DETAILS],
                gold[DIM_PRODUCTS],
                gold[DIM_CUSTOMERS],
            )

        return gold
