"""
Transformation engine: raw (bronze) snapshot -> canonical (silver) snapshot.

The engine is a pure function of the raw DataFrames, the lookup tables and
the as-of date. Malformed values are repaired or mapped to null / "N/A";
only structurally invalid raw sets raise.
"""

from datetime import date

from pyspark.errors import AnalysisException
from pyspark.sql import DataFrame

from src.core.errors import TransformationError
from src.core.rules import CanonicalMappings
from src.core.schema.raw import (
    CRM_CUST_INFO,
    CRM_PRD_INFO,
    CRM_SALES_DETAILS,
    ERP_CUST_AZ12,
    ERP_LOC_A101,
    ERP_PX_CAT_G1V2,
    RAW_SCHEMAS,
)
from src.observability.logger import get_logger, log_operation

from .customers import transform_customers
from .erp import transform_erp_categories, transform_erp_customers, transform_erp_locations
from .products import transform_products
from .sales import transform_sales

logger = get_logger(__name__)


class TransformationEngine:
    """
    Maps each raw record set to its canonical counterpart.

    The six transformations are independent of each other; the output is
    keyed by table name exactly like the input.
    """

    def __init__(self, mappings: CanonicalMappings | None = None, as_of: date | None = None):
        """
        Initialize the engine.

        Args:
            mappings: Lookup tables (defaults when None)
            as_of: Date treated as today for birth date validation
        """
        self.mappings = mappings or CanonicalMappings()
        self.as_of = as_of or date.today()

    def transform(self, raw: dict[str, DataFrame]) -> dict[str, DataFrame]:
        """
        Transform a full raw snapshot.

        Args:
            raw: Raw table name -> DataFrame, one entry per raw table

        Returns:
            Canonical table name -> DataFrame

        Raises:
            TransformationError: If a raw set is absent or structurally invalid
        """
        canonical = {}
        for table in RAW_SCHEMAS:
            if table not in raw:
                raise TransformationError(table, "raw set is absent from the snapshot")
            with log_operation("transform", logger=logger, entity=table):
                canonical[table] = self.transform_table(table, raw[table])
        return canonical

    def transform_table(self, table: str, df: DataFrame) -> DataFrame:
        """
        Apply one table's canonicalization rules.

        Args:
            table: Raw table name
            df: Raw records of that table

        Returns:
            Canonical DataFrame

        Raises:
            TransformationError: If the table is unknown or its rules cannot be planned
        """
        try:
            if table == CRM_CUST_INFO:
                return transform_customers(df, self.mappings)
            if table == CRM_PRD_INFO:
                return transform_products(df, self.mappings, self.as_of)
            if table == CRM_SALES_DETAILS:
                return transform_sales(df)
            if table == ERP_CUST_AZ12:
                return transform_erp_customers(df, self.mappings, self.as_of)
            if table == ERP_LOC_A101:
                return transform_erp_locations(df, self.mappings)
            if table == ERP_PX_CAT_G1V2:
                return transform_erp_categories(df)
        except AnalysisException as e:
            raise TransformationError(table, f"rules cannot be applied: {e}") from e

        raise TransformationError(table, "no transformation is defined for this table")
