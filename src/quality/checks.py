"""
Quality checks over canonical (silver) and dimensional (gold) tables.

Each check selects the offending rows; an empty selection means the check
passed.
"""

from datetime import date
from typing import Callable

from pyspark.errors import PySparkException
from pyspark.sql import DataFrame
from pyspark.sql import functions as F

from src.core.errors import VerificationError
from src.core.models import ConsistencyViolation
from src.core.rules import CanonicalMappings
from src.core.schema import (
    CRM_CUST_INFO,
    CRM_PRD_INFO,
    CRM_SALES_DETAILS,
    DIM_CUSTOMERS,
    DIM_PRODUCTS,
    ERP_CUST_AZ12,
    ERP_LOC_A101,
    ERP_PX_CAT_G1V2,
    FACT_SALES,
)

EARLIEST_BIRTH_DATE = date(1924, 1, 1)

Tables = dict[str, DataFrame]


class QualityCheck:
    """
    A named query returning the rows that violate one expectation.
    """

    def __init__(
        self,
        name: str,
        layer: str,
        table: str,
        description: str,
        query: Callable[[DataFrame, Tables], DataFrame],
    ):
        """
        Initialize a check.

        Args:
            name: Check identifier
            layer: "silver" or "gold"
            table: Table the check reads
            description: The expectation, in words
            query: (table DataFrame, all tables) -> offending rows
        """
        self.name = name
        self.layer = layer
        self.table = table
        self.description = description
        self.query = query

    def run(self, tables: Tables, sample_size: int = 5) -> ConsistencyViolation | None:
        """
        Run the check against a snapshot.

        Returns:
            A violation describing the offending rows, or None if there are none

        Raises:
            VerificationError: If Spark fails to evaluate the check
        """
        try:
            offending = self.query(tables[self.table], tables)
            count = offending.count()
            if count == 0:
                return None
            samples = [row.asDict() for row in offending.limit(sample_size).collect()]
        except PySparkException as e:
            raise VerificationError(self.table, f"check {self.name} could not run: {e}") from e

        return ConsistencyViolation(
            check_name=self.name,
            layer=self.layer,
            table=self.table,
            description=self.description,
            violation_count=count,
            samples=samples,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name}, table={self.table})"


def duplicate_or_null_keys(key: str) -> Callable[[DataFrame, Tables], DataFrame]:
    """Keys that are null or appear more than once."""
    def query(df: DataFrame, _: Tables) -> DataFrame:
        return df.groupBy(key).count().filter((F.col("count") > 1) | F.col(key).isNull())
    return query


def missing_dense_keys(key: str) -> Callable[[DataFrame, Tables], DataFrame]:
    """Values of 1..row count that no row carries."""
    def query(df: DataFrame, _: Tables) -> DataFrame:
        expected = df.sparkSession.range(1, df.count() + 1).withColumnRenamed("id", key)
        return expected.join(df.select(F.col(key).cast("long").alias(key)), on=key, how="left_anti")
    return query


def untrimmed(*columns: str) -> Callable[[DataFrame, Tables], DataFrame]:
    """Rows where any of ``columns`` has leading or trailing whitespace."""
    def query(df: DataFrame, _: Tables) -> DataFrame:
        condition = F.lit(False)
        for name in columns:
            condition = condition | (F.col(name) != F.trim(F.col(name)))
        return df.filter(condition)
    return query


def outside_domain(column: str, allowed: set[str]) -> Callable[[DataFrame, Tables], DataFrame]:
    """Distinct values of ``column`` outside the allowed labels."""
    def query(df: DataFrame, _: Tables) -> DataFrame:
        return df.select(column).distinct().filter(F.col(column).isNull() | ~F.col(column).isin(sorted(allowed)))
    return query


def unresolved_reference(key: str, dimension: str) -> Callable[[DataFrame, Tables], DataFrame]:
    """Fact rows whose ``key`` has no row in ``dimension`` (null keys included)."""
    def query(df: DataFrame, tables: Tables) -> DataFrame:
        return df.join(tables[dimension].select(key), on=key, how="left_anti")
    return query


def inconsistent_measures(df: DataFrame, _: Tables) -> DataFrame:
    sales, quantity, price = F.col("sls_sales"), F.col("sls_quantity"), F.col("sls_price")
    return df.filter(
        sales.isNull() | quantity.isNull() | price.isNull()
        | (sales <= 0) | (quantity <= 0) | (price <= 0)
        | (sales != quantity * price)
    ).select("sls_ord_num", "sls_sales", "sls_quantity", "sls_price")


def silver_checks(mappings: CanonicalMappings, as_of: date) -> list[QualityCheck]:
    """Checks over the canonical tables."""
    return [
        QualityCheck(
            "crm_cust_info_id_unique", "silver", CRM_CUST_INFO,
            "Customer id is unique and not null",
            duplicate_or_null_keys("cst_id"),
        ),
        QualityCheck(
            "crm_cust_info_key_trimmed", "silver", CRM_CUST_INFO,
            "Customer key has no surrounding whitespace",
            untrimmed("cst_key"),
        ),
        QualityCheck(
            "crm_cust_info_marital_status_domain", "silver", CRM_CUST_INFO,
            "Marital status is a known label",
            outside_domain("cst_marital_status", mappings.allowed_values("marital_status")),
        ),
        QualityCheck(
            "crm_cust_info_gender_domain", "silver", CRM_CUST_INFO,
            "Gender is a known label",
            outside_domain("cst_gndr", mappings.allowed_values("customer_gender")),
        ),
        QualityCheck(
            "crm_prd_info_id_unique", "silver", CRM_PRD_INFO,
            "Product id is unique and not null",
            duplicate_or_null_keys("prd_id"),
        ),
        QualityCheck(
            "crm_prd_info_name_trimmed", "silver", CRM_PRD_INFO,
            "Product name has no surrounding whitespace",
            untrimmed("prd_nm"),
        ),
        QualityCheck(
            "crm_prd_info_cost_valid", "silver", CRM_PRD_INFO,
            "Product cost is present and not negative",
            lambda df, _: df.filter(F.col("prd_cost").isNull() | (F.col("prd_cost") < 0)),
        ),
        QualityCheck(
            "crm_prd_info_line_domain", "silver", CRM_PRD_INFO,
            "Product line is a known label",
            outside_domain("prd_line", mappings.allowed_values("product_line")),
        ),
        QualityCheck(
            "crm_prd_info_date_order", "silver", CRM_PRD_INFO,
            "Product versions do not end before they start",
            lambda df, _: df.filter(F.col("prd_end_dt") < F.col("prd_start_dt")),
        ),
        QualityCheck(
            "crm_sales_details_date_order", "silver", CRM_SALES_DETAILS,
            "Orders are placed no later than they ship or fall due",
            lambda df, _: df.filter(
                (F.col("sls_order_dt") > F.col("sls_ship_dt")) | (F.col("sls_order_dt") > F.col("sls_due_dt"))
            ),
        ),
        QualityCheck(
            "crm_sales_details_measures_consistent", "silver", CRM_SALES_DETAILS,
            "Sales equal quantity times price and all measures are positive",
            inconsistent_measures,
        ),
        QualityCheck(
            "erp_cust_az12_birth_date_range", "silver", ERP_CUST_AZ12,
            f"Birth dates fall between {EARLIEST_BIRTH_DATE.isoformat()} and today",
            lambda df, _: df.select("bdate").distinct().filter(
                (F.col("bdate") < F.lit(EARLIEST_BIRTH_DATE)) | (F.col("bdate") > F.lit(as_of))
            ),
        ),
        QualityCheck(
            "erp_cust_az12_gender_domain", "silver", ERP_CUST_AZ12,
            "ERP gender is a known label",
            outside_domain("gen", mappings.allowed_values("erp_gender")),
        ),
        QualityCheck(
            "erp_loc_a101_country_domain", "silver", ERP_LOC_A101,
            "Country is a known label",
            outside_domain("country", mappings.allowed_values("country")),
        ),
        QualityCheck(
            "erp_px_cat_g1v2_text_trimmed", "silver", ERP_PX_CAT_G1V2,
            "Category texts have no surrounding whitespace",
            untrimmed("cat", "subcat", "maintenance"),
        ),
    ]


def gold_checks() -> list[QualityCheck]:
    """Checks over the dimension and fact tables."""
    return [
        QualityCheck(
            "dim_customers_key_unique", "gold", DIM_CUSTOMERS,
            "customer_key is unique and not null",
            duplicate_or_null_keys("customer_key"),
        ),
        QualityCheck(
            "dim_customers_key_dense", "gold", DIM_CUSTOMERS,
            "customer_key covers 1..N without gaps",
            missing_dense_keys("customer_key"),
        ),
        QualityCheck(
            "dim_customers_id_unique", "gold", DIM_CUSTOMERS,
            "customer_id appears once, so sales lines join to one customer",
            duplicate_or_null_keys("customer_id"),
        ),
        QualityCheck(
            "dim_products_key_unique", "gold", DIM_PRODUCTS,
            "product_key is unique and not null",
            duplicate_or_null_keys("product_key"),
        ),
        QualityCheck(
            "dim_products_key_dense", "gold", DIM_PRODUCTS,
            "product_key covers 1..N without gaps",
            missing_dense_keys("product_key"),
        ),
        QualityCheck(
            "dim_products_number_unique", "gold", DIM_PRODUCTS,
            "One active version per product_number, so sales lines join to one product",
            duplicate_or_null_keys("product_number"),
        ),
        QualityCheck(
            "fact_sales_unresolved_product", "gold", FACT_SALES,
            "Every sales line resolves to an active product",
            unresolved_reference("product_key", DIM_PRODUCTS),
        ),
        QualityCheck(
            "fact_sales_unresolved_customer", "gold", FACT_SALES,
            "Every sales line resolves to a customer",
            unresolved_reference("customer_key", DIM_CUSTOMERS),
        ),
    ]
