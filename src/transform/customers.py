"""
CRM customer canonicalization.

One survivor per customer id: the most recently created record wins.
Equal create dates fall back to ascending cst_key, first name, last name,
marital code and gender code (nulls last), so the survivor never depends on
input order.
"""

from pyspark.sql import DataFrame, Window
from pyspark.sql import functions as F

from src.core.rules import CanonicalMappings
from src.core.schema.canonical import CANONICAL_CUSTOMER_SCHEMA
from src.core.schema.raw import CRM_CUST_INFO, RAW_CUSTOMER_SCHEMA

from .columns import conform, map_codes, require_columns

TIE_BREAK_COLUMNS = ("cst_key", "cst_firstname", "cst_lastname", "cst_marital_status", "cst_gndr")


def transform_customers(df: DataFrame, mappings: CanonicalMappings) -> DataFrame:
    """
    Deduplicate and normalize raw CRM customers.

    Args:
        df: Raw crm_cust_info records
        mappings: Lookup tables for marital status and gender codes

    Returns:
        Canonical customers, unique on cst_id
    """
    require_columns(df, CRM_CUST_INFO, RAW_CUSTOMER_SCHEMA)

    latest_first = Window.partitionBy("cst_id").orderBy(
        F.col("cst_create_date").desc_nulls_last(),
        *[F.col(name).asc_nulls_last() for name in TIE_BREAK_COLUMNS],
    )

    survivors = df \
        .filter(F.col("cst_id").isNotNull()) \
        .withColumn("_rank", F.row_number().over(latest_first)) \
        .filter(F.col("_rank") == 1)

    canonical = survivors \
        .withColumn("cst_firstname", F.trim(F.col("cst_firstname"))) \
        .withColumn("cst_lastname", F.trim(F.col("cst_lastname"))) \
        .withColumn(
            "cst_marital_status",
            map_codes(F.col("cst_marital_status"), mappings.marital_status, mappings.unknown_label),
        ) \
        .withColumn(
            "cst_gndr",
            map_codes(F.col("cst_gndr"), mappings.customer_gender, mappings.unknown_label),
        )

    return conform(canonical, CANONICAL_CUSTOMER_SCHEMA)
