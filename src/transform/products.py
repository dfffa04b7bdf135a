"""
CRM product canonicalization.

The raw product key packs the category id and the product number:
"CO-RF-FR-R92B-58" -> category "CO_RF", product "FR-R92B-58". Every
version of a product carries its own start date; a version ends the day
before the next version of the same product starts.
"""

from datetime import date

from pyspark.sql import DataFrame, Window
from pyspark.sql import functions as F

from src.core.rules import CanonicalMappings
from src.core.schema.canonical import CANONICAL_PRODUCT_SCHEMA
from src.core.schema.raw import CRM_PRD_INFO, RAW_PRODUCT_SCHEMA

from .columns import conform, map_codes, require_columns, substring_from

CATEGORY_PREFIX_LENGTH = 5
PRODUCT_NUMBER_START = 7


def transform_products(df: DataFrame, mappings: CanonicalMappings, as_of: date | None = None) -> DataFrame:
    """
    Derive category ids, product numbers, lines and validity ranges.

    Args:
        df: Raw crm_prd_info records
        mappings: Lookup tables (product_line)
        as_of: Closing date for superseded versions without a known successor start

    Returns:
        Canonical products, one row per raw product version
    """
    require_columns(df, CRM_PRD_INFO, RAW_PRODUCT_SCHEMA)

    raw_key = F.col("prd_key")
    derived = df \
        .withColumn(
            "cat_id",
            F.regexp_replace(F.substring(raw_key, 1, CATEGORY_PREFIX_LENGTH), "-", "_"),
        ) \
        .withColumn("prd_key", substring_from(raw_key, PRODUCT_NUMBER_START)) \
        .withColumn("prd_cost", F.coalesce(F.col("prd_cost"), F.lit(0))) \
        .withColumn(
            "prd_line",
            map_codes(F.col("prd_line"), mappings.product_line, mappings.unknown_label, normalize=True),
        ) \
        .withColumn("prd_start_dt", F.to_date(F.col("prd_start_dt")))

    return conform(chain_end_dates(derived, as_of), CANONICAL_PRODUCT_SCHEMA)


def chain_end_dates(df: DataFrame, as_of: date | None = None) -> DataFrame:
    """
    Set prd_end_dt to the day before the next known start date of the chain.

    Versions are grouped by cleaned prd_key and scanned in start date order
    (prd_id breaks ties). Only the latest version of each chain stays open
    (null). A superseded version with no later known start date is closed
    at ``as_of`` (today when unset).
    """
    versions = Window.partitionBy("prd_key").orderBy(
        F.col("prd_start_dt").asc_nulls_first(),
        F.col("prd_id").asc_nulls_first(),
    )
    later = versions.rowsBetween(1, Window.unboundedFollowing)
    next_start = F.first("prd_start_dt", ignorenulls=True).over(later)
    closed_at = F.lit(as_of) if as_of is not None else F.current_date()

    position = F.row_number().over(versions)
    chain_length = F.count(F.lit(1)).over(Window.partitionBy("prd_key"))
    return df.withColumn(
        "prd_end_dt",
        F.when(position < chain_length, F.coalesce(F.date_sub(next_start, 1), closed_at)),
    )
