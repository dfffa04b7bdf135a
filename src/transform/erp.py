"""
ERP reference data canonicalization (customers, locations, categories).

ERP customer ids are brought in line with the CRM customer key
(cst_key) so the dimensional layer can join on them.
"""

from datetime import date

from pyspark.sql import DataFrame
from pyspark.sql import functions as F

from src.core.rules import CanonicalMappings
from src.core.schema.canonical import (
    CANONICAL_ERP_CATEGORY_SCHEMA,
    CANONICAL_ERP_CUSTOMER_SCHEMA,
    CANONICAL_ERP_LOCATION_SCHEMA,
)
from src.core.schema.raw import (
    ERP_CUST_AZ12,
    ERP_LOC_A101,
    ERP_PX_CAT_G1V2,
    RAW_ERP_CATEGORY_SCHEMA,
    RAW_ERP_CUSTOMER_SCHEMA,
    RAW_ERP_LOCATION_SCHEMA,
)

from .columns import conform, map_codes, require_columns, substring_from

LEGACY_ID_PREFIX = "NAS"


def transform_erp_customers(df: DataFrame, mappings: CanonicalMappings, as_of: date) -> DataFrame:
    """
    Clean ERP customer demographics.

    Args:
        df: Raw erp_cust_az12 records
        mappings: Lookup tables (erp_gender)
        as_of: Birth dates after this day are nulled

    Returns:
        Canonical ERP customers
    """
    require_columns(df, ERP_CUST_AZ12, RAW_ERP_CUSTOMER_SCHEMA)

    cid = F.col("cid")
    cleaned = df \
        .withColumn(
            "cid",
            F.when(cid.startswith(LEGACY_ID_PREFIX), substring_from(cid, len(LEGACY_ID_PREFIX) + 1))
            .otherwise(cid),
        ) \
        .withColumn(
            "bdate",
            F.when(F.col("bdate") > F.lit(as_of), F.lit(None)).otherwise(F.col("bdate")),
        ) \
        .withColumn(
            "gen",
            map_codes(F.col("gen"), mappings.erp_gender, mappings.unknown_label, normalize=True),
        )

    return conform(cleaned, CANONICAL_ERP_CUSTOMER_SCHEMA)


def transform_erp_locations(df: DataFrame, mappings: CanonicalMappings) -> DataFrame:
    """
    Strip hyphens from customer ids and normalize country names.

    Args:
        df: Raw erp_loc_a101 records
        mappings: Lookup tables (country)

    Returns:
        Canonical ERP locations
    """
    require_columns(df, ERP_LOC_A101, RAW_ERP_LOCATION_SCHEMA)

    cleaned = df \
        .withColumn("cid", F.regexp_replace(F.col("cid"), "-", "")) \
        .withColumn(
            "country",
            map_codes(F.col("country"), mappings.country, mappings.unknown_label, normalize=True),
        )

    return conform(cleaned, CANONICAL_ERP_LOCATION_SCHEMA)


def transform_erp_categories(df: DataFrame) -> DataFrame:
    """Product categories are reference data and pass through unchanged."""
    require_columns(df, ERP_PX_CAT_G1V2, RAW_ERP_CATEGORY_SCHEMA)
    return conform(df, CANONICAL_ERP_CATEGORY_SCHEMA)
