"""
CRM sales line cleaning.

Dates arrive as yyyyMMdd integers; measures arrive possibly missing,
negative or inconsistent with each other and are repaired from one another.
"""

from pyspark.sql import Column, DataFrame
from pyspark.sql import functions as F

from src.core.schema.canonical import CANONICAL_SALES_SCHEMA
from src.core.schema.raw import CRM_SALES_DETAILS, RAW_SALES_SCHEMA

from .columns import conform, require_columns

EARLIEST_DATE_INT = 19000101
LATEST_DATE_INT = 20500101
DATE_FIELDS = ("sls_order_dt", "sls_ship_dt", "sls_due_dt")


def int_to_date(column: Column) -> Column:
    """
    Convert a yyyyMMdd integer to a date.

    Zero, negative, non 8-digit, out of range and impossible calendar values
    become null.
    """
    as_text = column.cast("string")
    plausible = (column > 0) \
        & (F.length(as_text) == 8) \
        & column.between(EARLIEST_DATE_INT, LATEST_DATE_INT)
    return F.when(plausible, F.to_date(as_text, "yyyyMMdd"))


def repaired_sales(sales: Column, quantity: Column, price: Column) -> Column:
    """Recompute sales as quantity * |price| when missing, non-positive or inconsistent."""
    expected = quantity * F.abs(price)
    return F.when(sales.isNull() | (sales <= 0) | (sales != expected), expected).otherwise(sales)


def repaired_price(sales: Column, quantity: Column, price: Column) -> Column:
    """Derive a missing price from sales / quantity; flip non-positive prices."""
    derived = (sales / F.when(quantity != 0, quantity)).cast("int")
    return F.when(price.isNull(), derived) \
        .when(price <= 0, F.abs(price)) \
        .otherwise(price)


def transform_sales(df: DataFrame) -> DataFrame:
    """
    Validate dates and repair sales measures.

    Both repairs read the raw measures, never each other's output.

    Args:
        df: Raw crm_sales_details records

    Returns:
        Canonical sales lines, one per raw line
    """
    require_columns(df, CRM_SALES_DETAILS, RAW_SALES_SCHEMA)

    sales, quantity, price = F.col("sls_sales"), F.col("sls_quantity"), F.col("sls_price")

    cleaned = df.select(
        "sls_ord_num",
        "sls_prd_key",
        "sls_cust_id",
        *[int_to_date(F.col(name)).alias(name) for name in DATE_FIELDS],
        repaired_sales(sales, quantity, price).alias("sls_sales"),
        "sls_quantity",
        repaired_price(sales, quantity, price).alias("sls_price"),
    )

    return conform(cleaned, CANONICAL_SALES_SCHEMA)
