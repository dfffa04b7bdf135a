"""
Column expressions shared by the canonicalization rules.
"""

from functools import reduce

from pyspark.sql import Column, DataFrame
from pyspark.sql import functions as F
from pyspark.sql.types import StructType

from src.core.errors import TransformationError


def normalized(column: Column) -> Column:
    """UPPER(TRIM(column))."""
    return F.upper(F.trim(column))


def map_codes(column: Column, mapping: dict[str, str], default: str, normalize: bool = False) -> Column:
    """
    Translate coded values through a lookup table.

    Args:
        column: Source column
        mapping: Code -> label table
        default: Label for unmatched and null values
        normalize: Match on UPPER(TRIM(value)) instead of the raw value

    Returns:
        CASE WHEN expression yielding the label
    """
    if normalize:
        column = normalized(column)
        mapping = {code.strip().upper(): label for code, label in mapping.items()}

    if not mapping:
        return F.lit(default)

    items = list(mapping.items())
    first_code, first_label = items[0]
    expr = reduce(
        lambda acc, item: acc.when(column == item[0], F.lit(item[1])),
        items[1:],
        F.when(column == first_code, F.lit(first_label)),
    )
    return expr.otherwise(F.lit(default))


def substring_from(column: Column, position: int) -> Column:
    """SUBSTRING(column, position, LEN(column)), 1-based."""
    return column.substr(F.lit(position), F.length(column))


def require_columns(df: DataFrame, entity: str, schema: StructType) -> None:
    """
    Check that a raw set carries every column its rules read.

    Raises:
        TransformationError: If any column is missing
    """
    missing = [name for name in schema.fieldNames() if name not in df.columns]
    if missing:
        raise TransformationError(entity, f"raw set is missing columns: {', '.join(missing)}")


def conform(df: DataFrame, schema: StructType) -> DataFrame:
    """Select ``schema``'s columns in order, cast to their declared types."""
    return df.select([F.col(field.name).cast(field.dataType).alias(field.name) for field in schema.fields])
