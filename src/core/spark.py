"""
Spark session factory shared by the CLI and the test-suite.
"""

from pyspark.sql import SparkSession


def create_spark_session(app_name: str = "crm-erp-warehouse", master: str = "local[*]") -> SparkSession:
    """
    Create Spark session for batch processing.

    ANSI mode is disabled and the CORRECTED time parser is used so that
    malformed numbers and dates coerce to null instead of failing the run.

    Args:
        app_name: Application name
        master: Spark master URL

    Returns:
        SparkSession
    """
    spark = SparkSession.builder \
        .appName(app_name) \
        .master(master) \
        .config("spark.sql.ansi.enabled", "false") \
        .config("spark.sql.legacy.timeParserPolicy", "CORRECTED") \
        .config("spark.sql.session.timeZone", "UTC") \
        .config("spark.sql.adaptive.enabled", "true") \
        .config("spark.sql.adaptive.coalescePartitions.enabled", "true") \
        .config("spark.ui.enabled", "false") \
        .getOrCreate()

    return spark
