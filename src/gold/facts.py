"""
Sales fact resolving business keys to dimension surrogate keys.
"""

from pyspark.sql import DataFrame
from pyspark.sql import functions as F

from src.core.schema.gold import FACT_SALES_SCHEMA
from src.transform.columns import conform


def build_fact_sales(sales: DataFrame, dim_products: DataFrame, dim_customers: DataFrame) -> DataFrame:
    """
    Attach product and customer surrogate keys to every sales line.

    Lines whose product number or customer id has no dimension row keep a
    null key on that side; they are neither dropped nor repaired here.

    Args:
        sales: Canonical crm_sales_details
        dim_products: Product dimension of the same run
        dim_customers: Customer dimension of the same run

    Returns:
        fact_sales
    """
    sl = sales.alias("sl")
    pt = dim_products.select("product_key", "product_number").alias("pt")
    ct = dim_customers.select("customer_key", "customer_id").alias("ct")

    rows = sl \
        .join(pt, F.col("sl.sls_prd_key") == F.col("pt.product_number"), "left") \
        .join(ct, F.col("sl.sls_cust_id") == F.col("ct.customer_id"), "left") \
        .select(
            F.col("sl.sls_ord_num").alias("order_number"),
            F.col("pt.product_key").alias("product_key"),
            F.col("ct.customer_key").alias("customer_key"),
            F.col("sl.sls_order_dt").alias("order_date"),
            F.col("sl.sls_ship_dt").alias("shipping_date"),
            F.col("sl.sls_due_dt").alias("due_date"),
            F.col("sl.sls_price").alias("price"),
            F.col("sl.sls_quantity").alias("quantity"),
            F.col("sl.sls_sales").alias("sales_amount"),
        )

    return conform(rows, FACT_SALES_SCHEMA)
