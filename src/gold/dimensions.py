"""
Conformed customer and product dimensions.

Surrogate keys are dense 1..N row numbers recomputed on every run; they are
not stable across runs when the underlying business records change.
"""

from pyspark.sql import DataFrame, Window
from pyspark.sql import functions as F

from src.core.rules.mapping_config import UNKNOWN_LABEL
from src.core.schema.gold import DIM_CUSTOMERS_SCHEMA, DIM_PRODUCTS_SCHEMA
from src.transform.columns import conform


def build_dim_customers(
    customers: DataFrame,
    erp_customers: DataFrame,
    locations: DataFrame,
    unknown_label: str = UNKNOWN_LABEL,
) -> DataFrame:
    """
    Combine CRM customers with ERP demographics and locations.

    The CRM gender wins unless it is unknown, then the ERP gender is used.
    Keys follow customer_id order; the joined ERP columns break ties so that
    duplicate ERP matches still receive distinct keys.

    Args:
        customers: Canonical crm_cust_info
        erp_customers: Canonical erp_cust_az12
        locations: Canonical erp_loc_a101
        unknown_label: Label of an unknown gender

    Returns:
        dim_customers
    """
    ci, ca, cl = customers.alias("ci"), erp_customers.alias("ca"), locations.alias("cl")

    joined = ci \
        .join(ca, F.col("ca.cid") == F.col("ci.cst_key"), "left") \
        .join(cl, F.col("cl.cid") == F.col("ci.cst_key"), "left")

    gender = F.when(F.col("ci.cst_gndr") != unknown_label, F.col("ci.cst_gndr")) \
        .otherwise(F.coalesce(F.col("ca.gen"), F.lit(unknown_label)))

    rows = joined.select(
        F.col("ci.cst_id").alias("customer_id"),
        F.col("ci.cst_key").alias("customer_number"),
        F.col("ci.cst_firstname").alias("first_name"),
        F.col("ci.cst_lastname").alias("last_name"),
        F.col("cl.country").alias("country"),
        F.col("ci.cst_marital_status").alias("marital_status"),
        gender.alias("gender"),
        F.col("ca.bdate").alias("birth_date"),
        F.col("ci.cst_create_date").alias("create_date"),
    )

    by_customer_id = Window.orderBy(
        F.col("customer_id").asc(),
        F.col("birth_date").asc_nulls_last(),
        F.col("gender").asc_nulls_last(),
        F.col("country").asc_nulls_last(),
    )
    return conform(rows.withColumn("customer_key", F.row_number().over(by_customer_id)), DIM_CUSTOMERS_SCHEMA)


def build_dim_products(products: DataFrame, categories: DataFrame) -> DataFrame:
    """
    Build the product dimension from currently active product versions.

    Args:
        products: Canonical crm_prd_info
        categories: Canonical erp_px_cat_g1v2

    Returns:
        dim_products, keyed in (start_date, product_number) order
    """
    pn = products.filter(F.col("prd_end_dt").isNull()).alias("pn")
    pc = categories.alias("pc")

    rows = pn.join(pc, F.col("pn.cat_id") == F.col("pc.id"), "left").select(
        F.col("pn.prd_id").alias("product_id"),
        F.col("pn.prd_key").alias("product_number"),
        F.col("pn.prd_nm").alias("product_name"),
        F.col("pn.cat_id").alias("category_id"),
        F.col("pc.cat").alias("category"),
        F.col("pc.subcat").alias("subcategory"),
        F.col("pc.maintenance").alias("maintenance"),
        F.col("pn.prd_cost").alias("cost"),
        F.col("pn.prd_line").alias("product_line"),
        F.col("pn.prd_start_dt").alias("start_date"),
    )

    by_start = Window.orderBy(
        F.col("start_date").asc_nulls_first(),
        F.col("product_number").asc_nulls_first(),
        F.col("product_id").asc_nulls_first(),
        F.col("category").asc_nulls_last(),
    )
    return conform(rows.withColumn("product_key", F.row_number().over(by_start)), DIM_PRODUCTS_SCHEMA)
