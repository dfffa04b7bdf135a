"""
Schemas of the conformed dimension and fact tables (``gold`` warehouse schema).
"""

from pyspark.sql.types import (
    DateType,
    IntegerType,
    StringType,
    StructField,
    StructType,
)

GOLD_SCHEMA = "gold"

DIM_CUSTOMERS = "dim_customers"
DIM_PRODUCTS = "dim_products"
FACT_SALES = "fact_sales"

DIM_CUSTOMERS_SCHEMA = StructType([
    StructField("customer_key", IntegerType(), False),
    StructField("customer_id", IntegerType(), False),
    StructField("customer_number", StringType(), True),
    StructField("first_name", StringType(), True),
    StructField("last_name", StringType(), True),
    StructField("country", StringType(), True),
    StructField("marital_status", StringType(), True),
    StructField("gender", StringType(), False),
    StructField("birth_date", DateType(), True),
    StructField("create_date", DateType(), True),
])

DIM_PRODUCTS_SCHEMA = StructType([
    StructField("product_key", IntegerType(), False),
    StructField("product_id", IntegerType(), True),
    StructField("product_number", StringType(), True),
    StructField("product_name", StringType(), True),
    StructField("category_id", StringType(), True),
    StructField("category", StringType(), True),
    StructField("subcategory", StringType(), True),
    StructField("maintenance", StringType(), True),
    StructField("cost", IntegerType(), True),
    StructField("product_line", StringType(), True),
    StructField("start_date", DateType(), True),
])

FACT_SALES_SCHEMA = StructType([
    StructField("order_number", StringType(), True),
    StructField("product_key", IntegerType(), True),
    StructField("customer_key", IntegerType(), True),
    StructField("order_date", DateType(), True),
    StructField("shipping_date", DateType(), True),
    StructField("due_date", DateType(), True),
    StructField("price", IntegerType(), True),
    StructField("quantity", IntegerType(), True),
    StructField("sales_amount", IntegerType(), True),
])

GOLD_SCHEMAS: dict[str, StructType] = {
    DIM_CUSTOMERS: DIM_CUSTOMERS_SCHEMA,
    DIM_PRODUCTS: DIM_PRODUCTS_SCHEMA,
    FACT_SALES: FACT_SALES_SCHEMA,
}
