"""
Explicit schemas of the raw (bronze) source tables.

The raw files are read with these schemas in PERMISSIVE mode, so a value
that does not parse as its declared type arrives as null.
"""

from pyspark.sql.types import (
    DateType,
    IntegerType,
    StringType,
    StructField,
    StructType,
    TimestampType,
)

CRM_CUST_INFO = "crm_cust_info"
CRM_PRD_INFO = "crm_prd_info"
CRM_SALES_DETAILS = "crm_sales_details"
ERP_CUST_AZ12 = "erp_cust_az12"
ERP_LOC_A101 = "erp_loc_a101"
ERP_PX_CAT_G1V2 = "erp_px_cat_g1v2"

RAW_CUSTOMER_SCHEMA = StructType([
    StructField("cst_id", IntegerType(), True),
    StructField("cst_key", StringType(), True),
    StructField("cst_firstname", StringType(), True),
    StructField("cst_lastname", StringType(), True),
    StructField("cst_marital_status", StringType(), True),
    StructField("cst_gndr", StringType(), True),
    StructField("cst_create_date", DateType(), True),
])

RAW_PRODUCT_SCHEMA = StructType([
    StructField("prd_id", IntegerType(), True),
    StructField("prd_key", StringType(), True),
    StructField("prd_nm", StringType(), True),
    StructField("prd_cost", IntegerType(), True),
    StructField("prd_line", StringType(), True),
    StructField("prd_start_dt", TimestampType(), True),
    StructField("prd_end_dt", TimestampType(), True),
])

RAW_SALES_SCHEMA = StructType([
    StructField("sls_ord_num", StringType(), True),
    StructField("sls_prd_key", StringType(), True),
    StructField("sls_cust_id", IntegerType(), True),
    StructField("sls_order_dt", IntegerType(), True),
    StructField("sls_ship_dt", IntegerType(), True),
    StructField("sls_due_dt", IntegerType(), True),
    StructField("sls_sales", IntegerType(), True),
    StructField("sls_quantity", IntegerType(), True),
    StructField("sls_price", IntegerType(), True),
])

RAW_ERP_CUSTOMER_SCHEMA = StructType([
    StructField("cid", StringType(), True),
    StructField("bdate", DateType(), True),
    StructField("gen", StringType(), True),
])

RAW_ERP_LOCATION_SCHEMA = StructType([
    StructField("cid", StringType(), True),
    StructField("country", StringType(), True),
])

RAW_ERP_CATEGORY_SCHEMA = StructType([
    StructField("id", StringType(), True),
    StructField("cat", StringType(), True),
    StructField("subcat", StringType(), True),
    StructField("maintenance", StringType(), True),
])

# Raw table name -> schema, in load order
RAW_SCHEMAS: dict[str, StructType] = {
    CRM_CUST_INFO: RAW_CUSTOMER_SCHEMA,
    CRM_PRD_INFO: RAW_PRODUCT_SCHEMA,
    CRM_SALES_DETAILS: RAW_SALES_SCHEMA,
    ERP_CUST_AZ12: RAW_ERP_CUSTOMER_SCHEMA,
    ERP_LOC_A101: RAW_ERP_LOCATION_SCHEMA,
    ERP_PX_CAT_G1V2: RAW_ERP_CATEGORY_SCHEMA,
}
