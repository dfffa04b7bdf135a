"""
Unit tests for the CSV and raw store readers.
"""

import os
from datetime import date, datetime

import pytest

from src.batch.readers import CSVReader, RawStoreReader
from src.core.config import build_config
from src.core.errors import IngestionError
from src.core.models import RawSource
from src.core.schema import RAW_SCHEMAS
from src.core.schema.raw import RAW_ERP_LOCATION_SCHEMA, RAW_PRODUCT_SCHEMA

pytestmark = pytest.mark.unit


class TestCSVReader:
    """Tests for CSVReader"""

    def test_malformed_values_become_null(self, spark_session, tmp_path):
        """Test that unparsable numbers and dates do not fail the read"""
        path = tmp_path / "prd_info.csv"
        path.write_text(
            "prd_id,prd_key,prd_nm,prd_cost,prd_line,prd_start_dt,prd_end_dt\n"
            "1,CO-RF-FR-1,Frame,abc,R,not-a-date,\n"
            "2,CO-RF-FR-2,Frame,10,R,2011-07-01,\n"
        )

        rows = {r["prd_id"]: r for r in CSVReader(spark_session).read(str(path), RAW_PRODUCT_SCHEMA).collect()}

        assert rows[1]["prd_cost"] is None
        assert rows[1]["prd_start_dt"] is None
        assert rows[2]["prd_cost"] == 10
        assert rows[2]["prd_start_dt"] == datetime(2011, 7, 1)

    def test_whitespace_is_preserved(self, spark_session, tmp_path):
        """Test that padding reaches the transformation rules"""
        path = tmp_path / "loc.csv"
        path.write_text("CID,CNTRY\nAW-1, Germany \n")

        row = CSVReader(spark_session).read(str(path), RAW_ERP_LOCATION_SCHEMA).first()

        assert row["country"] == " Germany "

    def test_custom_delimiter_without_header(self, spark_session, tmp_path):
        """Test delimiter and header options"""
        path = tmp_path / "loc.txt"
        path.write_text("AW-1|DE\nAW-2|US\n")

        df = CSVReader(spark_session).read(str(path), RAW_ERP_LOCATION_SCHEMA, header=False, delimiter="|")

        assert sorted(tuple(r) for r in df.collect()) == [("AW-1", "DE"), ("AW-2", "US")]


class TestRawStoreReader:
    """Tests for RawStoreReader"""

    def test_reads_fixture_snapshot(self, raw_snapshot):
        """Test that all six raw tables are read with their schemas"""
        assert set(raw_snapshot) == set(RAW_SCHEMAS)
        for table, df in raw_snapshot.items():
            assert df.schema == RAW_SCHEMAS[table]

    def test_fixture_raw_counts(self, raw_snapshot):
        """Test that every data row is read, header excluded"""
        counts = {table: df.count() for table, df in raw_snapshot.items()}

        assert counts == {
            "crm_cust_info": 6,
            "crm_prd_info": 6,
            "crm_sales_details": 7,
            "erp_cust_az12": 5,
            "erp_loc_a101": 5,
            "erp_px_cat_g1v2": 3,
        }

    def test_raw_dates_are_typed(self, raw_snapshot):
        """Test that CRM create dates arrive as dates"""
        row = raw_snapshot["crm_cust_info"].filter("cst_id = 11001").first()

        assert row["cst_create_date"] == date(2025, 10, 6)

    def test_missing_file_raises(self, spark_session, datasets_dir):
        """Test that a missing source file aborts ingestion"""
        os.remove(os.path.join(datasets_dir, "source_erp", "LOC_A101.csv"))
        config = build_config({"base_path": datasets_dir})

        with pytest.raises(IngestionError) as exc_info:
            RawStoreReader(spark_session).read_snapshot(config)

        assert exc_info.value.entity == "erp_loc_a101"

    def test_header_only_file_is_empty(self, spark_session, datasets_dir):
        """Test that an empty raw set is read, not rejected"""
        path = os.path.join(datasets_dir, "source_erp", "PX_CAT_G1V2.csv")
        with open(path, "w") as f:
            f.write("ID,CAT,SUBCAT,MAINTENANCE\n")

        raw = RawStoreReader(spark_session).read_snapshot(build_config({"base_path": datasets_dir}))

        assert raw["erp_px_cat_g1v2"].count() == 0

    def test_unknown_table_raises(self, spark_session, tmp_path):
        """Test that a source without a raw schema is rejected"""
        source = RawSource(table="crm_orders", source_path=str(tmp_path))

        with pytest.raises(IngestionError):
            RawStoreReader(spark_session).read_source(source)
