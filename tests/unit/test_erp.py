"""
Unit tests for ERP reference data canonicalization.
"""

from datetime import date

import pytest

from src.core.rules import CanonicalMappings
from src.core.schema.raw import (
    RAW_ERP_CATEGORY_SCHEMA,
    RAW_ERP_CUSTOMER_SCHEMA,
    RAW_ERP_LOCATION_SCHEMA,
)
from src.transform import transform_erp_categories, transform_erp_customers, transform_erp_locations

pytestmark = pytest.mark.unit

AS_OF = date(2025, 1, 1)


class TestErpCustomers:
    """Tests for ERP customer demographics"""

    def test_legacy_prefix_is_stripped(self, spark_session):
        """Test that NAS-prefixed ids match the CRM customer key"""
        df = spark_session.createDataFrame(
            [("NASAW00011000", date(1971, 10, 6), "Male"), ("AW00011001", date(1976, 5, 10), "F")],
            RAW_ERP_CUSTOMER_SCHEMA,
        )

        ids = sorted(r["cid"] for r in transform_erp_customers(df, CanonicalMappings(), AS_OF).collect())

        assert ids == ["AW00011000", "AW00011001"]

    def test_future_birth_dates_are_nulled(self, spark_session):
        """Test that birth dates after the as-of date become null"""
        df = spark_session.createDataFrame(
            [("A", date(2030, 1, 1), "F"), ("B", AS_OF, "F"), ("C", None, "F")],
            RAW_ERP_CUSTOMER_SCHEMA,
        )

        rows = {r["cid"]: r["bdate"] for r in transform_erp_customers(df, CanonicalMappings(), AS_OF).collect()}

        assert rows == {"A": None, "B": AS_OF, "C": None}

    def test_gender_text_is_normalized(self, spark_session):
        """Test free-text gender values"""
        df = spark_session.createDataFrame(
            [("A", None, " male"), ("B", None, "F "), ("C", None, "FEMALE"), ("D", None, "Unknown"), ("E", None, None)],
            RAW_ERP_CUSTOMER_SCHEMA,
        )

        rows = {r["cid"]: r["gen"] for r in transform_erp_customers(df, CanonicalMappings(), AS_OF).collect()}

        assert rows == {"A": "Male", "B": "Female", "C": "Female", "D": "N/A", "E": "N/A"}


class TestErpLocations:
    """Tests for ERP customer locations"""

    def test_hyphens_are_removed_from_ids(self, spark_session):
        """Test that AW-00011000 becomes AW00011000"""
        df = spark_session.createDataFrame([("AW-00011000", "Australia")], RAW_ERP_LOCATION_SCHEMA)

        row = transform_erp_locations(df, CanonicalMappings()).first()

        assert row["cid"] == "AW00011000"
        assert row["country"] == "Australia"

    def test_country_codes_and_names_are_normalized(self, spark_session):
        """Test the country lookup table"""
        df = spark_session.createDataFrame(
            [("1", "US"), ("2", "usa "), ("3", "DE"), ("4", "Germany"), ("5", ""), ("6", None), ("7", "Atlantis")],
            RAW_ERP_LOCATION_SCHEMA,
        )

        rows = {r["cid"]: r["country"] for r in transform_erp_locations(df, CanonicalMappings()).collect()}

        assert rows == {
            "1": "USA",
            "2": "USA",
            "3": "Germany",
            "4": "Germany",
            "5": "N/A",
            "6": "N/A",
            "7": "N/A",
        }

    def test_configured_country_extends_lookup(self, spark_session):
        """Test that a country added through configuration is recognised"""
        mappings = CanonicalMappings(country={"NL": "Netherlands"})
        df = spark_session.createDataFrame([("1", " nl"), ("2", "US")], RAW_ERP_LOCATION_SCHEMA)

        rows = {r["cid"]: r["country"] for r in transform_erp_locations(df, mappings).collect()}

        assert rows == {"1": "Netherlands", "2": "N/A"}


class TestErpCategories:
    """Tests for product categories"""

    def test_categories_pass_through(self, spark_session):
        """Test that categories are unchanged"""
        rows = [("AC_HE", "Accessories", "Helmets", "Yes"), ("CO_RF", "Components", "Road Frames", "No")]
        df = spark_session.createDataFrame(rows, RAW_ERP_CATEGORY_SCHEMA)

        result = sorted(tuple(r) for r in transform_erp_categories(df).collect())

        assert result == sorted(rows)
