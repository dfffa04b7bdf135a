"""
Unit tests for the post-run quality verifier.
"""

import pytest
from pyspark.sql import functions as F

from src.core.errors import VerificationError
from src.core.schema import DIM_CUSTOMERS, DIM_PRODUCTS, FACT_SALES
from src.quality import QualityCheck, QualityVerifier, gold_checks, silver_checks

pytestmark = pytest.mark.unit


class TestQualityVerifier:
    """Tests for QualityVerifier over the fixture snapshot"""

    @pytest.fixture(scope="class")
    def report(self, canonical_snapshot, gold_snapshot, fixture_config):
        verifier = QualityVerifier(fixture_config.mappings, fixture_config.as_of)
        return verifier.verify(canonical_snapshot, gold_snapshot)

    def test_all_checks_run(self, report, fixture_config):
        """Test that every check runs when all tables are present"""
        expected = silver_checks(fixture_config.mappings, fixture_config.as_of) + gold_checks()

        assert report.checks_run == [check.name for check in expected]

    def test_expected_violations(self, report):
        """Test the violations planted in the fixture snapshot"""
        names = sorted(v.check_name for v in report.violations)

        assert names == [
            "crm_sales_details_measures_consistent",
            "fact_sales_unresolved_customer",
            "fact_sales_unresolved_product",
        ]
        assert not report.passed

    def test_violation_carries_samples(self, report):
        """Test counts and samples of a violation"""
        [violation] = report.violations_for("fact_sales_unresolved_product")

        assert violation.layer == "gold"
        assert violation.violation_count == 1
        assert violation.samples[0]["order_number"] == "SO43702"

    def test_surrogate_keys_pass(self, report):
        """Test that the key checks pass on a fresh build"""
        for name in ("dim_customers_key_unique", "dim_customers_key_dense", "dim_customers_id_unique",
                     "dim_products_key_unique", "dim_products_key_dense", "dim_products_number_unique"):
            assert report.violations_for(name) == []

    def test_checks_for_absent_tables_are_skipped(self, canonical_snapshot, gold_snapshot, fixture_config):
        """Test that checks only run against tables in the snapshot"""
        gold = {k: v for k, v in gold_snapshot.items() if k != DIM_PRODUCTS}
        verifier = QualityVerifier(fixture_config.mappings, fixture_config.as_of)

        report = verifier.verify(canonical_snapshot, gold)

        assert "dim_products_key_unique" not in report.checks_run
        assert "dim_customers_key_unique" in report.checks_run

    def test_gap_in_keys_is_reported(self, gold_snapshot, fixture_config):
        """Test that a missing surrogate key is detected"""
        gapped = gold_snapshot["dim_products"].filter("product_key != 2")
        verifier = QualityVerifier(fixture_config.mappings, fixture_config.as_of)

        report = verifier.verify({}, {DIM_PRODUCTS: gapped})

        [violation] = report.violations_for("dim_products_key_dense")
        assert violation.violation_count == 1

    def test_duplicate_customer_ids_are_reported(self, canonical_snapshot, fixture_config):
        """Test the canonical customer uniqueness check"""
        customers = canonical_snapshot["crm_cust_info"]
        verifier = QualityVerifier(fixture_config.mappings, fixture_config.as_of)

        report = verifier.verify({"crm_cust_info": customers.unionByName(customers.limit(1))}, {})

        [violation] = report.violations_for("crm_cust_info_id_unique")
        assert violation.violation_count == 1

    def test_customer_matched_twice_is_reported(self, gold_snapshot, fixture_config):
        """Test that a customer_id carried by two dimension rows is detected"""
        customers = gold_snapshot[DIM_CUSTOMERS]
        doubled = customers.unionByName(customers.filter("customer_id = 11000").withColumn("customer_key", F.lit(5)))
        verifier = QualityVerifier(fixture_config.mappings, fixture_config.as_of)

        report = verifier.verify({}, {DIM_CUSTOMERS: doubled})

        [violation] = report.violations_for("dim_customers_id_unique")
        assert violation.samples[0]["customer_id"] == 11000
        assert report.violations_for("dim_customers_key_unique") == []

    def test_two_active_versions_are_reported(self, gold_snapshot, fixture_config):
        """Test that a product_number carried by two dimension rows is detected"""
        products = gold_snapshot[DIM_PRODUCTS]
        doubled = products.unionByName(products.filter("product_key = 1").withColumn("product_key", F.lit(5)))
        verifier = QualityVerifier(fixture_config.mappings, fixture_config.as_of)

        report = verifier.verify({}, {DIM_PRODUCTS: doubled})

        [violation] = report.violations_for("dim_products_number_unique")
        assert violation.samples[0]["product_number"] == "FR-R92B-58"


class TestQualityCheck:
    """Tests for running a single check"""

    def test_spark_failure_names_the_table(self, gold_snapshot):
        """Test that an unevaluable check raises a VerificationError for its table"""
        check = QualityCheck(
            "fact_sales_has_discount", "gold", FACT_SALES, "Discount is set",
            lambda df, _: df.select("discount"),
        )

        with pytest.raises(VerificationError) as exc_info:
            check.run(gold_snapshot)

        assert exc_info.value.entity == FACT_SALES
        assert "fact_sales_has_discount" in exc_info.value.message
