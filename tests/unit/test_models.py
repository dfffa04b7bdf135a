"""
Unit tests for Pydantic data models and the error taxonomy.
"""

from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from src.core.errors import IngestionError, PipelineError, PublishError, TransformationError
from src.core.models import (
    ConsistencyViolation,
    PipelineRunResult,
    RawSource,
    VerificationReport,
)


class TestRawSource:
    """Tests for RawSource model"""

    def test_valid_raw_source(self):
        """Test creating a valid RawSource"""
        source = RawSource(table="erp_loc_a101", source_system="erp", source_path="source_erp/LOC_A101.csv")

        assert source.field_delimiter == ","
        assert source.header_row_present is True

    def test_invalid_source_system(self):
        """Test that only crm and erp are accepted"""
        with pytest.raises(ValidationError) as exc_info:
            RawSource(table="crm_cust_info", source_system="sap", source_path="x.csv")
        assert "source_system" in str(exc_info.value)

    def test_empty_path(self):
        """Test that an empty path raises ValidationError"""
        with pytest.raises(ValidationError):
            RawSource(table="crm_cust_info", source_path="")


class TestConsistencyViolation:
    """Tests for ConsistencyViolation and VerificationReport"""

    def test_violation_requires_offending_rows(self):
        """Test that a violation counts at least one row"""
        with pytest.raises(ValidationError):
            ConsistencyViolation(
                check_name="fact_sales_unresolved_product",
                layer="gold",
                table="fact_sales",
                description="Every sales line resolves to an active product",
                violation_count=0,
            )

    def test_invalid_layer(self):
        """Test that only silver and gold are layers"""
        with pytest.raises(ValidationError):
            ConsistencyViolation(
                check_name="x", layer="bronze", table="t", description="d", violation_count=1
            )

    def test_report_passed(self):
        """Test passed and violations_for"""
        violation = ConsistencyViolation(
            check_name="dim_products_key_dense", layer="gold", table="dim_products",
            description="product_key covers 1..N without gaps", violation_count=2,
        )

        assert VerificationReport(checks_run=["dim_products_key_dense"]).passed
        report = VerificationReport(checks_run=["dim_products_key_dense"], violations=[violation])
        assert not report.passed
        assert report.violations_for("dim_products_key_dense") == [violation]
        assert report.violations_for("other") == []


class TestPipelineRunResult:
    """Tests for PipelineRunResult model"""

    def test_defaults(self):
        """Test a fresh run result"""
        result = PipelineRunResult(run_id="run-1")

        assert result.status == "success"
        assert result.published is False
        assert result.duration_seconds is None

    def test_duration(self):
        """Test duration from start and finish times"""
        started = datetime(2025, 1, 1, 12, 0, 0)
        result = PipelineRunResult(run_id="run-1", started_at=started, finished_at=started + timedelta(seconds=90))

        assert result.duration_seconds == 90.0

    def test_invalid_status(self):
        """Test that status is success or failed"""
        with pytest.raises(ValidationError):
            PipelineRunResult(run_id="run-1", status="partial")


class TestPipelineErrors:
    """Tests for the error taxonomy"""

    @pytest.mark.parametrize("error_class", [IngestionError, TransformationError, PublishError])
    def test_errors_name_their_entity(self, error_class):
        """Test entity, message and string form"""
        error = error_class("crm_prd_info", "source file not found")

        assert isinstance(error, PipelineError)
        assert error.entity == "crm_prd_info"
        assert error.message == "source file not found"
        assert str(error) == "[crm_prd_info] source file not found"
