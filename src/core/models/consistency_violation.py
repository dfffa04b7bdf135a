"""
ConsistencyViolation and VerificationReport models produced by the quality verifier.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class ConsistencyViolation(BaseModel):
    """
    One failed quality check over the canonical or dimensional output.

    Violations are reported, never raised: the run that produced the data
    has already succeeded.

    Attributes:
        check_name: Identifier of the check (e.g. "fact_sales_unresolved_product")
        layer: "silver" or "gold"
        table: Table the check ran against
        description: What the check expects
        violation_count: Number of offending rows (or keys)
        samples: A few offending rows for investigation
    """

    check_name: str = Field(..., min_length=1)
    layer: Literal["silver", "gold"]
    table: str
    description: str
    violation_count: int = Field(..., ge=1)
    samples: list[dict[str, Any]] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "check_name": "fact_sales_unresolved_product",
                "layer": "gold",
                "table": "fact_sales",
                "description": "Every fact row resolves to an active product",
                "violation_count": 2,
                "samples": [{"order_number": "SO43697", "product_key": None}]
            }
        }


class VerificationReport(BaseModel):
    """
    Outcome of running the quality checks against one snapshot.

    Attributes:
        checks_run: Names of every check executed
        violations: Checks that found offending rows
        verified_at: When the checks ran
    """

    checks_run: list[str] = Field(default_factory=list)
    violations: list[ConsistencyViolation] = Field(default_factory=list)
    verified_at: datetime = Field(default_factory=datetime.now)

    @property
    def passed(self) -> bool:
        return not self.violations

    def violations_for(self, check_name: str) -> list[ConsistencyViolation]:
        return [v for v in self.violations if v.check_name == check_name]
