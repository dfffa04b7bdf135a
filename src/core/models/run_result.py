"""
PipelineRunResult model summarizing one warehouse run.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class PipelineRunResult(BaseModel):
    """
    Summary of a warehouse run, reported to the operator.

    Attributes:
        run_id: Identifier of the run
        status: "success" or "failed"
        started_at: When the run started
        finished_at: When the run finished
        raw_counts: Rows read per raw table
        canonical_counts: Rows produced per canonical table
        gold_counts: Rows produced per dimension/fact table
        published: Whether the snapshot was written to the warehouse
        failed_entity: Entity that aborted the run, if any
        error_message: Why the run failed, if it did
        violation_count: Number of failed quality checks (None if not verified)
    """

    run_id: str
    status: Literal["success", "failed"] = "success"
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: datetime | None = None
    raw_counts: dict[str, int] = Field(default_factory=dict)
    canonical_counts: dict[str, int] = Field(default_factory=dict)
    gold_counts: dict[str, int] = Field(default_factory=dict)
    published: bool = False
    failed_entity: str | None = None
    error_message: str | None = None
    violation_count: int | None = None

    @property
    def duration_seconds(self) -> float | None:
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    class Config:
        json_schema_extra = {
            "example": {
                "run_id": "3f0c5d0e-2c51-4b59-9a1f-8c0f2b7d9a11",
                "status": "success",
                "raw_counts": {"crm_cust_info": 18494},
                "canonical_counts": {"crm_cust_info": 18484},
                "gold_counts": {"dim_customers": 18484},
                "published": True
            }
        }
