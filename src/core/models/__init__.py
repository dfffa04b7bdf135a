"""
Core data models for the warehouse pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .consistency_violation import ConsistencyViolation, VerificationReport
from .raw_source import RawSource
from .run_result import PipelineRunResult

__all__ = [
    "RawSource",
    "PipelineRunResult",
    "ConsistencyViolation",
    "VerificationReport",
]
