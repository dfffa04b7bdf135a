"""
Error taxonomy for a warehouse run.

Every error names the entity (raw or target table) it was raised for, so a
failed run can report which entity failed and why. Per-record anomalies are
repaired by the transformation rules and never surface here.
"""


class PipelineError(Exception):
    """Unrecoverable failure that aborts the current run."""

    def __init__(self, entity: str, message: str):
        self.entity = entity
        self.message = message
        super().__init__(f"[{entity}] {message}")


class IngestionError(PipelineError):
    """Raised when a raw source file is missing or unreadable."""


class TransformationError(PipelineError):
    """Raised when a raw set is structurally invalid for its rules."""


class PublishError(PipelineError):
    """Raised when the snapshot could not be written to the warehouse."""


class VerificationError(PipelineError):
    """Raised when a quality check cannot be evaluated."""
