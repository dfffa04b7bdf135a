"""
Prometheus metrics collection for the warehouse pipeline

This module provides metrics instrumentation for monitoring run
duration, per-entity record counts and data quality.
"""
import os
from typing import TYPE_CHECKING, Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

if TYPE_CHECKING:
    from src.core.models import PipelineRunResult, VerificationReport


# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# RUN METRICS
# =======================

runs_total = Counter(
    name="warehouse_runs_total",
    documentation="Total number of warehouse runs",
    labelnames=["status"],  # status: success, failed
    registry=REGISTRY,
)

run_duration_seconds = Histogram(
    name="warehouse_run_duration_seconds",
    documentation="Wall time of a full warehouse run in seconds",
    labelnames=["status"],
    buckets=[1.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0],
    registry=REGISTRY,
)

stage_duration_seconds = Histogram(
    name="warehouse_stage_duration_seconds",
    documentation="Time spent in each pipeline stage in seconds",
    labelnames=["stage"],  # stage: ingest, transform, model, verify, publish
    buckets=[0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0],
    registry=REGISTRY,
)

# =======================
# ENTITY METRICS
# =======================

entity_records = Gauge(
    name="warehouse_entity_records",
    documentation="Records per entity in the latest run",
    labelnames=["layer", "entity"],  # layer: raw, silver, gold
    registry=REGISTRY,
)

rows_published_total = Counter(
    name="warehouse_rows_published_total",
    documentation="Total number of rows written to warehouse tables",
    labelnames=["table"],
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

quality_violations = Gauge(
    name="warehouse_quality_violations",
    documentation="Offending rows per quality check in the latest verification",
    labelnames=["check"],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Imported lazily: binding a port is only wanted when the endpoint is enabled
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(stage_duration_seconds, stage="transform"):
            # do work
            pass
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        self.timer = self.histogram.labels(**self.labels).time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """Increment a counter metric"""
    counter.labels(**labels).inc(value)


def set_gauge(gauge: Gauge, value: float, **labels) -> None:
    """Set a gauge metric value"""
    gauge.labels(**labels).set(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    """Observe a value in a histogram metric"""
    histogram.labels(**labels).observe(value)


# =======================
# RUN-SPECIFIC HELPERS
# =======================

def record_entity_counts(layer: str, counts: dict[str, int]) -> None:
    """
    Record per-entity record counts of one layer.

    Args:
        layer: "raw", "silver" or "gold"
        counts: Entity name -> record count
    """
    for entity, count in counts.items():
        set_gauge(entity_records, count, layer=layer, entity=entity)


def record_published_rows(table: str, row_count: int) -> None:
    """Record rows written to a warehouse table."""
    increment_counter(rows_published_total, row_count, table=table)


def record_run(result: "PipelineRunResult") -> None:
    """
    Record the outcome of a warehouse run.

    Args:
        result: Finished run summary
    """
    increment_counter(runs_total, 1, status=result.status)
    if result.duration_seconds is not None:
        observe_histogram(run_duration_seconds, result.duration_seconds, status=result.status)


def record_verification(report: "VerificationReport") -> None:
    """
    Record quality check results; passing checks are reset to zero.

    Args:
        report: Verification report of the latest snapshot
    """
    failing = {v.check_name: v.violation_count for v in report.violations}
    for check_name in report.checks_run:
        set_gauge(quality_violations, failing.get(check_name, 0), check=check_name)
