"""
Quality verifier: runs every check against one canonical + dimensional snapshot.

The verifier reports; it never repairs data or fails the run that produced it.
"""

from datetime import date

from pyspark.sql import DataFrame

from src.core.models import VerificationReport
from src.core.rules import CanonicalMappings
from src.observability.logger import get_logger
from src.observability.metrics import record_verification

from .checks import QualityCheck, gold_checks, silver_checks

logger = get_logger(__name__)


class QualityVerifier:
    """
    Runs the silver and gold quality checks and collects violations.
    """

    def __init__(
        self,
        mappings: CanonicalMappings | None = None,
        as_of: date | None = None,
        sample_size: int = 5,
    ):
        """
        Initialize the verifier.

        Args:
            mappings: Lookup tables defining the allowed labels
            as_of: Date treated as today for birth date checks
            sample_size: Offending rows kept per violation
        """
        self.mappings = mappings or CanonicalMappings()
        self.as_of = as_of or date.today()
        self.sample_size = sample_size
        self.checks: list[QualityCheck] = silver_checks(self.mappings, self.as_of) + gold_checks()

    def verify(self, canonical: dict[str, DataFrame], gold: dict[str, DataFrame]) -> VerificationReport:
        """
        Run every check whose table is present in the snapshot.

        Args:
            canonical: Canonical table name -> DataFrame
            gold: Gold table name -> DataFrame

        Returns:
            VerificationReport with one violation per failed check
        """
        tables = {**canonical, **gold}
        report = VerificationReport()

        for check in self.checks:
            if check.table not in tables:
                logger.debug(f"Skipping check {check.name}: table {check.table} not in snapshot")
                continue

            report.checks_run.append(check.name)
            violation = check.run(tables, sample_size=self.sample_size)
            if violation is not None:
                report.violations.append(violation)
                logger.warning(
                    f"Quality check failed: {check.name} ({violation.violation_count} rows)",
                    extra={"check": check.name, "table": check.table, "violation_count": violation.violation_count},
                )

        record_verification(report)
        logger.info(
            f"Quality verification complete: {len(report.checks_run)} checks, "
            f"{len(report.violations)} violations"
        )
        return report
