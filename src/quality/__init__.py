"""
Post-run quality verification of canonical and dimensional output.
"""

from .checks import QualityCheck, gold_checks, silver_checks
from .verifier import QualityVerifier

__all__ = [
    "QualityCheck",
    "QualityVerifier",
    "gold_checks",
    "silver_checks",
]
