"""
Category Scorer - Severity-weighted mean of a category's checks.

Checks with status error/unavailable are dropped before scoring. A category
with nothing left to score is unavailable (None), never 0 or 100.
"""
import math
from typing import Iterable, Optional

from sitesentinel.services.scoring.models import CheckRecord
from sitesentinel.services.scoring.weights import (
    DEFAULT_SEVERITY_WEIGHT,
    SEVERITY_WEIGHTS,
    STATUS_VALUES,
    UNSCORABLE_STATUSES,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up."""
    return int(math.floor(value + 0.5))


def check_value(check: CheckRecord) -> int:
    return STATUS_VALUES.get(check.status, 0)


def severity_weight(check: CheckRecord) -> float:
    return SEVERITY_WEIGHTS.get(check.severity, DEFAULT_SEVERITY_WEIGHT)


def score_category(checks: Iterable[CheckRecord]) -> Optional[int]:
    """
    Score a category's checks.

    Args:
        checks: Check records in execution order

    Returns:
        Integer 0-100, or None when no check produced a usable verdict
    """
    checks = list(checks or [])
    if not checks:
        return None

    scorable = [c for c in checks if c.status not in UNSCORABLE_STATUSES]
    if not scorable:
        return None

    weighted_sum = 0.0
    total_weight = 0.0
    for check in scorable:
        weight = severity_weight(check)
        weighted_sum += check_value(check) * weight
        total_weight += weight

    return round_half_up(weighted_sum / total_weight)
