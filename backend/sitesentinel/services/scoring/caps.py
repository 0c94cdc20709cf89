"""
Hard Caps - Threat verdicts that averaging must not dilute.

Rules:
- Malware/phishing confirmed in any included category → Overall forced to 0
"""

from dataclasses import replace
from typing import Iterable

from sitesentinel.services.scoring.models import CategoryResult, OverallResult
from sitesentinel.logger import logger

MALWARE_CAP = "overall_forced_0_malware_detected"


def apply_threat_override(result: OverallResult, categories: Iterable[CategoryResult]) -> OverallResult:
    """Force the overall score to 0 when any category confirmed malware.

    Args:
        result: Weighted overall result
        categories: Categories that were included in the weighted score

    Returns:
        The same result, or a copy with score 0 and the cap recorded
    """
    flagged = [c.category for c in categories if c.malware_detected]
    if not flagged:
        return result

    logger.warning(f"Applied cap: malware detected in {', '.join(flagged)} → overall=0")
    return replace(
        result,
        score=0,
        caps_applied=[*result.caps_applied, MALWARE_CAP],
    )


class CapsEngine:
    """Apply hard caps to the weighted overall score."""

    rules = (apply_threat_override,)

    def apply(self, result: OverallResult, categories: Iterable[CategoryResult]) -> OverallResult:
        categories = list(categories)
        for rule in self.rules:
            result = rule(result, categories)
        return result
