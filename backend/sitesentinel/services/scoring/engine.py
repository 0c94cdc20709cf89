"""
Scoring Engine - Combines category results into the overall score.

Coordinates:
- Category exclusion (unavailable / errored categories)
- Importance-weighted average of the remaining category scores
- Hard caps (confirmed malware forces the score to 0)
"""

from typing import Any, List, Mapping, Optional, Sequence, Tuple

from sitesentinel.services.scoring.caps import CapsEngine
from sitesentinel.services.scoring.category_scorer import round_half_up
from sitesentinel.services.scoring.models import (
    Breakdown,
    CategoryContribution,
    CategoryResult,
    CategoryStatus,
    ExcludedCategory,
    OverallResult,
)
from sitesentinel.services.scoring.weights import category_weight
from sitesentinel.logger import logger


def _coerce(entry: Any) -> Optional[CategoryResult]:
    if isinstance(entry, CategoryResult):
        return entry
    if isinstance(entry, Mapping):
        return CategoryResult.from_dict(entry)
    return None


def exclusion_reason(category: CategoryResult) -> Optional[str]:
    """Why a category cannot contribute to the overall score, if it can't."""
    if category.status == CategoryStatus.UNAVAILABLE:
        return "Analysis unavailable"
    if category.score is None:
        return "No valid checks executed"
    # Recheck: a producer may report a number without having real data
    if category.checks and not any(c.is_scorable for c in category.checks):
        return "All checks failed or unavailable"
    return None


def partition_categories(
    categories: Any,
) -> Tuple[List[CategoryResult], List[ExcludedCategory]]:
    """Split input into usable categories and excluded ones (with reasons).

    Entries that are neither a CategoryResult nor a mapping are skipped.
    """
    included: List[CategoryResult] = []
    excluded: List[ExcludedCategory] = []

    if not isinstance(categories, (list, tuple)):
        return included, excluded

    for entry in categories:
        category = _coerce(entry)
        if category is None:
            logger.debug(f"Skipping malformed category entry: {type(entry).__name__}")
            continue

        reason = exclusion_reason(category)
        if reason:
            excluded.append(ExcludedCategory(name=category.category, reason=reason))
        else:
            included.append(category)

    return included, excluded


def score_overall(categories: Sequence[Any]) -> OverallResult:
    """Importance-weighted mean of usable category scores.

    Args:
        categories: CategoryResult values (or equivalent mappings)

    Returns:
        OverallResult with score 0-100 and a diagnostic breakdown
    """
    if not isinstance(categories, (list, tuple)) or not categories:
        return OverallResult(score=0, breakdown=Breakdown())

    included, excluded = partition_categories(categories)

    weighted_sum = 0.0
    total_weight = 0.0
    contributions: List[CategoryContribution] = []

    for category in included:
        weight = category_weight(category.category)
        weighted_sum += category.score * weight
        total_weight += weight
        # Running-total share, a display hint only
        contributions.append(CategoryContribution(
            name=category.category,
            score=category.score,
            weight=weight,
            contribution=round_half_up((category.score * weight) / total_weight),
        ))

    score = round_half_up(weighted_sum / total_weight) if total_weight > 0 else 0

    return OverallResult(
        score=score,
        breakdown=Breakdown(
            included_categories=len(included),
            total_categories=len(categories),
            excluded_categories=excluded,
            category_scores=contributions,
        ),
    )


class ScoringEngine:
    """Main scoring orchestrator."""

    def __init__(self):
        self.caps_engine = CapsEngine()

    def score(self, categories: Sequence[Any]) -> OverallResult:
        """Weighted overall score with hard caps applied.

        Returns:
            The OverallResult exposed to the user
        """
        result = score_overall(categories)
        included, _ = partition_categories(categories)
        result = self.caps_engine.apply(result, included)

        breakdown = result.breakdown
        logger.info(
            f"Overall score={result.score} "
            f"(included={breakdown.included_categories}/{breakdown.total_categories}, "
            f"caps={result.caps_applied or 'none'})"
        )
        return result
