"""
Analysis Runner - Main orchestrator for site analyses.

Coordinates URL validation, the single page fetch, the category checkers and
scoring.
"""
import asyncio
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sitesentinel.config import settings
from sitesentinel.logger import logger
from sitesentinel.schemas.analysis_result import AnalysisResult
from sitesentinel.services.checks.accessibility_check import AccessibilityCheck
from sitesentinel.services.checks.base import BaseCheck
from sitesentinel.services.checks.dns_check import DnsCheck
from sitesentinel.services.checks.performance_check import PerformanceCheck
from sitesentinel.services.checks.safety_check import SafetyCheck
from sitesentinel.services.checks.security_check import SecurityCheck
from sitesentinel.services.checks.seo_check import SeoCheck
from sitesentinel.services.page_fetcher import PageData, PageFetcher
from sitesentinel.services.scoring.engine import ScoringEngine
from sitesentinel.services.scoring.labels import score_to_color, score_to_label
from sitesentinel.services.scoring.models import CategoryResult, OverallResult
from sitesentinel.services.scoring.weights import SCORING_VERSION
from sitesentinel.services.url_validator import SSRFProtection, validate_url


def default_checks(fetcher: PageFetcher) -> List[BaseCheck]:
    """The built-in checkers, in report order."""
    return [
        SecurityCheck(fetcher),
        DnsCheck(fetcher),
        PerformanceCheck(fetcher),
        SeoCheck(fetcher),
        AccessibilityCheck(fetcher),
        SafetyCheck(fetcher),
    ]


class AnalysisRunner:
    """Orchestrates the complete analysis process."""

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        checks: Optional[Sequence[BaseCheck]] = None,
        ssrf_protection: Optional[bool] = None,
    ):
        self.ssrf_protection = settings.SSRF_PROTECTION_ENABLED if ssrf_protection is None else ssrf_protection
        # Redirect hops are re-checked by the fetcher itself
        self.page_fetcher = fetcher or PageFetcher(ssrf_guard=self.ssrf_protection)
        self.checks = list(checks) if checks is not None else default_checks(self.page_fetcher)
        self.scoring_engine = ScoringEngine()

    async def run(self, url: str) -> AnalysisResult:
        """
        Run a complete analysis on a URL.

        Args:
            url: The URL to analyze (scheme optional)

        Returns:
            AnalysisResult with the overall score, breakdown and categories

        Raises:
            UrlValidationError: the URL is malformed or targets an internal host
        """
        started_at = datetime.now(timezone.utc)
        url = validate_url(url)
        if self.ssrf_protection:
            await asyncio.to_thread(SSRFProtection.check, url)

        # 1. Fetch the page once
        logger.info(f"Starting analysis for {url}")
        page = await self.page_fetcher.fetch(url)
        if page.error:
            logger.warning(f"Page fetch failed for {url}: {page.error}")

        # 2. Run every checker against the same page
        categories = await asyncio.gather(*(self._safe_analyze(check, page) for check in self.checks))

        # 3. Score
        overall = self.scoring_engine.score(list(categories))

        completed_at = datetime.now(timezone.utc)
        duration = (completed_at - started_at).total_seconds()
        logger.info(f"Completed analysis for {url} in {duration:.2f}s (score={overall.score})")

        return self._build_result(page, categories, overall, started_at, completed_at)

    async def _safe_analyze(self, check: BaseCheck, page: PageData) -> CategoryResult:
        try:
            return await check.analyze(page)
        except Exception as e:
            logger.exception(f"{check.category or type(check).__name__} checker crashed: {e}")
            return CategoryResult.unavailable(check.category, f"Analysis failed: {e}", icon=check.icon)

    def _build_result(
        self,
        page: PageData,
        categories: Sequence[CategoryResult],
        overall: OverallResult,
        started_at: datetime,
        completed_at: datetime,
    ) -> AnalysisResult:
        breakdown = overall.breakdown
        return AnalysisResult(
            url=page.url,
            final_url=page.final_url,
            status_code=page.status_code,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=round((completed_at - started_at).total_seconds(), 2),
            overall={
                "score": overall.score,
                "label": score_to_label(overall.score),
                "color": score_to_color(overall.score),
            },
            breakdown={
                "included_categories": breakdown.included_categories,
                "total_categories": breakdown.total_categories,
                "excluded_categories": [vars(e) for e in breakdown.excluded_categories],
                "category_scores": [vars(c) for c in breakdown.category_scores],
            },
            caps_applied=overall.caps_applied,
            categories=[
                {
                    **category.to_dict(),
                    "label": score_to_label(category.score),
                    "color": score_to_color(category.score),
                }
                for category in categories
            ],
            error=page.error,
            scoring_version=SCORING_VERSION,
        )
