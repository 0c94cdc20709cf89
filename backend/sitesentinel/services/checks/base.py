"""
Base class for category checkers.
"""
from typing import List, Optional

from sitesentinel.logger import logger
from sitesentinel.services.page_fetcher import PageData, PageFetcher
from sitesentinel.services.scoring.models import CategoryResult, CheckRecord, Severity, Status


class BaseCheck:
    """Runs one category's checks against a fetched page.

    Subclasses implement ``run_checks``. ``analyze`` never raises for errors
    inside the checks: they become a single error record.
    """

    category: str = ""
    icon: str = ""
    requires_page: bool = True

    def __init__(self, fetcher: Optional[PageFetcher] = None):
        self.fetcher = fetcher or PageFetcher()

    async def analyze(self, page: PageData) -> CategoryResult:
        if self.requires_page and not page.ok:
            return self.build_result([
                CheckRecord(
                    "Connection Error", Status.ERROR, Severity.CRITICAL,
                    f"Unable to analyze: {page.error or 'no response'}",
                    explanation="Could not connect to the website to perform this analysis.",
                )
            ])

        try:
            checks = await self.run_checks(page)
        except Exception as e:
            logger.exception(f"{self.category} checks failed: {e}")
            checks = [
                CheckRecord(
                    f"{self.category} Analysis Error", Status.ERROR, Severity.CRITICAL,
                    f"Unable to analyze: {e}",
                )
            ]

        return self.build_result(checks)

    async def run_checks(self, page: PageData) -> List[CheckRecord]:
        raise NotImplementedError

    def build_result(self, checks: List[CheckRecord]) -> CategoryResult:
        return CategoryResult.from_checks(self.category, checks, icon=self.icon)
