"""
SEO & Metadata Checks - on-page tags plus robots.txt and sitemap presence.
"""
from typing import List

from sitesentinel.services.checks.base import BaseCheck
from sitesentinel.services.collectors.meta_collector import MetaCollector
from sitesentinel.services.collectors.robots_collector import RobotsCollector, RobotsData
from sitesentinel.services.collectors.sitemap_collector import SitemapCollector, SitemapData
from sitesentinel.services.page_fetcher import PageData
from sitesentinel.services.scoring.models import CheckRecord, Severity, Status
from sitesentinel.services.scoring.weights import SEO

TITLE_RANGE = (30, 60)
DESCRIPTION_RANGE = (120, 160)


class SeoCheck(BaseCheck):
    category = SEO
    icon = "search"

    def __init__(self, fetcher=None):
        super().__init__(fetcher)
        self.meta_collector = MetaCollector()
        self.robots_collector = RobotsCollector(self.fetcher)
        self.sitemap_collector = SitemapCollector(self.fetcher)

    async def run_checks(self, page: PageData) -> List[CheckRecord]:
        meta = self.meta_collector.collect(page.html)
        checks = []

        # 1. Title
        if meta.title:
            low, high = TITLE_RANGE
            optimal = low <= meta.title_length <= high
            checks.append(CheckRecord(
                "Meta Title",
                Status.PASS if optimal else Status.WARN,
                Severity.HIGH,
                f'Title: "{meta.title}" ({meta.title_length} chars{" - optimal" if optimal else ""})',
                explanation=f"Keep the title between {low}-{high} characters for best results.",
            ))
        else:
            checks.append(CheckRecord("Meta Title", Status.FAIL, Severity.HIGH, "Meta title not found or empty"))

        # 2. Description
        if meta.description:
            low, high = DESCRIPTION_RANGE
            optimal = low <= meta.description_length <= high
            checks.append(CheckRecord(
                "Meta Description",
                Status.PASS if optimal else Status.WARN,
                Severity.MEDIUM,
                f"{meta.description_length} characters{' (optimal)' if optimal else ''}",
                explanation=f"Keep the description between {low}-{high} characters.",
            ))
        else:
            checks.append(CheckRecord("Meta Description", Status.FAIL, Severity.MEDIUM, "Meta description not found"))

        # 3. H1
        h1_count = len(meta.h1_tags)
        if h1_count == 1:
            checks.append(CheckRecord("H1 Tags", Status.PASS, Severity.MEDIUM, "One H1 tag found (optimal)"))
        elif h1_count == 0:
            checks.append(CheckRecord("H1 Tags", Status.FAIL, Severity.MEDIUM, "No H1 tag found"))
        else:
            checks.append(CheckRecord("H1 Tags", Status.WARN, Severity.MEDIUM, f"{h1_count} H1 tags found (should be 1)"))

        # 4-5. robots.txt and sitemap
        robots = await self.robots_collector.fetch(page.base_url)
        sitemap = await self.sitemap_collector.fetch(page.base_url, robots.sitemaps)
        checks.append(self._robots_check(robots))
        checks.append(self._sitemap_check(sitemap))

        # 6. Canonical
        checks.append(CheckRecord(
            "Canonical URL",
            Status.PASS if meta.canonical else Status.WARN,
            Severity.LOW,
            f"Set to: {meta.canonical}" if meta.canonical else "Canonical URL not set",
        ))

        # 7. Favicon
        checks.append(CheckRecord(
            "Favicon",
            Status.PASS if meta.favicon else Status.WARN,
            Severity.LOW,
            "Favicon configured" if meta.favicon else "Favicon not found",
        ))

        # 8. Open Graph
        og_count = len(meta.og_tags)
        checks.append(CheckRecord(
            "Open Graph Tags",
            Status.PASS if og_count else Status.WARN,
            Severity.LOW,
            f"{og_count} OG tags found (good for social sharing)" if og_count else "Open Graph tags not found",
        ))

        # 9. Structured data
        blocks = meta.json_ld_blocks
        types = ", ".join(sorted(set(meta.schema_types)))
        checks.append(CheckRecord(
            "Structured Data (Schema.org)",
            Status.PASS if blocks else Status.WARN,
            Severity.LOW,
            f"{blocks} schema.org block(s) found{f' ({types})' if types else ''}" if blocks
            else "No structured data found",
        ))

        # 10. Viewport
        checks.append(CheckRecord(
            "Viewport Meta Tag",
            Status.PASS if meta.viewport else Status.FAIL,
            Severity.HIGH,
            "Responsive viewport configured" if meta.viewport else "Viewport meta tag not found",
        ))

        return checks

    def _robots_check(self, robots: RobotsData) -> CheckRecord:
        if robots.error:
            return CheckRecord("Robots.txt Exists", Status.WARN, Severity.MEDIUM, f"robots.txt check failed: {robots.error}")
        if not robots.exists:
            return CheckRecord(
                "Robots.txt Exists", Status.WARN, Severity.MEDIUM,
                f"robots.txt not found (HTTP {robots.status_code})",
            )
        if robots.blocks_all:
            return CheckRecord(
                "Robots.txt Exists", Status.WARN, Severity.MEDIUM,
                "robots.txt blocks all crawlers (Disallow: /)",
            )
        return CheckRecord("Robots.txt Exists", Status.PASS, Severity.MEDIUM, "robots.txt is configured")

    def _sitemap_check(self, sitemap: SitemapData) -> CheckRecord:
        if sitemap.exists:
            return CheckRecord(
                "Sitemap.xml Exists", Status.PASS, Severity.MEDIUM,
                f"Sitemap found at {sitemap.url} ({sitemap.url_count} entries)",
            )
        if sitemap.error:
            return CheckRecord("Sitemap.xml Exists", Status.WARN, Severity.MEDIUM, f"Sitemap check failed: {sitemap.error}")
        return CheckRecord(
            "Sitemap.xml Exists", Status.WARN, Severity.MEDIUM,
            f"sitemap.xml not found (HTTP {sitemap.status_code})",
        )
