"""
Sitemap Collector - Detect sitemap.xml.

Checks:
- Sitemap URLs declared in robots.txt
- The conventional /sitemap.xml location
"""

import re
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urljoin

from sitesentinel.services.page_fetcher import PageFetcher


@dataclass
class SitemapData:
    """Sitemap detection result."""
    exists: bool = False
    url: Optional[str] = None
    source: str = "not_found"  # 'robots', 'common_path', 'not_found'
    status_code: Optional[int] = None
    url_count: int = 0
    is_index: bool = False
    error: Optional[str] = None


class SitemapCollector:
    """Collector for sitemap.xml."""

    DEFAULT_PATH = "/sitemap.xml"

    def __init__(self, fetcher: PageFetcher):
        self.fetcher = fetcher

    async def fetch(self, base_url: str, declared: Optional[List[str]] = None) -> SitemapData:
        """Detect the site's sitemap.

        Args:
            base_url: scheme://host of the analyzed site
            declared: Sitemap URLs listed in robots.txt

        Returns:
            SitemapData; for a miss, status_code is the /sitemap.xml response
        """
        for sitemap_url in declared or []:
            result = await self._fetch_sitemap(urljoin(base_url, sitemap_url))
            if result.exists:
                result.source = "robots"
                return result

        result = await self._fetch_sitemap(urljoin(base_url, self.DEFAULT_PATH))
        if result.exists:
            result.source = "common_path"
        return result

    async def _fetch_sitemap(self, sitemap_url: str) -> SitemapData:
        response = await self.fetcher.fetch_aux(sitemap_url)
        if response.error:
            return SitemapData(error=response.error)
        if response.status_code != 200:
            return SitemapData(status_code=response.status_code)

        content = response.text
        if "<urlset" not in content and "<sitemapindex" not in content:
            return SitemapData(status_code=response.status_code)

        return SitemapData(
            exists=True,
            url=sitemap_url,
            status_code=response.status_code,
            is_index="<sitemapindex" in content,
            url_count=len(re.findall(r"<loc>", content)),
        )
