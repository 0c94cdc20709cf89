"""
Robots.txt Collector - Fetch and parse robots.txt.
"""
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urljoin

from sitesentinel.services.page_fetcher import PageFetcher


@dataclass
class RobotsData:
    """Parsed robots.txt data."""
    exists: bool = False
    status_code: Optional[int] = None
    blocks_all: bool = False
    sitemaps: List[str] = field(default_factory=list)
    error: Optional[str] = None


class RobotsCollector:
    """Fetches and parses robots.txt."""

    def __init__(self, fetcher: PageFetcher):
        self.fetcher = fetcher

    async def fetch(self, base_url: str) -> RobotsData:
        """Fetch robots.txt from the domain."""
        response = await self.fetcher.fetch_aux(urljoin(base_url, "/robots.txt"))

        if response.error:
            return RobotsData(error=response.error)
        if response.status_code != 200:
            return RobotsData(status_code=response.status_code)

        data = self.parse(response.text)
        data.status_code = response.status_code
        return data

    def parse(self, content: str) -> RobotsData:
        """Parse robots.txt content.

        Groups are consecutive User-agent lines followed by their rules.
        """
        data = RobotsData(exists=True)
        agents: List[str] = []
        in_rules = False

        for line in content.splitlines():
            line = line.split("#", 1)[0].strip()
            if not line or ":" not in line:
                continue

            key, value = line.split(":", 1)
            key = key.strip().lower()
            value = value.strip()

            if key == "user-agent":
                if in_rules:
                    agents, in_rules = [], False
                agents.append(value)
            elif key in ("disallow", "allow"):
                in_rules = True
                if key == "disallow" and value == "/" and "*" in agents:
                    data.blocks_all = True
            elif key == "sitemap" and value:
                data.sitemaps.append(value)

        return data
