"""
Meta Collector - Extract SEO-relevant tags from HTML.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Dict, List

from bs4 import BeautifulSoup

from sitesentinel.logger import logger


@dataclass
class MetaData:
    """Extracted metadata from a page."""
    title: str = ""
    description: str = ""
    h1_tags: List[str] = field(default_factory=list)
    canonical: str = ""
    favicon: str = ""
    og_tags: Dict[str, str] = field(default_factory=dict)
    twitter_tags: Dict[str, str] = field(default_factory=dict)
    json_ld_blocks: int = 0
    schema_types: List[str] = field(default_factory=list)
    viewport: str = ""
    robots_meta: str = ""
    lang: str = ""

    @property
    def title_length(self) -> int:
        return len(self.title)

    @property
    def description_length(self) -> int:
        return len(self.description)


def _rel_values(tag) -> List[str]:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return [r.lower() for r in rel]


class MetaCollector:
    """Collects metadata from HTML content."""

    def collect(self, html: str) -> MetaData:
        """Extract metadata from HTML."""
        soup = BeautifulSoup(html or "", "html.parser")
        data = MetaData()

        # Title
        title_tag = soup.find("title")
        if title_tag:
            data.title = title_tag.get_text(strip=True)

        # Meta description
        desc_tag = soup.find("meta", attrs={"name": re.compile(r"^description$", re.I)})
        if desc_tag:
            data.description = (desc_tag.get("content") or "").strip()

        # Headings
        data.h1_tags = [h.get_text(strip=True) for h in soup.find_all("h1")]

        # Canonical and favicon
        for link in soup.find_all("link"):
            rels = _rel_values(link)
            if "canonical" in rels and not data.canonical:
                data.canonical = link.get("href", "")
            if "icon" in rels and not data.favicon:
                data.favicon = link.get("href", "")

        # OpenGraph
        for og in soup.find_all("meta", property=re.compile(r"^og:")):
            prop = og.get("property", "").replace("og:", "")
            data.og_tags[prop] = og.get("content", "")

        # Twitter Cards
        for tw in soup.find_all("meta", attrs={"name": re.compile(r"^twitter:")}):
            name = tw.get("name", "").replace("twitter:", "")
            data.twitter_tags[name] = tw.get("content", "")

        # JSON-LD
        for script in soup.find_all("script", attrs={"type": re.compile(r"application/ld\+json", re.I)}):
            data.json_ld_blocks += 1
            try:
                payload = json.loads(script.string or "")
            except (TypeError, ValueError) as e:
                logger.debug(f"Invalid JSON-LD block: {e}")
                continue
            items = payload if isinstance(payload, list) else [payload]
            for item in items:
                if isinstance(item, dict) and item.get("@type"):
                    schema_type = item["@type"]
                    data.schema_types.extend(schema_type if isinstance(schema_type, list) else [str(schema_type)])

        # Viewport
        viewport_tag = soup.find("meta", attrs={"name": re.compile(r"^viewport$", re.I)})
        if viewport_tag:
            data.viewport = viewport_tag.get("content", "") or "present"

        # Robots meta
        robots_tag = soup.find("meta", attrs={"name": re.compile(r"^robots$", re.I)})
        if robots_tag:
            data.robots_meta = robots_tag.get("content", "")

        # HTML lang
        html_tag = soup.find("html")
        if html_tag:
            data.lang = html_tag.get("lang", "")

        return data
