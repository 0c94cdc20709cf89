"""
Page Fetcher - Fetches the target page once per analysis.

Architecture:
1. Single GET of the target URL (redirects followed, retries on timeout,
   every hop optionally re-checked against SSRF rules)
2. Headers, body, timing and protocol captured into PageData
3. Small auxiliary requests (robots.txt, sitemap.xml, threat lookups)

Failures never raise; they are reported through ``error`` fields.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx

from sitesentinel.config import settings
from sitesentinel.logger import logger
from sitesentinel.services.url_validator import SSRFProtection


@dataclass
class PageData:
    """Fetched page data container."""
    url: str
    final_url: str
    status_code: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)
    html: str = ""
    elapsed_ms: int = 0
    http_version: str = ""
    redirect_chain: list[str] = field(default_factory=list)
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None

    @property
    def is_https(self) -> bool:
        return self.final_url.lower().startswith("https://")

    @property
    def hostname(self) -> str:
        return (urlparse(self.final_url).hostname or "").lower()

    @property
    def base_url(self) -> str:
        parsed = urlparse(self.final_url)
        return f"{parsed.scheme}://{parsed.netloc}"

    def header(self, name: str, default: str = "") -> str:
        return self.headers.get(name.lower(), default)


@dataclass
class AuxResponse:
    """Result of an auxiliary request."""
    status_code: Optional[int] = None
    text: str = ""
    data: Any = None
    error: Optional[str] = None


class PageFetcher:
    """Fetches the analyzed page and auxiliary resources over HTTP."""

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        ssrf_guard: bool = False,
    ):
        self.http_timeout = settings.HTTP_TIMEOUT
        self.aux_timeout = settings.AUX_FETCH_TIMEOUT
        self.max_redirects = settings.HTTP_MAX_REDIRECTS
        self.max_retries = settings.HTTP_MAX_RETRIES
        self.transport = transport
        self.ssrf_guard = ssrf_guard

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            max_redirects=self.max_redirects,
            timeout=timeout,
            http2=settings.HTTP2_ENABLED and self.transport is None,
            transport=self.transport,
            headers={"User-Agent": settings.USER_AGENT},
            event_hooks={"request": [self._guard_request]} if self.ssrf_guard else None,
        )

    async def _guard_request(self, request: httpx.Request) -> None:
        # Runs for the first request and for every redirect hop
        await asyncio.to_thread(SSRFProtection.check, str(request.url))

    async def fetch(self, url: str) -> PageData:
        """Fetch the target page.

        Args:
            url: Validated URL to fetch

        Returns:
            PageData; ``error`` is set when no response was obtained
        """
        for attempt in range(self.max_retries + 1):
            try:
                async with self._client(self.http_timeout) as client:
                    started = time.perf_counter()
                    response = await client.get(
                        url,
                        headers={
                            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                            "Accept-Encoding": "gzip, deflate, br",
                        },
                    )
                    elapsed_ms = int((time.perf_counter() - started) * 1000)

                    return PageData(
                        url=url,
                        final_url=str(response.url),
                        status_code=response.status_code,
                        headers={k.lower(): v for k, v in response.headers.items()},
                        html=response.text,
                        elapsed_ms=elapsed_ms,
                        http_version=response.http_version,
                        redirect_chain=[str(r.url) for r in response.history],
                    )

            except httpx.TimeoutException:
                if attempt < self.max_retries:
                    logger.warning(f"HTTP timeout for {url}, retrying (attempt {attempt + 1})")
                    await asyncio.sleep(2 ** attempt)
                    continue
                return PageData(url=url, final_url=url, error="HTTP timeout")
            except Exception as e:
                logger.warning(f"HTTP error for {url}: {e}")
                return PageData(url=url, final_url=url, error=str(e) or type(e).__name__)

        return PageData(url=url, final_url=url, error="HTTP fetch failed after retries")

    async def fetch_aux(self, url: str) -> AuxResponse:
        """GET a small auxiliary resource (robots.txt, sitemap.xml)."""
        try:
            async with self._client(self.aux_timeout) as client:
                response = await client.get(url)
                return AuxResponse(status_code=response.status_code, text=response.text)
        except Exception as e:
            logger.debug(f"Auxiliary fetch failed for {url}: {e}")
            return AuxResponse(error=str(e) or type(e).__name__)

    async def post_json(self, url: str, payload: Dict[str, Any]) -> AuxResponse:
        """POST JSON to a lookup API and decode the JSON reply."""
        try:
            async with self._client(self.aux_timeout) as client:
                response = await client.post(url, json=payload)
                data = response.json() if response.content else {}
                return AuxResponse(status_code=response.status_code, text=response.text, data=data)
        except Exception as e:
            logger.warning(f"Lookup request to {urlparse(url).netloc} failed: {e}")
            return AuxResponse(error=str(e) or type(e).__name__)
