"""
Shared pytest fixtures for backend tests.

Provides fetched-page factories, an HTTP fake for auxiliary requests and a
fake DNS resolver.
"""
from typing import Callable, Dict, Optional

import httpx
import pytest

from sitesentinel.services.page_fetcher import PageData, PageFetcher


GOOD_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <title>Example Domain - Reference Pages for Documentation</title>
  <meta name="description" content="Example Domain is reserved for use in illustrative examples in documents. You may use this domain in literature without prior coordination.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <link rel="canonical" href="https://example.com/">
  <link rel="icon" href="/favicon.ico">
  <meta property="og:title" content="Example Domain">
  <script type="application/ld+json">{"@context": "https://schema.org", "@type": "Organization", "name": "Example"}</script>
</head>
<body>
  <a class="skip-link" href="#main">Skip to content</a>
  <header><nav aria-label="Primary"><a href="/about">About the project</a></nav></header>
  <main id="main">
    <h1>Example Domain</h1>
    <h2>Usage</h2>
    <img src="/logo.png" alt="Example logo">
    <form action="/search">
      <label for="q">Search</label>
      <input id="q" name="q" type="text">
    </form>
  </main>
  <footer>Footer</footer>
</body>
</html>
"""

SECURE_HEADERS = {
    "content-type": "text/html; charset=utf-8",
    "strict-transport-security": "max-age=31536000; includeSubDomains",
    "content-security-policy": "default-src 'self'; frame-ancestors 'none'",
    "x-frame-options": "DENY",
    "x-content-type-options": "nosniff",
    "referrer-policy": "strict-origin-when-cross-origin",
    "permissions-policy": "camera=()",
    "content-encoding": "gzip",
    "cache-control": "max-age=600",
    "server": "cloudflare",
    "content-length": "2048",
}


@pytest.fixture
def make_page() -> Callable[..., PageData]:
    """Factory for fetched pages; defaults describe a healthy HTTPS site."""
    def _make(
        url: str = "https://example.com",
        final_url: Optional[str] = None,
        html: str = GOOD_HTML,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> PageData:
        return PageData(
            url=url,
            final_url=final_url or url,
            status_code=kwargs.pop("status_code", 200),
            headers=dict(SECURE_HEADERS if headers is None else headers),
            html=html,
            elapsed_ms=kwargs.pop("elapsed_ms", 420),
            http_version=kwargs.pop("http_version", "HTTP/2"),
            **kwargs,
        )
    return _make


@pytest.fixture
def mock_fetcher() -> Callable[..., PageFetcher]:
    """Factory for a PageFetcher whose requests are answered from a path map.

    Unknown paths answer 404.
    """
    def _make(routes: Optional[Dict[str, httpx.Response]] = None) -> PageFetcher:
        routes = routes or {}

        def handler(request: httpx.Request) -> httpx.Response:
            response = routes.get(request.url.path)
            if response is None:
                return httpx.Response(404, text="Not Found")
            # Fresh copy so a canned response can serve several requests
            return httpx.Response(response.status_code, headers=response.headers, content=response.content)

        return PageFetcher(transport=httpx.MockTransport(handler))
    return _make


class FakeResolver:
    """Stands in for dns.asyncresolver.Resolver.

    ``records`` maps (qname, rdtype) to a list of answers or to an exception
    instance that ``resolve`` raises.
    """

    def __init__(self, records):
        self.records = records
        self.queries = []

    async def resolve(self, qname, rdtype, lifetime=None):
        self.queries.append((qname, rdtype))
        answer = self.records.get((qname, rdtype), [])
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def fake_resolver():
    return FakeResolver
