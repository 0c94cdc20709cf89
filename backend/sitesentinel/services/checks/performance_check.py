"""
Performance Checks - timing, protocol and delivery headers of the page fetch.
"""
from typing import List

from sitesentinel.services.checks.base import BaseCheck
from sitesentinel.services.page_fetcher import PageData
from sitesentinel.services.scoring.models import CheckRecord, Severity, Status
from sitesentinel.services.scoring.weights import PERFORMANCE

FAST_LOAD_MS = 3000
ACCEPTABLE_LOAD_MS = 5000

CDN_INDICATORS = ["cloudflare", "akamai", "cdn", "cloudfront", "fastly"]
CDN_HEADERS = ["cf-ray", "x-amz-cf-id", "x-served-by", "x-cache", "x-akamai-transformed"]


class PerformanceCheck(BaseCheck):
    category = PERFORMANCE
    icon = "zap"

    async def run_checks(self, page: PageData) -> List[CheckRecord]:
        checks = []

        # 1. Load time
        load_ms = page.elapsed_ms
        if load_ms < FAST_LOAD_MS:
            status, verdict = Status.PASS, "Excellent"
        elif load_ms < ACCEPTABLE_LOAD_MS:
            status, verdict = Status.WARN, "Acceptable"
        else:
            status, verdict = Status.FAIL, "Slow"
        checks.append(CheckRecord("Page Load Time", status, Severity.MEDIUM, f"Load time: {load_ms}ms ({verdict})"))

        # 2. HTTP/2 or HTTP/3
        version = page.http_version or "HTTP/1.1"
        modern = version.upper() in ("HTTP/2", "HTTP/3")
        checks.append(CheckRecord(
            "HTTP Version",
            Status.PASS if modern else Status.WARN,
            Severity.MEDIUM,
            f"Using {version}",
        ))

        # 3. Compression
        encoding = page.header("content-encoding")
        checks.append(CheckRecord(
            "Content Compression",
            Status.PASS if encoding else Status.INFO,
            Severity.LOW,
            f"Compression enabled: {encoding}" if encoding else "No compression detected",
        ))

        # 4. Caching
        cache_control = page.header("cache-control")
        checks.append(CheckRecord(
            "Browser Caching",
            Status.PASS if cache_control else Status.INFO,
            Severity.LOW,
            f"Cache-Control: {cache_control}" if cache_control else "No cache policy set",
        ))

        # 5. CDN
        server = page.header("server")
        has_cdn = any(i in server.lower() for i in CDN_INDICATORS) or any(page.header(h) for h in CDN_HEADERS)
        checks.append(CheckRecord(
            "CDN/Performance Optimization",
            Status.PASS if has_cdn else Status.INFO,
            Severity.LOW,
            f"CDN detected: {server or 'edge headers present'}" if has_cdn else "No CDN detected (not required)",
        ))

        # 6. Response size
        content_length = page.header("content-length")
        if content_length.isdigit():
            checks.append(CheckRecord(
                "Response Size", Status.PASS, Severity.MEDIUM,
                f"Content size: {int(content_length) / 1024:.2f} KB",
            ))
        else:
            checks.append(CheckRecord("Response Size", Status.INFO, Severity.MEDIUM, "Size information not available"))

        # 7. Redirects
        redirects = len(page.redirect_chain)
        efficient = page.status_code == 200 and redirects == 0
        description = f"HTTP Status: {page.status_code}"
        if redirects:
            description += f" after {redirects} redirect(s)"
        checks.append(CheckRecord(
            "Redirect Efficiency",
            Status.PASS if efficient else Status.WARN,
            Severity.MEDIUM,
            description,
        ))

        return checks
