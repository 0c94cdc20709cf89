"""
Tests for the analysis orchestrator.
"""
import socket
from dataclasses import replace
from unittest.mock import patch

import httpx
import pytest

from sitesentinel.services.analysis_runner import AnalysisRunner, default_checks
from sitesentinel.services.checks.base import BaseCheck
from sitesentinel.services.page_fetcher import PageFetcher
from sitesentinel.services.scoring.caps import MALWARE_CAP
from sitesentinel.services.scoring.models import CheckRecord, Severity, Status
from sitesentinel.services.url_validator import UrlValidationError


class StaticCheck(BaseCheck):
    """Checker returning fixed records."""

    def __init__(self, category, records, requires_page=True, malware=False):
        super().__init__(fetcher=None)
        self.category = category
        self.records = records
        self.requires_page = requires_page
        self.malware = malware

    async def run_checks(self, page):
        return list(self.records)

    def build_result(self, checks):
        result = super().build_result(checks)
        if self.malware:
            result = replace(result, malware_detected=True)
        return result


class CrashingCheck(BaseCheck):
    category = "Crashing"
    icon = "x"

    async def analyze(self, page):
        raise RuntimeError("checker blew up")


def page_fetcher():
    return PageFetcher(transport=httpx.MockTransport(
        lambda request: httpx.Response(200, html="<html><body>ok</body></html>")
    ))


def refusing_fetcher():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)
    return PageFetcher(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
class TestAnalysisRunner:
    async def test_scores_all_categories(self):
        checks = [
            StaticCheck("Security & HTTPS", [CheckRecord("a", Status.PASS, Severity.CRITICAL)]),
            StaticCheck("Performance", [CheckRecord("b", Status.WARN, Severity.MEDIUM)]),
        ]
        runner = AnalysisRunner(fetcher=page_fetcher(), checks=checks, ssrf_protection=False)
        result = await runner.run("example.com")

        # (100 * 3 + 60 * 1.5) / 4.5 = 86.67
        assert result.url == "https://example.com"
        assert result.status_code == 200
        assert result.overall.score == 87
        assert result.overall.label == "Good"
        assert result.breakdown.included_categories == 2
        assert [c.category for c in result.categories] == ["Security & HTTPS", "Performance"]
        assert result.categories[1].label == "Fair"
        assert result.scoring_version == "2.1"
        assert result.error is None

    async def test_crashing_checker_is_isolated(self):
        checks = [
            StaticCheck("Security & HTTPS", [CheckRecord("a", Status.PASS, Severity.HIGH)]),
            CrashingCheck(fetcher=None),
        ]
        runner = AnalysisRunner(fetcher=page_fetcher(), checks=checks, ssrf_protection=False)
        result = await runner.run("https://example.com")

        assert result.overall.score == 100
        crashed = result.categories[1]
        assert crashed.status == "unavailable"
        assert crashed.score is None
        assert crashed.label == "Not Analyzed"
        assert "checker blew up" in crashed.checks[0].description
        assert result.breakdown.total_categories == 2
        assert result.breakdown.excluded_categories[0].name == "Crashing"
        assert result.breakdown.excluded_categories[0].reason == "Analysis unavailable"

    async def test_fetch_failure_keeps_page_independent_checks(self):
        checks = [
            StaticCheck("Security & HTTPS", [CheckRecord("a", Status.PASS)]),
            StaticCheck("DNS & Domain", [CheckRecord("b", Status.WARN)], requires_page=False),
        ]
        runner = AnalysisRunner(fetcher=refusing_fetcher(), checks=checks, ssrf_protection=False)
        result = await runner.run("https://example.com")

        assert "connection refused" in result.error
        assert result.categories[0].status == "unavailable"
        assert result.categories[0].checks[0].name == "Connection Error"
        assert result.overall.score == 60
        assert result.breakdown.included_categories == 1

    async def test_malware_overrides_overall(self):
        checks = [
            StaticCheck("Security & HTTPS", [CheckRecord("a", Status.PASS)]),
            StaticCheck("Safety & Threats", [CheckRecord("b", Status.PASS)], malware=True),
        ]
        runner = AnalysisRunner(fetcher=page_fetcher(), checks=checks, ssrf_protection=False)
        result = await runner.run("https://example.com")

        assert result.overall.score == 0
        assert result.overall.label == "Critical"
        assert result.caps_applied == [MALWARE_CAP]

    async def test_invalid_url_raises(self):
        runner = AnalysisRunner(fetcher=page_fetcher(), checks=[], ssrf_protection=False)
        with pytest.raises(UrlValidationError):
            await runner.run("ftp://example.com")

    async def test_ssrf_protection_blocks_internal_hosts(self):
        runner = AnalysisRunner(fetcher=page_fetcher(), checks=[], ssrf_protection=True)
        with pytest.raises(UrlValidationError):
            await runner.run("http://127.0.0.1:8000/admin")

    async def test_redirect_to_internal_host_is_not_followed(self):
        requested = []

        def handler(request):
            requested.append(request.url.host)
            if request.url.host == "example.com":
                return httpx.Response(302, headers={"Location": "http://169.254.169.254/latest/meta-data"})
            return httpx.Response(200, text="iam-credentials")

        fetcher = PageFetcher(transport=httpx.MockTransport(handler), ssrf_guard=True)
        checks = [StaticCheck("Security & HTTPS", [CheckRecord("a", Status.PASS)])]
        runner = AnalysisRunner(fetcher=fetcher, checks=checks, ssrf_protection=True)
        public = [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("93.184.216.34", 0))]
        with patch("sitesentinel.services.url_validator.socket.getaddrinfo", return_value=public):
            result = await runner.run("http://example.com/")

        assert requested == ["example.com"]
        assert "169.254.169.254" in result.error
        assert result.status_code is None
        assert result.categories[0].checks[0].name == "Connection Error"

    async def test_redirect_to_public_host_is_followed(self):
        def handler(request):
            if request.url.host == "example.com":
                return httpx.Response(301, headers={"Location": "https://www.example.com/"})
            return httpx.Response(200, text="<html><body>ok</body></html>")

        fetcher = PageFetcher(transport=httpx.MockTransport(handler), ssrf_guard=True)
        runner = AnalysisRunner(fetcher=fetcher, checks=[], ssrf_protection=True)
        public = [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("93.184.216.34", 0))]
        with patch("sitesentinel.services.url_validator.socket.getaddrinfo", return_value=public):
            result = await runner.run("http://example.com/")

        assert result.error is None
        assert result.final_url == "https://www.example.com/"
        assert result.status_code == 200


def test_default_checks_cover_six_categories():
    fetcher = page_fetcher()
    checks = default_checks(fetcher)
    assert [c.category for c in checks] == [
        "Security & HTTPS",
        "DNS & Domain",
        "Performance",
        "SEO & Metadata",
        "Accessibility",
        "Safety & Threats",
    ]
    assert all(c.fetcher is fetcher for c in checks)


def test_default_fetcher_guards_redirects_when_protection_enabled():
    assert AnalysisRunner(checks=[], ssrf_protection=True).page_fetcher.ssrf_guard is True
    assert AnalysisRunner(checks=[], ssrf_protection=False).page_fetcher.ssrf_guard is False
