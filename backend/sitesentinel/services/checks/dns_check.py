"""
DNS & Domain Checks - resolution and email-authentication records.
"""
import asyncio
from typing import Any, List, Optional, Tuple
from urllib.parse import urlparse

import dns.asyncresolver
import dns.exception

from sitesentinel.config import settings
from sitesentinel.logger import logger
from sitesentinel.services.checks.base import BaseCheck
from sitesentinel.services.page_fetcher import PageData, PageFetcher
from sitesentinel.services.scoring.models import CheckRecord, Severity, Status
from sitesentinel.services.scoring.weights import DNS


def _txt_value(rdata: Any) -> str:
    strings = getattr(rdata, "strings", None)
    if strings:
        return "".join(s.decode(errors="ignore") if isinstance(s, bytes) else str(s) for s in strings)
    return str(rdata).strip('"')


class DnsCheck(BaseCheck):
    category = DNS
    icon = "globe"
    requires_page = False

    def __init__(self, fetcher: Optional[PageFetcher] = None, resolver: Any = None):
        super().__init__(fetcher)
        self.resolver = resolver

    def _get_resolver(self) -> Any:
        # Reads the system resolver configuration, so built on first use
        if self.resolver is None:
            self.resolver = dns.asyncresolver.Resolver()
        return self.resolver

    async def _lookup(self, resolver: Any, qname: str, rdtype: str) -> Tuple[List[Any], Optional[str]]:
        try:
            answer = await resolver.resolve(qname, rdtype, lifetime=settings.DNS_TIMEOUT)
            return list(answer), None
        except dns.exception.DNSException as e:
            logger.debug(f"DNS {rdtype} lookup for {qname} failed: {e}")
            return [], str(e) or type(e).__name__

    async def run_checks(self, page: PageData) -> List[CheckRecord]:
        hostname = (urlparse(page.url).hostname or page.hostname).lower()
        resolver = self._get_resolver()
        checks = []

        (a, a_err), (aaaa, aaaa_err), (mx, mx_err), (txt, txt_err), (dmarc, dmarc_err) = await asyncio.gather(
            self._lookup(resolver, hostname, "A"),
            self._lookup(resolver, hostname, "AAAA"),
            self._lookup(resolver, hostname, "MX"),
            self._lookup(resolver, hostname, "TXT"),
            self._lookup(resolver, f"_dmarc.{hostname}", "TXT"),
        )

        # 1. DNS Resolution
        if a_err:
            checks.append(CheckRecord("DNS Resolution", Status.FAIL, Severity.CRITICAL, f"Cannot resolve domain: {a_err}"))
        else:
            addresses = [str(r) for r in a]
            checks.append(CheckRecord(
                "DNS Resolution",
                Status.PASS if addresses else Status.FAIL,
                Severity.CRITICAL,
                f"Domain resolves to: {', '.join(addresses)}",
            ))

        # 2. IPv6
        if aaaa_err:
            checks.append(CheckRecord("IPv6 Support", Status.INFO, Severity.LOW, "IPv6 not available"))
        else:
            checks.append(CheckRecord(
                "IPv6 Support",
                Status.PASS if aaaa else Status.WARN,
                Severity.LOW,
                f"IPv6 enabled: {aaaa[0]}" if aaaa else "IPv6 not configured",
            ))

        # 3. MX
        if mx_err:
            checks.append(CheckRecord("MX Records (Email)", Status.WARN, Severity.MEDIUM, "Unable to verify mail configuration"))
        else:
            checks.append(CheckRecord(
                "MX Records (Email)",
                Status.PASS if mx else Status.WARN,
                Severity.MEDIUM,
                f"{len(mx)} mail server(s) configured" if mx else "No mail servers configured",
            ))

        # 4. SPF
        if txt_err:
            checks.append(CheckRecord("SPF Record (Email Security)", Status.WARN, Severity.MEDIUM, "Unable to check SPF record"))
        else:
            has_spf = any(_txt_value(r).lower().startswith("v=spf1") for r in txt)
            checks.append(CheckRecord(
                "SPF Record (Email Security)",
                Status.PASS if has_spf else Status.WARN,
                Severity.MEDIUM,
                "SPF configured to prevent email spoofing" if has_spf else "SPF not configured",
            ))

        # 5. DMARC
        if dmarc_err:
            checks.append(CheckRecord("DMARC Record (Email Auth)", Status.INFO, Severity.MEDIUM, "DMARC policy not detected"))
        else:
            has_dmarc = any(_txt_value(r).lower().startswith("v=dmarc1") for r in dmarc)
            checks.append(CheckRecord(
                "DMARC Record (Email Auth)",
                Status.PASS if has_dmarc else Status.WARN,
                Severity.MEDIUM,
                "DMARC policy configured" if has_dmarc else "DMARC policy not configured",
            ))

        # 6. DNSSEC
        checks.append(CheckRecord("DNSSEC", Status.INFO, Severity.MEDIUM, "DNSSEC verification not available in this check"))

        return checks
