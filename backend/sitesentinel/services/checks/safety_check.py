"""
Safety & Threats Checks - malware/phishing verdict and in-page risk signals.

A failing "Malware/Phishing Indicators" check marks the category as
malware_detected and forces its score to 0.
"""
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from sitesentinel.config import settings
from sitesentinel.logger import logger
from sitesentinel.services.checks.base import BaseCheck
from sitesentinel.services.checks.threat_indicators import (
    check_domain_reputation,
    detect_phishing_indicators,
    scan_page_text,
)
from sitesentinel.services.page_fetcher import PageData
from sitesentinel.services.scoring.models import CategoryResult, CheckRecord, Severity, Status
from sitesentinel.services.scoring.weights import SAFETY

MALWARE_CHECK = "Malware/Phishing Indicators"

SAFE_BROWSING_API = "https://safebrowsing.googleapis.com/v4/threatMatches:find"

TRUSTED_CDNS = [
    "googleapis.com", "gstatic.com", "cloudflare.com", "jsdelivr.net",
    "unpkg.com", "cdnjs.cloudflare.com", "jquery.com", "bootstrapcdn.com",
]


def _external_host(src: str, hostname: str) -> Optional[str]:
    """Host of an absolute/protocol-relative URL that is not the page's own host."""
    host = (urlparse(src).hostname or "").lower() if src.startswith(("http://", "https://", "//")) else ""
    if not host or host == hostname or host.endswith("." + hostname):
        return None
    return host


class SafetyCheck(BaseCheck):
    category = SAFETY
    icon = "alert-triangle"

    async def run_checks(self, page: PageData) -> List[CheckRecord]:
        soup = BeautifulSoup(page.html or "", "html.parser")
        is_https = page.is_https
        checks = []

        # 1. Malware / phishing
        detected, details = await self._detect_threats(page)
        checks.append(CheckRecord(
            MALWARE_CHECK,
            Status.FAIL if detected else Status.PASS,
            Severity.CRITICAL,
            details if detected else "No malware or phishing indicators detected",
        ))

        # 2. SSL
        checks.append(CheckRecord(
            "SSL Certificate Status",
            Status.PASS if is_https else Status.FAIL,
            Severity.CRITICAL,
            "Site uses HTTPS encryption - your connection is secure" if is_https
            else "Site uses HTTP (unencrypted) - data can be intercepted by attackers",
        ))

        # 3. Forms
        checks.append(self._check_forms(soup, is_https))

        # 4. XSS protection
        csp = page.header("content-security-policy")
        xss_header = page.header("x-xss-protection")
        if "script-src" in csp or "default-src" in csp:
            status, desc = Status.PASS, "Content Security Policy (CSP) is configured - protects against script injection"
        elif xss_header.replace(" ", "") == "1;mode=block":
            status, desc = Status.PASS, "X-XSS-Protection header enabled in blocking mode"
        elif xss_header:
            status, desc = Status.WARN, "X-XSS-Protection header present but not in full blocking mode"
        else:
            status, desc = Status.WARN, "No XSS protection headers detected - site may be vulnerable to script injection"
        checks.append(CheckRecord("XSS (Cross-Site Scripting) Protection", status, Severity.HIGH, desc))

        # 5. External scripts
        hostname = page.hostname
        script_hosts = [h for h in (_external_host(s.get("src", ""), hostname) for s in soup.find_all("script", src=True)) if h]
        untrusted = [h for h in script_hosts if not any(cdn in h for cdn in TRUSTED_CDNS)]
        if untrusted:
            status = Status.WARN
            desc = f"{len(untrusted)} script(s) from unknown sources detected - could be tracking or malicious"
        elif script_hosts:
            status, desc = Status.PASS, f"{len(script_hosts)} external script(s) loaded from trusted CDNs"
        else:
            status, desc = Status.PASS, "No external scripts detected"
        checks.append(CheckRecord(
            "External Scripts", status, Severity.HIGH, desc,
            details={"untrusted_hosts": sorted(set(untrusted))[:10]} if untrusted else None,
        ))

        # 6. Iframes
        iframes = soup.find_all("iframe")
        external_iframes = [f for f in iframes if _external_host(f.get("src", ""), hostname)]
        if external_iframes:
            status = Status.WARN
            desc = f"{len(external_iframes)} external iframe(s) detected - verify they're from trusted sources"
        elif iframes:
            status, desc = Status.PASS, f"{len(iframes)} iframe(s) detected, all from same domain"
        else:
            status, desc = Status.PASS, "No iframes detected on page"
        checks.append(CheckRecord("Iframe Usage", status, Severity.MEDIUM, desc))

        # 7. Clickjacking
        x_frame = page.header("x-frame-options").upper()
        if x_frame == "DENY" or "frame-ancestors" in csp:
            status, desc = Status.PASS, "Clickjacking protection enabled - site cannot be embedded in iframes"
        elif x_frame == "SAMEORIGIN":
            status, desc = Status.PASS, "Clickjacking protection enabled - only same-origin embedding allowed"
        else:
            status, desc = Status.WARN, "No clickjacking protection - site can be embedded in malicious iframes"
        checks.append(CheckRecord("Clickjacking Protection", status, Severity.MEDIUM, desc))

        # 8. Mixed content
        insecure = 0
        if is_https:
            insecure = sum(1 for tag in soup.find_all(src=True) if tag["src"].lower().startswith("http://"))
            insecure += sum(
                1 for link in soup.find_all("link", href=True)
                if link["href"].lower().startswith("http://") and "stylesheet" in (link.get("rel") or [])
            )
        checks.append(CheckRecord(
            "Mixed Content",
            Status.WARN if insecure else Status.PASS,
            Severity.MEDIUM,
            f"{insecure} insecure HTTP resource(s) on HTTPS page - may cause security warnings" if insecure
            else "No mixed content issues",
        ))

        # 9. Scam wording
        phrases = scan_page_text(soup.get_text(" ", strip=True))
        checks.append(CheckRecord(
            "Suspicious Page Content",
            Status.WARN if phrases else Status.PASS,
            Severity.HIGH,
            f"Scam-like wording found: {'; '.join(phrases[:3])}" if phrases
            else "No scam-like wording detected",
        ))

        return checks

    def build_result(self, checks: List[CheckRecord]) -> CategoryResult:
        malware = any(c.name == MALWARE_CHECK and c.status == Status.FAIL for c in checks)
        result = CategoryResult.from_checks(self.category, checks, icon=self.icon, malware_detected=malware)
        if malware:
            result = result.with_score(0)
        return result

    async def _detect_threats(self, page: PageData) -> Tuple[bool, Optional[str]]:
        url = page.final_url

        if settings.GOOGLE_SAFE_BROWSING_API_KEY:
            listed = await self._safe_browsing_lookup(url)
            if listed:
                return True, "DANGER: Google Safe Browsing flagged this site for malware or phishing"

        for candidate in dict.fromkeys([page.url, url]):
            reason = detect_phishing_indicators(candidate)
            if reason:
                return True, f"WARNING: Suspicious URL patterns detected ({reason})"

        reason = check_domain_reputation(page.hostname)
        if reason:
            return True, f"WARNING: {reason}"

        return False, None

    async def _safe_browsing_lookup(self, url: str) -> bool:
        """True only for a confirmed match; lookup failures fall back to local heuristics."""
        payload = {
            "client": {"clientId": "sitesentinel", "clientVersion": settings.APP_VERSION},
            "threatInfo": {
                "threatTypes": ["MALWARE", "SOCIAL_ENGINEERING", "UNWANTED_SOFTWARE", "POTENTIALLY_HARMFUL_APPLICATION"],
                "platformTypes": ["ANY_PLATFORM"],
                "threatEntryTypes": ["URL"],
                "threatEntries": [{"url": url}],
            },
        }
        response = await self.fetcher.post_json(
            f"{SAFE_BROWSING_API}?key={settings.GOOGLE_SAFE_BROWSING_API_KEY}", payload
        )
        if response.error or response.status_code != 200:
            logger.warning(f"Safe Browsing lookup unavailable (status={response.status_code}), using local heuristics")
            return False
        return bool(isinstance(response.data, dict) and response.data.get("matches"))

    def _check_forms(self, soup: BeautifulSoup, is_https: bool) -> CheckRecord:
        has_forms = soup.find("form") is not None
        has_password = soup.find("input", attrs={"type": lambda v: (v or "").lower() == "password"}) is not None

        if has_password and not is_https:
            status = Status.FAIL
            desc = "CRITICAL: Password field on non-HTTPS page - login credentials can be stolen"
        elif has_forms and not is_https:
            status, desc = Status.WARN, "Forms detected on non-HTTPS page - submitted data is not encrypted"
        elif has_forms:
            status, desc = Status.PASS, "Forms are protected by HTTPS encryption"
        else:
            status, desc = Status.PASS, "No forms detected"

        return CheckRecord("Form Security", status, Severity.CRITICAL, desc)
