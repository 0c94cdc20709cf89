"""
Security & HTTPS Checks - transport security and hardening headers.
"""
import re
from typing import List

from sitesentinel.services.checks.base import BaseCheck
from sitesentinel.services.page_fetcher import PageData
from sitesentinel.services.scoring.models import CheckRecord, Severity, Status
from sitesentinel.services.scoring.weights import SECURITY

META_CSP_RE = re.compile(
    r"<meta[^>]*http-equiv\s*=\s*[\"']Content-Security-Policy[\"'][^>]*content\s*=\s*[\"']([^\"']+)[\"']",
    re.IGNORECASE,
)
NONCE_RE = re.compile(r"nonce-[A-Za-z0-9+/=]+", re.IGNORECASE)

# Providers that apply CSP at the edge, invisible in the response we get
INFRA_PROVIDERS = ["google.com", "cloudflare.com", "amazon.com", "microsoft.com", "facebook.com", "apple.com"]

KNOWN_MALICIOUS_DOMAINS = [
    "durframet", "chroelhome", "defulated", "phosolica", "flianial",
    "bitaxiers", "kxkxgw", "nwqgrv",
]


class SecurityCheck(BaseCheck):
    category = SECURITY
    icon = "lock"

    async def run_checks(self, page: PageData) -> List[CheckRecord]:
        checks = []
        is_https = page.is_https

        # 1. HTTPS
        checks.append(CheckRecord(
            "HTTPS Encryption",
            Status.PASS if is_https else Status.FAIL,
            Severity.CRITICAL,
            "Site uses HTTPS encryption" if is_https else "Site does not use HTTPS",
            explanation="HTTPS encrypts all communication between your browser and the website.",
        ))

        # 2. HSTS
        hsts = page.header("strict-transport-security")
        checks.append(CheckRecord(
            "HSTS Header",
            Status.PASS if hsts else Status.WARN,
            Severity.MEDIUM,
            f"HSTS enabled: {hsts}" if hsts else "HSTS not configured (optional for major sites)",
            explanation="HTTP Strict Transport Security forces browsers to always use HTTPS.",
        ))

        # 3. CSP
        checks.append(self._check_csp(page))

        # 4. X-Frame-Options
        x_frame = page.header("x-frame-options")
        checks.append(CheckRecord(
            "X-Frame-Options Header",
            Status.PASS if x_frame else Status.WARN,
            Severity.MEDIUM,
            f"Set to {x_frame}" if x_frame else "Not set - considered lower priority",
            explanation="X-Frame-Options prevents clickjacking by controlling iframe embedding.",
        ))

        # 5. X-Content-Type-Options
        has_nosniff = bool(page.header("x-content-type-options"))
        checks.append(CheckRecord(
            "X-Content-Type-Options",
            Status.PASS if has_nosniff else Status.WARN,
            Severity.MEDIUM,
            "MIME type sniffing disabled" if has_nosniff else "MIME type sniffing mitigation not detected",
            explanation="Prevents browsers from MIME-sniffing responses, reducing drive-by download attacks.",
        ))

        # 6. Referrer-Policy
        referrer = page.header("referrer-policy")
        checks.append(CheckRecord(
            "Referrer-Policy",
            Status.PASS if referrer else Status.INFO,
            Severity.LOW,
            f"Set to {referrer}" if referrer else "Not configured (uses default)",
            explanation="Controls how much referrer information is shared when navigating to other sites.",
        ))

        # 7. Permissions-Policy
        has_permissions = bool(page.header("permissions-policy"))
        checks.append(CheckRecord(
            "Permissions-Policy",
            Status.PASS if has_permissions else Status.INFO,
            Severity.MEDIUM,
            "Browser permissions restricted" if has_permissions else "Browser permissions not restricted",
            explanation="Restricts which browser features (camera, microphone, etc.) the site can use.",
        ))

        # 8. TLS
        if is_https:
            checks.append(CheckRecord(
                "TLS Protocol Version",
                Status.PASS,
                Severity.HIGH,
                "TLS connection established successfully (TLS 1.2+)",
                explanation="Modern TLS versions provide strong encryption for data in transit.",
            ))

        # 9. Redirect scams
        visited = [page.url, *page.redirect_chain, page.final_url]
        scam = any(d in u.lower() for u in visited for d in KNOWN_MALICIOUS_DOMAINS)
        checks.append(CheckRecord(
            "Redirect Scam Detection",
            Status.FAIL if scam else Status.PASS,
            Severity.CRITICAL,
            "Detected potential phishing redirect or fake verification scam" if scam
            else "No phishing redirect patterns detected",
            explanation="Checks for known malicious redirect patterns used in phishing attacks.",
        ))

        return checks

    def _check_csp(self, page: PageData) -> CheckRecord:
        csp_header = page.header("content-security-policy")
        csp_report_only = page.header("content-security-policy-report-only")
        meta_match = META_CSP_RE.search(page.html)
        has_nonce = bool(NONCE_RE.search(page.html))
        is_infra = any(p in page.hostname for p in INFRA_PROVIDERS)

        if csp_header:
            status, desc = Status.PASS, "CSP configured via HTTP header to prevent XSS attacks"
            explanation = "Content-Security-Policy header defines allowed content sources."
        elif meta_match:
            status, desc = Status.PASS, "CSP configured via meta tag to prevent XSS attacks"
            explanation = "Content-Security-Policy set via HTML meta tag."
        elif csp_report_only:
            status, desc = Status.WARN, "CSP in report-only mode (monitoring but not enforcing)"
            explanation = "CSP is configured to report violations but not block them."
        elif has_nonce:
            status, desc = Status.PASS, "CSP with nonce detected - dynamically applied security policy"
            explanation = "Site uses nonce-based CSP for inline scripts."
        elif is_infra:
            status, desc = Status.INFO, "CSP not observable in HTTP response - may be applied at infrastructure level"
            explanation = "Major providers often apply security policies at CDN/edge servers."
        else:
            status, desc = Status.WARN, "CSP not configured (recommended but not required)"
            explanation = "Consider implementing Content-Security-Policy to protect against XSS attacks."

        return CheckRecord("Content Security Policy (CSP)", status, Severity.MEDIUM, desc, explanation=explanation)
