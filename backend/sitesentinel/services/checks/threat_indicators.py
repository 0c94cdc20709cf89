"""
Threat indicators - local phishing/scam heuristics for URLs and page text.

Used when no threat-intelligence API is configured, or when it is unreachable.
"""
import ipaddress
import re
from typing import List, Optional, Tuple
from urllib.parse import urlparse

# A single path segment that looks like a base64 payload
OBFUSCATED_PATH_RE = re.compile(r"/[a-z0-9+]{50,}={0,2}(?:$|[?/])", re.IGNORECASE)
AD_TRACKING_PARAM_RE = re.compile(r"[?&](click_id|cid|zoneid|landing_id)=", re.IGNORECASE)

TYPOSQUAT_PATTERNS = [
    re.compile(r"goog+le", re.IGNORECASE),
    re.compile(r"faceb+ook", re.IGNORECASE),
    re.compile(r"amazo+n", re.IGNORECASE),
    re.compile(r"paypa+l", re.IGNORECASE),
]
# Registrable labels owned by the brands above, valid under any TLD
BRAND_LABELS = {"google", "facebook", "amazon", "paypal"}
# Brand-operated hosting and API domains
BRAND_PROVIDER_DOMAINS = ["amazonaws.com", "googleapis.com", "googleusercontent.com", "paypalobjects.com"]
# Second-level labels of two-part country suffixes such as co.uk or com.au
SECOND_LEVEL_LABELS = {"co", "com", "net", "org", "gov", "ac", "edu"}

SUSPICIOUS_TLDS = [".click", ".download", ".tk", ".ml", ".ga", ".cf", ".top"]

SCAM_PHRASES = [
    re.compile(r"your (computer|device|pc|phone) (is|has been|may be) infected", re.IGNORECASE),
    re.compile(r"verify your (account|identity|payment) (immediately|now|within)", re.IGNORECASE),
    re.compile(r"your account (has been|will be) (suspended|locked|closed)", re.IGNORECASE),
    re.compile(r"call (microsoft|apple|windows) (support|technician)", re.IGNORECASE),
    re.compile(r"(enter|confirm) your (seed|recovery) phrase", re.IGNORECASE),
    re.compile(r"claim your (free )?(prize|reward|gift)", re.IGNORECASE),
    re.compile(r"you('ve| have) (won|been selected)", re.IGNORECASE),
]

def _is_ip(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
        return True
    except ValueError:
        return False

def _split_host(hostname: str) -> Tuple[List[str], str]:
    """Split a hostname into its labels above the public suffix and the registrable label."""
    labels = [label for label in hostname.split(".") if label]
    if len(labels) < 2:
        return labels, labels[0] if labels else ""
    suffix_len = 1
    if len(labels) >= 3 and len(labels[-1]) == 2 and labels[-2] in SECOND_LEVEL_LABELS:
        suffix_len = 2
    owned = labels[:-suffix_len]
    return owned, owned[-1]

def detect_typosquatting(hostname: str) -> Optional[str]:
    """Flag hosts that borrow a well-known brand name without belonging to it.

    ``google.co.uk`` and ``bucket.s3.amazonaws.com`` are the brands' own;
    ``evil-google.com`` and ``paypal.com.attacker.net`` are not.
    """
    hostname = (hostname or "").lower().rstrip(".")
    if any(hostname == d or hostname.endswith("." + d) for d in BRAND_PROVIDER_DOMAINS):
        return None

    owned, registrable = _split_host(hostname)
    if registrable in BRAND_LABELS:
        return None

    for label in owned:
        if any(pattern.search(label) for pattern in TYPOSQUAT_PATTERNS):
            return f"Possible typosquatting of a well-known brand ({hostname})"
    return None

def detect_phishing_indicators(url: str) -> Optional[str]:
    """Return the first suspicious URL pattern found, or None."""
    parsed = urlparse(url)
    hostname = (parsed.hostname or "").lower()

    if OBFUSCATED_PATH_RE.search(parsed.path or ""):
        return "Obfuscated payload in URL path"
    if AD_TRACKING_PARAM_RE.search(url):
        return "Ad-network landing parameters in URL"
    if _is_ip(hostname):
        return "Site is addressed by raw IP instead of a domain name"

    return detect_typosquatting(hostname)

def check_domain_reputation(hostname: str) -> Optional[str]:
    hostname = (hostname or "").lower()
    for tld in SUSPICIOUS_TLDS:
        if hostname.endswith(tld):
            return f"Suspicious {tld} domain - commonly used for scams"
    return None

def scan_page_text(text: str) -> List[str]:
    """Scam phrases present in visible page text."""
    matches = []
    for pattern in SCAM_PHRASES:
        found = pattern.search(text or "")
        if found:
            matches.append(found.group(0))
    return matches
