"""
Scoring Weights Configuration - v2.1

Per-check values by status, per-check weights by severity, and per-category
importance weights for the overall score.
"""

from sitesentinel.services.scoring.models import Severity, Status

# Category names produced by the built-in checkers
SECURITY = "Security & HTTPS"
DNS = "DNS & Domain"
PERFORMANCE = "Performance"
SEO = "SEO & Metadata"
ACCESSIBILITY = "Accessibility"
SAFETY = "Safety & Threats"

# Categories supplied by external producers
LINK_ANALYSIS = "Link Analysis"
EXTERNAL_LINKS = "External Links"
WHOIS = "WHOIS & Domain Info"

# Value of a single check by status (0-100). Anything missing scores 0.
STATUS_VALUES = {
    Status.PASS: 100,
    Status.INFO: 75,
    Status.WARN: 60,
    Status.FAIL: 0,
}

# Statuses that carry no information about the site
UNSCORABLE_STATUSES = frozenset({Status.ERROR, Status.UNAVAILABLE})

SEVERITY_WEIGHTS = {
    Severity.CRITICAL: 3,
    Severity.HIGH: 2,
    Severity.MEDIUM: 1,
    Severity.LOW: 0.5,
}
DEFAULT_SEVERITY_WEIGHT = 1

CATEGORY_WEIGHTS = {
    SECURITY: 3,
    SAFETY: 3,
    DNS: 2,
    LINK_ANALYSIS: 2,
    PERFORMANCE: 1.5,
    ACCESSIBILITY: 1.5,
    EXTERNAL_LINKS: 1.5,
    SEO: 1,
    WHOIS: 1,
}
DEFAULT_CATEGORY_WEIGHT = 1

# Scoring version
SCORING_VERSION = "2.1"


def category_weight(name: str) -> float:
    return CATEGORY_WEIGHTS.get(name, DEFAULT_CATEGORY_WEIGHT)


# --- Validation (Prevent Drift) ---
def _validate_weights():
    """Ensure values stay within 0-100 and every weight is positive."""
    for status, value in STATUS_VALUES.items():
        if not 0 <= value <= 100:
            raise ValueError(f"CRITICAL: Status value for {status.value} is {value}, expected 0-100")

    missing = set(Severity) - set(SEVERITY_WEIGHTS)
    if missing:
        raise ValueError(f"CRITICAL: Severity weights missing for {sorted(s.value for s in missing)}")

    for name, weight in {**SEVERITY_WEIGHTS, **CATEGORY_WEIGHTS}.items():
        if weight <= 0:
            raise ValueError(f"CRITICAL: Weight for {name} is {weight}, expected > 0")

_validate_weights()
