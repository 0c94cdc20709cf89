"""
Accessibility Checks (WCAG 2.1) - static markup heuristics.
"""
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from sitesentinel.services.checks.base import BaseCheck
from sitesentinel.services.page_fetcher import PageData
from sitesentinel.services.scoring.models import CheckRecord, Severity, Status
from sitesentinel.services.scoring.weights import ACCESSIBILITY

NON_LABELLED_INPUT_TYPES = {"hidden", "submit", "button", "reset", "image"}
SKIP_LINK_TARGETS = {"#main", "#content", "#main-content"}
SKIP_LINK_CLASSES = {"skip-link", "skip-to-content"}
GENERIC_LINK_TEXT = {"click here", "read more", "more", "link", "here"}
LANDMARK_TAGS = {"main", "nav", "header", "footer"}
LANDMARK_ROLES = {"main", "navigation", "banner", "contentinfo"}
HEADING_RE = re.compile(r"^h[1-6]$")


def _label_method(soup: BeautifulSoup, field) -> Optional[str]:
    """How a form field is labelled, or None."""
    field_id = field.get("id")
    if field_id and soup.find("label", attrs={"for": field_id}):
        return "explicit <label for>"
    if field.get("aria-label"):
        return "aria-label"
    labelledby = field.get("aria-labelledby")
    if labelledby:
        if any(soup.find(id=ref) for ref in labelledby.split()):
            return "aria-labelledby"
        return None
    wrapper = field.find_parent("label")
    if wrapper and wrapper.get_text(strip=True):
        return "implicit label (wrapped)"
    if field.get("title"):
        return "title attribute (fallback)"
    if field.get("placeholder"):
        return "placeholder only (not recommended)"
    return None


class AccessibilityCheck(BaseCheck):
    category = ACCESSIBILITY
    icon = "accessibility"

    async def run_checks(self, page: PageData) -> List[CheckRecord]:
        soup = BeautifulSoup(page.html or "", "html.parser")
        checks = []

        # 1. Language
        html_tag = soup.find("html")
        lang = html_tag.get("lang") if html_tag else None
        checks.append(CheckRecord(
            "Page Language Declaration",
            Status.PASS if lang else Status.WARN,
            Severity.MEDIUM,
            f"Language set to: {lang}" if lang else "Language attribute not specified",
            explanation="The lang attribute helps screen readers pronounce content correctly.",
        ))

        # 2. Image alt text
        images = soup.find_all("img")
        with_alt = sum(1 for img in images if img.get("alt") is not None)
        checks.append(CheckRecord(
            "Image Alt Text",
            Status.PASS if with_alt == len(images) else Status.WARN,
            Severity.MEDIUM,
            f"{with_alt}/{len(images)} images have alt text" if images else "No images found",
            explanation="Alt text describes images for screen reader users and when images fail to load.",
        ))

        # 3. Form labels
        checks.append(self._check_form_labels(soup))

        # 4. Heading hierarchy
        headings = soup.find_all(HEADING_RE)
        valid_hierarchy = True
        last_level = 0
        for heading in headings:
            level = int(heading.name[1])
            if level > last_level + 1:
                valid_hierarchy = False
            last_level = level
        if headings:
            status = Status.PASS if valid_hierarchy else Status.WARN
            desc = f"{len(headings)} headings found ({'proper hierarchy' if valid_hierarchy else 'hierarchy issues'})"
        else:
            status, desc = Status.INFO, "No headings found"
        checks.append(CheckRecord(
            "Heading Hierarchy (H1-H6)", status, Severity.HIGH, desc,
            explanation="Proper heading hierarchy helps screen reader users navigate the page.",
        ))

        # 5-6. Manual review items
        checks.append(CheckRecord(
            "Color Contrast Ratio", Status.INFO, Severity.HIGH,
            "Advanced contrast analysis requires manual review",
            explanation="WCAG requires 4.5:1 contrast for normal text and 3:1 for large text.",
        ))
        checks.append(CheckRecord(
            "Keyboard Navigation", Status.INFO, Severity.HIGH,
            "Keyboard navigation requires manual testing",
            explanation="All interactive elements must be accessible via keyboard navigation.",
        ))

        # 7. ARIA
        aria_count = len(soup.find_all(
            lambda tag: tag.has_attr("aria-label") or tag.has_attr("aria-labelledby") or tag.has_attr("role")
        ))
        checks.append(CheckRecord(
            "ARIA Labels & Roles",
            Status.PASS if aria_count else Status.INFO,
            Severity.MEDIUM,
            f"{aria_count} elements with ARIA attributes" if aria_count
            else "No ARIA attributes detected (may not be needed)",
        ))

        # 8. Skip link
        links = soup.find_all("a")
        has_skip = any(
            a.get("href") in SKIP_LINK_TARGETS or SKIP_LINK_CLASSES.intersection(a.get("class") or [])
            for a in links
        )
        checks.append(CheckRecord(
            "Skip to Main Content Link",
            Status.PASS if has_skip else Status.WARN,
            Severity.MEDIUM,
            "Skip link found" if has_skip else "No skip link for keyboard users",
            explanation="Skip links allow keyboard users to bypass repetitive navigation.",
        ))

        # 9. Link text
        generic = sum(1 for a in links if a.get_text(strip=True).lower() in GENERIC_LINK_TEXT)
        if not links or generic == 0:
            status = Status.PASS
        elif generic / len(links) < 0.2:
            status = Status.WARN
        else:
            status = Status.FAIL
        checks.append(CheckRecord(
            "Link Text Quality", status, Severity.MEDIUM,
            f"{generic} out of {len(links)} links have generic text" if links else "No links",
        ))

        # 10. Landmarks
        landmarks = len(soup.find_all(
            lambda tag: tag.name in LANDMARK_TAGS or tag.get("role") in LANDMARK_ROLES
        ))
        checks.append(CheckRecord(
            "Landmark Regions",
            Status.PASS if landmarks else Status.WARN,
            Severity.MEDIUM,
            f"{landmarks} landmark regions defined" if landmarks else "No landmark regions detected",
        ))

        return checks

    def _check_form_labels(self, soup: BeautifulSoup) -> CheckRecord:
        fields = [
            f for f in soup.find_all(["input", "select", "textarea"])
            if not (f.name == "input" and (f.get("type") or "").lower() in NON_LABELLED_INPUT_TYPES)
        ]
        methods = []
        for field in fields:
            name = field.get("name") or field.get("type") or field.name
            methods.append({"field": name, "method": _label_method(soup, field) or "none"})

        labelled = sum(1 for m in methods if m["method"] != "none")
        if not fields or labelled == len(fields):
            status = Status.PASS
        elif labelled / len(fields) >= 0.8:
            status = Status.WARN
        else:
            status = Status.FAIL

        return CheckRecord(
            "Form Input Labels", status, Severity.HIGH,
            f"{labelled}/{len(fields)} form inputs have accessible labels" if fields
            else "No form inputs requiring labels",
            explanation="Form inputs need accessible labels (<label>, aria-label, aria-labelledby or wrapping).",
            details={"labeling_methods": methods[:10]} if methods else None,
        )
