"""
Assessment - Rule-based reading of a finished analysis report.

Works on the report JSON (as returned by /analyze) so clients can submit a
report they stored earlier.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Mapping, Tuple

from sitesentinel.services.scoring.category_scorer import round_half_up


@dataclass
class Assessment:
    """Quick verdict on a report."""
    score: int
    message: str
    failures: int = 0
    warnings: int = 0
    critical_failures: List[str] = field(default_factory=list)


def _iter_checks(report: Mapping[str, Any]) -> Iterator[Tuple[str, Mapping[str, Any]]]:
    categories = report.get("categories") or []
    if not isinstance(categories, list):
        return
    for category in categories:
        if not isinstance(category, Mapping):
            continue
        for check in category.get("checks") or []:
            if isinstance(check, Mapping):
                yield str(category.get("category") or ""), check


def _overall_score(report: Mapping[str, Any]) -> float:
    overall = report.get("overall")
    score = overall.get("score") if isinstance(overall, Mapping) else None
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return 0
    if isinstance(score, float) and not math.isfinite(score):
        return 0
    return max(0, min(100, score))


def quick_assessment(report: Mapping[str, Any]) -> Assessment:
    """
    Score a report from its failing checks.

    More than 5 failures caps the score at 40, more than 2 at 60.
    """
    failures = 0
    warnings = 0
    critical: List[str] = []

    for _, check in _iter_checks(report):
        status = check.get("status")
        if status == "fail":
            failures += 1
            if check.get("severity") == "critical":
                critical.append(str(check.get("name", "")))
        elif status == "warn":
            warnings += 1

    score = _overall_score(report)
    if failures > 5:
        score = min(score, 40)
    elif failures > 2:
        score = min(score, 60)

    if score >= 85:
        message = (
            f"Excellent security posture with {failures} failing checks and {warnings} warnings. "
            "Site follows best practices."
        )
    elif score >= 70:
        message = f"Good security with {failures} failing checks. Address: {', '.join(critical[:2]) or 'minor warnings'}."
    elif score >= 50:
        message = f"Moderate security concerns. {failures} failing checks found"
        if critical:
            message += f", including critical issues: {', '.join(critical[:2])}."
        else:
            message += ", none of them critical."
    else:
        message = f"Serious security risks detected. {failures} failing checks found"
        if critical:
            message += f". Critical issues require immediate attention: {', '.join(critical[:3])}."
        else:
            message += ", none of them critical."

    return Assessment(
        score=round_half_up(score),
        message=message,
        failures=failures,
        warnings=warnings,
        critical_failures=critical,
    )


def security_insights(report: Mapping[str, Any]) -> str:
    """Markdown summary of critical failures and warnings with a fix checklist."""
    findings: List[str] = []
    checklist: List[str] = []

    for category, check in _iter_checks(report):
        name = str(check.get("name", ""))
        status = check.get("status")
        if status == "fail" and check.get("severity") == "critical":
            findings.append(f"- FAIL {category}: {name} - {check.get('description', '')}")
            checklist.append(f"Fix {name.lower()}")
        elif status == "warn":
            findings.append(f"- WARN {category}: {name} - {check.get('description', '')}")

    lines = ["## Security Analysis", "", "### Critical Findings:"]
    lines.extend(findings[:8] or ["No critical issues found"])
    lines += ["", "### Priority Checklist:"]
    lines.extend([f"{i}. {item}" for i, item in enumerate(checklist[:6], start=1)] or ["All security checks passed"])
    lines += ["", f"### Overall Risk Score: {int(_overall_score(report))}/100"]
    return "\n".join(lines) + "\n"

