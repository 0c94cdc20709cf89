"""
Scoring vocabulary - check records, category results and the overall result.

Statuses and severities are closed enumerations. Parsing never raises:
unrecognised statuses become ``Status.UNKNOWN`` (scored like a failure) and
unrecognised severities become ``Severity.MEDIUM``.
"""
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple


class Status(str, Enum):
    """Verdict of a single check."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"
    INFO = "info"
    ERROR = "error"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "Status":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


class Severity(str, Enum):
    """How much a check's outcome matters within its category."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.MEDIUM
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MEDIUM


class CategoryStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

    @classmethod
    def parse(cls, value: Any) -> Optional["CategoryStatus"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


def _coerce_score(value: Any) -> Optional[float]:
    """A finite number clamped to 0-100, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return max(0, min(100, value))


@dataclass(frozen=True)
class CheckRecord:
    """Individual heuristic verdict."""
    name: str
    status: Status
    severity: Severity = Severity.MEDIUM
    description: str = ""
    explanation: Optional[str] = None
    details: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        object.__setattr__(self, "status", Status.parse(self.status))
        object.__setattr__(self, "severity", Severity.parse(self.severity))

    @property
    def is_scorable(self) -> bool:
        return self.status not in (Status.ERROR, Status.UNAVAILABLE)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CheckRecord":
        return cls(
            name=str(data.get("name", "")),
            status=data.get("status"),
            severity=data.get("severity"),
            description=str(data.get("description") or ""),
            explanation=data.get("explanation"),
            details=data.get("details"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "status": self.status.value,
            "severity": self.severity.value,
            "description": self.description,
        }
        if self.explanation:
            data["explanation"] = self.explanation
        if self.details:
            data["details"] = self.details
        return data


@dataclass(frozen=True)
class CategoryResult:
    """A named group of checks with its derived score.

    Built through ``from_checks`` or ``unavailable`` so that
    ``status == UNAVAILABLE`` exactly when ``score is None``.
    """
    category: str
    checks: Tuple[CheckRecord, ...] = ()
    score: Optional[float] = None
    status: CategoryStatus = CategoryStatus.UNAVAILABLE
    malware_detected: bool = False
    icon: str = ""

    @classmethod
    def from_checks(
        cls,
        category: str,
        checks: Iterable[CheckRecord],
        icon: str = "",
        malware_detected: bool = False,
    ) -> "CategoryResult":
        from sitesentinel.services.scoring.category_scorer import score_category

        checks = tuple(checks)
        score = score_category(checks)
        return cls(
            category=category,
            checks=checks,
            score=score,
            status=CategoryStatus.UNAVAILABLE if score is None else CategoryStatus.AVAILABLE,
            malware_detected=malware_detected,
            icon=icon,
        )

    @classmethod
    def unavailable(cls, category: str, reason: str, icon: str = "") -> "CategoryResult":
        """Result for a checker that crashed before producing checks."""
        return cls(
            category=category,
            checks=(CheckRecord("Error", Status.ERROR, Severity.CRITICAL, reason),),
            score=None,
            status=CategoryStatus.UNAVAILABLE,
            icon=icon,
        )

    def with_score(self, score: Optional[int]) -> "CategoryResult":
        status = CategoryStatus.UNAVAILABLE if score is None else CategoryStatus.AVAILABLE
        return replace(self, score=score, status=status)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CategoryResult":
        """Coerce a loosely shaped mapping (e.g. JSON from another producer)."""
        score = _coerce_score(data.get("score"))

        status = CategoryStatus.parse(data.get("status"))
        if status is None:
            status = CategoryStatus.UNAVAILABLE if score is None else CategoryStatus.AVAILABLE

        raw_checks = data.get("checks") or []
        checks = tuple(
            CheckRecord.from_dict(c) for c in raw_checks if isinstance(c, Mapping)
        ) if isinstance(raw_checks, (list, tuple)) else ()

        malware = data.get("malware_detected", data.get("malwareDetected", False))

        return cls(
            category=str(data.get("category") or data.get("name") or ""),
            checks=checks,
            score=score,
            status=status,
            malware_detected=malware is True,
            icon=str(data.get("icon") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "icon": self.icon,
            "score": self.score,
            "status": self.status.value,
            "malware_detected": self.malware_detected,
            "checks": [c.to_dict() for c in self.checks],
        }


@dataclass
class ExcludedCategory:
    name: str
    reason: str


@dataclass
class CategoryContribution:
    name: str
    score: float
    weight: float
    contribution: int


@dataclass
class Breakdown:
    """Diagnostic view of how the overall score was assembled."""
    included_categories: int = 0
    total_categories: int = 0
    excluded_categories: List[ExcludedCategory] = field(default_factory=list)
    category_scores: List[CategoryContribution] = field(default_factory=list)


@dataclass
class OverallResult:
    """Final score for one analysis."""
    score: int
    breakdown: Breakdown = field(default_factory=Breakdown)
    caps_applied: List[str] = field(default_factory=list)
