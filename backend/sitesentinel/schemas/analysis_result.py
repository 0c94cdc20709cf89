"""
Pydantic schemas for analysis responses.
"""

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CheckResult(BaseModel):
    """Individual check verdict."""
    name: str
    status: Literal["pass", "warn", "fail", "info", "error", "unavailable", "unknown"]
    severity: Literal["critical", "high", "medium", "low"] = "medium"
    description: str = ""
    explanation: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


class CategoryReport(BaseModel):
    """One category of checks with its score."""
    category: str
    icon: str = ""
    score: Optional[float] = None
    status: Literal["available", "unavailable"]
    malware_detected: bool = False
    label: str
    color: str
    checks: list[CheckResult] = []


class ExcludedCategory(BaseModel):
    name: str
    reason: str


class CategoryScore(BaseModel):
    name: str
    score: float
    weight: float
    contribution: int


class Breakdown(BaseModel):
    """How the overall score was assembled."""
    included_categories: int = 0
    total_categories: int = 0
    excluded_categories: list[ExcludedCategory] = []
    category_scores: list[CategoryScore] = []


class OverallScore(BaseModel):
    """Top-line score."""
    score: int = Field(..., ge=0, le=100)
    label: str
    color: str


class AnalysisResult(BaseModel):
    """Complete analysis response."""
    # Request info
    url: str
    final_url: str
    status_code: Optional[int] = None

    # Timestamps
    started_at: datetime
    completed_at: datetime
    duration_seconds: float = 0

    # Scores
    overall: OverallScore
    breakdown: Breakdown = Breakdown()
    caps_applied: list[str] = []
    categories: list[CategoryReport] = []

    # Page fetch error, if any (categories needing the page are then unavailable)
    error: Optional[str] = None

    # Metadata
    scoring_version: str = "2.1"

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "https://example.com",
                "final_url": "https://example.com/",
                "status_code": 200,
                "started_at": "2024-01-01T12:00:00Z",
                "completed_at": "2024-01-01T12:00:03Z",
                "duration_seconds": 3.1,
                "overall": {"score": 78, "label": "Good", "color": "#3b82f6"},
                "breakdown": {
                    "included_categories": 6,
                    "total_categories": 6,
                    "excluded_categories": [],
                    "category_scores": [
                        {"name": "Security & HTTPS", "score": 82, "weight": 3, "contribution": 82}
                    ]
                },
                "caps_applied": []
            }
        }
    )
