"""
Pydantic schemas for analysis and assessment requests.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnalyzeRequest(BaseModel):
    """Request to analyze a web page."""
    url: str = Field(..., description="URL to analyze; https:// is assumed when no scheme is given")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "https://example.com"
            }
        }
    )


class AssessmentRequest(BaseModel):
    """Request for a quick assessment of a finished report."""
    report: Optional[Dict[str, Any]] = Field(None, description="Report returned by /analyze")


class AssessmentResponse(BaseModel):
    """Quick assessment verdict."""
    score: int = Field(..., ge=0, le=100)
    message: str


class InsightsResponse(BaseModel):
    """Markdown findings and fix checklist for a report."""
    answer: str
