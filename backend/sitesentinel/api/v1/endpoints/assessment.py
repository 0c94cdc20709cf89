"""
Quick assessment endpoints (rule-based reading of a finished report).
"""
from fastapi import APIRouter, HTTPException

from sitesentinel.config import settings
from sitesentinel.schemas.analysis_request import AssessmentRequest, AssessmentResponse, InsightsResponse
from sitesentinel.services.assessment import quick_assessment, security_insights

router = APIRouter(tags=["Assessment"])


def _require_report(request: AssessmentRequest) -> dict:
    if not settings.ASSESSMENT_ENABLED:
        raise HTTPException(status_code=403, detail="Assessment disabled on server")
    if not request.report:
        raise HTTPException(status_code=400, detail="Missing or invalid report JSON")
    return request.report


@router.get("/enabled")
async def assessment_enabled():
    return {"enabled": settings.ASSESSMENT_ENABLED}


@router.post("", response_model=AssessmentResponse)
async def assess(request: AssessmentRequest):
    """Score a report from its failing checks."""
    result = quick_assessment(_require_report(request))
    return AssessmentResponse(score=result.score, message=result.message)


@router.post("/insights", response_model=InsightsResponse)
async def insights(request: AssessmentRequest):
    """Critical findings and a prioritized fix checklist."""
    return InsightsResponse(answer=security_insights(_require_report(request)))
