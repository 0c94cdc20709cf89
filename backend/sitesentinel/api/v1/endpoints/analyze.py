"""
Analysis API endpoints.
"""
from fastapi import APIRouter, HTTPException

from sitesentinel.logger import logger
from sitesentinel.schemas.analysis_request import AnalyzeRequest
from sitesentinel.schemas.analysis_result import AnalysisResult
from sitesentinel.services.analysis_runner import AnalysisRunner
from sitesentinel.services.url_validator import UrlValidationError

router = APIRouter(tags=["Analysis"])


@router.post("/analyze", response_model=AnalysisResult)
async def analyze(request: AnalyzeRequest):
    """Fetch a page, run every category's checks and score the site."""
    runner = AnalysisRunner()
    try:
        return await runner.run(request.url)
    except UrlValidationError as e:
        logger.info(f"Rejected analysis request for {request.url!r}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(f"Analysis failed for {request.url}: {e}")
        raise HTTPException(status_code=500, detail="Analysis failed")
