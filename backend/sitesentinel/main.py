"""
SiteSentinel - FastAPI Application Entry Point
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sitesentinel.config import settings
from sitesentinel.api.v1.endpoints import analyze, assessment, health
from sitesentinel.logger import logger

# Create app
app = FastAPI(
    title=settings.APP_NAME,
    description="Website security, performance, SEO, accessibility and safety analysis",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(analyze.router, prefix="/api/v1")
app.include_router(assessment.router, prefix="/api/v1/assessment")


@app.on_event("startup")
async def startup():
    """Log configuration on startup."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}...")
    logger.info(
        f"SSRF protection {'enabled' if settings.SSRF_PROTECTION_ENABLED else 'disabled'}, "
        f"Safe Browsing {'configured' if settings.GOOGLE_SAFE_BROWSING_API_KEY else 'not configured'}, "
        f"assessment {'enabled' if settings.ASSESSMENT_ENABLED else 'disabled'}"
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("sitesentinel.main:app", host="0.0.0.0", port=8000)
