"""
Tests for the HTTP API.
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import httpx
import pytest
import pytest_asyncio

from sitesentinel.config import settings
from sitesentinel.main import app
from sitesentinel.schemas.analysis_result import AnalysisResult
from sitesentinel.services.url_validator import UrlValidationError


@pytest_asyncio.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def sample_result():
    now = datetime.now(timezone.utc)
    return AnalysisResult(
        url="https://example.com",
        final_url="https://example.com/",
        status_code=200,
        started_at=now,
        completed_at=now,
        overall={"score": 82, "label": "Good", "color": "#3b82f6"},
        breakdown={
            "included_categories": 1,
            "total_categories": 1,
            "category_scores": [{"name": "Security & HTTPS", "score": 82, "weight": 3, "contribution": 82}],
        },
        categories=[{
            "category": "Security & HTTPS",
            "icon": "lock",
            "score": 82,
            "status": "available",
            "label": "Good",
            "color": "#3b82f6",
            "checks": [{"name": "HTTPS Encryption", "status": "pass", "severity": "critical"}],
        }],
    )


@pytest.mark.asyncio
class TestHealth:
    async def test_health(self, client):
        response = await client.get("/api/v1/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "operational"
        assert data["version"] == settings.APP_VERSION
        assert "timestamp" in data

    async def test_root(self, client):
        response = await client.get("/")
        assert response.json() == {"app": settings.APP_NAME, "version": settings.APP_VERSION, "docs": "/docs"}


@pytest.mark.asyncio
class TestAnalyze:
    async def test_returns_report(self, client):
        with patch("sitesentinel.api.v1.endpoints.analyze.AnalysisRunner") as runner_cls:
            runner_cls.return_value.run = AsyncMock(return_value=sample_result())
            response = await client.post("/api/v1/analyze", json={"url": "example.com"})

        assert response.status_code == 200
        data = response.json()
        assert data["overall"]["score"] == 82
        assert data["categories"][0]["checks"][0]["name"] == "HTTPS Encryption"
        runner_cls.return_value.run.assert_awaited_once_with("example.com")

    async def test_invalid_url_is_400(self, client):
        with patch("sitesentinel.api.v1.endpoints.analyze.AnalysisRunner") as runner_cls:
            runner_cls.return_value.run = AsyncMock(side_effect=UrlValidationError("Invalid scheme: ftp"))
            response = await client.post("/api/v1/analyze", json={"url": "ftp://example.com"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid scheme: ftp"

    async def test_unexpected_failure_is_500(self, client):
        with patch("sitesentinel.api.v1.endpoints.analyze.AnalysisRunner") as runner_cls:
            runner_cls.return_value.run = AsyncMock(side_effect=RuntimeError("boom"))
            response = await client.post("/api/v1/analyze", json={"url": "https://example.com"})

        assert response.status_code == 500

    async def test_missing_url_is_422(self, client):
        response = await client.post("/api/v1/analyze", json={})
        assert response.status_code == 422


@pytest.mark.asyncio
class TestAssessment:
    async def test_enabled_flag(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ASSESSMENT_ENABLED", False)
        response = await client.get("/api/v1/assessment/enabled")
        assert response.json() == {"enabled": False}

    async def test_disabled_is_403(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ASSESSMENT_ENABLED", False)
        response = await client.post("/api/v1/assessment", json={"report": {"overall": {"score": 90}}})
        assert response.status_code == 403

    async def test_missing_report_is_400(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ASSESSMENT_ENABLED", True)
        response = await client.post("/api/v1/assessment", json={})
        assert response.status_code == 400

    async def test_assesses_report(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ASSESSMENT_ENABLED", True)
        report = sample_result().model_dump(mode="json")
        response = await client.post("/api/v1/assessment", json={"report": report})
        assert response.status_code == 200
        assert response.json() == {
            "score": 82,
            "message": "Good security with 0 failing checks. Address: minor warnings.",
        }

    async def test_insights(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ASSESSMENT_ENABLED", True)
        report = sample_result().model_dump(mode="json")
        response = await client.post("/api/v1/assessment/insights", json={"report": report})
        assert response.status_code == 200
        assert "### Overall Risk Score: 82/100" in response.json()["answer"]
