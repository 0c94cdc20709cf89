"""
Application configuration using environment variables.
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _split_csv(value: Optional[str], default: List[str]) -> List[str]:
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings."""
    APP_NAME: str = os.getenv("APP_NAME", "SiteSentinel")
    APP_VERSION: str = "2.0.0"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # HTTP client settings (target page)
    HTTP_TIMEOUT: int = int(os.getenv("HTTP_TIMEOUT", "15"))
    HTTP_MAX_RETRIES: int = int(os.getenv("HTTP_MAX_RETRIES", "2"))
    HTTP_MAX_REDIRECTS: int = int(os.getenv("HTTP_MAX_REDIRECTS", "5"))
    HTTP2_ENABLED: bool = os.getenv("HTTP2_ENABLED", "true").lower() == "true"
    USER_AGENT: str = os.getenv("USER_AGENT", "Mozilla/5.0 (compatible; SiteSentinel/2.0)")

    # Auxiliary fetches (robots.txt, sitemap.xml, Safe Browsing)
    AUX_FETCH_TIMEOUT: int = int(os.getenv("AUX_FETCH_TIMEOUT", "5"))

    # DNS
    DNS_TIMEOUT: float = float(os.getenv("DNS_TIMEOUT", "5"))

    # Threat intelligence
    GOOGLE_SAFE_BROWSING_API_KEY: str = os.getenv("GOOGLE_SAFE_BROWSING_API_KEY", "")

    # Request guards
    SSRF_PROTECTION_ENABLED: bool = os.getenv("SSRF_PROTECTION_ENABLED", "true").lower() == "true"

    # Quick assessment endpoint
    ASSESSMENT_ENABLED: bool = os.getenv("ASSESSMENT_ENABLED", "false").lower() in ("1", "true")

    # CORS
    CORS_ORIGINS: List[str] = field(
        default_factory=lambda: _split_csv(
            os.getenv("CORS_ORIGINS"),
            ["http://localhost:3000", "http://127.0.0.1:3000"],
        )
    )

settings = Settings()
