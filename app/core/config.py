import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from typing import Literal
from datetime import datetime

load_dotenv()

class Settings(BaseSettings):
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "AI Readiness Crawler API"
    APP_ENV: Literal["development", "production"] = os.getenv("APP_ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    BACKEND_LAST_BREAKING_CHANGE_DATE: str = os.getenv("BACKEND_LAST_BREAKING_CHANGE_DATE", datetime(2026, 1, 20, 10, 0, 0).isoformat())

    # CORS
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Crawler
    CRAWL_MAX_PAGES: int = int(os.getenv("CRAWL_MAX_PAGES", "6"))
    CRAWL_TIMEOUT_SECONDS: float = float(os.getenv("CRAWL_TIMEOUT_SECONDS", "8.0"))
    ROBOTS_TXT_TIMEOUT_SECONDS: float = float(os.getenv("ROBOTS_TXT_TIMEOUT_SECONDS", "5.0"))
    CRAWLER_USER_AGENT: str = os.getenv(
        "CRAWLER_USER_AGENT",
        "Mozilla/5.0 (compatible; AIReadinessCrawler/1.0; +https://example.com/bot)",
    )

    # Rendering proxy used for client-rendered pages
    RENDER_PROXY_BASE_URL: str = os.getenv("RENDER_PROXY_BASE_URL", "https://r.jina.ai/")
    RENDER_PROXY_TIMEOUT_SECONDS: float = float(os.getenv("RENDER_PROXY_TIMEOUT_SECONDS", "15.0"))

    @property
    def CRAWL_MAX_SUBPAGES(self) -> int:
        return max(0, self.CRAWL_MAX_PAGES - 1)

    class Config:
        case_sensitive = True


settings = Settings()
