# app/config.py
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.errors import ConfigurationError

# .env staat naast pyproject.toml (project root)
ENV_FILE = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(ENV_FILE, override=False)

MAX_FORECAST_DAYS = 7


class NewsProvider(str, Enum):
    NEWSAPI = "newsapi"
    NEWSDATA = "newsdata"


class ForecastSamplePolicy(str, Enum):
    FIRST = "first"
    NEAREST_NOON = "nearest_noon"


class Settings(BaseSettings):
    # ---- App ----
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    HTTP_TIMEOUT_S: float = 10.0

    # ---- OpenWeather ----
    # Niet verplicht bij startup; de handler faalt per request met ConfigurationError.
    OPENWEATHER_API_KEY: Optional[str] = None
    OPENWEATHER_BASE_URL: str = "https://api.openweathermap.org/data/2.5"
    FORECAST_MAX_DAYS: int = Field(default=MAX_FORECAST_DAYS, ge=1, le=MAX_FORECAST_DAYS)
    FORECAST_SAMPLE_POLICY: ForecastSamplePolicy = ForecastSamplePolicy.FIRST

    # ---- News ----
    NEWS_API_KEY: Optional[str] = None
    NEWS_PROVIDER: NewsProvider = NewsProvider.NEWSAPI
    NEWSAPI_BASE_URL: str = "https://newsapi.org/v2"
    NEWSDATA_BASE_URL: str = "https://newsdata.io/api/1"
    NEWS_LANGUAGE: str = "en"
    NEWS_PAGE_SIZE: int = Field(default=20, ge=1, le=100)
    NEWS_LOOKBACK_DAYS: int = Field(default=7, ge=1)

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings()


def require_openweather_key(settings: Settings) -> str:
    if not settings.OPENWEATHER_API_KEY:
        raise ConfigurationError("Weather API key not configured")
    return settings.OPENWEATHER_API_KEY


def require_news_key(settings: Settings) -> str:
    if not settings.NEWS_API_KEY:
        raise ConfigurationError("News API key not configured")
    return settings.NEWS_API_KEY
