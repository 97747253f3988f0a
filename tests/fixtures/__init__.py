# tests/fixtures/__init__.py
"""
Factories for upstream payloads and test settings.

- make_settings()
- make_current_weather() / make_forecast_sample() / make_forecast()
- make_newsapi_article() / make_newsdata_article()
- mock_transport()
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx

from app.config import Settings

UTC = timezone.utc


def make_settings(**overrides: Any) -> Settings:
    """Settings that never read the developer's .env file."""
    values: Dict[str, Any] = {
        "OPENWEATHER_API_KEY": "weather-test-key",
        "OPENWEATHER_BASE_URL": "https://weather.test/data/2.5",
        "NEWS_API_KEY": "news-test-key",
        "NEWSAPI_BASE_URL": "https://newsapi.test/v2",
        "NEWSDATA_BASE_URL": "https://newsdata.test/api/1",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_current_weather(
    name: str = "Paris",
    temp: float = 18.0,
    humidity: int = 70,
    wind_speed: float = 5.2,
    description: str = "light rain",
    icon: str = "10d",
    coord: Optional[Dict[str, float]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": name,
        "main": {"temp": temp, "humidity": humidity},
        "wind": {"speed": wind_speed},
        "weather": [{"description": description, "icon": icon}],
        "cod": 200,
    }
    payload["coord"] = coord if coord is not None else {"lat": 48.8534, "lon": 2.3488}
    return payload


def make_forecast_sample(
    at: datetime,
    temp: float = 15.0,
    description: str = "clear sky",
    icon: str = "01d",
) -> Dict[str, Any]:
    return {
        "dt": int(at.timestamp()),
        "dt_txt": at.strftime("%Y-%m-%d %H:%M:%S"),
        "main": {"temp": temp},
        "weather": [{"description": description, "icon": icon}],
    }


def make_forecast(
    start: datetime = datetime(2024, 1, 15, 0, 0, tzinfo=UTC),
    days: int = 5,
    step_hours: int = 3,
) -> Dict[str, Any]:
    """OpenWeather 5 day / 3 hour style series covering `days` calendar dates."""
    samples: List[Dict[str, Any]] = []
    at = start
    end = start + timedelta(days=days)
    while at < end:
        samples.append(make_forecast_sample(at, temp=10.0 + at.hour / 3))
        at += timedelta(hours=step_hours)
    return {"cod": "200", "cnt": len(samples), "list": samples}


def make_newsapi_article(
    title: Optional[str] = "Storm season starts early",
    description: Optional[str] = "Forecasters warn of an active season.",
    url: Optional[str] = "https://news.test/storm",
    url_to_image: Optional[str] = "https://news.test/storm.jpg",
    published_at: Optional[str] = "2024-01-15T10:30:00Z",
    source_name: Optional[str] = "Weather Daily",
) -> Dict[str, Any]:
    return {
        "source": {"id": None, "name": source_name},
        "author": "Desk",
        "title": title,
        "description": description,
        "url": url,
        "urlToImage": url_to_image,
        "publishedAt": published_at,
        "content": "...",
    }


def make_newsdata_article(
    title: Optional[str] = "Heatwave hits the coast",
    description: Optional[str] = "Temperatures climb past records.",
    link: Optional[str] = "https://newsdata.test/heatwave",
    image_url: Optional[str] = "https://newsdata.test/heatwave.jpg",
    pub_date: Optional[str] = "2024-01-15 08:00:00",
    source_id: Optional[str] = "coastal_times",
) -> Dict[str, Any]:
    return {
        "article_id": "abc123",
        "title": title,
        "description": description,
        "link": link,
        "image_url": image_url,
        "pubDate": pub_date,
        "source_id": source_id,
        "category": ["environment"],
    }


def mock_transport(
    handler: Callable[[httpx.Request], httpx.Response],
    calls: Optional[List[httpx.Request]] = None,
) -> httpx.MockTransport:
    """MockTransport that also records the requests it saw."""

    def _record(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return handler(request)

    return httpx.MockTransport(_record)
