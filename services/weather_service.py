# services/weather_service.py
"""
WeatherService - OpenWeather proxy for the dashboard
- Current conditions by city name (metric units)
- Forecast by the coordinates the first call resolved, by name otherwise
- Forecast folded to one entry per calendar date (max 7)
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

import httpx

from app.config import Settings, require_openweather_key
from app.core.errors import InvalidRequest, NotFound, UpstreamError
from app.core.logging import get_logger
from app.models.weather import WeatherSnapshot
from services.forecast import reduce_forecast
from services.payload import as_number, as_text, first_mapping, get_path, round_half_up
from services.upstream import upstream_message

logger = get_logger(module="weather_service")

FETCH_FAILED = "Failed to fetch weather data"
MS_TO_KMH = 3.6


def _coordinates(current: Mapping[str, Any]) -> Optional[Tuple[float, float]]:
    lat = as_number(get_path(current, ("coord", "lat")))
    lon = as_number(get_path(current, ("coord", "lon")))
    if lat is None or lon is None:
        return None
    return lat, lon


class WeatherService:
    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._settings.OPENWEATHER_BASE_URL.rstrip("/") + "/",
            timeout=self._settings.HTTP_TIMEOUT_S,
            transport=self._transport,
        )

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        path: str,
        params: Dict[str, Any],
    ) -> Tuple[httpx.Response, Any]:
        try:
            response = await client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("weather_upstream_unreachable", path=path, error=str(exc), error_type=type(exc).__name__)
            raise UpstreamError(FETCH_FAILED, details=str(exc) or type(exc).__name__) from exc

        if response.is_success:
            try:
                return response, response.json()
            except ValueError as exc:
                logger.warning("weather_upstream_bad_json", path=path, status_code=response.status_code)
                raise UpstreamError(
                    FETCH_FAILED,
                    details="Upstream returned an unreadable response",
                    upstream_status=response.status_code,
                ) from exc
        return response, None

    async def fetch_current(self, client: httpx.AsyncClient, city: str, api_key: str) -> Mapping[str, Any]:
        response, body = await self._get_json(
            client,
            "weather",
            {"q": city, "appid": api_key, "units": "metric"},
        )
        if response.status_code == 404:
            logger.info("weather_city_not_found", city=city)
            raise NotFound("City not found")
        if not response.is_success:
            details = upstream_message(response)
            logger.warning("weather_upstream_error", path="weather", status_code=response.status_code, details=details)
            raise UpstreamError(FETCH_FAILED, details=details, upstream_status=response.status_code)
        if not isinstance(body, Mapping):
            raise UpstreamError(FETCH_FAILED, details="Unexpected current weather payload")
        return body

    async def fetch_forecast(
        self,
        client: httpx.AsyncClient,
        city: str,
        coords: Optional[Tuple[float, float]],
        api_key: str,
    ) -> Mapping[str, Any]:
        params: Dict[str, Any] = {"appid": api_key, "units": "metric"}
        if coords is not None:
            params["lat"], params["lon"] = coords
        else:
            params["q"] = city

        response, body = await self._get_json(client, "forecast", params)
        if not response.is_success:
            # forecast is part of the contract; a 404 here is still an upstream fault
            details = upstream_message(response)
            logger.warning("weather_upstream_error", path="forecast", status_code=response.status_code, details=details)
            raise UpstreamError(FETCH_FAILED, details=details, upstream_status=response.status_code)
        if not isinstance(body, Mapping):
            raise UpstreamError(FETCH_FAILED, details="Unexpected forecast payload")
        return body

    def build_snapshot(
        self,
        requested_city: str,
        current: Mapping[str, Any],
        forecast: Mapping[str, Any],
    ) -> WeatherSnapshot:
        temp = as_number(get_path(current, ("main", "temp")))
        if temp is None:
            raise UpstreamError(FETCH_FAILED, details="Upstream response is missing the current temperature")

        humidity = as_number(get_path(current, ("main", "humidity"))) or 0.0
        wind_ms = as_number(get_path(current, ("wind", "speed"))) or 0.0
        condition = first_mapping(current.get("weather"))

        return WeatherSnapshot(
            city=as_text(current.get("name")) or requested_city,
            temperature_c=round_half_up(temp),
            description=as_text(condition.get("description")) or "",
            humidity_pct=min(100, max(0, round_half_up(humidity))),
            wind_speed_kmh=round(max(0.0, wind_ms) * MS_TO_KMH, 1),
            icon_code=as_text(condition.get("icon")) or "",
            forecast=reduce_forecast(
                forecast.get("list"),
                max_days=self._settings.FORECAST_MAX_DAYS,
                policy=self._settings.FORECAST_SAMPLE_POLICY,
            ),
        )

    async def lookup(self, city: Optional[str]) -> WeatherSnapshot:
        name = as_text(city)
        if name is None:
            raise InvalidRequest("City name is required")
        api_key = require_openweather_key(self._settings)

        async with self._client() as client:
            current = await self.fetch_current(client, name, api_key)
            coords = _coordinates(current)
            forecast = await self.fetch_forecast(client, name, coords, api_key)

        snapshot = self.build_snapshot(name, current, forecast)
        logger.info(
            "weather_lookup_ok",
            city=name,
            resolved_city=snapshot.city,
            by_coordinates=coords is not None,
            forecast_days=len(snapshot.forecast),
        )
        return snapshot
