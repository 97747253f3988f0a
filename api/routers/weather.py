from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from app.config import Settings, get_settings
from app.models.weather import WeatherRequest, WeatherSnapshot
from services.weather_service import WeatherService

router = APIRouter(
    prefix="/weather",
    tags=["weather"],
)


def get_weather_service(settings: Settings = Depends(get_settings)) -> WeatherService:
    return WeatherService(settings)


@router.post("", response_model=WeatherSnapshot)
async def lookup_weather(
    payload: Optional[WeatherRequest] = None,
    service: WeatherService = Depends(get_weather_service),
) -> WeatherSnapshot:
    """
    Current conditions plus a daily forecast (max 7 days) for one city.

    Errors: 400 missing city, 404 unknown city, 500 missing key / upstream failure.
    """
    return await service.lookup(payload.city if payload else None)
