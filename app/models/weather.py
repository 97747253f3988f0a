from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WeatherRequest(BaseModel):
    city: Optional[str] = None


class ForecastDay(BaseModel):
    """One calendar day's representative forecast sample."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    date: dt.date
    temp_c: int = Field(alias="tempC")
    description: str = ""
    icon_code: str = Field(default="", alias="iconCode")


class WeatherSnapshot(BaseModel):
    """Current conditions plus a short daily forecast for one city."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    city: str
    temperature_c: int = Field(alias="temperatureC")
    description: str = ""
    humidity_pct: int = Field(alias="humidityPct", ge=0, le=100)
    wind_speed_kmh: float = Field(alias="windSpeedKmh", ge=0)
    icon_code: str = Field(default="", alias="iconCode")
    forecast: List[ForecastDay] = Field(default_factory=list, max_length=7)
