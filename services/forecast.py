# services/forecast.py
"""
Folds OpenWeather's 3-hour forecast series into one sample per UTC calendar date.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.config import MAX_FORECAST_DAYS, ForecastSamplePolicy
from app.models.weather import ForecastDay
from services.payload import (
    as_number,
    as_text,
    first_mapping,
    get_path,
    parse_timestamp,
    round_half_up,
)


@dataclass(frozen=True)
class ForecastSample:
    at: datetime
    temp_c: float
    description: str
    icon_code: str

    @property
    def day(self) -> date:
        return self.at.date()


def _sample_time(raw: Mapping[str, Any]) -> Optional[datetime]:
    epoch = as_number(raw.get("dt"))
    if epoch is not None:
        try:
            return datetime.fromtimestamp(epoch, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    return parse_timestamp(raw.get("dt_txt"))


def parse_sample(raw: Any) -> Optional[ForecastSample]:
    """Returns None for samples without a usable timestamp or temperature."""
    if not isinstance(raw, Mapping):
        return None
    at = _sample_time(raw)
    temp = as_number(get_path(raw, ("main", "temp")))
    if at is None or temp is None:
        return None
    condition = first_mapping(raw.get("weather"))
    return ForecastSample(
        at=at.astimezone(timezone.utc),
        temp_c=temp,
        description=as_text(condition.get("description")) or "",
        icon_code=as_text(condition.get("icon")) or "",
    )


def _distance_from_noon(sample: ForecastSample) -> float:
    noon = datetime.combine(sample.day, time(12, 0), tzinfo=timezone.utc)
    return abs((sample.at - noon).total_seconds())


def select_daily_samples(
    samples: Iterable[ForecastSample],
    *,
    max_days: int = MAX_FORECAST_DAYS,
    policy: ForecastSamplePolicy = ForecastSamplePolicy.FIRST,
) -> List[ForecastSample]:
    """
    One sample per calendar date, earliest date first, at most `max_days` dates.

    FIRST keeps the chronologically earliest sample of each date.
    NEAREST_NOON keeps the sample closest to 12:00 UTC (ties: the earlier one).
    """
    limit = max(0, min(max_days, MAX_FORECAST_DAYS))
    ordered = sorted(samples, key=lambda s: s.at)

    chosen: Dict[date, ForecastSample] = {}
    for sample in ordered:
        current = chosen.get(sample.day)
        if current is None:
            if len(chosen) >= limit:
                break
            chosen[sample.day] = sample
        elif policy is ForecastSamplePolicy.NEAREST_NOON:
            if _distance_from_noon(sample) < _distance_from_noon(current):
                chosen[sample.day] = sample

    # dict keeps insertion order and samples were walked chronologically
    return list(chosen.values())


def reduce_forecast(
    series: Any,
    *,
    max_days: int = MAX_FORECAST_DAYS,
    policy: ForecastSamplePolicy = ForecastSamplePolicy.FIRST,
) -> List[ForecastDay]:
    """Map an upstream `list` of forecast samples to at most `max_days` ForecastDay entries."""
    raw_samples = series if isinstance(series, list) else []
    parsed = [s for s in (parse_sample(raw) for raw in raw_samples) if s is not None]
    return [
        ForecastDay(
            date=sample.day,
            temp_c=round_half_up(sample.temp_c),
            description=sample.description,
            icon_code=sample.icon_code,
        )
        for sample in select_daily_samples(parsed, max_days=max_days, policy=policy)
    ]
