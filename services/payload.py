# services/payload.py
"""
Small readers for loosely-shaped upstream JSON.

Upstream payloads are treated as untrusted: any field may be missing,
null, or of the wrong type. These helpers return None instead of raising.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence


def get_path(record: Any, path: Sequence[str]) -> Any:
    current = record
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def as_number(value: Any) -> Optional[float]:
    # bool is an int subclass; "true" is not a temperature
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


def as_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601-ish timestamp ("2024-01-15T10:30:00Z",
    "2024-01-15 10:30:00"). Naive values are taken as UTC.
    """
    text = as_text(value)
    if text is None:
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def first_mapping(value: Any) -> Mapping[str, Any]:
    """First element of a list when it is a dict (OpenWeather's `weather[0]`)."""
    if isinstance(value, list) and value and isinstance(value[0], Mapping):
        return value[0]
    return {}
