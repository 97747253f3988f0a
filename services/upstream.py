# services/upstream.py
from __future__ import annotations

from typing import Mapping, Optional

import httpx

from services.payload import as_text, get_path


def upstream_message(response: httpx.Response) -> str:
    """
    Best-effort human readable reason from an upstream error response.
    OpenWeather/NewsAPI put it in `message`, NewsData in `results.message`.
    """
    message: Optional[str] = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping):
        message = as_text(body.get("message")) or as_text(get_path(body, ("results", "message")))
    return message or f"Upstream responded with HTTP {response.status_code}"
