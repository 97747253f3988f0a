# services/news_categories.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

DEFAULT_CATEGORY = "general"

# Caller-facing tag -> keyword query sent upstream (same table for every provider).
CATEGORY_QUERIES: Dict[str, str] = {
    "general": "weather OR climate OR environment OR technology",
    "all": "weather OR climate OR environment OR technology",
    "weather": "weather OR climate OR meteorology",
    "science": "climate science OR environmental science",
    "technology": "weather technology OR climate tech",
    "environment": "environment OR sustainability OR climate change",
}


@dataclass(frozen=True)
class CategoryRoute:
    tag: str
    query: str
    known: bool


def resolve_category(tag: Optional[str]) -> CategoryRoute:
    """
    Map a caller tag to its upstream query. Never fails: unknown tags get the
    default query but keep their own tag for stamping articles.
    """
    requested = (tag or "").strip() if isinstance(tag, str) else ""
    if not requested:
        requested = DEFAULT_CATEGORY

    query = CATEGORY_QUERIES.get(requested.lower())
    if query is None:
        return CategoryRoute(tag=requested, query=CATEGORY_QUERIES[DEFAULT_CATEGORY], known=False)
    return CategoryRoute(tag=requested, query=query, known=True)
