# services/news_normalization.py
"""
Maps raw upstream article records onto NewsArticle.

Two upstream shapes are understood and told apart per record:

- NEWSAPI:  {"articles": [{url, urlToImage, publishedAt, source: {name}}]}
- NEWSDATA: {"results":  [{link, image_url, pubDate, source_id}]}

Field extraction is table driven: FIELD_RULES lists, per shape, where each
NewsArticle field comes from and what it falls back to.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from app.models.news import NewsArticle
from services.payload import as_text, get_path, parse_timestamp

REMOVED_MARKER = "[Removed]"
PLACEHOLDER_URL = "#"
PLACEHOLDER_IMAGE_URL = "https://images.unsplash.com/photo-1504711434969-e33886168f5c?w=400&h=250&fit=crop"
UNKNOWN_SOURCE = "Unknown"


class ArticleShape(str, Enum):
    NEWSAPI = "newsapi"
    NEWSDATA = "newsdata"


# Keys that only the NEWSDATA shape uses.
_NEWSDATA_MARKERS = ("link", "pubDate", "image_url", "source_id")

Fallback = Callable[[datetime], Any]


def _const(value: Any) -> Fallback:
    return lambda _now: value


def _processing_time(now: datetime) -> datetime:
    return now


@dataclass(frozen=True)
class FieldRule:
    """
    `target` is read from the first of `paths` that holds a non-empty value;
    otherwise `fallback(now)` is used. A rule without fallback is required.
    """

    target: str
    paths: Tuple[Tuple[str, ...], ...]
    fallback: Optional[Fallback] = None
    parse: Callable[[Any], Any] = as_text

    @property
    def required(self) -> bool:
        return self.fallback is None

    def read(self, record: Mapping[str, Any]) -> Any:
        for path in self.paths:
            value = self.parse(get_path(record, path))
            if value is not None:
                return value
        return None

    def resolve(self, record: Mapping[str, Any], now: datetime) -> Any:
        value = self.read(record)
        if value is None and self.fallback is not None:
            return self.fallback(now)
        return value


FIELD_RULES: Dict[ArticleShape, Tuple[FieldRule, ...]] = {
    ArticleShape.NEWSAPI: (
        FieldRule("title", (("title",),)),
        FieldRule("description", (("description",),)),
        FieldRule("url", (("url",),), _const(PLACEHOLDER_URL)),
        FieldRule("image_url", (("urlToImage",),), _const(PLACEHOLDER_IMAGE_URL)),
        FieldRule("published_at", (("publishedAt",),), _processing_time, parse_timestamp),
        FieldRule("source", (("source", "name"),), _const(UNKNOWN_SOURCE)),
    ),
    ArticleShape.NEWSDATA: (
        FieldRule("title", (("title",),)),
        FieldRule("description", (("description",),)),
        FieldRule("url", (("link",),), _const(PLACEHOLDER_URL)),
        FieldRule("image_url", (("image_url",),), _const(PLACEHOLDER_IMAGE_URL)),
        FieldRule("published_at", (("pubDate",),), _processing_time, parse_timestamp),
        FieldRule("source", (("source_name",), ("source_id",)), _const(UNKNOWN_SOURCE)),
    ),
}

# The link a record must carry to be worth showing.
CANONICAL_LINK: Dict[ArticleShape, str] = {
    ArticleShape.NEWSAPI: "url",
    ArticleShape.NEWSDATA: "link",
}


def detect_shape(record: Mapping[str, Any]) -> ArticleShape:
    if "url" not in record and any(key in record for key in _NEWSDATA_MARKERS):
        return ArticleShape.NEWSDATA
    return ArticleShape.NEWSAPI


def extract_candidates(payload: Any) -> List[Mapping[str, Any]]:
    """Raw article records from either listing envelope; anything else yields []."""
    if not isinstance(payload, Mapping):
        return []
    for key in ("articles", "results"):
        records = payload.get(key)
        if isinstance(records, list):
            return [r for r in records if isinstance(r, Mapping)]
    return []


def is_publishable(record: Mapping[str, Any], shape: Optional[ArticleShape] = None) -> bool:
    shape = shape or detect_shape(record)
    for field in ("title", "description"):
        value = as_text(record.get(field))
        if value is None or value == REMOVED_MARKER:
            return False
    return as_text(record.get(CANONICAL_LINK[shape])) is not None


def apply_field_rules(
    record: Mapping[str, Any],
    shape: ArticleShape,
    now: datetime,
) -> Dict[str, Any]:
    return {rule.target: rule.resolve(record, now) for rule in FIELD_RULES[shape]}


def normalize_article(
    record: Mapping[str, Any],
    *,
    index: int,
    category: str,
    now: Optional[datetime] = None,
) -> Optional[NewsArticle]:
    """NewsArticle for a publishable record, None for one that gets filtered out."""
    shape = detect_shape(record)
    if not is_publishable(record, shape):
        return None
    fields = apply_field_rules(record, shape, now or datetime.now(timezone.utc))
    published_at: datetime = fields["published_at"]
    return NewsArticle(
        id=f"{published_at.isoformat()}-{index}",
        category=category,
        **fields,
    )


def normalize_articles(
    payload: Any,
    *,
    category: str,
    now: Optional[datetime] = None,
) -> List[NewsArticle]:
    """Filter and map an upstream listing, keeping upstream order."""
    stamp = now or datetime.now(timezone.utc)
    articles: List[NewsArticle] = []
    for record in extract_candidates(payload):
        article = normalize_article(record, index=len(articles), category=category, now=stamp)
        if article is not None:
            articles.append(article)
    return articles


def count_candidates(payload: Any) -> int:
    return len(extract_candidates(payload))
