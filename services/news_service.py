# services/news_service.py
"""
NewsService - article listing proxy for the dashboard.

Maps the caller's category tag to a keyword query, calls the configured
provider (NewsAPI or NewsData) and returns normalized articles in upstream order.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import httpx

from app.config import NewsProvider, Settings, require_news_key
from app.core.errors import UpstreamError
from app.core.logging import get_logger
from app.models.news import NewsArticle
from services.news_categories import CategoryRoute, resolve_category
from services.news_normalization import count_candidates, normalize_articles
from services.upstream import upstream_message

logger = get_logger(module="news_service")

FETCH_FAILED = "Failed to fetch news data"
# NewsData caps page size at 50 (10 on the free tier).
_NEWSDATA_MAX_SIZE = 50


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NewsService:
    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._settings = settings
        self._transport = transport
        self._clock = clock

    def build_request(
        self,
        route: CategoryRoute,
        api_key: str,
        *,
        page: int = 1,
        now: Optional[datetime] = None,
    ) -> Tuple[str, Dict[str, Any]]:
        """Upstream URL and query params for the configured provider."""
        s = self._settings
        if s.NEWS_PROVIDER is NewsProvider.NEWSDATA:
            if page > 1:
                # NewsData pages with opaque nextPage tokens, not numbers
                logger.info("news_page_ignored", provider=s.NEWS_PROVIDER.value, page=page)
            params: Dict[str, Any] = {
                "apikey": api_key,
                "q": route.query,
                "language": s.NEWS_LANGUAGE,
                "size": min(s.NEWS_PAGE_SIZE, _NEWSDATA_MAX_SIZE),
            }
            return f"{s.NEWSDATA_BASE_URL.rstrip('/')}/news", params

        since = (now or self._clock()) - timedelta(days=s.NEWS_LOOKBACK_DAYS)
        params = {
            "q": route.query,
            "from": since.date().isoformat(),
            "sortBy": "publishedAt",
            "language": s.NEWS_LANGUAGE,
            "page": page,
            "pageSize": s.NEWS_PAGE_SIZE,
            "apiKey": api_key,
        }
        return f"{s.NEWSAPI_BASE_URL.rstrip('/')}/everything", params

    async def fetch_listing(self, url: str, params: Dict[str, Any]) -> Mapping[str, Any]:
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.HTTP_TIMEOUT_S,
                transport=self._transport,
            ) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("news_upstream_unreachable", error=str(exc), error_type=type(exc).__name__)
            raise UpstreamError(FETCH_FAILED, details=str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            details = upstream_message(response)
            logger.warning("news_upstream_error", status_code=response.status_code, details=details)
            raise UpstreamError(FETCH_FAILED, details=details, upstream_status=response.status_code)

        try:
            body = response.json()
        except ValueError as exc:
            logger.warning("news_upstream_bad_json", status_code=response.status_code)
            raise UpstreamError(
                FETCH_FAILED,
                details="Upstream returned an unreadable response",
                upstream_status=response.status_code,
            ) from exc

        if not isinstance(body, Mapping):
            raise UpstreamError(FETCH_FAILED, details="Unexpected news payload")
        # Both providers also signal failures in-band
        if str(body.get("status", "")).lower() == "error":
            details = upstream_message(response)
            logger.warning("news_upstream_error", status_code=response.status_code, details=details)
            raise UpstreamError(FETCH_FAILED, details=details, upstream_status=response.status_code)
        return body

    async def lookup(self, category: Optional[str] = None, *, page: int = 1) -> List[NewsArticle]:
        route = resolve_category(category)
        if not route.known:
            logger.info("news_category_fallback", category=route.tag)
        api_key = require_news_key(self._settings)

        now = self._clock()
        url, params = self.build_request(route, api_key, page=page, now=now)
        payload = await self.fetch_listing(url, params)

        articles = normalize_articles(payload, category=route.tag, now=now)
        candidates = count_candidates(payload)
        if candidates != len(articles):
            logger.debug("news_articles_filtered", dropped=candidates - len(articles), kept=len(articles))
        logger.info(
            "news_lookup_ok",
            category=route.tag,
            provider=self._settings.NEWS_PROVIDER.value,
            page=page,
            articles=len(articles),
        )
        return articles
