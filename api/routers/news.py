from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends

from app.config import Settings, get_settings
from app.models.news import NewsArticle, NewsRequest
from services.news_service import NewsService

router = APIRouter(
    prefix="/news",
    tags=["news"],
)


def get_news_service(settings: Settings = Depends(get_settings)) -> NewsService:
    return NewsService(settings)


@router.post("", response_model=List[NewsArticle])
async def lookup_news(
    payload: Optional[NewsRequest] = None,
    service: NewsService = Depends(get_news_service),
) -> List[NewsArticle]:
    """
    Articles for a category tag (default "general"), in upstream order.
    Unknown tags fall back to the default query; an empty list is a valid answer.
    """
    request = payload or NewsRequest()
    return await service.lookup(request.category, page=request.page)
