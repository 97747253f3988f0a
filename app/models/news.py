from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NewsRequest(BaseModel):
    category: Optional[str] = None
    page: int = Field(default=1, ge=1)

    @field_validator("category", mode="before")
    @classmethod
    def _category_as_tag(cls, value: Any) -> Optional[str]:
        # Category never fails a request: numbers become tags, anything else the default.
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return None


class NewsArticle(BaseModel):
    """
    Normalized news item, independent of which upstream provider shape
    it was mapped from.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    url: str
    image_url: str = Field(alias="imageUrl")
    published_at: datetime = Field(alias="publishedAt")
    source: str = "Unknown"
    # Tag the caller asked for, not the upstream category.
    category: str
