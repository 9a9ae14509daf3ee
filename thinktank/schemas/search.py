"""
Search schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SearchResultItem(BaseModel):
    id: str
    type: str
    title: str
    excerpt: str
    url: str
    date: Optional[datetime] = None
    slug: Optional[str] = None


class SearchResponse(BaseModel):
    """Field names follow the public search contract (camelCase)."""

    model_config = ConfigDict(populate_by_name=True)

    results: List[SearchResultItem]
    total_results: int = Field(..., serialization_alias="totalResults")
    page: int
    total_pages: int = Field(..., serialization_alias="totalPages")
    query: str
