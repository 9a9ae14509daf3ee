"""
Site search endpoint.
"""

from typing import Optional

from fastapi import APIRouter

from thinktank.api.deps import DbSession
from thinktank.content.search import DEFAULT_LIMIT, SearchService
from thinktank.schemas.search import SearchResponse, SearchResultItem

router = APIRouter()


@router.get("", response_model=SearchResponse, response_model_by_alias=True)
async def search(
    db: DbSession,
    q: Optional[str] = None,
    type: str = "all",
    page: int = 1,
    limit: int = DEFAULT_LIMIT,
):
    """
    Search published content, current events and public team profiles.

    Parameter bounds are enforced by the search service so every violation
    is reported in one response.
    """
    found = await SearchService(db).search(q, type=type, page=page, limit=limit)
    return SearchResponse(
        results=[
            SearchResultItem(
                id=r.id,
                type=r.type.value,
                title=r.title,
                excerpt=r.excerpt,
                url=r.url,
                date=r.date,
                slug=r.slug,
            )
            for r in found.results
        ],
        total_results=found.total_results,
        page=found.page,
        total_pages=found.total_pages,
        query=found.query,
    )
