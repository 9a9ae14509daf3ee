"""
Read-only queries behind the home and publication pages.

Every method returns published publications only, whoever the caller is.
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from thinktank.content.repository import ContentRepository, ListFilter, ListOrder, Pagination
from thinktank.kernel.errors import NotFoundError, ValidationError
from thinktank.kernel.models.publication import ContentStatus, Publication, PublicationType

MIN_LIMIT = 1
MAX_LIMIT = 50


def validate_limit(limit: int) -> int:
    if not isinstance(limit, int) or isinstance(limit, bool) or not MIN_LIMIT <= limit <= MAX_LIMIT:
        raise ValidationError.for_field(
            "limit", f"limit must be between {MIN_LIMIT} and {MAX_LIMIT}"
        )
    return limit


class QueryFacade:
    """
    Curated publication listings.

    Usage:
        facade = QueryFacade(session)
        latest_briefs = await facade.by_type("policy_brief", limit=4)
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = ContentRepository(session, Publication, "publication")

    async def featured(self, limit: int = 5) -> List[Publication]:
        """The most recent published publications across all types."""
        return await self._published(ListFilter(), limit)

    async def popular(self, limit: int = 5) -> List[Publication]:
        # No view counts are tracked; popularity is recency.
        return await self._published(ListFilter(), limit)

    async def by_type(self, type: str, limit: int = 4) -> List[Publication]:
        type_value = _publication_type(type)
        return await self._published(ListFilter(type=type_value), limit)

    async def by_category(self, category_id: int, limit: int = 4) -> List[Publication]:
        return await self._published(ListFilter(category_id=category_id), limit)

    async def related(self, slug: str, limit: int = 3) -> List[Publication]:
        """Most recent publications of the same type, excluding the one at ``slug``."""
        validate_limit(limit)
        current = await self.repository.get_by_slug(slug)
        if current is None or current.status != ContentStatus.PUBLISHED.value:
            raise NotFoundError("Publication not found")
        return await self._published(
            ListFilter(type=current.type, exclude_id=current.id),
            limit,
        )

    async def _published(self, filters: ListFilter, limit: int) -> List[Publication]:
        validate_limit(limit)
        filters.status = ContentStatus.PUBLISHED.value
        items, _ = await self.repository.list(
            filters,
            Pagination(offset=0, limit=limit),
            order=ListOrder.PUBLIC,
        )
        return items


def _publication_type(value: Optional[str]) -> str:
    try:
        return PublicationType(value).value
    except ValueError as exc:
        allowed = ", ".join(t.value for t in PublicationType)
        raise ValidationError.for_field("type", f"type must be one of: {allowed}") from exc
