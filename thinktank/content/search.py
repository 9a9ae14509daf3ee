"""
Site search over published content, current events and the public team.

Matching is a case-insensitive substring match in the database (LIKE);
there is no separate index.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from math import ceil
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from thinktank.kernel.errors import ValidationError
from thinktank.kernel.models.event import Event, EventStatus
from thinktank.kernel.models.policy import Policy
from thinktank.kernel.models.profile import Profile
from thinktank.kernel.models.publication import ContentStatus, Publication
from thinktank.logging_config import get_logger

logger = get_logger(__name__)

MAX_QUERY_LENGTH = 100
MAX_LIMIT = 50
DEFAULT_LIMIT = 10
EXCERPT_LENGTH = 200


class SearchType(str, Enum):
    ALL = "all"
    PUBLICATION = "publication"
    EVENT = "event"
    POLICY = "policy"
    MEMBER = "member"


@dataclass
class SearchResult:
    id: str
    type: SearchType
    title: str
    excerpt: str
    url: str
    date: Optional[datetime] = None
    slug: Optional[str] = None


@dataclass
class SearchResults:
    results: List[SearchResult]
    total_results: int
    page: int
    total_pages: int
    query: str


@dataclass
class _Source:
    """How one record kind is matched, ordered and turned into a result."""

    model: Any
    columns: Sequence[str]
    conditions: Callable[[], List[ColumnElement]]
    date_column: str
    to_result: Callable[[Any], SearchResult]


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _excerpt(*parts: Optional[str]) -> str:
    text = next((p for p in parts if p), "") or ""
    text = " ".join(text.split())
    if len(text) <= EXCERPT_LENGTH:
        return text
    return text[:EXCERPT_LENGTH].rsplit(" ", 1)[0] + "..."


def _id_key(value: str) -> Tuple[int, str]:
    """Numeric ids compare as numbers, so ties keep each source's id order."""
    if value.isdigit():
        return (int(value), "")
    return (0, value)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def validate_search_params(q: Optional[str], type: str, page: int, limit: int) -> tuple[str, SearchType]:
    errors = []
    query = (q or "").strip()
    if not 1 <= len(query) <= MAX_QUERY_LENGTH:
        errors.append({"field": "q", "message": f"Query must be 1-{MAX_QUERY_LENGTH} characters"})
    try:
        search_type = SearchType(type)
    except ValueError:
        search_type = SearchType.ALL
        allowed = ", ".join(t.value for t in SearchType)
        errors.append({"field": "type", "message": f"type must be one of: {allowed}"})
    if page < 1:
        errors.append({"field": "page", "message": "page must be >= 1"})
    if not 1 <= limit <= MAX_LIMIT:
        errors.append({"field": "limit", "message": f"limit must be between 1 and {MAX_LIMIT}"})
    if errors:
        raise ValidationError("Invalid search parameters", errors=errors)
    return query, search_type


class SearchService:
    """
    Usage:
        results = await SearchService(session).search("tax", type="all", page=1, limit=10)
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._sources: Dict[SearchType, _Source] = {
            SearchType.PUBLICATION: _Source(
                model=Publication,
                columns=("title", "abstract", "content"),
                conditions=lambda: [Publication.status == ContentStatus.PUBLISHED.value],
                date_column="published_at",
                to_result=lambda p: SearchResult(
                    id=str(p.id),
                    type=SearchType.PUBLICATION,
                    title=p.title,
                    excerpt=_excerpt(p.abstract, p.content),
                    url=f"/publications/{p.slug}",
                    date=_as_utc(p.published_at),
                    slug=p.slug,
                ),
            ),
            SearchType.EVENT: _Source(
                model=Event,
                columns=("title", "description", "location"),
                conditions=lambda: [
                    Event.status.in_([EventStatus.UPCOMING.value, EventStatus.ONGOING.value])
                ],
                date_column="start_date",
                to_result=lambda e: SearchResult(
                    id=str(e.id),
                    type=SearchType.EVENT,
                    title=e.title,
                    excerpt=_excerpt(e.description, e.location),
                    url=f"/events/{e.slug}",
                    date=_as_utc(e.start_date),
                    slug=e.slug,
                ),
            ),
            SearchType.POLICY: _Source(
                model=Policy,
                columns=("title", "summary", "content"),
                conditions=lambda: [Policy.status == ContentStatus.PUBLISHED.value],
                date_column="published_at",
                to_result=lambda p: SearchResult(
                    id=str(p.id),
                    type=SearchType.POLICY,
                    title=p.title,
                    excerpt=_excerpt(p.summary, p.content),
                    url=f"/policy/{p.slug}",
                    date=_as_utc(p.published_at),
                    slug=p.slug,
                ),
            ),
            SearchType.MEMBER: _Source(
                model=Profile,
                columns=("name", "position", "bio"),
                conditions=lambda: [
                    Profile.is_team_member.is_(True),
                    Profile.show_on_website.is_(True),
                ],
                date_column="created_at",
                to_result=lambda m: SearchResult(
                    id=m.id,
                    type=SearchType.MEMBER,
                    title=m.name or "",
                    excerpt=_excerpt(m.position, m.bio),
                    url="/about/team",
                    date=_as_utc(m.created_at),
                ),
            ),
        }

    async def search(
        self,
        q: Optional[str],
        type: str = SearchType.ALL.value,
        page: int = 1,
        limit: int = DEFAULT_LIMIT,
    ) -> SearchResults:
        """
        One page of matches, newest first.

        For ``all`` every kind is queried for its first ``page * limit``
        matches; the merged list is sorted by date and sliced, so pages are
        exact without loading whole tables.
        """
        query, search_type = validate_search_params(q, type, page, limit)
        pattern = f"%{_escape_like(query.lower())}%"
        offset = (page - 1) * limit

        kinds = list(self._sources) if search_type == SearchType.ALL else [search_type]
        total = 0
        candidates: List[SearchResult] = []
        for kind in kinds:
            source = self._sources[kind]
            count, rows = await self._match(source, pattern, offset + limit)
            total += count
            candidates.extend(source.to_result(row) for row in rows)

        epoch = datetime.min.replace(tzinfo=timezone.utc)
        candidates.sort(key=lambda r: (r.date or epoch, r.type.value, _id_key(r.id)), reverse=True)
        results = candidates[offset:offset + limit]

        logger.debug(
            "Search executed",
            extra={"query_length": len(query), "search_type": search_type.value, "total": total},
        )
        return SearchResults(
            results=results,
            total_results=total,
            page=page,
            total_pages=ceil(total / limit) if total else 0,
            query=query,
        )

    async def _match(self, source: _Source, pattern: str, fetch: int) -> tuple[int, List[Any]]:
        model = source.model
        text_match = or_(
            *(func.lower(getattr(model, name)).like(pattern, escape="\\") for name in source.columns)
        )
        conditions = [*source.conditions(), text_match]
        count = await self.session.scalar(select(func.count()).select_from(model).where(*conditions))
        date_col = getattr(model, source.date_column)
        result = await self.session.execute(
            select(model)
            .where(*conditions)
            .order_by(date_col.desc().nulls_last(), model.id.desc())
            .limit(fetch)
        )
        return count or 0, list(result.scalars().all())
