"""
Generic content repository.

One ``ContentRepository`` per record kind provides create / get_by_id /
get_by_slug / list / update / update_status. Visibility is not decided
here; callers pass the permission layer's SQL clause into ``list``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from thinktank.content.slugs import slugify, with_suffix
from thinktank.kernel.errors import ConflictError, NotFoundError
from thinktank.kernel.models.base import enum_value
from thinktank.logging_config import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")

# Insert attempts when a concurrent writer takes the same slug first
SLUG_INSERT_ATTEMPTS = 5


class ListOrder(str, Enum):
    """Ordering for ``list``. Records with ``display_order`` ignore this."""
    PUBLIC = "public"  # published_at desc
    ADMIN = "admin"    # created_at desc


@dataclass
class ListFilter:
    """Column filters for ``list``. Unset fields do not filter."""

    type: Optional[str] = None
    category: Optional[str] = None
    category_id: Optional[int] = None
    status: Optional[str] = None
    author_id: Optional[str] = None
    exclude_id: Optional[int] = None
    conditions: List[ColumnElement] = field(default_factory=list)


@dataclass
class Pagination:
    offset: int = 0
    limit: int = 20

    @classmethod
    def from_page(cls, page: int, limit: int) -> "Pagination":
        return cls(offset=(page - 1) * limit, limit=limit)


class ContentRepository(Generic[ModelT]):
    """
    CRUD surface over one model class.

    Usage:
        repo = ContentRepository(session, Publication, "publication")
        pub = await repo.create(title="Tax Policy Review", content="...", type="opinion")
        pub.slug  # 'tax-policy-review'
    """

    def __init__(self, session: AsyncSession, model: Type[ModelT], entity_type: str):
        self.session = session
        self.model = model
        self.entity_type = entity_type
        self.has_slug = hasattr(model, "slug")
        self.has_display_order = hasattr(model, "display_order")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_by_id(self, record_id: Any, fresh: bool = False) -> Optional[ModelT]:
        query = select(self.model).where(self.model.id == record_id)
        if fresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[ModelT]:
        if not self.has_slug:
            raise TypeError(f"{self.model.__name__} has no slug")
        result = await self.session.execute(select(self.model).where(self.model.slug == slug))
        return result.scalar_one_or_none()

    async def require(self, record_id: Any) -> ModelT:
        record = await self.get_by_id(record_id)
        if record is None:
            raise NotFoundError(f"{self._label} not found")
        return record

    async def list(
        self,
        filters: Optional[ListFilter] = None,
        pagination: Optional[Pagination] = None,
        order: ListOrder = ListOrder.PUBLIC,
        visibility: Optional[ColumnElement] = None,
    ) -> tuple[List[ModelT], int]:
        """
        Filtered, ordered, paginated list plus the total matching count.

        Ordering is total (``id`` breaks ties) so repeated calls with no
        intervening writes return identical pages.
        """
        conditions = self._conditions(filters or ListFilter())
        if visibility is not None:
            conditions.append(visibility)
        pagination = pagination or Pagination()

        total = await self.session.scalar(
            select(func.count()).select_from(self.model).where(*conditions)
        )
        query = (
            select(self.model)
            .where(*conditions)
            .order_by(*self._ordering(order))
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total or 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, **values: Any) -> ModelT:
        """
        Insert a record. Slugged kinds derive a unique slug from ``title``
        (``name`` for taxonomy, or an explicit ``slug`` value), suffixed
        with -2, -3, ... when the base is taken.
        """
        if not self.has_slug:
            record = self.model(**values)
            self.session.add(record)
            await self.session.flush()
            return record

        base = slugify(values.pop("slug", None) or values.get("title") or values.get("name") or "")
        for _ in range(SLUG_INSERT_ATTEMPTS):
            slug = await self.unique_slug(base)
            record = self.model(slug=slug, **values)
            try:
                async with self.session.begin_nested():
                    self.session.add(record)
                    await self.session.flush()
            except IntegrityError as exc:
                if "slug" not in str(exc.orig).lower():
                    raise ConflictError(f"{self._label} violates a storage constraint") from exc
                logger.info(
                    "Slug taken concurrently, retrying",
                    extra={"entity_type": self.entity_type, "slug": slug},
                )
                continue
            return record

        raise ConflictError(f"Could not allocate a unique slug for '{base}'")

    async def unique_slug(self, base: str, exclude_id: Optional[Any] = None) -> str:
        """First free candidate among base, base-2, base-3, ..."""
        counter = 1
        while True:
            candidate = with_suffix(base, counter)
            query = select(self.model.id).where(self.model.slug == candidate)
            if exclude_id is not None:
                query = query.where(self.model.id != exclude_id)
            if (await self.session.execute(query)).first() is None:
                return candidate
            counter += 1

    async def update(self, record: ModelT, changes: Dict[str, Any]) -> ModelT:
        """Apply field changes to a loaded record. ``None`` values are skipped."""
        for key, value in changes.items():
            if value is None:
                continue
            if not hasattr(self.model, key):
                raise AttributeError(f"{self.model.__name__} has no field {key}")
            setattr(record, key, value)
        await self.session.flush()
        return record

    async def update_status(
        self,
        record_id: Any,
        expected_status: str,
        new_status: str,
        extra_values: Optional[Dict[str, Any]] = None,
    ) -> ModelT:
        """
        Atomic compare-and-set of ``status``.

        The UPDATE only matches while the row still has ``expected_status``;
        if another writer moved it first, zero rows match and ConflictError
        is raised.
        """
        values = {"status": new_status, **(extra_values or {})}
        stmt = (
            update(self.model)
            .where(self.model.id == record_id, self.model.status == expected_status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)

        if result.rowcount == 0:
            current = await self.get_by_id(record_id, fresh=True)
            if current is None:
                raise NotFoundError(f"{self._label} not found")
            raise ConflictError(
                f"{self._label} is now '{enum_value(current.status)}'; "
                f"expected '{expected_status}'"
            )

        refreshed = await self.get_by_id(record_id, fresh=True)
        return refreshed

    async def delete(self, record: ModelT) -> None:
        """Hard delete; only admin-only directory kinds use this."""
        await self.session.delete(record)
        await self.session.flush()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def _label(self) -> str:
        return self.entity_type.replace("_", " ").capitalize()

    def _conditions(self, filters: ListFilter) -> List[ColumnElement]:
        model = self.model
        conditions: List[ColumnElement] = list(filters.conditions)
        if filters.type is not None:
            conditions.append(model.type == filters.type)
        if filters.category is not None:
            conditions.append(model.category == filters.category)
        if filters.category_id is not None:
            conditions.append(model.category_id == filters.category_id)
        if filters.status is not None:
            conditions.append(model.status == filters.status)
        if filters.author_id is not None:
            conditions.append(model.author_id == filters.author_id)
        if filters.exclude_id is not None:
            conditions.append(model.id != filters.exclude_id)
        return conditions

    def _ordering(self, order: ListOrder) -> Sequence[ColumnElement]:
        model = self.model
        if self.has_display_order:
            return (model.display_order.asc(), model.id.asc())
        if order == ListOrder.PUBLIC and hasattr(model, "published_at"):
            return (model.published_at.desc().nulls_last(), model.id.desc())
        if hasattr(model, "created_at"):
            return (model.created_at.desc(), model.id.desc())
        return (model.id.desc(),)
