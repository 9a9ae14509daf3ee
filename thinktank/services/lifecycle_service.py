"""
Lifecycle content services: publications, policies and case studies.

One generic ``LifecycleService`` carries the member submission flow, admin
moderation and direct authoring; the subclasses only add the reference
checks and text fields particular to their kind.
"""

from typing import Any, Dict, Iterable, List, Optional, Type

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from thinktank.content.repository import ContentRepository, ListFilter, ListOrder, Pagination
from thinktank.content.sanitize import sanitize_plain_text, sanitize_rich_text
from thinktank.kernel.audit import AuditStore
from thinktank.kernel.errors import NotFoundError, ValidationError
from thinktank.kernel.identity.caller import Caller
from thinktank.kernel.models.audit_log import AuditAction
from thinktank.kernel.models.base import enum_value, utcnow
from thinktank.kernel.models.policy import CaseStudy, Policy, PolicyCategory
from thinktank.kernel.models.profile import Profile
from thinktank.kernel.models.publication import (
    Category,
    ContentStatus,
    Publication,
    PublicationType,
    Tag,
)
from thinktank.kernel.permissions import (
    ensure_admin,
    ensure_editable,
    ensure_member,
    ensure_readable,
    visibility_clause,
)
from thinktank.logging_config import get_logger
from thinktank.orchestration.state_machine import StateMachine

logger = get_logger(__name__)

# Statuses an admin may create a record in directly
DIRECT_AUTHORING_STATUSES = (ContentStatus.DRAFT.value, ContentStatus.PUBLISHED.value)


class LifecycleService:
    """
    Create, read, edit and move lifecycle records of one kind.

    Usage:
        service = PublicationService(session)
        pub = await service.create(caller, {"title": "...", "content": "...", "type": "opinion"})
        pub = await service.submit(caller, pub.id)
    """

    model: Type[Any]
    entity_type: str
    label: str
    plain_text_fields: Iterable[str] = ("title",)
    rich_text_fields: Iterable[str] = ("content",)
    search_fields: Iterable[str] = ("title", "content")

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = ContentRepository(session, self.model, self.entity_type)
        self.state_machine = StateMachine(session, self.repository)
        self.audit = AuditStore(session)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(
        self,
        caller: Caller,
        fields: Dict[str, Any],
        submit: bool = False,
        ip_address: Optional[str] = None,
    ) -> Any:
        """
        Member creates a draft they own. With ``submit`` the draft goes
        straight on to pending_review in the same transaction.
        """
        ensure_member(caller)
        values = await self._prepare(fields)
        record = await self.repository.create(
            **values,
            author_id=caller.profile_id,
            status=ContentStatus.DRAFT.value,
        )
        await self._audit_created(record, caller, ip_address)

        if submit:
            record = await self.state_machine.transition(
                record, ContentStatus.PENDING_REVIEW.value, caller, ip_address=ip_address
            )
        return record

    async def author_as_admin(
        self,
        caller: Caller,
        fields: Dict[str, Any],
        author_id: Optional[str] = None,
        status: str = ContentStatus.DRAFT.value,
        ip_address: Optional[str] = None,
    ) -> Any:
        """
        Admin creates a record directly, optionally on behalf of another
        author, in draft or already published.
        """
        ensure_admin(caller)
        status = enum_value(status)
        if status not in DIRECT_AUTHORING_STATUSES:
            raise ValidationError.for_field(
                "status", "Direct authoring creates draft or published records only"
            )

        author_id = author_id or caller.profile_id
        if await self.session.get(Profile, author_id) is None:
            raise NotFoundError("Author profile not found")

        values = await self._prepare(fields)
        values["published_at"] = utcnow() if status == ContentStatus.PUBLISHED.value else None
        record = await self.repository.create(**values, author_id=author_id, status=status)
        await self._audit_created(record, caller, ip_address, on_behalf_of=author_id)
        return record

    async def update(
        self,
        caller: Caller,
        record_id: int,
        changes: Dict[str, Any],
        ip_address: Optional[str] = None,
    ) -> Any:
        """Edit content fields. Owners may edit drafts; admins anything."""
        record = await self.repository.get_by_id(record_id)
        ensure_editable(caller, record, self.label)

        values = await self._prepare(changes, partial=True)
        await self.repository.update(record, values)
        await self.audit.log(
            action=AuditAction.CONTENT_UPDATED,
            entity_type=self.entity_type,
            entity_id=record.id,
            actor_id=caller.profile_id,
            payload={"fields": sorted(values)},
            ip_address=ip_address,
        )
        return record

    async def transition(
        self,
        caller: Caller,
        record_id: int,
        to_status: str,
        reason: Optional[str] = None,
        details: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Any:
        record = await self.repository.get_by_id(record_id)
        ensure_readable(caller, record, self.label)
        return await self.state_machine.transition(
            record, to_status, caller, reason=reason, details=details, ip_address=ip_address
        )

    async def submit(self, caller: Caller, record_id: int, ip_address: Optional[str] = None) -> Any:
        return await self.transition(
            caller, record_id, ContentStatus.PENDING_REVIEW.value, ip_address=ip_address
        )

    async def revise(self, caller: Caller, record_id: int, ip_address: Optional[str] = None) -> Any:
        """Rejected back to draft so the author can edit and resubmit."""
        return await self.transition(
            caller, record_id, ContentStatus.DRAFT.value, ip_address=ip_address
        )

    async def approve(
        self,
        caller: Caller,
        record_id: int,
        modifications: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
    ) -> Any:
        """
        Publish a pending record. Admin edits made while reviewing are
        applied in the same transaction as the status change.
        """
        ensure_admin(caller)
        record = await self.repository.get_by_id(record_id)
        if record is None:
            raise NotFoundError(f"{self.label} not found")

        if modifications:
            values = await self._prepare(modifications, partial=True)
            await self.repository.update(record, values)

        return await self.state_machine.transition(
            record, ContentStatus.PUBLISHED.value, caller, ip_address=ip_address
        )

    async def reject(
        self,
        caller: Caller,
        record_id: int,
        reason: str,
        details: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Any:
        ensure_admin(caller)
        if not (reason or "").strip():
            raise ValidationError.for_field("reason", "A rejection reason is required")
        return await self.transition(
            caller,
            record_id,
            ContentStatus.REJECTED.value,
            reason=reason.strip(),
            details=details,
            ip_address=ip_address,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, caller: Caller, record_id: int) -> Any:
        record = await self.repository.get_by_id(record_id)
        return ensure_readable(caller, record, self.label)

    async def get_by_slug(self, caller: Caller, slug: str) -> Any:
        record = await self.repository.get_by_slug(slug)
        return ensure_readable(caller, record, self.label)

    async def list_visible(
        self,
        caller: Caller,
        filters: Optional[ListFilter] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[List[Any], int]:
        """Published records plus, for members, their own; admins see all."""
        _validate_page(page, limit)
        return await self.repository.list(
            filters,
            Pagination.from_page(page, limit),
            order=ListOrder.PUBLIC,
            visibility=visibility_clause(caller, self.model),
        )

    async def list_mine(
        self,
        caller: Caller,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[List[Any], int]:
        ensure_member(caller)
        _validate_page(page, limit)
        filters = ListFilter(author_id=caller.profile_id, status=_status_filter(status))
        return await self.repository.list(
            filters, Pagination.from_page(page, limit), order=ListOrder.ADMIN
        )

    async def list_for_admin(
        self,
        caller: Caller,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[List[Any], int]:
        """Moderation queue: every status, newest first, optional text match."""
        ensure_admin(caller)
        if not 1 <= limit <= 100 or offset < 0:
            raise ValidationError.for_field("limit", "limit must be 1-100 and offset >= 0")

        filters = ListFilter(status=_status_filter(status))
        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            filters.conditions.append(
                or_(*(func.lower(getattr(self.model, f)).like(pattern) for f in self.search_fields))
            )
        return await self.repository.list(
            filters, Pagination(offset=offset, limit=limit), order=ListOrder.ADMIN
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _prepare(self, fields: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
        """Sanitise text fields and check references before any write."""
        values = {k: v for k, v in fields.items() if v is not None}
        for name in self.plain_text_fields:
            if name in values:
                values[name] = sanitize_plain_text(values[name])
        for name in self.rich_text_fields:
            if name in values:
                values[name] = sanitize_rich_text(values[name])
        if not partial:
            values.setdefault("title", "")
            values.setdefault("content", "")
        await self._check_references(values)
        return values

    async def _check_references(self, values: Dict[str, Any]) -> None:
        """Subclasses validate enum and foreign-key fields here."""

    async def _require_row(self, model: Type[Any], row_id: Optional[int], field: str) -> None:
        if row_id is not None and await self.session.get(model, row_id) is None:
            raise ValidationError.for_field(field, f"Unknown {field.replace('_id', '')} {row_id}")

    async def _audit_created(
        self,
        record: Any,
        caller: Caller,
        ip_address: Optional[str],
        on_behalf_of: Optional[str] = None,
    ) -> None:
        payload = {"slug": record.slug, "status": enum_value(record.status)}
        if on_behalf_of and on_behalf_of != caller.profile_id:
            payload["on_behalf_of"] = on_behalf_of
        await self.audit.log(
            action=AuditAction.CONTENT_CREATED,
            entity_type=self.entity_type,
            entity_id=record.id,
            actor_id=caller.profile_id,
            payload=payload,
            ip_address=ip_address,
        )
        logger.info(
            "Content created",
            extra={"entity_type": self.entity_type, "entity_id": record.id, "slug": record.slug},
        )


class PublicationService(LifecycleService):
    model = Publication
    entity_type = "publication"
    label = "Publication"
    plain_text_fields = ("title", "abstract")
    search_fields = ("title", "abstract", "content")

    async def _check_references(self, values: Dict[str, Any]) -> None:
        if "type" in values:
            values["type"] = _enum_field(PublicationType, values["type"], "type")
        await self._require_row(Category, values.get("category_id"), "category_id")
        await self._require_row(Tag, values.get("tag_id"), "tag_id")


class PolicyService(LifecycleService):
    model = Policy
    entity_type = "policy"
    label = "Policy"
    plain_text_fields = ("title", "summary")
    search_fields = ("title", "summary", "content")

    async def _check_references(self, values: Dict[str, Any]) -> None:
        if "category" in values:
            values["category"] = _enum_field(PolicyCategory, values["category"], "category")


class CaseStudyService(LifecycleService):
    model = CaseStudy
    entity_type = "case_study"
    label = "Case study"
    plain_text_fields = ("title", "summary")
    search_fields = ("title", "summary", "content")

    async def _check_references(self, values: Dict[str, Any]) -> None:
        await self._require_row(Policy, values.get("policy_id"), "policy_id")

    async def list_for_policy(self, caller: Caller, policy_id: int) -> List[CaseStudy]:
        """Visible case studies of a visible policy, most recent first."""
        policy = await self.session.get(Policy, policy_id)
        ensure_readable(caller, policy, "Policy")
        query = (
            select(CaseStudy)
            .where(CaseStudy.policy_id == policy_id)
            .order_by(CaseStudy.published_at.desc().nulls_last(), CaseStudy.id.desc())
        )
        clause = visibility_clause(caller, CaseStudy)
        if clause is not None:
            query = query.where(clause)
        result = await self.session.execute(query)
        return list(result.scalars().all())


def _enum_field(enum_cls: Type[Any], value: Any, field: str) -> str:
    try:
        return enum_cls(enum_value(value)).value
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError.for_field(field, f"{field} must be one of: {allowed}") from exc


def _status_filter(status: Optional[str]) -> Optional[str]:
    if status is None:
        return None
    return _enum_field(ContentStatus, status, "status")


def _validate_page(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationError.for_field("page", "page must be >= 1")
    if not 1 <= limit <= 50:
        raise ValidationError.for_field("limit", "limit must be between 1 and 50")
