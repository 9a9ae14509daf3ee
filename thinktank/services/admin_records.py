"""
Admin-maintained records (events, initiatives, directory, taxonomy,
membership types).

These kinds have no lifecycle and no member write path: any caller may read
them (subject to per-kind filters), only admins may create, edit or delete.
"""

from typing import Any, Dict, Iterable, List, Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from thinktank.content.repository import ContentRepository, ListFilter, ListOrder, Pagination
from thinktank.content.sanitize import sanitize_plain_text, sanitize_rich_text
from thinktank.kernel.audit import AuditStore
from thinktank.kernel.errors import NotFoundError, ValidationError
from thinktank.kernel.identity.caller import Caller
from thinktank.kernel.models.audit_log import AuditAction
from thinktank.kernel.models.base import enum_value
from thinktank.kernel.permissions import ensure_admin
from thinktank.logging_config import get_logger

logger = get_logger(__name__)


class AdminRecordService:
    """
    CRUD for one admin-only kind, with audit entries for every mutation.

    Subclasses set ``model``, ``entity_type`` and ``enum_fields`` and may
    override ``read_clause`` to hide rows from non-admins.
    """

    model: Type[Any]
    entity_type: str
    label: str
    plain_text_fields: Iterable[str] = ()
    rich_text_fields: Iterable[str] = ()
    enum_fields: Dict[str, Type[Any]] = {}

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = ContentRepository(session, self.model, self.entity_type)
        self.audit = AuditStore(session)

    def read_clause(self, caller: Caller) -> Optional[ColumnElement]:
        return None

    async def list(
        self,
        caller: Caller,
        filters: Optional[ListFilter] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[List[Any], int]:
        return await self.repository.list(
            filters,
            Pagination(offset=offset, limit=limit),
            order=ListOrder.ADMIN,
            visibility=self.read_clause(caller),
        )

    async def get(self, caller: Caller, record_id: int) -> Any:
        record = await self.repository.get_by_id(record_id)
        if record is None or not self._visible(caller, record):
            raise NotFoundError(f"{self.label} not found")
        return record

    async def create(
        self,
        caller: Caller,
        fields: Dict[str, Any],
        ip_address: Optional[str] = None,
    ) -> Any:
        ensure_admin(caller)
        record = await self.repository.create(**self._prepare(fields))
        await self._audit(AuditAction.RECORD_CREATED, record, caller, ip_address)
        return record

    async def update(
        self,
        caller: Caller,
        record_id: int,
        changes: Dict[str, Any],
        ip_address: Optional[str] = None,
    ) -> Any:
        ensure_admin(caller)
        record = await self.repository.require(record_id)
        values = self._prepare(changes)
        await self.repository.update(record, values)
        await self._audit(
            AuditAction.RECORD_UPDATED, record, caller, ip_address, {"fields": sorted(values)}
        )
        return record

    async def delete(
        self,
        caller: Caller,
        record_id: int,
        ip_address: Optional[str] = None,
    ) -> None:
        ensure_admin(caller)
        record = await self.repository.require(record_id)
        await self._audit(AuditAction.RECORD_DELETED, record, caller, ip_address)
        await self.repository.delete(record)

    def _visible(self, caller: Caller, record: Any) -> bool:
        return True

    def _prepare(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        values = {k: v for k, v in fields.items() if v is not None}
        for name in self.plain_text_fields:
            if name in values:
                values[name] = sanitize_plain_text(values[name])
        for name in self.rich_text_fields:
            if name in values:
                values[name] = sanitize_rich_text(values[name])
        for name, enum_cls in self.enum_fields.items():
            if name in values:
                try:
                    values[name] = enum_cls(enum_value(values[name])).value
                except ValueError as exc:
                    allowed = ", ".join(member.value for member in enum_cls)
                    raise ValidationError.for_field(name, f"{name} must be one of: {allowed}") from exc
        return values

    async def _audit(
        self,
        action: AuditAction,
        record: Any,
        caller: Caller,
        ip_address: Optional[str],
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        await self.audit.log(
            action=action,
            entity_type=self.entity_type,
            entity_id=record.id,
            actor_id=caller.profile_id,
            payload=payload,
            ip_address=ip_address,
        )
        logger.info(
            "Admin record change",
            extra={
                "action": action.value,
                "entity_type": self.entity_type,
                "entity_id": record.id,
                "actor_id": caller.profile_id,
            },
        )
