"""
Membership types and member applications.
"""

from datetime import timedelta
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from thinktank.content.repository import ContentRepository
from thinktank.kernel.audit import AuditStore
from thinktank.kernel.errors import ConflictError, NotFoundError, ValidationError
from thinktank.kernel.identity.caller import Caller
from thinktank.kernel.models.audit_log import AuditAction
from thinktank.kernel.models.base import enum_value, utcnow
from thinktank.kernel.models.membership import Membership, MembershipStatus, MembershipType
from thinktank.kernel.permissions import ensure_admin, ensure_member
from thinktank.logging_config import get_logger
from thinktank.services.admin_records import AdminRecordService

logger = get_logger(__name__)

MEMBERSHIP_TERM = timedelta(days=365)
ACTIVE_STATUSES = (MembershipStatus.PENDING.value, MembershipStatus.APPROVED.value)


class MembershipTypeService(AdminRecordService):
    model = MembershipType
    entity_type = "membership_type"
    label = "Membership type"
    plain_text_fields = ("name", "description", "benefits")

    async def delete(self, caller: Caller, record_id: int, ip_address: Optional[str] = None) -> None:
        ensure_admin(caller)
        in_use = await self.session.execute(
            select(Membership.id).where(Membership.membership_type_id == record_id).limit(1)
        )
        if in_use.first() is not None:
            raise ConflictError("Cannot delete a membership type that is in use")
        await super().delete(caller, record_id, ip_address)


class MembershipService:
    """
    Applications move pending -> approved | rejected. A member holds at most
    one pending or approved membership per type.
    """

    entity_type = "membership"

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = ContentRepository(session, Membership, self.entity_type)
        self.audit = AuditStore(session)

    async def apply(
        self,
        caller: Caller,
        membership_type_id: int,
        ip_address: Optional[str] = None,
    ) -> Membership:
        ensure_member(caller)
        membership_type = await self.session.get(MembershipType, membership_type_id)
        if membership_type is None:
            raise NotFoundError("Membership type not found")

        if await self._has_active(caller.profile_id, membership_type_id):
            raise ConflictError("You already have or applied for this membership")

        now = utcnow()
        if membership_type.requires_approval:
            membership = Membership(
                user_id=caller.profile_id,
                membership_type_id=membership_type_id,
                status=MembershipStatus.PENDING.value,
            )
        else:
            membership = Membership(
                user_id=caller.profile_id,
                membership_type_id=membership_type_id,
                status=MembershipStatus.APPROVED.value,
                start_date=now,
                end_date=now + MEMBERSHIP_TERM,
            )
        self.session.add(membership)
        await self.session.flush()

        await self.audit.log(
            action=AuditAction.MEMBERSHIP_APPLIED,
            entity_type=self.entity_type,
            entity_id=membership.id,
            actor_id=caller.profile_id,
            payload={
                "membership_type_id": membership_type_id,
                "status": membership.status,
            },
            ip_address=ip_address,
        )
        logger.info(
            "Membership application",
            extra={"membership_id": membership.id, "profile_id": caller.profile_id},
        )
        return membership

    async def list_mine(self, caller: Caller) -> List[Membership]:
        ensure_member(caller)
        result = await self.session.execute(
            select(Membership)
            .where(Membership.user_id == caller.profile_id)
            .order_by(Membership.created_at.asc(), Membership.id.asc())
        )
        return list(result.scalars().all())

    async def list_all(self, caller: Caller, status: Optional[str] = None) -> List[Membership]:
        ensure_admin(caller)
        query = select(Membership).order_by(Membership.created_at.asc(), Membership.id.asc())
        if status is not None:
            query = query.where(Membership.status == _membership_status(status))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def set_status(
        self,
        caller: Caller,
        membership_id: int,
        status: str,
        ip_address: Optional[str] = None,
    ) -> Membership:
        """Admin decision. Approval starts a one-year term."""
        ensure_admin(caller)
        membership = await self.repository.require(membership_id)
        previous = enum_value(membership.status)
        new_status = _membership_status(status)
        if new_status != previous and new_status in ACTIVE_STATUSES:
            if await self._has_active(
                membership.user_id, membership.membership_type_id, exclude_id=membership.id
            ):
                raise ConflictError("Member already holds an active membership of this type")

        membership.status = new_status
        if new_status == MembershipStatus.APPROVED.value:
            now = utcnow()
            membership.start_date = now
            membership.end_date = now + MEMBERSHIP_TERM
        await self.session.flush()

        await self.audit.log(
            action=AuditAction.MEMBERSHIP_STATUS_CHANGED,
            entity_type=self.entity_type,
            entity_id=membership.id,
            actor_id=caller.profile_id,
            payload={"from_status": previous, "to_status": new_status},
            ip_address=ip_address,
        )
        return membership

    async def cancel(
        self,
        caller: Caller,
        membership_id: int,
        ip_address: Optional[str] = None,
    ) -> Membership:
        """Members cancel their own memberships; admins any. Cancelled rows end now."""
        ensure_member(caller)
        membership = await self.session.get(Membership, membership_id)
        if membership is None or not (caller.is_admin or membership.user_id == caller.profile_id):
            raise NotFoundError("Membership not found")
        if enum_value(membership.status) == MembershipStatus.REJECTED.value:
            raise ConflictError("Membership is already inactive")

        membership.status = MembershipStatus.REJECTED.value
        membership.end_date = utcnow()
        await self.session.flush()

        await self.audit.log(
            action=AuditAction.MEMBERSHIP_CANCELED,
            entity_type=self.entity_type,
            entity_id=membership.id,
            actor_id=caller.profile_id,
            ip_address=ip_address,
        )
        return membership

    async def _has_active(
        self, user_id: str, membership_type_id: int, exclude_id: Optional[int] = None
    ) -> bool:
        """Whether the member has a pending or approved membership of this type."""
        query = select(Membership.id).where(
            Membership.user_id == user_id,
            Membership.membership_type_id == membership_type_id,
            Membership.status.in_(ACTIVE_STATUSES),
        )
        if exclude_id is not None:
            query = query.where(Membership.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.first() is not None


def _membership_status(value: str) -> str:
    try:
        return MembershipStatus(enum_value(value)).value
    except ValueError as exc:
        raise ValidationError.for_field("status", "status must be pending, approved or rejected") from exc
