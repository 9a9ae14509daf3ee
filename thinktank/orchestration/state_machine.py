"""
State machine for the content lifecycle.

Publications, policies and case studies share one lifecycle:

    draft -> pending_review -> published
                            -> rejected -> draft

Valid transitions and who may trigger them are defined here. Every
transition is a compare-and-set on the stored status, so of two concurrent
transitions from the same state exactly one wins.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from thinktank.content.repository import ContentRepository
from thinktank.kernel.audit import AuditStore
from thinktank.kernel.errors import AuthorizationError, ValidationError
from thinktank.kernel.identity.caller import Caller
from thinktank.kernel.models.audit_log import AuditAction
from thinktank.kernel.models.base import enum_value, utcnow
from thinktank.kernel.models.publication import ContentStatus
from thinktank.kernel.permissions import ensure_readable
from thinktank.logging_config import get_logger

logger = get_logger(__name__)


class Actor(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"


# Valid transitions: (from_status, to_status) -> actors that may trigger
_TRANSITIONS: Dict[Tuple[str, str], Set[Actor]] = {
    (ContentStatus.DRAFT.value, ContentStatus.PENDING_REVIEW.value): {Actor.OWNER},
    (ContentStatus.PENDING_REVIEW.value, ContentStatus.PUBLISHED.value): {Actor.ADMIN},
    (ContentStatus.PENDING_REVIEW.value, ContentStatus.REJECTED.value): {Actor.ADMIN},
    (ContentStatus.REJECTED.value, ContentStatus.DRAFT.value): {Actor.OWNER},
}


def valid_transitions(from_status: str) -> List[str]:
    """Return list of valid target statuses from given status."""
    return sorted({to for (frm, to) in _TRANSITIONS if frm == from_status})


def can_transition(caller: Caller, author_id: Optional[str], from_status: str, to_status: str) -> bool:
    """
    Check if the caller may move a record from_status -> to_status.

    Admins may perform any listed transition; owners only those marked for them.
    Unlisted pairs are never allowed.
    """
    allowed = _TRANSITIONS.get((from_status, to_status))
    if not allowed:
        return False
    if caller.is_admin:
        return True
    return Actor.OWNER in allowed and caller.owns(author_id)


def validate_submission(record: Any) -> None:
    """A record entering review needs a title and content."""
    errors = []
    if not (record.title or "").strip():
        errors.append({"field": "title", "message": "Title is required"})
    if not (record.content or "").strip():
        errors.append({"field": "content", "message": "Content is required"})
    if errors:
        raise ValidationError("Record is incomplete and cannot be submitted for review", errors=errors)


class StateMachine:
    """Service for performing lifecycle transitions with audit logging."""

    def __init__(self, session: AsyncSession, repository: ContentRepository):
        self.session = session
        self.repository = repository
        self.audit = AuditStore(session)

    @property
    def entity_type(self) -> str:
        return self.repository.entity_type

    async def transition(
        self,
        record: Any,
        to_status: str,
        caller: Caller,
        reason: Optional[str] = None,
        details: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> Any:
        """
        Move a record to ``to_status``. Returns the refreshed record.

        Raises NotFoundError if the caller cannot see the record,
        AuthorizationError for a transition the caller may not perform,
        ValidationError when submitting an incomplete record and
        ConflictError if the stored status changed since ``record`` was read.
        """
        label = self.entity_type.replace("_", " ").capitalize()
        ensure_readable(caller, record, label)

        to_status = enum_value(to_status)
        from_status = enum_value(record.status)
        if not can_transition(caller, record.author_id, from_status, to_status):
            raise AuthorizationError(f"Invalid transition: {from_status} -> {to_status}")

        values: Dict[str, Any] = {}
        if to_status == ContentStatus.PENDING_REVIEW.value:
            validate_submission(record)
            values.update(rejection_reason=None, rejection_details=None)
        elif to_status == ContentStatus.PUBLISHED.value:
            values["published_at"] = utcnow()
        elif to_status == ContentStatus.REJECTED.value:
            values.update(rejection_reason=reason, rejection_details=details)

        updated = await self.repository.update_status(record.id, from_status, to_status, values)

        await self.audit.log(
            action=AuditAction.CONTENT_STATUS_CHANGED,
            entity_type=self.entity_type,
            entity_id=updated.id,
            actor_id=caller.profile_id,
            payload={
                "from_status": from_status,
                "to_status": to_status,
                "reason": reason,
            },
            ip_address=ip_address,
        )
        logger.info(
            "Content status changed",
            extra={
                "entity_type": self.entity_type,
                "entity_id": updated.id,
                "from_status": from_status,
                "to_status": to_status,
                "actor_id": caller.profile_id,
            },
        )
        return updated
