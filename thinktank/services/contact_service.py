"""
Contact form submissions.

Anyone may submit; only admins read submissions or move their status.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from thinktank.content.repository import ContentRepository, ListFilter, ListOrder, Pagination
from thinktank.content.sanitize import sanitize_plain_text
from thinktank.kernel.audit import AuditStore
from thinktank.kernel.errors import ValidationError
from thinktank.kernel.identity.caller import Caller
from thinktank.kernel.models.audit_log import AuditAction
from thinktank.kernel.models.base import enum_value
from thinktank.kernel.models.contact import ContactSubmission, InquiryType, SubmissionStatus
from thinktank.kernel.permissions import ensure_admin
from thinktank.logging_config import get_logger

logger = get_logger(__name__)

MIN_MESSAGE_LENGTH = 10


class ContactService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = ContentRepository(session, ContactSubmission, "contact_submission")
        self.audit = AuditStore(session)

    async def submit(
        self,
        caller: Caller,
        fields: Dict[str, Any],
        ip_address: Optional[str] = None,
    ) -> ContactSubmission:
        """
        Store a submission with status ``new``.

        Field shape (email syntax, lengths) is checked by the request schema;
        the checks here guard callers that bypass it.
        """
        values = {
            "name": sanitize_plain_text(fields.get("name")),
            "email": (fields.get("email") or "").strip(),
            "phone": sanitize_plain_text(fields.get("phone")) or None,
            "subject": sanitize_plain_text(fields.get("subject")),
            "message": sanitize_plain_text(fields.get("message")),
            "inquiry_type": enum_value(fields.get("inquiry_type") or InquiryType.GENERAL),
        }
        errors = []
        for name in ("name", "email", "subject"):
            if not values[name]:
                errors.append({"field": name, "message": f"{name} is required"})
        if len(values["message"] or "") < MIN_MESSAGE_LENGTH:
            errors.append({
                "field": "message",
                "message": f"message must be at least {MIN_MESSAGE_LENGTH} characters",
            })
        if values["inquiry_type"] not in {t.value for t in InquiryType}:
            errors.append({"field": "inquiry_type", "message": "Unknown inquiry type"})
        if errors:
            raise ValidationError("Invalid contact submission", errors=errors)

        submission = await self.repository.create(**values, status=SubmissionStatus.NEW.value)
        await self.audit.log(
            action=AuditAction.CONTACT_SUBMITTED,
            entity_type="contact_submission",
            entity_id=submission.id,
            actor_id=caller.profile_id,
            payload={"inquiry_type": values["inquiry_type"]},
            ip_address=ip_address,
        )
        logger.info(
            "Contact submission received",
            extra={"submission_id": submission.id, "inquiry_type": values["inquiry_type"]},
        )
        return submission

    async def list(
        self,
        caller: Caller,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[List[ContactSubmission], int]:
        ensure_admin(caller)
        filters = ListFilter(status=_submission_status(status) if status else None)
        return await self.repository.list(
            filters, Pagination(offset=offset, limit=limit), order=ListOrder.ADMIN
        )

    async def get(self, caller: Caller, submission_id: int) -> ContactSubmission:
        ensure_admin(caller)
        return await self.repository.require(submission_id)

    async def set_status(
        self,
        caller: Caller,
        submission_id: int,
        status: str,
        ip_address: Optional[str] = None,
    ) -> ContactSubmission:
        ensure_admin(caller)
        submission = await self.repository.require(submission_id)
        previous = enum_value(submission.status)
        new_status = _submission_status(status)
        submission.status = new_status
        await self.session.flush()

        await self.audit.log(
            action=AuditAction.CONTACT_STATUS_CHANGED,
            entity_type="contact_submission",
            entity_id=submission.id,
            actor_id=caller.profile_id,
            payload={"from_status": previous, "to_status": new_status},
            ip_address=ip_address,
        )
        return submission


def _submission_status(value: str) -> str:
    try:
        return SubmissionStatus(enum_value(value)).value
    except ValueError as exc:
        raise ValidationError.for_field("status", "status must be new, in_progress or resolved") from exc
