"""
Immutable audit log of lifecycle transitions and admin mutations.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Index, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from thinktank.kernel.models.base import Base, IntPrimaryKeyMixin, utcnow


class AuditAction(str, Enum):
    """All actions recorded in the audit log."""

    # Profiles
    PROFILE_CREATED = "profile.created"
    PROFILE_UPDATED = "profile.updated"
    PROFILE_ROLE_CHANGED = "profile.role_changed"

    # Lifecycle content
    CONTENT_CREATED = "content.created"
    CONTENT_UPDATED = "content.updated"
    CONTENT_STATUS_CHANGED = "content.status_changed"

    # Admin-only records
    RECORD_CREATED = "record.created"
    RECORD_UPDATED = "record.updated"
    RECORD_DELETED = "record.deleted"

    # Contact and membership workflows
    CONTACT_SUBMITTED = "contact.submitted"
    CONTACT_STATUS_CHANGED = "contact.status_changed"
    MEMBERSHIP_APPLIED = "membership.applied"
    MEMBERSHIP_STATUS_CHANGED = "membership.status_changed"
    MEMBERSHIP_CANCELED = "membership.canceled"

    # Uploads
    UPLOAD_COMPLETED = "upload.completed"


class AuditLog(Base, IntPrimaryKeyMixin):
    """
    Append-only audit entry.

    Rows are only ever inserted; nothing updates or deletes them.
    """

    __tablename__ = "audit_logs"

    action: Mapped[AuditAction] = mapped_column(String(100), nullable=False, index=True)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(255), nullable=False)
    actor_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: utcnow(),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        Index("ix_audit_logs_entity", "entity_type", "entity_id"),
    )

    def __repr__(self) -> str:
        return f"<AuditLog {self.action} {self.entity_type}:{self.entity_id}>"
