"""
Contact form submissions. Append-only; status is admin-mutated.
"""

from enum import Enum
from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from thinktank.kernel.models.base import Base, IntPrimaryKeyMixin, TimestampMixin


class InquiryType(str, Enum):
    GENERAL = "general"
    MEMBERSHIP = "membership"
    COLLABORATION = "collaboration"
    MEDIA = "media"
    OTHER = "other"


class SubmissionStatus(str, Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"


class ContactSubmission(Base, IntPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "contact_submissions"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    subject: Mapped[str] = mapped_column(String(256), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    inquiry_type: Mapped[InquiryType] = mapped_column(
        String(50),
        default=InquiryType.GENERAL,
        nullable=False,
    )
    status: Mapped[SubmissionStatus] = mapped_column(
        String(50),
        default=SubmissionStatus.NEW,
        nullable=False,
        index=True,
    )
