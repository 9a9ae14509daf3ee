"""
Membership types and member applications.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from thinktank.kernel.models.base import Base, IntPrimaryKeyMixin, TimestampMixin


class MembershipStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MembershipType(Base, IntPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "membership_types"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    benefits: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    requires_approval: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class Membership(Base, IntPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "memberships"

    user_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("profiles.id"),
        nullable=False,
        index=True,
    )
    membership_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("membership_types.id"),
        nullable=False,
    )
    status: Mapped[MembershipStatus] = mapped_column(
        String(50),
        default=MembershipStatus.PENDING,
        nullable=False,
    )
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_memberships_user_type", "user_id", "membership_type_id"),
    )
