"""
Events and initiatives.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from thinktank.kernel.models.base import Base, IntPrimaryKeyMixin, TimestampMixin, enum_value


class EventType(str, Enum):
    CONFERENCE = "conference"
    WORKSHOP = "workshop"
    SEMINAR = "seminar"
    WEBINAR = "webinar"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELED = "canceled"


class InitiativeCategory(str, Enum):
    EDUCATION = "education"
    POLICY = "policy"
    COMMUNITY = "community"
    RESEARCH = "research"


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class Event(Base, IntPrimaryKeyMixin, TimestampMixin):
    """Scheduled event. ``status`` is admin-set; see ``effective_status``."""

    __tablename__ = "events"

    title: Mapped[str] = mapped_column(String(256), nullable=False)
    slug: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    registration_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[EventType] = mapped_column(String(50), nullable=False)
    status: Mapped[EventStatus] = mapped_column(
        String(50),
        default=EventStatus.UPCOMING,
        nullable=False,
    )
    is_virtual: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    virtual_link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    max_attendees: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def effective_status(self, now: datetime) -> EventStatus:
        """Temporal state derived from the scheduling window, unless canceled."""
        if enum_value(self.status) == EventStatus.CANCELED.value:
            return EventStatus.CANCELED
        now = _as_utc(now)
        start = _as_utc(self.start_date)
        end = _as_utc(self.end_date) if self.end_date else start
        if now < start:
            return EventStatus.UPCOMING
        if now <= end:
            return EventStatus.ONGOING
        return EventStatus.COMPLETED


class Initiative(Base, IntPrimaryKeyMixin, TimestampMixin):
    """Standing programme shown on the events page."""

    __tablename__ = "initiatives"

    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[InitiativeCategory] = mapped_column(String(50), nullable=False, index=True)
    icon_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
