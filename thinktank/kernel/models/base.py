"""
Base model with common fields and utilities.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


class IntPrimaryKeyMixin:
    """Server-generated integer primary key."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: utcnow(),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: utcnow(),
        server_default=func.now(),
        onupdate=lambda: utcnow(),
        nullable=False,
    )


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


def enum_value(value) -> str:
    """Enum members and raw strings (as loaded from SQLite) compare the same way."""
    return value.value if hasattr(value, "value") else str(value)
