"""
Policy papers and their case studies.
"""

from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from thinktank.kernel.models.base import Base, IntPrimaryKeyMixin, TimestampMixin
from thinktank.kernel.models.publication import LifecycleMixin


class PolicyCategory(str, Enum):
    ECONOMIC = "economic"
    SOCIAL = "social"
    ENVIRONMENTAL = "environmental"


class Policy(Base, IntPrimaryKeyMixin, LifecycleMixin, TimestampMixin):
    """Policy paper, scoped by category instead of publication type."""

    __tablename__ = "policies"

    summary: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    category: Mapped[PolicyCategory] = mapped_column(String(50), nullable=False, index=True)
    author_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        ForeignKey("profiles.id"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Policy {self.slug} status={self.status}>"


class CaseStudy(Base, IntPrimaryKeyMixin, LifecycleMixin, TimestampMixin):
    """Case study attached to a policy."""

    __tablename__ = "case_studies"

    summary: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    policy_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("policies.id"),
        nullable=True,
        index=True,
    )
    author_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        ForeignKey("profiles.id"),
        nullable=True,
        index=True,
    )
