"""
Publications and their taxonomy (categories, tags).
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from thinktank.kernel.models.base import Base, IntPrimaryKeyMixin, TimestampMixin


class ContentStatus(str, Enum):
    """Lifecycle shared by publications, policies and case studies."""
    DRAFT = "draft"
    PENDING_REVIEW = "pending_review"
    PUBLISHED = "published"
    REJECTED = "rejected"


class PublicationType(str, Enum):
    RESEARCH_PAPER = "research_paper"
    POLICY_BRIEF = "policy_brief"
    OPINION = "opinion"
    BLOG_POST = "blog_post"


class Category(Base, IntPrimaryKeyMixin, TimestampMixin):
    """Publication category."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)


class Tag(Base, IntPrimaryKeyMixin):
    """Publication tag."""

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    slug: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)


class LifecycleMixin:
    """
    Columns every lifecycle-governed record carries.

    ``published_at`` is set exactly once, on the transition into published.
    """

    slug: Mapped[str] = mapped_column(String(256), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[ContentStatus] = mapped_column(
        String(50),
        default=ContentStatus.DRAFT,
        nullable=False,
        index=True,
    )
    thumbnail_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    rejection_details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    published_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )


class Publication(Base, IntPrimaryKeyMixin, LifecycleMixin, TimestampMixin):
    """Research paper, policy brief, opinion or blog post."""

    __tablename__ = "publications"

    abstract: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    type: Mapped[PublicationType] = mapped_column(String(50), nullable=False)
    pdf_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    author_id: Mapped[Optional[str]] = mapped_column(
        String(255),
        ForeignKey("profiles.id"),
        nullable=True,
        index=True,
    )
    category_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=True,
    )
    tag_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("tags.id"),
        nullable=True,
    )
    featured_order: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        Index("ix_publications_status_published_at", "status", "published_at"),
    )

    def __repr__(self) -> str:
        return f"<Publication {self.slug} status={self.status}>"
