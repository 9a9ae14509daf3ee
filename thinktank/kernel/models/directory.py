"""
Directory entries: partners and team members. Admin-maintained.
"""

from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from thinktank.kernel.models.base import Base, IntPrimaryKeyMixin, TimestampMixin


class PartnerCategory(str, Enum):
    ACADEMIC = "academic"
    POLICY = "policy"
    CIVIL_SOCIETY = "civil_society"


class TeamMemberCategory(str, Enum):
    LEADERSHIP = "leadership"
    FACULTY = "faculty"
    STUDENTS = "students"


class Partner(Base, IntPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "partners"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[PartnerCategory] = mapped_column(String(50), nullable=False, index=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    show_on_website: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class TeamMember(Base, IntPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "team_members"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    role: Mapped[str] = mapped_column(String(256), nullable=False)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[TeamMemberCategory] = mapped_column(String(50), nullable=False, index=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    show_on_website: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
