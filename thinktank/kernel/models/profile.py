"""
Profile model: one row per person who has ever authenticated.
"""

from typing import Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from thinktank.kernel.models.base import Base, TimestampMixin


class Profile(Base, TimestampMixin):
    """
    Person record keyed by the identity provider's user id.

    ``is_team_member`` is the admin marker. Profiles are never deleted.
    """

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    position: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_team_member: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    team_role: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    show_on_website: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<Profile {self.id}>"
