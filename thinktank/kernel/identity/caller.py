"""
Caller identity as seen by the authorization layer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class CallerKind(str, Enum):
    ANONYMOUS = "anonymous"
    MEMBER = "member"
    ADMIN = "admin"


@dataclass(frozen=True)
class Caller:
    """Who is making the request: Anonymous, Member(profile_id) or Admin(profile_id)."""

    kind: CallerKind
    profile_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "Caller":
        return cls(kind=CallerKind.ANONYMOUS)

    @classmethod
    def member(cls, profile_id: str, name: Optional[str] = None, email: Optional[str] = None) -> "Caller":
        return cls(kind=CallerKind.MEMBER, profile_id=profile_id, name=name, email=email)

    @classmethod
    def admin(cls, profile_id: str, name: Optional[str] = None, email: Optional[str] = None) -> "Caller":
        return cls(kind=CallerKind.ADMIN, profile_id=profile_id, name=name, email=email)

    @property
    def is_authenticated(self) -> bool:
        return self.kind != CallerKind.ANONYMOUS

    @property
    def is_admin(self) -> bool:
        return self.kind == CallerKind.ADMIN

    def owns(self, author_id: Optional[str]) -> bool:
        return self.is_authenticated and author_id is not None and author_id == self.profile_id
