"""
Visibility and authorization rules for content records.

Rules (uniform across lifecycle-governed kinds):
- published records are visible to every caller
- draft / pending_review / rejected records are visible only to their
  author or an admin; to anyone else they do not exist (NotFoundError)
- content fields are editable by the author while the record is a draft,
  and by an admin at any status
- admin-only kinds have no member write path at all
"""

from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement

from thinktank.kernel.errors import AuthorizationError, NotFoundError
from thinktank.kernel.identity.caller import Caller
from thinktank.kernel.models.base import enum_value
from thinktank.kernel.models.publication import ContentStatus


def _status(record: Any) -> str:
    return enum_value(record.status)


def can_read(caller: Caller, record: Any) -> bool:
    """Whether the caller may see a lifecycle record."""
    if _status(record) == ContentStatus.PUBLISHED.value:
        return True
    if caller.is_admin:
        return True
    return caller.owns(getattr(record, "author_id", None))


def can_edit(caller: Caller, record: Any) -> bool:
    """Whether the caller may change a lifecycle record's content fields."""
    if caller.is_admin:
        return True
    return caller.owns(getattr(record, "author_id", None)) and _status(record) == ContentStatus.DRAFT.value


def ensure_readable(caller: Caller, record: Optional[Any], label: str = "Record") -> Any:
    """Return the record or raise NotFoundError if it is missing or hidden."""
    if record is None or not can_read(caller, record):
        raise NotFoundError(f"{label} not found")
    return record


def ensure_editable(caller: Caller, record: Optional[Any], label: str = "Record") -> Any:
    """
    Return the record if the caller may edit it.

    Hidden records raise NotFoundError; visible but locked ones raise
    AuthorizationError.
    """
    ensure_readable(caller, record, label)
    if not can_edit(caller, record):
        if caller.owns(getattr(record, "author_id", None)):
            raise AuthorizationError(
                f"{label} can only be edited by its author while in draft"
            )
        raise AuthorizationError(f"Not allowed to edit this {label.lower()}")
    return record


def ensure_member(caller: Caller) -> Caller:
    """Writes of any kind need an authenticated caller."""
    if not caller.is_authenticated:
        raise AuthorizationError("Sign in required")
    return caller


def ensure_admin(caller: Caller) -> Caller:
    """Admin-only records and moderation actions."""
    if not caller.is_admin:
        raise AuthorizationError("Admin access required")
    return caller


def visibility_clause(caller: Caller, model: Any) -> Optional[ColumnElement]:
    """
    SQL condition restricting a list query to what the caller may see.

    Returns None for admins (no restriction).
    """
    if caller.is_admin:
        return None
    published = model.status == ContentStatus.PUBLISHED.value
    if caller.is_authenticated and hasattr(model, "author_id"):
        return or_(published, model.author_id == caller.profile_id)
    return published


def public_directory_clause(caller: Caller, model: Any) -> Optional[ColumnElement]:
    """Directory kinds: non-admins only see rows flagged for the website."""
    if caller.is_admin:
        return None
    return model.show_on_website.is_(True)


class PermissionService:
    """
    Object form of the rules, bound to one caller.

    Usage:
        perms = PermissionService(caller)
        pub = perms.readable(await repo.get_by_slug(slug), "Publication")
    """

    def __init__(self, caller: Caller):
        self.caller = caller

    def readable(self, record: Optional[Any], label: str = "Record") -> Any:
        return ensure_readable(self.caller, record, label)

    def editable(self, record: Optional[Any], label: str = "Record") -> Any:
        return ensure_editable(self.caller, record, label)

    def require_member(self) -> Caller:
        return ensure_member(self.caller)

    def require_admin(self) -> Caller:
        return ensure_admin(self.caller)

    def list_clause(self, model: Any) -> Optional[ColumnElement]:
        return visibility_clause(self.caller, model)
