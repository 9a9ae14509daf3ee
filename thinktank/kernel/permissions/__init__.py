"""
Permission Core - visibility and mutation rules.
"""

from thinktank.kernel.permissions.permission_service import (
    PermissionService,
    can_edit,
    can_read,
    ensure_admin,
    ensure_editable,
    ensure_member,
    ensure_readable,
    public_directory_clause,
    visibility_clause,
)

__all__ = [
    "PermissionService",
    "can_edit",
    "can_read",
    "ensure_admin",
    "ensure_editable",
    "ensure_member",
    "ensure_readable",
    "public_directory_clause",
    "visibility_clause",
]
