"""
Kernel Layer

Foundational pieces every other layer builds on:
- Data models (profiles, lifecycle content, directory, audit log)
- Identity Core (session token verification, caller resolution)
- Permission Core (visibility and mutation rules)
- Audit trail (append-only)
- Domain errors

Invariants:
- Hidden records surface as NotFoundError, never AuthorizationError
- Every lifecycle transition and admin mutation is audited in the same transaction
"""

from thinktank.kernel.errors import (
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)

__all__ = [
    "AuthorizationError",
    "ConflictError",
    "DomainError",
    "NotFoundError",
    "UpstreamError",
    "ValidationError",
]
