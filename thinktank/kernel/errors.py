"""
Domain errors raised by the content layer.

The API layer maps each class to an HTTP status in ``thinktank.main``.
"""

from typing import Any, Dict, List, Optional


class DomainError(Exception):
    """Base class for errors that are rendered to the client."""

    status_code: int = 400
    code: str = "error"

    def __init__(
        self,
        detail: str,
        *,
        code: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(detail)
        self.detail = detail
        if code is not None:
            self.code = code
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.detail, "code": self.code}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(DomainError):
    """Malformed input. ``errors`` carries per-field detail."""

    status_code = 422
    code = "validation/invalid"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(
            "Validation error",
            errors=[{"field": field, "message": message, "type": "value_error"}],
        )


class AuthorizationError(DomainError):
    """Caller lacks permission for the record or action."""

    status_code = 403
    code = "auth/forbidden"


class NotFoundError(DomainError):
    """Record id or slug does not resolve (or is hidden from the caller)."""

    status_code = 404
    code = "resource/not_found"


class ConflictError(DomainError):
    """Unresolvable slug collision, lost transition race, duplicate application."""

    status_code = 409
    code = "resource/conflict"


class UpstreamError(DomainError):
    """Identity provider or object storage call failed."""

    status_code = 502
    code = "upstream/failed"
