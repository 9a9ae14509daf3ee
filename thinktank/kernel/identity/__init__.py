"""
Identity Core - session verification, caller resolution, profiles.
"""

from thinktank.kernel.identity.caller import Caller, CallerKind
from thinktank.kernel.identity.jwt import (
    SessionClaims,
    SessionTokenVerifier,
    get_token_verifier,
    verify_session_token,
)
from thinktank.kernel.identity.identity_service import IdentityService, is_admin_profile

__all__ = [
    "Caller",
    "CallerKind",
    "SessionClaims",
    "SessionTokenVerifier",
    "get_token_verifier",
    "verify_session_token",
    "IdentityService",
    "is_admin_profile",
]
