"""
FastAPI dependencies for caller resolution, authorization, and database sessions.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from thinktank.database import get_db
from thinktank.kernel.identity.caller import Caller
from thinktank.kernel.identity.identity_service import IdentityService
from thinktank.kernel.identity.jwt import SessionClaims, verify_session_token


# Security scheme
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]
Credentials = Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)]


async def get_caller(credentials: Credentials, db: DbSession) -> Caller:
    """Resolve the caller. Never fails: anything unverifiable is Anonymous."""
    token = credentials.credentials if credentials else None
    return await IdentityService(db).resolve_caller(token)


async def get_member(credentials: Credentials, db: DbSession) -> Caller:
    """Authenticated caller or 401. The caller's profile row exists afterwards."""
    token = credentials.credentials if credentials else None
    caller = await IdentityService(db).resolve_caller(token, create_profile=True)
    if not caller.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return caller


async def require_admin(caller: Annotated[Caller, Depends(get_member)]) -> Caller:
    """Require the current caller to be an admin."""
    if not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return caller


async def get_session_claims(credentials: Credentials) -> SessionClaims:
    """Verified token claims, for endpoints that create the caller's profile."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    claims = verify_session_token(credentials.credentials)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims


CurrentCaller = Annotated[Caller, Depends(get_caller)]
MemberCaller = Annotated[Caller, Depends(get_member)]
AdminCaller = Annotated[Caller, Depends(require_admin)]
Claims = Annotated[SessionClaims, Depends(get_session_claims)]


def get_client_ip(request: Request) -> Optional[str]:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
