"""
Session token verification.

The identity provider signs a JWT per session; the platform trusts it
completely once the signature, expiry and (optional) issuer check out.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel

from thinktank.config import get_settings


class SessionClaims(BaseModel):
    """What the identity provider tells us about the caller."""

    sub: str  # External user id, the Profile primary key
    name: Optional[str] = None
    email: Optional[str] = None
    image_url: Optional[str] = None
    exp: datetime
    iat: Optional[datetime] = None


class SessionTokenVerifier:
    """
    Verifies identity-provider session tokens.

    ``issue`` exists for local development and tests, standing in for the
    provider's own signing.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        issuer: Optional[str] = None,
    ):
        settings = get_settings()
        self.secret_key = secret_key or settings.identity_secret_key
        self.algorithm = algorithm or settings.identity_algorithm
        self.issuer = settings.identity_issuer if issuer is None else issuer

    def verify(self, token: str) -> Optional[SessionClaims]:
        """
        Decode a session token.

        Returns:
            SessionClaims if the token is valid, None otherwise
        """
        options = {"verify_iss": bool(self.issuer)}
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer or None,
                options=options,
            )
        except JWTError:
            return None

        sub = payload.get("sub")
        if not sub or "exp" not in payload:
            return None

        return SessionClaims(
            sub=str(sub),
            name=payload.get("name"),
            email=payload.get("email"),
            image_url=payload.get("image_url"),
            exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            iat=(
                datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
                if "iat" in payload else None
            ),
        )

    def issue(
        self,
        external_user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        """Sign a session token the way the identity provider does."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": external_user_id,
            "name": name,
            "email": email,
            "iat": now,
            "exp": now + (expires_delta or timedelta(hours=1)),
        }
        if self.issuer:
            payload["iss"] = self.issuer
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)


_verifier: Optional[SessionTokenVerifier] = None


def get_token_verifier() -> SessionTokenVerifier:
    """Get or create the default verifier."""
    global _verifier
    if _verifier is None:
        _verifier = SessionTokenVerifier()
    return _verifier


def verify_session_token(token: str) -> Optional[SessionClaims]:
    """Verify a session token with the default verifier."""
    return get_token_verifier().verify(token)
