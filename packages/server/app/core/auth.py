"""
Authentication for Roadmap Hub.

Principals are owned by the external auth subsystem. The service only
verifies the bearer JWT it issued and reads two claims from it:

- ``sub``   — the principal's UUID
- ``email`` — the principal's verified email (used to match invitations)
"""

from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog
from fastapi import Depends, Header
from fastapi.security import APIKeyHeader

from app.core.config import get_settings
from app.core.errors import Unauthenticated
from roadmap_hub_shared.schemas.invitations import normalize_email

log = structlog.get_logger()
settings = get_settings()

bearer_header = APIKeyHeader(name="Authorization", auto_error=False)


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_jwt(
    principal_id: uuid.UUID,
    email: str,
    *,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed bearer token (dev tooling and tests)."""
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": str(principal_id),
        "email": email,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": exp,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_jwt(token: str) -> dict:
    """Decode and verify a JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
    )


# ---------------------------------------------------------------------------
# Authentication dependencies
# ---------------------------------------------------------------------------

class Principal:
    """The authenticated caller: an opaque id plus the email it signed in with."""

    def __init__(self, id: uuid.UUID, email: str):
        self.id = id
        self.email = normalize_email(email)

    def __repr__(self) -> str:
        return f"Principal(id={self.id!s}, email={self.email!r})"


def principal_from_token(token: str) -> Principal:
    try:
        payload = decode_jwt(token)
    except jwt.PyJWTError:
        raise Unauthenticated("Invalid or expired token")

    try:
        principal_id = uuid.UUID(payload["sub"])
    except (KeyError, ValueError):
        raise Unauthenticated("Token subject is not a principal id")

    email = payload.get("email")
    if not email:
        raise Unauthenticated("Token carries no email claim")

    return Principal(id=principal_id, email=email)


async def get_current_principal(
    authorization: Optional[str] = Depends(bearer_header),
) -> Principal:
    """Main authentication dependency: ``Authorization: Bearer <jwt>``."""
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated()
    principal = principal_from_token(authorization[7:].strip())
    structlog.contextvars.bind_contextvars(principal_id=str(principal.id))
    return principal


async def verify_auth_hook(
    x_auth_hook_secret: Optional[str] = Header(default=None),
) -> None:
    """Guard for webhooks posted by the auth subsystem."""
    if not x_auth_hook_secret or not secrets.compare_digest(
        x_auth_hook_secret, settings.auth_hook_secret
    ):
        raise Unauthenticated("Invalid auth hook secret")
