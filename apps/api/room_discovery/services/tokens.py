"""Session token issuance and verification.

Tokens are stateless HS256 JWTs carrying the user identity. There is no
server-side session store, so a token stays valid until it expires.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from ..core.config import Settings
from ..core.errors import ConfigurationError, InvalidToken
from ..models.user import User


@dataclass(slots=True)
class SessionToken:
    token: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class TokenClaims:
    """Identity asserted by a verified token."""

    user_id: str
    email: str
    name: str


def issue_token(user: User, settings: Settings, *, now: datetime | None = None) -> SessionToken:
    """Sign a token embedding ``{userId, email, name}``."""

    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET is not configured")

    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(hours=settings.token_ttl_hours)
    payload = {
        "userId": user.id,
        "email": user.email,
        "name": user.name,
        "iat": issued_at,
        "exp": expires_at,
    }
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return SessionToken(token=token, expires_at=expires_at)


def verify_token(token: str, settings: Settings) -> TokenClaims:
    """Check signature and expiry and return the embedded claims."""

    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET is not configured")

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "userId"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidToken("Token has expired") from exc
    except jwt.PyJWTError as exc:
        raise InvalidToken("Invalid token") from exc

    return TokenClaims(
        user_id=str(payload["userId"]),
        email=str(payload.get("email", "")),
        name=str(payload.get("name", "")),
    )
