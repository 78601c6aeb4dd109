"""Request dependencies shared by the routers."""
from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.config import Settings
from ..core.errors import Unauthenticated
from ..services.tokens import TokenClaims, verify_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running app was built with."""

    return request.app.state.settings


async def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> TokenClaims:
    """FastAPI dependency that authenticates the caller."""

    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Authorization header with a bearer token is required")
    return verify_token(credentials.credentials, settings)
