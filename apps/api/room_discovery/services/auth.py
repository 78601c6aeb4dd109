"""Account registration and login."""
from __future__ import annotations

import asyncio
import logging

from fastapi import status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings
from ..core.errors import DuplicateIdentity, InvalidCredential, NotFound, StorageError
from ..core.security import hash_password, verify_password
from ..models.user import User
from ..repositories import users as users_repo
from ..schemas import auth as schemas
from .tokens import issue_token

logger = logging.getLogger(__name__)


async def register(
    payload: schemas.SignupRequest,
    session: AsyncSession,
    settings: Settings,
) -> schemas.AuthResponse:
    """Create an account and return a session token for it."""

    loop = asyncio.get_running_loop()
    password_hash = await loop.run_in_executor(None, hash_password, payload.password)

    try:
        async with session.begin():
            if await users_repo.get_by_email(session, payload.email):
                raise DuplicateIdentity("Email is already registered")
            user = await users_repo.create_user(
                session,
                name=payload.name,
                email=payload.email,
                password_hash=password_hash,
            )
    except IntegrityError as exc:
        # Lost a race with a concurrent signup for the same email.
        raise DuplicateIdentity("Email is already registered") from exc
    except SQLAlchemyError as exc:
        logger.exception("register failed for email=%s", payload.email)
        raise StorageError("Failed to create user") from exc

    logger.info("Registered user_id=%s", user.id)
    return _auth_response(user, settings)


async def authenticate(
    payload: schemas.LoginRequest,
    session: AsyncSession,
    settings: Settings,
) -> schemas.AuthResponse:
    """Check credentials and return a fresh session token."""

    try:
        async with session.begin():
            user = await users_repo.get_by_email(session, payload.email)
    except SQLAlchemyError as exc:
        logger.exception("authenticate failed for email=%s", payload.email)
        raise StorageError("Failed to load user") from exc

    if user is None:
        raise NotFound("No account exists for this email", status_code=status.HTTP_401_UNAUTHORIZED)
    loop = asyncio.get_running_loop()
    if not await loop.run_in_executor(None, verify_password, payload.password, user.password_hash):
        raise InvalidCredential("Incorrect password")

    return _auth_response(user, settings)


def _auth_response(user: User, settings: Settings) -> schemas.AuthResponse:
    issued = issue_token(user, settings)
    return schemas.AuthResponse(
        token=issued.token,
        user=schemas.UserView(id=user.id, name=user.name, email=user.email),
    )
