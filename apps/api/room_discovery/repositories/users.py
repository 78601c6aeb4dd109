"""User repository helpers."""
from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User


async def get_by_email(session: AsyncSession, email: str) -> User | None:
    """Return a user by email, compared case-insensitively."""

    stmt: Select[tuple[User]] = select(User).where(func.lower(User.email) == email.lower()).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    *,
    name: str,
    email: str,
    password_hash: str,
) -> User:
    """Persist a new user. Unique violations surface on flush."""

    user = User(
        id=str(uuid4()),
        name=name,
        email=email.lower(),
        password_hash=password_hash,
        created_at=datetime.now(timezone.utc),
    )
    session.add(user)
    await session.flush()
    return user


async def count_by_email(session: AsyncSession, email: str) -> int:
    stmt = select(func.count(User.id)).where(func.lower(User.email) == email.lower())
    result = await session.execute(stmt)
    return result.scalar_one()
