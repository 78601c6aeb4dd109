"""Signup and login endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings
from ..db.session import get_session
from ..schemas import auth as auth_schema
from ..services import auth as auth_service
from .deps import get_app_settings

router = APIRouter()


@router.post("/signup", response_model=auth_schema.AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: auth_schema.SignupRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> auth_schema.AuthResponse:
    """Register an account and return a session token."""

    return await auth_service.register(payload, session, settings)


@router.post("/login", response_model=auth_schema.AuthResponse)
async def login(
    payload: auth_schema.LoginRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> auth_schema.AuthResponse:
    """Exchange email and password for a session token."""

    return await auth_service.authenticate(payload, session, settings)
