"""Room lifecycle endpoints. Every route requires a bearer token."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings
from ..db.session import get_session
from ..models.room import RoomStatus
from ..schemas import rooms as rooms_schema
from ..services import rooms as rooms_service
from ..services.tokens import TokenClaims
from .deps import get_app_settings, get_current_claims

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=rooms_schema.RoomView, status_code=status.HTTP_201_CREATED)
async def create_room(
    payload: rooms_schema.RoomCreateRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    claims: TokenClaims = Depends(get_current_claims),
) -> rooms_schema.RoomView:
    """Create a broadcast room."""

    room = await rooms_service.create_room(payload, session, settings)
    logger.info("user_id=%s created room_id=%s", claims.user_id, room.room_id)
    return room


@router.post("/{room_id}/join", response_model=rooms_schema.JoinResponse)
async def join_room(
    room_id: str,
    payload: rooms_schema.JoinRoomRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    claims: TokenClaims = Depends(get_current_claims),
) -> rooms_schema.JoinResponse:
    """Join a room as host, guest or audience."""

    result = await rooms_service.join_room(room_id, payload, session, settings)
    logger.info(
        "user_id=%s joined room_id=%s as %s on behalf of %s",
        claims.user_id,
        room_id,
        result.role.value,
        payload.user_id,
    )
    return result


@router.get("/{room_id}", response_model=rooms_schema.RoomView)
async def get_room(
    room_id: str,
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
) -> rooms_schema.RoomView:
    """Return room metadata."""

    return await rooms_service.get_room(room_id, session)


@router.post("/{room_id}/start", response_model=rooms_schema.RoomStatusResponse)
async def start_room(
    room_id: str,
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
) -> rooms_schema.RoomStatusResponse:
    """Mark the room live."""

    result = await rooms_service.set_status(room_id, RoomStatus.LIVE, session)
    logger.info("user_id=%s started room_id=%s", claims.user_id, room_id)
    return result


@router.post("/{room_id}/stop", response_model=rooms_schema.RoomStatusResponse)
async def stop_room(
    room_id: str,
    session: AsyncSession = Depends(get_session),
    claims: TokenClaims = Depends(get_current_claims),
) -> rooms_schema.RoomStatusResponse:
    """Mark the room ended."""

    result = await rooms_service.set_status(room_id, RoomStatus.ENDED, session)
    logger.info("user_id=%s stopped room_id=%s", claims.user_id, room_id)
    return result
