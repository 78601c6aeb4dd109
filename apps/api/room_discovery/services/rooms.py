"""Room lifecycle and join-role classification."""
from __future__ import annotations

import logging
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import Settings
from ..core.errors import InvalidInput, NotFound, StorageError
from ..models.room import Room, RoomStatus
from ..repositories import rooms as rooms_repo
from ..schemas import rooms as schemas

logger = logging.getLogger(__name__)

ROOM_NOT_FOUND = "room not found"


def build_hls_url(base_url: str, room_id: str) -> str:
    """Placeholder playback URL used when the caller does not supply one."""

    return f"{base_url.rstrip('/')}/{room_id}/index.m3u8"


def classify_member(room: Room, user_id: str, max_guests: int) -> schemas.JoinRole | None:
    """Return the role for ``user_id`` without mutating the room.

    ``None`` means the user would be appended as a new guest.
    """

    if user_id == room.host_id:
        return schemas.JoinRole.HOST
    if user_id in (room.guest_ids or []):
        return schemas.JoinRole.GUEST
    if len(room.guest_ids or []) < max_guests:
        return None
    return schemas.JoinRole.AUDIENCE


async def create_room(
    payload: schemas.RoomCreateRequest,
    session: AsyncSession,
    settings: Settings,
) -> schemas.RoomView:
    """Create a room in the ``created`` state with fresh media identifiers."""

    title = payload.title.strip()
    host_id = payload.host_id.strip()
    missing = [name for name, value in (("title", title), ("hostId", host_id)) if not value]
    if missing:
        raise InvalidInput("title and hostId are required", fields=missing)

    room_id = str(uuid4())
    try:
        async with session.begin():
            room = await rooms_repo.create_room(
                session,
                room_id=room_id,
                title=title,
                host_id=host_id,
                webrtc_room_id=f"webrtc-{uuid4()}",
                hls_playback_url=payload.hls_playback_url or build_hls_url(settings.hls_base_url, room_id),
                chat_channel_id=f"chat-{uuid4()}",
            )
    except SQLAlchemyError as exc:
        logger.exception("create_room failed for host_id=%s", host_id)
        raise StorageError("failed to create room") from exc

    return to_room_view(room)


async def join_room(
    room_id: str,
    payload: schemas.JoinRoomRequest,
    session: AsyncSession,
    settings: Settings,
) -> schemas.JoinResponse:
    """Classify a joining user as host, guest or audience.

    New guests are appended with a conditional update. If another writer
    got there first the room is re-read and classified again; once the
    attempts run out the user is treated as audience.
    """

    user_id = payload.user_id.strip()
    if not user_id:
        raise InvalidInput("userId is required", fields=["userId"])

    try:
        async with session.begin():
            room = await rooms_repo.get_by_room_id(session, room_id)
            if room is None:
                raise NotFound(ROOM_NOT_FOUND)

            role = schemas.JoinRole.AUDIENCE
            for attempt in range(settings.join_max_attempts):
                if attempt:
                    room = await rooms_repo.get_by_room_id(session, room_id, refresh=True)
                    if room is None:
                        raise NotFound(ROOM_NOT_FOUND)

                classified = classify_member(room, user_id, settings.max_guests)
                if classified is not None:
                    role = classified
                    break

                appended = await rooms_repo.append_guest_if_unchanged(
                    session,
                    room=room,
                    user_id=user_id,
                    max_guests=settings.max_guests,
                )
                if appended:
                    role = schemas.JoinRole.GUEST
                    break
                logger.info("Guest append for room_id=%s lost a race (attempt %d)", room_id, attempt + 1)
    except SQLAlchemyError as exc:
        logger.exception("join_room failed for room_id=%s user_id=%s", room_id, user_id)
        raise StorageError("failed to join room") from exc

    return schemas.JoinResponse(
        role=role,
        room_id=room.room_id,
        webrtc_room_id=room.webrtc_room_id,
        hls_url=room.hls_playback_url,
        chat_room_id=room.chat_channel_id,
    )


async def get_room(room_id: str, session: AsyncSession) -> schemas.RoomView:
    """Return the full metadata view for a room."""

    try:
        async with session.begin():
            room = await rooms_repo.get_by_room_id(session, room_id)
    except SQLAlchemyError as exc:
        logger.exception("get_room failed for room_id=%s", room_id)
        raise StorageError("failed to fetch room") from exc

    if room is None:
        raise NotFound(ROOM_NOT_FOUND)
    return to_room_view(room)


async def set_status(
    room_id: str,
    new_status: RoomStatus,
    session: AsyncSession,
) -> schemas.RoomStatusResponse:
    """Overwrite the room status. Any state may move to live or ended."""

    try:
        async with session.begin():
            room = await rooms_repo.get_by_room_id(session, room_id)
            if room is None:
                raise NotFound(ROOM_NOT_FOUND)
            room = await rooms_repo.set_status(session, room, new_status)
    except SQLAlchemyError as exc:
        logger.exception("set_status(%s) failed for room_id=%s", new_status.value, room_id)
        raise StorageError("failed to update room status") from exc

    return schemas.RoomStatusResponse(room_id=room.room_id, status=room.status)


def to_room_view(room: Room) -> schemas.RoomView:
    return schemas.RoomView(
        room_id=room.room_id,
        title=room.title,
        host_id=room.host_id,
        guest_ids=list(room.guest_ids or []),
        webrtc_room_id=room.webrtc_room_id,
        hls_playback_url=room.hls_playback_url,
        chat_channel_id=room.chat_channel_id,
        status=room.status,
        created_at=room.created_at,
    )
