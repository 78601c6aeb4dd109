"""Room persistence helpers."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.room import Room, RoomStatus


async def get_by_room_id(session: AsyncSession, room_id: str, *, refresh: bool = False) -> Room | None:
    """Return a room by its public identifier.

    ``refresh`` overwrites any copy already held in the identity map so a
    retry observes rows committed by concurrent writers.
    """

    stmt: Select[tuple[Room]] = select(Room).where(Room.room_id == room_id)
    if refresh:
        stmt = stmt.execution_options(populate_existing=True)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_room(
    session: AsyncSession,
    *,
    room_id: str,
    title: str,
    host_id: str,
    webrtc_room_id: str,
    hls_playback_url: str,
    chat_channel_id: str,
) -> Room:
    """Persist a new room in the ``created`` state."""

    room = Room(
        room_id=room_id,
        title=title,
        host_id=host_id,
        guest_ids=[],
        webrtc_room_id=webrtc_room_id,
        hls_playback_url=hls_playback_url,
        chat_channel_id=chat_channel_id,
        status=RoomStatus.CREATED,
        version=0,
        created_at=datetime.now(timezone.utc),
    )
    session.add(room)
    await session.flush()
    return room


async def append_guest_if_unchanged(
    session: AsyncSession,
    *,
    room: Room,
    user_id: str,
    max_guests: int,
) -> bool:
    """Append ``user_id`` to the guest list only if nobody wrote it since ``room`` was read.

    The update is conditional on the version observed at read time, so two
    joins racing for the last free slot cannot both succeed. Returns False
    when the row changed underneath us or the room is already full.
    """

    current = list(room.guest_ids or [])
    if len(current) >= max_guests:
        return False

    stmt = (
        update(Room)
        .where(Room.room_id == room.room_id, Room.version == room.version)
        .values(guest_ids=[*current, user_id], version=room.version + 1)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount != 1:
        return False

    await session.refresh(room)
    return True


async def set_status(session: AsyncSession, room: Room, status: RoomStatus) -> Room:
    """Overwrite the room status unconditionally."""

    room.status = status
    session.add(room)
    await session.flush()
    return room
