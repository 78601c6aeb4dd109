"""Room model."""
from __future__ import annotations

from datetime import datetime, timezone
import enum

from sqlalchemy import DateTime, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, JSONType


class RoomStatus(str, enum.Enum):
    CREATED = "created"
    LIVE = "live"
    ENDED = "ended"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Room(Base):
    """Broadcast session metadata and its tracked guests."""

    __tablename__ = "rooms"

    room_id: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    host_id: Mapped[str] = mapped_column(String, nullable=False)
    guest_ids: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    webrtc_room_id: Mapped[str] = mapped_column(String, nullable=False)
    hls_playback_url: Mapped[str] = mapped_column(String, nullable=False)
    chat_channel_id: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[RoomStatus] = mapped_column(
        Enum(RoomStatus, name="room_status", values_callable=lambda enum_cls: [item.value for item in enum_cls]),
        default=RoomStatus.CREATED,
        nullable=False,
    )
    # Bumped on each guest list write; guards the conditional append.
    version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
