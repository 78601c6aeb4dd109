"""Data contracts for room endpoints.

Field names on the wire are camelCase; Python attributes stay snake_case.
"""
from __future__ import annotations

from datetime import datetime
import enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from ..models.room import RoomStatus

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class JoinRole(str, enum.Enum):
    HOST = "host"
    GUEST = "guest"
    AUDIENCE = "audience"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RoomCreateRequest(_CamelModel):
    title: NonBlank
    host_id: NonBlank = Field(..., alias="hostId")
    hls_playback_url: str | None = Field(default=None, alias="hlsPlaybackUrl", description="Omit to synthesize one")


class JoinRoomRequest(_CamelModel):
    user_id: NonBlank = Field(..., alias="userId")


class RoomView(_CamelModel):
    room_id: str = Field(..., alias="roomId")
    title: str
    host_id: str = Field(..., alias="hostId")
    guest_ids: list[str] = Field(default_factory=list, alias="guestIds")
    webrtc_room_id: str = Field(..., alias="webrtcRoomId")
    hls_playback_url: str = Field(..., alias="hlsPlaybackUrl")
    chat_channel_id: str = Field(..., alias="chatChannelId")
    status: RoomStatus
    created_at: datetime = Field(..., alias="createdAt")


class JoinResponse(_CamelModel):
    role: JoinRole
    room_id: str = Field(..., alias="roomId")
    webrtc_room_id: str = Field(..., alias="webrtcRoomId")
    hls_url: str = Field(..., alias="hlsUrl")
    chat_room_id: str = Field(..., alias="chatRoomId")


class RoomStatusResponse(_CamelModel):
    room_id: str = Field(..., alias="roomId")
    status: RoomStatus
