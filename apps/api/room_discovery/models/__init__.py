"""Expose ORM models."""
from .room import Room, RoomStatus
from .user import User

__all__ = [
    "Room",
    "RoomStatus",
    "User",
]
