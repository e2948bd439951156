"""Game domain services: deck, rooms, registry and timers.

This package contains pure(ish) domain logic that should be imported by
socket handlers and HTTP routes, keeping transport concerns separated
from core game mechanics.
"""

from .errors import GameAlreadyStarted, RoomError, RoomFull, RoomNotFound
from .registry import RoomRegistry
from .room import Room, RoomStatus

__all__ = [
    'GameAlreadyStarted',
    'Room',
    'RoomError',
    'RoomFull',
    'RoomNotFound',
    'RoomRegistry',
    'RoomStatus',
]
