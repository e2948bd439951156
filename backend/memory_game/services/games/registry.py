import logging
import random
import string
import threading
from typing import Dict, List, Optional

from .errors import RoomNotFound
from .room import Room

logger = logging.getLogger(__name__)

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


class RoomRegistry:
    """Process-local map of live rooms keyed by their public code.

    The registry lock only guards the map itself; room state is guarded by
    each room's own lock so unrelated rooms never wait on each other.
    """

    def __init__(self, code_length: int = 6, rng: Optional[random.Random] = None):
        self.code_length = code_length
        self._rng = rng or random.Random()
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(room_id) -> str:
        return (room_id or '').upper()

    def _generate_code(self) -> str:
        return ''.join(self._rng.choices(ROOM_CODE_ALPHABET, k=self.code_length))

    def create(self, host_id: str, host_name: str) -> Room:
        """Open a room with ``host_id`` in the first seat."""
        with self._lock:
            code = self._generate_code()
            while code in self._rooms:
                logger.warning(f"[room-code-collision] code={code}")
                code = self._generate_code()
            room = Room(code, rng=self._rng)
            room.add_seat(host_id, host_name)
            self._rooms[code] = room
        logger.info(f"[room-create] room={code} host={host_name}")
        return room

    def get(self, room_id: str) -> Room:
        with self._lock:
            room = self._rooms.get(self._key(room_id))
        if room is None:
            raise RoomNotFound(room_id)
        return room

    def find(self, room_id: str) -> Optional[Room]:
        try:
            return self.get(room_id)
        except RoomNotFound:
            return None

    def delete(self, room_id: str) -> None:
        with self._lock:
            removed = self._rooms.pop(self._key(room_id), None)
        if removed is not None:
            logger.info(f"[room-delete] room={self._key(room_id)}")

    def discard_if_empty(self, room: Room) -> bool:
        """Remove ``room`` if nobody is seated; the caller holds ``room.lock``."""
        with self._lock:
            if room.is_empty and self._rooms.get(room.room_id) is room:
                del self._rooms[room.room_id]
                logger.info(f"[room-delete] room={room.room_id}")
                return True
        return False

    def room_ids(self) -> List[str]:
        with self._lock:
            return list(self._rooms)

    def __contains__(self, room_id) -> bool:
        with self._lock:
            return self._key(room_id) in self._rooms

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)
