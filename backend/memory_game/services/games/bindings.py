import threading
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class Binding:
    room_id: str
    display_name: str


class ConnectionBindings:
    """Which room each live connection is seated in."""

    def __init__(self):
        self._by_sid: Dict[str, Binding] = {}
        self._lock = threading.Lock()

    def bind(self, sid: str, room_id: str, display_name: str) -> Binding:
        binding = Binding(room_id=room_id, display_name=display_name)
        with self._lock:
            self._by_sid[sid] = binding
        return binding

    def get(self, sid: str) -> Optional[Binding]:
        with self._lock:
            return self._by_sid.get(sid)

    def pop(self, sid: str) -> Optional[Binding]:
        with self._lock:
            return self._by_sid.pop(sid, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_sid)
