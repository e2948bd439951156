import logging
from contextlib import ExitStack
from typing import Callable, Optional

from .bindings import ConnectionBindings
from .broadcast import BroadcastGateway
from .errors import RoomNotFound
from .registry import RoomRegistry
from .room import GameOutcome, ResolutionTicket, Room

logger = logging.getLogger(__name__)

DEFAULT_PLAYER_NAME = 'Player'


class ActionRouter:
    """Applies inbound player actions to the room the connection is seated in.

    In-game actions are resolved through the connection binding, never
    through a room id supplied by the client. Invalid or stale actions are
    dropped: no state change, no broadcast, no reply.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        bindings: ConnectionBindings,
        gateway: BroadcastGateway,
        max_name_length: int = 24,
        on_game_finished: Optional[Callable[[GameOutcome], None]] = None,
    ):
        self.registry = registry
        self.bindings = bindings
        self.gateway = gateway
        self.max_name_length = max_name_length
        self.on_game_finished = on_game_finished
        self.scheduler = None

    def clean_name(self, name) -> str:
        name = str(name or '').strip()[: self.max_name_length]
        return name or DEFAULT_PLAYER_NAME

    def _bound_room(self, sid: str) -> Optional[Room]:
        binding = self.bindings.get(sid)
        if binding is None:
            return None
        return self.registry.find(binding.room_id)

    # ---- lobby ----

    def create_room(self, sid: str, display_name) -> Room:
        self.leave(sid)
        name = self.clean_name(display_name)
        room = self.registry.create(sid, name)
        self.bindings.bind(sid, room.room_id, name)
        self.gateway.subscribe(sid, room.room_id)
        return room

    def join_room(self, sid: str, room_id, display_name) -> Room:
        """Seat ``sid`` in an existing room; raises a RoomError subclass on failure."""
        room = self.registry.get(str(room_id or ''))
        bound = self.bindings.get(sid)
        if bound is not None and bound.room_id == room.room_id:
            return room
        previous = self._bound_room(sid)
        name = self.clean_name(display_name)
        # Both rooms are locked, in code order, so the refusal checks and the
        # move out of the previous room happen as one step
        with ExitStack() as stack:
            for locked in sorted(filter(None, {room, previous}), key=lambda r: r.room_id):
                stack.enter_context(locked.lock)
            # The last occupant may have left between lookup and lock
            if self.registry.find(room.room_id) is not room:
                raise RoomNotFound(room_id)
            room.check_seat()
            self.leave(sid)
            room.add_seat(sid, name)
            self.bindings.bind(sid, room.room_id, name)
            self.gateway.subscribe(sid, room.room_id)
            logger.info(f"[room-join] room={room.room_id} player={name}")
            self.gateway.broadcast_state(room)
        return room

    # ---- in-game ----

    def player_ready(self, sid: str) -> None:
        room = self._bound_room(sid)
        if room is None:
            return
        with room.lock:
            if room.mark_ready(sid):
                self.gateway.broadcast_state(room)

    def flip_card(self, sid: str, card_id) -> None:
        room = self._bound_room(sid)
        if room is None:
            return
        with room.lock:
            if not room.flip_card(sid, card_id):
                logger.debug(f"[flip-ignored] room={room.room_id} player={sid} card={card_id!r}")
                return
            self.gateway.broadcast_state(room)
            ticket = room.resolution_ticket()
            if ticket is not None and self.scheduler is not None:
                self.scheduler.schedule(ticket)

    def resolve(self, ticket: ResolutionTicket) -> bool:
        room = self.registry.find(ticket.room_id)
        if room is None:
            return False
        with room.lock:
            if not room.resolve(ticket):
                return False
            self.gateway.broadcast_state(room)
            outcome = room.outcome() if room.is_finished else None
        # The stats store is written outside the room lock
        if outcome is not None and self.on_game_finished is not None:
            self.on_game_finished(outcome)
        return True

    def restart_game(self, sid: str) -> None:
        room = self._bound_room(sid)
        if room is None:
            return
        with room.lock:
            if room.restart(sid):
                self.gateway.broadcast_state(room)

    # ---- lifecycle ----

    def leave(self, sid: str, unsubscribe: bool = True) -> bool:
        """Vacate the connection's seat, tearing the room down when it empties."""
        binding = self.bindings.pop(sid)
        if binding is None:
            return False
        room = self.registry.find(binding.room_id)
        if room is None:
            return False
        if unsubscribe:
            self.gateway.unsubscribe(sid, room.room_id)
        with room.lock:
            if room.remove_seat(sid) is None:
                return False
            if self.registry.discard_if_empty(room):
                return True
            self.gateway.notify(room.room_id, 'player_left', {'name': binding.display_name})
            self.gateway.broadcast_state(room)
        logger.info(f"[room-leave] room={room.room_id} player={binding.display_name}")
        return True
