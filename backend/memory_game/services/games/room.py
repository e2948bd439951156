import logging
import random
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .deck import Card, build_deck
from .errors import GameAlreadyStarted, RoomFull

logger = logging.getLogger(__name__)


class RoomStatus(str, Enum):
    WAITING = 'waiting'
    PLAYING = 'playing'
    FINISHED = 'finished'


@dataclass
class Seat:
    id: str
    name: str
    score: int = 0
    is_ready: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
            'is_ready': self.is_ready,
        }


@dataclass(frozen=True)
class GameOutcome:
    """Final result of a finished game, detached from the live room."""

    room_id: str
    winner_id: Optional[str]
    seats: Tuple[Seat, ...]


@dataclass(frozen=True)
class ResolutionTicket:
    """Everything a delayed resolution needs to check it is still current."""

    room_id: str
    generation: int
    player_id: str
    card_ids: Tuple[int, int]


class Room:
    """Authoritative state for one two-player memory game.

    Every method mutates in place and reports whether anything changed;
    callers must hold ``lock`` around a mutation and the broadcast that
    follows it so observers see transitions in the order they happened.
    """

    MAX_SEATS = 2

    def __init__(self, room_id: str, rng: Optional[random.Random] = None):
        self.room_id = room_id
        self.lock = threading.RLock()
        self._rng = rng
        self.cards: List[Card] = build_deck(rng=rng)
        self.seats: List[Seat] = []
        # Turn order is kept apart from seat order even though both follow joins today
        self.turn_order: List[str] = []
        self.current_player_id: Optional[str] = None
        self.flipped_cards: List[int] = []
        self.status = RoomStatus.WAITING
        self.winner_id: Optional[str] = None
        # Bumped whenever an in-flight resolution must be invalidated
        self.generation = 0

    # ---- queries ----

    def seat(self, player_id: str) -> Optional[Seat]:
        for s in self.seats:
            if s.id == player_id:
                return s
        return None

    @property
    def is_empty(self) -> bool:
        return not self.seats

    @property
    def is_finished(self) -> bool:
        return self.status == RoomStatus.FINISHED

    def card(self, card_id) -> Optional[Card]:
        if isinstance(card_id, bool) or not isinstance(card_id, int):
            return None
        if 0 <= card_id < len(self.cards):
            return self.cards[card_id]
        return None

    def resolution_ticket(self) -> Optional[ResolutionTicket]:
        if len(self.flipped_cards) != 2 or self.current_player_id is None:
            return None
        return ResolutionTicket(
            room_id=self.room_id,
            generation=self.generation,
            player_id=self.current_player_id,
            card_ids=(self.flipped_cards[0], self.flipped_cards[1]),
        )

    # ---- seating ----

    def check_seat(self) -> None:
        """Raise the refusal a join would get right now, without seating anyone."""
        if len(self.seats) >= self.MAX_SEATS:
            raise RoomFull(self.room_id)
        if self.status != RoomStatus.WAITING:
            raise GameAlreadyStarted(self.room_id)

    def add_seat(self, player_id: str, name: str) -> Seat:
        self.check_seat()
        seat = Seat(id=player_id, name=name)
        self.seats.append(seat)
        self.turn_order.append(player_id)
        return seat

    def remove_seat(self, player_id: str) -> Optional[Seat]:
        """Vacate a seat and demote whatever is left back to the lobby."""
        seat = self.seat(player_id)
        if seat is None:
            return None
        self.seats.remove(seat)
        self.turn_order = [pid for pid in self.turn_order if pid != player_id]
        self.generation += 1
        if self.seats:
            self.status = RoomStatus.WAITING
            self.current_player_id = None
            self.winner_id = None
            for s in self.seats:
                s.is_ready = False
            self._hide_pending()
        return seat

    # ---- transitions ----

    def mark_ready(self, player_id: str) -> bool:
        seat = self.seat(player_id)
        if seat is None:
            return False
        seat.is_ready = True
        if (
            self.status == RoomStatus.WAITING
            and len(self.seats) == self.MAX_SEATS
            and all(s.is_ready for s in self.seats)
        ):
            self.status = RoomStatus.PLAYING
            self.current_player_id = self.turn_order[0]
            logger.info(f"[game-start] room={self.room_id} first={self.current_player_id}")
        return True

    def flip_card(self, player_id: str, card_id) -> bool:
        if self.status != RoomStatus.PLAYING:
            return False
        if self.current_player_id != player_id:
            return False
        if len(self.flipped_cards) >= 2:
            return False
        card = self.card(card_id)
        if card is None or card.is_flipped or card.is_matched:
            return False
        card.is_flipped = True
        self.flipped_cards.append(card.id)
        return True

    def resolve(self, ticket: ResolutionTicket) -> bool:
        """Judge the pair captured in ``ticket``.

        Returns False without touching anything when the room has moved on
        since the ticket was issued (restart, departure, or a different pair).
        """
        if (
            ticket.room_id != self.room_id
            or ticket.generation != self.generation
            or self.status != RoomStatus.PLAYING
            or self.current_player_id != ticket.player_id
            or tuple(self.flipped_cards) != ticket.card_ids
        ):
            return False

        first, second = (self.cards[cid] for cid in ticket.card_ids)
        if first.symbol == second.symbol:
            first.is_matched = second.is_matched = True
            scorer = self.seat(ticket.player_id)
            if scorer is not None:
                scorer.score += 1
            logger.info(f"[pair-found] room={self.room_id} player={ticket.player_id} symbol={first.symbol}")
            if all(c.is_matched for c in self.cards):
                self._finish()
        else:
            first.is_flipped = second.is_flipped = False
            self._advance_turn()
        self.flipped_cards = []
        return True

    def restart(self, player_id: str) -> bool:
        if self.seat(player_id) is None:
            return False
        self.cards = build_deck(rng=self._rng)
        self.flipped_cards = []
        self.status = RoomStatus.WAITING
        self.current_player_id = None
        self.winner_id = None
        self.generation += 1
        for s in self.seats:
            s.score = 0
            s.is_ready = False
        logger.info(f"[game-restart] room={self.room_id} by={player_id}")
        return True

    # ---- helpers ----

    def _advance_turn(self) -> None:
        idx = self.turn_order.index(self.current_player_id)
        self.current_player_id = self.turn_order[(idx + 1) % len(self.turn_order)]
        logger.info(f"[turn-pass] room={self.room_id} next={self.current_player_id}")

    def _finish(self) -> None:
        self.status = RoomStatus.FINISHED
        first, second = self.seats
        if first.score == second.score:
            self.winner_id = None
            logger.info(f"[game-over] room={self.room_id} tie {first.score}-{second.score}")
        else:
            winner = first if first.score > second.score else second
            self.winner_id = winner.id
            logger.info(f"[game-over] room={self.room_id} winner={winner.name} {first.score}-{second.score}")

    def _hide_pending(self) -> None:
        for cid in self.flipped_cards:
            card = self.cards[cid]
            if not card.is_matched:
                card.is_flipped = False
        self.flipped_cards = []

    def outcome(self) -> GameOutcome:
        return GameOutcome(
            room_id=self.room_id,
            winner_id=self.winner_id,
            seats=tuple(Seat(s.id, s.name, s.score, s.is_ready) for s in self.seats),
        )

    def info(self):
        return {
            'room_id': self.room_id,
            'player_count': len(self.seats),
            'max_players': self.MAX_SEATS,
            'status': self.status.value,
        }

    def to_dict(self):
        return {
            'room_id': self.room_id,
            'cards': [c.to_dict() for c in self.cards],
            'players': [s.to_dict() for s in self.seats],
            'turn_order': list(self.turn_order),
            'current_player_id': self.current_player_id,
            'flipped_cards': list(self.flipped_cards),
            'status': self.status.value,
            'winner_id': self.winner_id,
        }
