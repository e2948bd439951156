import logging
from typing import Callable

from .room import ResolutionTicket

logger = logging.getLogger(__name__)


class ResolutionScheduler:
    """Run a pair resolution once, ``delay`` seconds after the second flip.

    There is no cancellation: the task always fires and the resolve callback
    decides whether the ticket still applies.
    """

    def __init__(self, app, socketio, on_fire: Callable[[ResolutionTicket], bool], delay: float = 1.0):
        self.app = app
        self.socketio = socketio
        self.on_fire = on_fire
        self.delay = delay

    def schedule(self, ticket: ResolutionTicket) -> None:
        logger.info(
            f"[timer-set] room={ticket.room_id} generation={ticket.generation} cards={list(ticket.card_ids)} delay={self.delay}s"
        )
        if self.app.config.get('TESTING') and not self.app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
            self._worker(ticket)
        else:
            self.socketio.start_background_task(self._worker, ticket)

    def _worker(self, ticket: ResolutionTicket) -> None:
        if self.delay > 0:
            self.socketio.sleep(self.delay)
        with self.app.app_context():
            applied = self.on_fire(ticket)
        if not applied:
            logger.info(f"[timer-abort] room={ticket.room_id} generation={ticket.generation} stale ticket")
