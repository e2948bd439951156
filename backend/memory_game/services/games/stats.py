import logging

from memory_game import db
from memory_game.models import PlayerStats

logger = logging.getLogger(__name__)


def record_game_result(outcome) -> None:
    """Write one finished game to the statistics store.

    ``outcome`` is a GameOutcome snapshot. Each seat gets a played game,
    a win or a loss (neither on a tie) and the pairs it found. Store failures
    are logged and never reach the room.
    """
    try:
        for seat in outcome.seats:
            stats = PlayerStats.query.filter_by(username=seat.name).first()
            if stats is None:
                stats = PlayerStats(username=seat.name)
            won = outcome.winner_id is not None and outcome.winner_id == seat.id
            lost = outcome.winner_id is not None and outcome.winner_id != seat.id
            stats.record(won=won, lost=lost, pairs_found=seat.score)
            db.session.add(stats)
        db.session.commit()
        logger.info(f"[stats-saved] room={outcome.room_id} players={[s.name for s in outcome.seats]}")
    except Exception:
        db.session.rollback()
        logger.exception(f"[stats-failed] room={outcome.room_id}")
