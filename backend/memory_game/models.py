from datetime import datetime, timezone

from memory_game import db


def _utcnow():
    return datetime.now(timezone.utc)


class PlayerStats(db.Model):
    __tablename__ = 'player_stats'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    games_played = db.Column(db.Integer, default=0, nullable=False)
    games_won = db.Column(db.Integer, default=0, nullable=False)
    games_lost = db.Column(db.Integer, default=0, nullable=False)
    total_pairs_found = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    def record(self, won: bool, lost: bool, pairs_found: int) -> None:
        # Column defaults only apply on flush, so a fresh row still holds None here
        self.games_played = (self.games_played or 0) + 1
        self.games_won = (self.games_won or 0) + (1 if won else 0)
        self.games_lost = (self.games_lost or 0) + (1 if lost else 0)
        self.total_pairs_found = (self.total_pairs_found or 0) + pairs_found

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'games_played': self.games_played,
            'games_won': self.games_won,
            'games_lost': self.games_lost,
            'total_pairs_found': self.total_pairs_found,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
