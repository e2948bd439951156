import random
from dataclasses import dataclass
from typing import List, Optional

CARD_SYMBOLS = [
    '🦊', '🐼', '🦁', '🐸', '🦋', '🌸', '🍄', '🌺',
    '🎮', '🎲', '⭐', '🌙', '🔥', '💎', '🎯', '🎪',
]

PAIR_COUNT = 8


@dataclass
class Card:
    id: int
    symbol: str
    is_flipped: bool = False
    is_matched: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'symbol': self.symbol,
            'is_flipped': self.is_flipped,
            'is_matched': self.is_matched,
        }


def build_deck(symbol_count: int = PAIR_COUNT, rng: Optional[random.Random] = None) -> List[Card]:
    """Return a freshly shuffled board holding two cards per symbol.

    Fisher-Yates over the doubled symbol list, then positions are numbered
    0..n-1 so a card's id is its index on the board.
    """
    rng = rng or random
    symbols = CARD_SYMBOLS[:symbol_count]
    pairs = symbols + symbols
    for i in range(len(pairs) - 1, 0, -1):
        j = rng.randint(0, i)
        pairs[i], pairs[j] = pairs[j], pairs[i]
    return [Card(id=index, symbol=symbol) for index, symbol in enumerate(pairs)]
