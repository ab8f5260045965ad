"""In-memory quote store."""

import random
from typing import Sequence, Tuple

from quotesite.schemas import Quote

QUOTES: Tuple[Quote, ...] = (
    Quote(id=1, text="The only limit to our realization of tomorrow is our doubts of today.", author="Franklin D. Roosevelt"),
    Quote(id=2, text="In the middle of every difficulty lies opportunity.", author="Albert Einstein"),
    Quote(id=3, text="What you get by achieving your goals is not as important as what you become by achieving your goals.", author="Zig Ziglar"),
    Quote(id=4, text="Life is 10% what happens to us and 90% how we react to it.", author="Charles R. Swindoll"),
    Quote(id=5, text="The best way to predict the future is to invent it.", author="Alan Kay"),
    Quote(id=6, text="You miss 100% of the shots you don't take.", author="Wayne Gretzky"),
    Quote(id=7, text="Whether you think you can or you think you can't, you're right.", author="Henry Ford"),
    Quote(id=8, text="Don't watch the clock; do what it does. Keep going.", author="Sam Levenson"),
    Quote(id=9, text="Keep your eyes on the stars, and your feet on the ground.", author="Theodore Roosevelt"),
    Quote(id=10, text="The harder I work, the luckier I get.", author="Samuel Goldwyn"),
)


class QuoteStore:
    """Read-only collection of quotes. Never empty."""

    def __init__(self, quotes: Sequence[Quote] = QUOTES):
        if not quotes:
            raise ValueError("QuoteStore needs at least one quote")
        self._quotes = tuple(quotes)

    def __len__(self) -> int:
        return len(self._quotes)

    def pick_random(self) -> Quote:
        """Return a quote drawn uniformly at random."""
        return random.choice(self._quotes)
