"""
Review scheduler: fixed three-tier interval policy.

easy -> +3 days, medium -> +1 day, hard -> +4 hours. No interval growth,
no ease factors, no randomness.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from flashify.application.utils.time import as_utc
from flashify.domain.constants import EASY_INTERVAL, HARD_INTERVAL, MEDIUM_INTERVAL
from flashify.domain.errors import InvalidDifficulty
from flashify.domain.models import Difficulty, Flashcard

INTERVALS: dict[Difficulty, timedelta] = {
    Difficulty.EASY: EASY_INTERVAL,
    Difficulty.MEDIUM: MEDIUM_INTERVAL,
    Difficulty.HARD: HARD_INTERVAL,
}


def parse_difficulty(value: Difficulty | str) -> Difficulty:
    """Coerce a rating to Difficulty, raising InvalidDifficulty for anything else."""
    if isinstance(value, Difficulty):
        return value
    if isinstance(value, str):
        try:
            return Difficulty(value.strip().lower())
        except ValueError:
            pass
    raise InvalidDifficulty(value)


def compute_next_review_date(now: datetime, difficulty: Difficulty | str) -> datetime:
    """
    Next time a card rated `difficulty` at `now` becomes due.

    Raises:
        InvalidDifficulty: if the rating is not easy, medium or hard.
    """
    return as_utc(now) + INTERVALS[parse_difficulty(difficulty)]


def is_due(card: Flashcard, now: datetime) -> bool:
    return as_utc(card.next_review_date) <= as_utc(now)


def due_cards(cards: Iterable[Flashcard], now: datetime) -> list[Flashcard]:
    """Cards that are due at `now`, in the order given."""
    return [card for card in cards if is_due(card, now)]
