"""
Domain models for decks and flashcards.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Difficulty(str, Enum):
    """Recall rating given by the learner after seeing the answer."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Flashcard:
    """
    A question/answer pair with its scheduling state.

    Attributes:
        id: Globally unique, never changes after creation.
        question: Prompt side of the card.
        answer: Answer side of the card.
        deck_id: Owning deck. Empty only until the card is added to a deck.
        next_review_date: Earliest time the card is due again (UTC).
        difficulty: Last rating, or None if the card was never reviewed.
    """

    id: str
    question: str
    answer: str
    deck_id: str = ""
    next_review_date: datetime = field(default_factory=_utc_now)
    difficulty: Difficulty | None = None

    @property
    def is_reviewed(self) -> bool:
        return self.difficulty is not None


@dataclass
class Deck:
    """
    A named, tagged collection of flashcards.

    created_at is set once on first save; updated_at moves on every save.
    """

    id: str
    title: str
    description: str = ""
    tags: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)
