"""
In-memory progress through one study pass of a deck.

The session only tracks what the learner has rated so far; persisting each
rating is the caller's job (FlashcardService.review_card).
"""

from dataclasses import dataclass, field

from flashify.application.scheduler import parse_difficulty
from flashify.domain.models import Difficulty, Flashcard


@dataclass
class StudySession:
    cards: list[Flashcard]
    index: int = 0
    ratings: dict[str, Difficulty] = field(default_factory=dict)

    @property
    def current(self) -> Flashcard | None:
        if not self.cards:
            return None
        return self.cards[self.index]

    @property
    def reviewed_count(self) -> int:
        return len(self.ratings)

    @property
    def progress(self) -> float:
        """Percentage of distinct cards rated in this pass."""
        if not self.cards:
            return 0.0
        return self.reviewed_count / len(self.cards) * 100

    @property
    def is_complete(self) -> bool:
        return bool(self.cards) and self.reviewed_count == len(self.cards)

    def rate(self, difficulty: Difficulty | str) -> Flashcard | None:
        """
        Record a rating for the current card and move to the next one.

        Stays on the last card once the end is reached. Returns the card
        that was rated, or None for an empty session.
        """
        card = self.current
        if card is None:
            return None
        self.ratings[card.id] = parse_difficulty(difficulty)
        if self.index < len(self.cards) - 1:
            self.index += 1
        return card

    def rating_counts(self) -> dict[Difficulty, int]:
        counts = {d: 0 for d in Difficulty}
        for rating in self.ratings.values():
            counts[rating] += 1
        return counts

    def reset(self) -> None:
        self.index = 0
        self.ratings.clear()
