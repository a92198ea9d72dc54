"""
Flashcard service: the single in-process authority over decks, cards and stats.

Every read and every read-modify-write runs under one re-entrant lock, so
rapid UI calls (double-clicked ratings, a generation callback landing during
a manual edit) can never interleave. Repositories flush the full collection
after each mutation.
"""

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime

from flashify.application.id_service import normalize_tags
from flashify.application.scheduler import compute_next_review_date, due_cards, parse_difficulty
from flashify.application.stats.aggregator import StatsAggregator
from flashify.application.utils.time import as_utc, utc_now
from flashify.domain.errors import (
    DeckValidationError,
    FlashcardValidationError,
    NoFlashcardsError,
)
from flashify.domain.models import Deck, Difficulty, Flashcard
from flashify.domain.ports import CardRepository, DeckRepository
from flashify.domain.stats.models import Stats
from flashify.domain.stats.ports import StatsRepository

logger = logging.getLogger(__name__)


def _require_deck_id(deck: Deck) -> None:
    if not deck.id.strip():
        raise DeckValidationError("Deck id must not be blank.")


@dataclass
class SaveResult:
    """Outcome of saving a deck together with its flashcards."""

    deck: Deck
    flashcards: list[Flashcard]
    created: bool  # False when an existing deck was edited
    new_card_count: int


class FlashcardService:
    """
    Application service for decks, flashcards, reviews and stats counters.

    Follows Dependency Inversion: depends on repository ports,
    not concrete storage adapters.
    """

    def __init__(
        self,
        decks: DeckRepository,
        cards: CardRepository,
        stats: StatsRepository,
        aggregator: StatsAggregator | None = None,
    ):
        self._decks = decks
        self._cards = cards
        self._stats = stats
        self._agg = aggregator or StatsAggregator()
        self._lock = threading.RLock()

    @property
    def aggregator(self) -> StatsAggregator:
        return self._agg

    # ------------------------------------------------------------------
    # Decks
    # ------------------------------------------------------------------

    def get_decks(self) -> list[Deck]:
        with self._lock:
            return self._decks.all()

    def get_deck_by_id(self, deck_id: str) -> Deck | None:
        with self._lock:
            return self._decks.get(deck_id)

    def upsert_deck(self, deck: Deck, now: datetime | None = None) -> Deck:
        """
        Insert or update a deck.

        New decks get created_at == updated_at == now. Existing decks keep
        their original created_at and get updated_at bumped to now. Tags are
        trimmed and deduplicated.

        Raises:
            DeckValidationError: if the deck id is blank.
        """
        _require_deck_id(deck)
        now = as_utc(now or utc_now())
        tags = normalize_tags(deck.tags)
        with self._lock:
            existing = self._decks.get(deck.id)
            if existing is not None:
                stored = replace(
                    deck,
                    tags=tags,
                    created_at=existing.created_at,
                    updated_at=max(now, existing.created_at),
                )
            else:
                stored = replace(deck, tags=tags, created_at=now, updated_at=now)
            self._decks.upsert(stored)
        logger.info(f"{'Updated' if existing else 'Created'} deck {stored.id} ({stored.title!r})")
        return stored

    def delete_deck(self, deck_id: str) -> bool:
        """
        Delete a deck and every flashcard it owns as one operation.

        Returns False if the deck did not exist (nothing is changed).
        """
        with self._lock:
            if self._decks.get(deck_id) is None:
                return False
            removed = self._cards.delete_for_deck(deck_id)
            self._decks.delete(deck_id)
        logger.info(f"Deleted deck {deck_id} and {removed} flashcard(s)")
        return True

    # ------------------------------------------------------------------
    # Flashcards
    # ------------------------------------------------------------------

    def get_flashcards(self) -> list[Flashcard]:
        with self._lock:
            return self._cards.all()

    def get_flashcards_for_deck(self, deck_id: str) -> list[Flashcard]:
        with self._lock:
            return self._cards.for_deck(deck_id)

    def get_due_flashcards_for_deck(
        self, deck_id: str, now: datetime | None = None
    ) -> list[Flashcard]:
        now = as_utc(now or utc_now())
        with self._lock:
            return due_cards(self._cards.for_deck(deck_id), now)

    def upsert_flashcards(self, cards: list[Flashcard]) -> list[Flashcard]:
        """
        Upsert cards by id and count the newly inserted ones as created.

        Raises:
            FlashcardValidationError: if a card does not belong to an existing deck.
        """
        with self._lock:
            self._upsert_flashcards_locked(cards)
        return cards

    def _upsert_flashcards_locked(self, cards: list[Flashcard]) -> int:
        live = {d.id for d in self._decks.all()}
        for card in cards:
            if not card.deck_id:
                raise FlashcardValidationError(f"Flashcard {card.id} is not assigned to a deck")
            if card.deck_id not in live:
                raise FlashcardValidationError(
                    f"Flashcard {card.id} references unknown deck {card.deck_id}"
                )

        new_ids = self._cards.upsert_many(cards)
        if new_ids:
            stats = self._agg.record_cards_created(self._stats.get(), len(new_ids))
            self._stats.save(stats)
        logger.debug(f"Upserted {len(cards)} flashcard(s), {len(new_ids)} new")
        return len(new_ids)

    def save_deck(
        self, deck: Deck, flashcards: list[Flashcard], now: datetime | None = None
    ) -> SaveResult:
        """
        Save a deck and its flashcards (the create / edit deck flow).

        Cards missing a question or an answer are dropped. Every kept card is
        assigned to the deck.

        Raises:
            DeckValidationError: if the id or the title is blank.
            NoFlashcardsError: if no card has both a question and an answer.
        """
        _require_deck_id(deck)
        if not deck.title.strip():
            raise DeckValidationError("Please enter a title for your deck.")

        valid = [c for c in flashcards if c.question.strip() and c.answer.strip()]
        if not valid:
            raise NoFlashcardsError()

        with self._lock:
            created = self._decks.get(deck.id) is None
            stored = self.upsert_deck(deck, now=now)
            assigned = [replace(c, deck_id=stored.id) for c in valid]
            new_count = self._upsert_flashcards_locked(assigned)

        dropped = len(flashcards) - len(valid)
        if dropped:
            logger.info(f"Skipped {dropped} incomplete flashcard(s) for deck {stored.id}")
        return SaveResult(deck=stored, flashcards=assigned, created=created, new_card_count=new_count)

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    def review_card(
        self,
        card: Flashcard | str,
        difficulty: Difficulty | str,
        now: datetime | None = None,
    ) -> Flashcard | None:
        """
        Rate a card, reschedule it and record the review in stats.

        A card id that is not in the store is a no-op: nothing is written,
        stats are untouched, and the card passed in is returned unchanged
        (None if only an id was given).

        Raises:
            InvalidDifficulty: for ratings other than easy, medium or hard.
        """
        rating = parse_difficulty(difficulty)
        now = as_utc(now or utc_now())
        card_id = card if isinstance(card, str) else card.id

        with self._lock:
            stored = self._cards.get(card_id)
            if stored is None:
                logger.warning(f"Review ignored: flashcard {card_id} not found")
                return None if isinstance(card, str) else card

            updated = replace(
                stored,
                difficulty=rating,
                next_review_date=compute_next_review_date(now, rating),
            )
            self._cards.upsert_many([updated])
            stats = self._agg.record_review_event(self._stats.get(), now)
            self._stats.save(stats)

        logger.info(
            f"Reviewed {card_id} as {rating.value}; next review {updated.next_review_date.isoformat()}"
        )
        return updated

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self) -> Stats:
        with self._lock:
            return self._stats.get()

    def snapshot(self) -> tuple[list[Deck], list[Flashcard], Stats]:
        """Consistent view of all three collections."""
        with self._lock:
            return self._decks.all(), self._cards.all(), self._stats.get()
