"""
JSON-backed repositories.

Each repository mirrors one JSON document from a KeyValueStore in memory,
loads it on first use, and writes the whole document back after every
mutation. The mirror only changes after the store accepted the write.
Reads decode fresh objects, so callers never hold references into
the mirror. Serialization of concurrent callers is the FlashcardService's job.
"""

import json
import logging
from typing import Any

from flashify.domain.constants import (
    DECKS_STORAGE_KEY,
    FLASHCARDS_STORAGE_KEY,
    STATS_STORAGE_KEY,
)
from flashify.domain.errors import StorageError
from flashify.domain.models import Deck, Flashcard
from flashify.domain.ports import CardRepository, DeckRepository, KeyValueStore
from flashify.domain.stats.models import Stats
from flashify.domain.stats.ports import StatsRepository

from .codec import (
    card_from_dict,
    card_to_dict,
    deck_from_dict,
    deck_to_dict,
    stats_from_dict,
    stats_to_dict,
)

logger = logging.getLogger(__name__)


class _JsonArrayDocument:
    """In-memory mirror of a JSON array of records keyed by 'id'."""

    def __init__(self, store: KeyValueStore, key: str):
        self._store = store
        self._key = key
        self._records: list[dict[str, Any]] | None = None

    @property
    def records(self) -> list[dict[str, Any]]:
        if self._records is None:
            raw = self._store.get(self._key)
            if raw is None:
                self._records = []
            else:
                try:
                    data = json.loads(raw)
                except json.JSONDecodeError as e:
                    raise StorageError(f"Could not decode {self._key}: {e}") from e
                if not isinstance(data, list):
                    raise StorageError(f"Expected a JSON array under {self._key}")
                self._records = data
            logger.debug(f"Loaded {len(self._records)} record(s) from {self._key}")
        return self._records

    def index_of(self, record_id: str) -> int:
        for i, record in enumerate(self.records):
            if record.get("id") == record_id:
                return i
        return -1

    def commit(self, records: list[dict[str, Any]]) -> None:
        """Write records to the store, then adopt them as the mirror."""
        self._store.set(self._key, json.dumps(records))
        self._records = records


class JsonDeckRepository(DeckRepository):
    def __init__(self, store: KeyValueStore, key: str = DECKS_STORAGE_KEY):
        self._doc = _JsonArrayDocument(store, key)

    def all(self) -> list[Deck]:
        return [deck_from_dict(r) for r in self._doc.records]

    def get(self, deck_id: str) -> Deck | None:
        i = self._doc.index_of(deck_id)
        return deck_from_dict(self._doc.records[i]) if i >= 0 else None

    def upsert(self, deck: Deck) -> None:
        records = list(self._doc.records)
        record = deck_to_dict(deck)
        i = self._doc.index_of(deck.id)
        if i >= 0:
            records[i] = record
        else:
            records.append(record)
        self._doc.commit(records)

    def delete(self, deck_id: str) -> bool:
        i = self._doc.index_of(deck_id)
        if i < 0:
            return False
        records = list(self._doc.records)
        del records[i]
        self._doc.commit(records)
        return True


class JsonCardRepository(CardRepository):
    def __init__(self, store: KeyValueStore, key: str = FLASHCARDS_STORAGE_KEY):
        self._doc = _JsonArrayDocument(store, key)

    def all(self) -> list[Flashcard]:
        return [card_from_dict(r) for r in self._doc.records]

    def get(self, card_id: str) -> Flashcard | None:
        i = self._doc.index_of(card_id)
        return card_from_dict(self._doc.records[i]) if i >= 0 else None

    def for_deck(self, deck_id: str) -> list[Flashcard]:
        return [card_from_dict(r) for r in self._doc.records if r.get("deckId") == deck_id]

    def upsert_many(self, cards: list[Flashcard]) -> list[str]:
        records = list(self._doc.records)
        positions = {r.get("id"): i for i, r in enumerate(records)}
        new_ids = []
        for card in cards:
            record = card_to_dict(card)
            i = positions.get(card.id)
            if i is not None:
                records[i] = record
            else:
                positions[card.id] = len(records)
                records.append(record)
                new_ids.append(card.id)
        self._doc.commit(records)
        return new_ids

    def delete_for_deck(self, deck_id: str) -> int:
        kept = [r for r in self._doc.records if r.get("deckId") != deck_id]
        removed = len(self._doc.records) - len(kept)
        if removed:
            self._doc.commit(kept)
        return removed


class JsonStatsRepository(StatsRepository):
    def __init__(self, store: KeyValueStore, key: str = STATS_STORAGE_KEY):
        self._store = store
        self._key = key

    def get(self) -> Stats:
        raw = self._store.get(self._key)
        if raw is None:
            return Stats()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Could not decode {self._key}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Expected a JSON object under {self._key}")
        return stats_from_dict(data)

    def save(self, stats: Stats) -> None:
        self._store.set(self._key, json.dumps(stats_to_dict(stats)))
