from datetime import datetime, timezone

import pytest

from flashify.application.flashcard_service import FlashcardService
from flashify.domain.models import Deck, Flashcard
from flashify.infrastructure.adapters.storage import (
    InMemoryKeyValueStore,
    JsonCardRepository,
    JsonDeckRepository,
    JsonStatsRepository,
)

T0 = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return T0


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def service(store):
    """FlashcardService over a fresh in-memory store."""
    return FlashcardService(
        decks=JsonDeckRepository(store),
        cards=JsonCardRepository(store),
        stats=JsonStatsRepository(store),
    )


@pytest.fixture
def make_deck():
    def _make(deck_id="deck-bio", title="Bio", **kwargs) -> Deck:
        return Deck(id=deck_id, title=title, **kwargs)

    return _make


@pytest.fixture
def make_card():
    def _make(card_id, deck_id="deck-bio", question="Q", answer="A", **kwargs) -> Flashcard:
        kwargs.setdefault("next_review_date", T0)
        return Flashcard(id=card_id, question=question, answer=answer, deck_id=deck_id, **kwargs)

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config files
    monkeypatch.setenv("HOME", str(home))
    return home
