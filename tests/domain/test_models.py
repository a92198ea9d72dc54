from datetime import timezone

from flashify.domain.errors import (
    CardNotFound,
    DeckNotFound,
    GenerationError,
    GenerationInputError,
    InvalidDifficulty,
    NoFlashcardsError,
    ValidationError,
)
from flashify.domain.models import Deck, Difficulty, Flashcard
from flashify.domain.stats.models import Stats


def test_new_flashcard_defaults():
    card = Flashcard(id="c1", question="Q", answer="A")
    assert card.deck_id == ""
    assert card.difficulty is None
    assert not card.is_reviewed
    assert card.next_review_date.tzinfo == timezone.utc


def test_difficulty_values():
    assert [d.value for d in Difficulty] == ["easy", "medium", "hard"]
    assert Difficulty("hard") is Difficulty.HARD


def test_deck_tags_are_not_shared():
    a, b = Deck(id="a", title="A"), Deck(id="b", title="B")
    a.tags.append("x")
    assert b.tags == []


def test_stats_zero_state():
    stats = Stats()
    assert (stats.streak, stats.cards_reviewed, stats.cards_created) == (0, 0, 0)
    assert stats.last_study_date is None
    assert stats.study_days == {}


def test_error_taxonomy():
    assert issubclass(InvalidDifficulty, ValueError)
    assert issubclass(CardNotFound, LookupError)
    assert issubclass(DeckNotFound, LookupError)
    assert issubclass(NoFlashcardsError, ValidationError)
    assert issubclass(GenerationInputError, GenerationError)
    assert "meh" in str(InvalidDifficulty("meh"))
    assert CardNotFound("c9").card_id == "c9"
