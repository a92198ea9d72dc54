from flashify.application.id_service import generate_id, new_deck, new_flashcard, normalize_tags


def test_generate_id_is_unique_and_prefixed():
    ids = {generate_id("card") for _ in range(100)}
    assert len(ids) == 100
    assert all(i.startswith("card_") for i in ids)


def test_new_flashcard_is_unreviewed_and_due_now(now):
    card = new_flashcard("What is ATP?", "Energy currency", now=now)
    assert card.id.startswith("card_")
    assert card.deck_id == ""
    assert card.difficulty is None
    assert card.next_review_date == now


def test_new_deck_timestamps(now):
    deck = new_deck("Bio", tags=["a", "a", " b "], now=now)
    assert deck.id.startswith("deck_")
    assert deck.created_at == deck.updated_at == now
    assert deck.tags == ["a", "b"]


def test_normalize_tags_handles_none():
    assert normalize_tags(None) == []
