"""Service for minting stable ids and fresh deck/flashcard records."""

from datetime import datetime

from ulid import ULID

from flashify.application.utils.time import as_utc, utc_now
from flashify.domain.constants import CARD_ID_PREFIX, DECK_ID_PREFIX
from flashify.domain.models import Deck, Flashcard


def generate_id(prefix: str) -> str:
    """Generate a sortable unique id using ULID."""
    return f"{prefix}_{ULID()}"


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Strip, drop blanks and duplicates, keep first-seen order."""
    seen: list[str] = []
    for tag in tags or []:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def new_deck(
    title: str,
    description: str = "",
    tags: list[str] | None = None,
    now: datetime | None = None,
) -> Deck:
    now = as_utc(now or utc_now())
    return Deck(
        id=generate_id(DECK_ID_PREFIX),
        title=title,
        description=description,
        tags=normalize_tags(tags),
        created_at=now,
        updated_at=now,
    )


def new_flashcard(
    question: str,
    answer: str,
    deck_id: str = "",
    now: datetime | None = None,
) -> Flashcard:
    """A never-reviewed card that is due immediately."""
    return Flashcard(
        id=generate_id(CARD_ID_PREFIX),
        question=question,
        answer=answer,
        deck_id=deck_id,
        next_review_date=as_utc(now or utc_now()),
        difficulty=None,
    )
