"""
JSON wire format for the persisted collections.

Field names are camelCase and timestamps are ISO-8601 UTC strings with a
trailing 'Z', matching documents written by the browser version of the app.
"""

from typing import Any

from flashify.application.utils.time import parse_iso, to_iso
from flashify.domain.errors import StorageError
from flashify.domain.models import Deck, Difficulty, Flashcard
from flashify.domain.stats.models import Stats


def deck_to_dict(deck: Deck) -> dict[str, Any]:
    return {
        "id": deck.id,
        "title": deck.title,
        "description": deck.description,
        "tags": list(deck.tags),
        "createdAt": to_iso(deck.created_at),
        "updatedAt": to_iso(deck.updated_at),
    }


def deck_from_dict(data: dict[str, Any]) -> Deck:
    try:
        return Deck(
            id=data["id"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            tags=list(data.get("tags") or []),
            created_at=parse_iso(data["createdAt"]),
            updated_at=parse_iso(data["updatedAt"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise StorageError(f"Malformed deck record: {e}") from e


def card_to_dict(card: Flashcard) -> dict[str, Any]:
    return {
        "id": card.id,
        "question": card.question,
        "answer": card.answer,
        "deckId": card.deck_id,
        "nextReviewDate": to_iso(card.next_review_date),
        "difficulty": card.difficulty.value if card.difficulty else None,
    }


def card_from_dict(data: dict[str, Any]) -> Flashcard:
    try:
        difficulty = data.get("difficulty")
        return Flashcard(
            id=data["id"],
            question=data.get("question", ""),
            answer=data.get("answer", ""),
            deck_id=data.get("deckId") or "",
            next_review_date=parse_iso(data["nextReviewDate"]),
            difficulty=Difficulty(difficulty) if difficulty else None,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise StorageError(f"Malformed flashcard record: {e}") from e


def stats_to_dict(stats: Stats) -> dict[str, Any]:
    return {
        "streak": stats.streak,
        "lastStudyDate": to_iso(stats.last_study_date) if stats.last_study_date else "",
        "cardsReviewed": stats.cards_reviewed,
        "cardsCreated": stats.cards_created,
        "studyDays": dict(stats.study_days),
    }


def stats_from_dict(data: dict[str, Any]) -> Stats:
    try:
        last = data.get("lastStudyDate")
        return Stats(
            streak=int(data.get("streak", 0)),
            last_study_date=parse_iso(last) if last else None,
            cards_reviewed=int(data.get("cardsReviewed", 0)),
            cards_created=int(data.get("cardsCreated", 0)),
            study_days={str(k): int(v) for k, v in (data.get("studyDays") or {}).items()},
        )
    except (AttributeError, TypeError, ValueError) as e:
        raise StorageError(f"Malformed stats record: {e}") from e
