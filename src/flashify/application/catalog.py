"""Deck search, tag filtering and ordering for the deck library view."""

from collections.abc import Iterable
from typing import Literal

from flashify.application.utils.time import as_utc
from flashify.domain.models import Deck

SortKey = Literal["recent", "title"]


def filter_decks(decks: Iterable[Deck], search: str = "", tag: str | None = None) -> list[Deck]:
    """
    Decks whose title or description contains `search` (case-insensitive)
    and, when `tag` is given, that carry exactly that tag.
    """
    needle = search.strip().lower()
    result = []
    for deck in decks:
        matches_search = (
            not needle or needle in deck.title.lower() or needle in deck.description.lower()
        )
        matches_tag = tag is None or tag in deck.tags
        if matches_search and matches_tag:
            result.append(deck)
    return result


def sort_decks(decks: Iterable[Deck], by: SortKey = "recent") -> list[Deck]:
    if by == "recent":
        return sorted(decks, key=lambda d: as_utc(d.updated_at), reverse=True)
    if by == "title":
        return sorted(decks, key=lambda d: d.title.casefold())
    raise ValueError(f"Unknown sort key: {by!r}")


def all_tags(decks: Iterable[Deck]) -> list[str]:
    tags: list[str] = []
    for deck in decks:
        for tag in deck.tags:
            if tag not in tags:
                tags.append(tag)
    return tags
