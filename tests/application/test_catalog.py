from datetime import datetime, timezone

import pytest

from flashify.application.catalog import all_tags, filter_decks, sort_decks
from flashify.domain.models import Deck


@pytest.fixture
def decks():
    def d(i, title, description, tags, day):
        ts = datetime(2024, 1, day, tzinfo=timezone.utc)
        return Deck(id=i, title=title, description=description, tags=tags, created_at=ts, updated_at=ts)

    return [
        d("1", "biology", "Cells and genes", ["science", "bio"], 3),
        d("2", "Algebra", "Linear equations", ["math"], 5),
        d("3", "Chemistry", "Bonds and CELL potentials", ["science"], 1),
    ]


def test_search_matches_title_or_description_case_insensitive(decks):
    assert [d.id for d in filter_decks(decks, search="cell")] == ["1", "3"]
    assert [d.id for d in filter_decks(decks, search="ALGEBRA")] == ["2"]


def test_empty_search_matches_everything(decks):
    assert len(filter_decks(decks, search="  ")) == 3


def test_tag_filter_is_exact(decks):
    assert [d.id for d in filter_decks(decks, tag="science")] == ["1", "3"]
    assert filter_decks(decks, tag="sci") == []


def test_search_and_tag_combine(decks):
    assert [d.id for d in filter_decks(decks, search="bonds", tag="science")] == ["3"]


def test_sort_recent_first(decks):
    assert [d.id for d in sort_decks(decks, "recent")] == ["2", "1", "3"]


def test_sort_by_title(decks):
    assert [d.title for d in sort_decks(decks, "title")] == ["Algebra", "biology", "Chemistry"]


def test_sort_unknown_key(decks):
    with pytest.raises(ValueError):
        sort_decks(decks, "size")


def test_all_tags_first_seen_order(decks):
    assert all_tags(decks) == ["science", "bio", "math"]
