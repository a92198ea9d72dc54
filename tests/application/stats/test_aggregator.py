from datetime import date, datetime, timedelta, timezone

import pytest

from flashify.application.stats.aggregator import StatsAggregator
from flashify.domain.models import Deck, Difficulty
from flashify.domain.stats.models import Stats


@pytest.fixture
def agg():
    return StatsAggregator()


def at(day: int, hour: int = 12) -> datetime:
    return datetime(2024, 1, day, hour, tzinfo=timezone.utc)


# --- Review events / streak ---


def test_first_review_starts_streak(agg):
    stats = agg.record_review_event(Stats(), at(1))
    assert stats.streak == 1
    assert stats.cards_reviewed == 1
    assert stats.study_days == {"2024-01-01": 1}
    assert stats.last_study_date == at(1)


def test_consecutive_days_extend_streak(agg):
    stats = Stats()
    agg.record_review_event(stats, at(1))
    agg.record_review_event(stats, at(2))
    assert stats.streak == 2


def test_gap_resets_streak(agg):
    stats = Stats()
    agg.record_review_event(stats, at(1))
    agg.record_review_event(stats, at(4))
    assert stats.streak == 1


def test_same_day_reviews_keep_streak(agg):
    stats = Stats()
    agg.record_review_event(stats, at(1))
    agg.record_review_event(stats, at(2, hour=8))
    agg.record_review_event(stats, at(2, hour=20))
    assert stats.streak == 2
    assert stats.cards_reviewed == 3
    assert stats.study_days == {"2024-01-01": 1, "2024-01-02": 2}


def test_yesterday_is_by_calendar_date_not_24_hours(agg):
    # 23:59 on day 1 then 00:01 on day 2 is consecutive days
    stats = Stats()
    agg.record_review_event(stats, datetime(2024, 1, 1, 23, 59, tzinfo=timezone.utc))
    agg.record_review_event(stats, datetime(2024, 1, 2, 0, 1, tzinfo=timezone.utc))
    assert stats.streak == 2


def test_streak_resumes_from_stored_counters(agg):
    stats = Stats(streak=5, last_study_date=at(9), cards_reviewed=40)
    agg.record_review_event(stats, at(10))
    assert stats.streak == 6
    assert stats.cards_reviewed == 41


def test_days_are_utc_calendar_days(agg):
    # 2024-01-02 01:00 at UTC+5 is still 2024-01-01 in UTC
    tz = timezone(timedelta(hours=5))
    stats = agg.record_review_event(Stats(), datetime(2024, 1, 2, 1, tzinfo=tz))
    assert stats.study_days == {"2024-01-01": 1}


def test_record_cards_created(agg):
    stats = agg.record_cards_created(Stats(cards_created=2), 3)
    assert stats.cards_created == 5
    with pytest.raises(ValueError):
        agg.record_cards_created(stats, -1)


# --- Mastery ---


def test_mastery_empty_is_zero(agg):
    assert agg.mastery_for_cards([]) == 0


def test_mastery_weights(agg, make_card):
    cards = [
        make_card("1", difficulty=Difficulty.EASY),
        make_card("2", difficulty=Difficulty.MEDIUM),
        make_card("3", difficulty=Difficulty.HARD),
        make_card("4"),
    ]
    # (1 + 0.5) / 4 = 37.5% -> 38
    assert agg.mastery_for_cards(cards) == 38


def test_mastery_rounds_half_up(agg, make_card):
    cards = [make_card("1", difficulty=Difficulty.MEDIUM)] + [make_card(str(i)) for i in range(2, 5)]
    assert agg.mastery_for_cards(cards) == 13


@pytest.mark.parametrize(
    "ratings",
    [
        [Difficulty.EASY] * 5,
        [Difficulty.HARD] * 3,
        [None, None],
        [Difficulty.MEDIUM, Difficulty.EASY, None, Difficulty.HARD],
    ],
)
def test_mastery_bounds(agg, make_card, ratings):
    cards = [make_card(str(i), difficulty=r) for i, r in enumerate(ratings)]
    assert 0 <= agg.mastery_for_cards(cards) <= 100


def test_all_easy_is_full_mastery(agg, make_card):
    cards = [make_card(str(i), difficulty=Difficulty.EASY) for i in range(3)]
    assert agg.mastery_for_cards(cards) == 100


@pytest.mark.parametrize(
    "easy, total, level",
    [(0, 0, "Beginner"), (4, 5, "Master"), (3, 5, "Advanced"), (2, 5, "Intermediate"), (1, 5, "Beginner")],
)
def test_mastery_level(agg, make_card, easy, total, level):
    cards = [make_card(str(i), difficulty=Difficulty.EASY if i < easy else None) for i in range(total)]
    assert agg.mastery_level(cards) == level


def test_difficulty_breakdown(agg, make_card):
    cards = [
        make_card("1", difficulty=Difficulty.EASY),
        make_card("2", difficulty=Difficulty.EASY),
        make_card("3", difficulty=Difficulty.HARD),
    ]
    b = agg.difficulty_breakdown(cards)
    assert (b.total, b.reviewed, b.easy, b.medium, b.hard) == (3, 3, 2, 0, 1)
    assert (b.easy_percentage, b.medium_percentage, b.hard_percentage) == (67, 0, 33)


def test_difficulty_breakdown_empty(agg):
    b = agg.difficulty_breakdown([])
    assert b.total == 0
    assert b.easy_percentage == 0


def test_deck_performance_sorted_and_skips_empty(agg, make_card):
    decks = [Deck(id="a", title="A"), Deck(id="b", title="B"), Deck(id="empty", title="Empty")]
    cards = [
        make_card("1", deck_id="a", difficulty=Difficulty.MEDIUM),
        make_card("2", deck_id="b", difficulty=Difficulty.EASY),
        make_card("3", deck_id="b"),
    ]
    rows = agg.deck_performance(decks, cards)
    assert [(r.deck_id, r.card_count, r.mastery) for r in rows] == [("a", 1, 50), ("b", 2, 50)]


def test_last_studied_label(agg, make_card):
    now = at(20)
    assert agg.last_studied_label([make_card("1")], now) == "Never"
    cases = {
        at(20): "Today",
        at(19): "Yesterday",
        at(17): "3 days ago",
        at(13): "1 week ago",
        at(5): "2 weeks ago",
        datetime(2023, 12, 1, 12, tzinfo=timezone.utc): "1 month ago",
        at(25): "Today",
    }
    for when, label in cases.items():
        card = make_card("1", difficulty=Difficulty.HARD, next_review_date=when)
        assert agg.last_studied_label([card], now) == label


# --- Activity ---


def test_chart_series_last_seven_days(agg):
    stats = Stats(study_days={"2024-01-03": 4, "2024-01-07": 1, "2023-12-31": 9})
    points = agg.chart_series(stats, days=7, today=date(2024, 1, 7))
    assert [p.label for p in points] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert [p.cards for p in points] == [0, 0, 4, 0, 0, 0, 1]
    assert points[0].date == date(2024, 1, 1)
    assert points[-1].date == date(2024, 1, 7)


def test_chart_series_rejects_non_positive_days(agg):
    with pytest.raises(ValueError):
        agg.chart_series(Stats(), days=0)


def test_calendar_data_is_a_copy(agg):
    stats = Stats(study_days={"2024-01-01": 2})
    data = agg.calendar_data(stats)
    data["2024-01-02"] = 1
    assert stats.study_days == {"2024-01-01": 2}


def test_heatmap_week_groups_by_sunday(agg):
    stats = Stats(study_days={"2024-01-02": 3, "2024-01-07": 40})
    weeks = agg.heatmap(stats, "week", today=date(2024, 1, 7))

    assert [len(w.days) for w in weeks] == [7, 1]
    assert weeks[0].start == date(2023, 12, 31)
    assert weeks[1].start == date(2024, 1, 7)
    jan2 = weeks[0].days[2]
    assert (jan2.date, jan2.value, jan2.level, jan2.label) == (date(2024, 1, 2), 3, 1, "1-5 cards")
    last = weeks[1].days[0]
    assert (last.level, last.label) == (4, "30+ cards")


def test_heatmap_range_lengths(agg):
    today = date(2024, 3, 31)
    for time_range, span in [("week", 7), ("month", 30), ("year", 90), ("bogus", 30)]:
        weeks = agg.heatmap(Stats(), time_range, today=today)
        assert sum(len(w.days) for w in weeks) == span + 1


@pytest.mark.parametrize(
    "value, level",
    [(0, 0), (1, 1), (5, 1), (6, 2), (15, 2), (16, 3), (30, 3), (31, 4)],
)
def test_heatmap_bucket(agg, value, level):
    assert agg.heatmap_bucket(value)[0] == level
