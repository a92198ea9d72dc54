"""
Stats aggregator: every streak, mastery and activity calculation lives here.

This is a pure computation module with no I/O. Deck views, the dashboard and
the stats page all call the same methods so the numbers never drift apart.
"""

import math
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from flashify.application.utils.time import as_utc, calendar_date, day_key, utc_now
from flashify.domain.constants import (
    DEFAULT_CHART_DAYS,
    DEFAULT_MASTERY_LEVEL,
    EASY_WEIGHT,
    HEATMAP_BUCKETS,
    HEATMAP_RANGES,
    HEATMAP_TOP_LABEL,
    MASTERY_LEVELS,
    MEDIUM_WEIGHT,
)
from flashify.domain.models import Deck, Difficulty, Flashcard
from flashify.domain.stats.models import (
    ChartPoint,
    DeckPerformance,
    DifficultyBreakdown,
    HeatmapCell,
    HeatmapWeek,
    Stats,
)

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def percentage(part: int, total: int) -> int:
    if total == 0:
        return 0
    return round_half_up(part / total * 100)


class StatsAggregator:
    """
    Computes derived statistics from cards and the Stats counters.

    Stateless. The record_* methods update the Stats object they are given
    and return it; everything else is a pure read.
    """

    # ------------------------------------------------------------------
    # Event hooks
    # ------------------------------------------------------------------

    def record_cards_created(self, stats: Stats, count: int) -> Stats:
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        stats.cards_created += count
        return stats

    def record_review_event(self, stats: Stats, now: datetime) -> Stats:
        """
        Apply one review at `now` to the counters and the streak.

        Streak transitions compare the calendar date of the previous review
        against today and yesterday:
          - no previous review      -> 1
          - previous was yesterday  -> +1
          - previous before that    -> 1
          - previous was today      -> unchanged
        """
        now = as_utc(now)
        today = calendar_date(now)
        yesterday = today - timedelta(days=1)

        stats.cards_reviewed += 1
        key = day_key(today)
        stats.study_days[key] = stats.study_days.get(key, 0) + 1

        if stats.last_study_date is None:
            stats.streak = 1
        else:
            last = calendar_date(stats.last_study_date)
            if last == yesterday:
                stats.streak += 1
            elif last < yesterday:
                stats.streak = 1
            # Same day (or a clock that moved backwards): keep the streak.

        stats.last_study_date = now
        return stats

    # ------------------------------------------------------------------
    # Mastery
    # ------------------------------------------------------------------

    def mastery_for_cards(self, cards: Iterable[Flashcard]) -> int:
        """
        Weighted share of cards rated easy (1.0) or medium (0.5), as 0-100.

        Hard and never-reviewed cards weigh nothing. An empty set is 0.
        """
        cards = list(cards)
        if not cards:
            return 0
        easy = sum(1 for c in cards if c.difficulty == Difficulty.EASY)
        medium = sum(1 for c in cards if c.difficulty == Difficulty.MEDIUM)
        score = (easy * EASY_WEIGHT + medium * MEDIUM_WEIGHT) / len(cards)
        return round_half_up(score * 100)

    def mastery_level(self, cards: Iterable[Flashcard]) -> str:
        mastery = self.mastery_for_cards(cards)
        for threshold, name in MASTERY_LEVELS:
            if mastery >= threshold:
                return name
        return DEFAULT_MASTERY_LEVEL

    def difficulty_breakdown(self, cards: Iterable[Flashcard]) -> DifficultyBreakdown:
        cards = list(cards)
        total = len(cards)
        easy = sum(1 for c in cards if c.difficulty == Difficulty.EASY)
        medium = sum(1 for c in cards if c.difficulty == Difficulty.MEDIUM)
        hard = sum(1 for c in cards if c.difficulty == Difficulty.HARD)
        return DifficultyBreakdown(
            total=total,
            reviewed=sum(1 for c in cards if c.is_reviewed),
            easy=easy,
            medium=medium,
            hard=hard,
            easy_percentage=percentage(easy, total),
            medium_percentage=percentage(medium, total),
            hard_percentage=percentage(hard, total),
        )

    def deck_performance(
        self, decks: Iterable[Deck], cards: Iterable[Flashcard]
    ) -> list[DeckPerformance]:
        """Mastery per non-empty deck, best first."""
        by_deck: dict[str, list[Flashcard]] = {}
        for card in cards:
            by_deck.setdefault(card.deck_id, []).append(card)

        rows = []
        for deck in decks:
            deck_cards = by_deck.get(deck.id, [])
            if not deck_cards:
                continue
            rows.append(
                DeckPerformance(
                    deck_id=deck.id,
                    title=deck.title,
                    card_count=len(deck_cards),
                    mastery=self.mastery_for_cards(deck_cards),
                )
            )
        rows.sort(key=lambda r: r.mastery, reverse=True)
        return rows

    def last_studied_label(self, cards: Iterable[Flashcard], now: datetime | None = None) -> str:
        """
        Relative "last studied" text for a deck card.

        Uses the latest next_review_date among reviewed cards. Reviews push
        that date into the future, so negative distances count as today.
        """
        reviewed = [c for c in cards if c.is_reviewed]
        if not reviewed:
            return "Never"

        now = as_utc(now or utc_now())
        most_recent = max(as_utc(c.next_review_date) for c in reviewed)
        diff_days = max(0, math.floor((now - most_recent) / timedelta(days=1)))

        if diff_days == 0:
            return "Today"
        if diff_days == 1:
            return "Yesterday"
        if diff_days < 7:
            return f"{diff_days} days ago"
        if diff_days < 30:
            weeks = diff_days // 7
            return f"{weeks} {'week' if weeks == 1 else 'weeks'} ago"
        months = diff_days // 30
        return f"{months} {'month' if months == 1 else 'months'} ago"

    # ------------------------------------------------------------------
    # Activity
    # ------------------------------------------------------------------

    def chart_series(
        self, stats: Stats, days: int = DEFAULT_CHART_DAYS, today: date | None = None
    ) -> list[ChartPoint]:
        """Reviews per day for the last `days` days ending today, oldest first."""
        if days < 1:
            raise ValueError(f"days must be positive, got {days}")
        today = today or calendar_date(utc_now())
        points = []
        for offset in range(days - 1, -1, -1):
            d = today - timedelta(days=offset)
            points.append(
                ChartPoint(
                    label=WEEKDAY_LABELS[d.weekday()],
                    date=d,
                    cards=stats.study_days.get(day_key(d), 0),
                )
            )
        return points

    def calendar_data(self, stats: Stats) -> dict[str, int]:
        return dict(stats.study_days)

    def heatmap(
        self, stats: Stats, time_range: str = "month", today: date | None = None
    ) -> list[HeatmapWeek]:
        """
        Calendar heatmap from `time_range` days ago through today.

        Weeks start on Sunday; the first and last weeks may be partial.
        Unknown ranges fall back to a month.
        """
        span = HEATMAP_RANGES.get(time_range, HEATMAP_RANGES["month"])
        today = today or calendar_date(utc_now())
        start = today - timedelta(days=span)

        weeks: list[HeatmapWeek] = []
        current = HeatmapWeek(start=start)
        d = start
        while d <= today:
            # date.weekday(): Monday == 0, Sunday == 6
            if d.weekday() == 6 and current.days:
                weeks.append(current)
                current = HeatmapWeek(start=d)
            value = stats.study_days.get(day_key(d), 0)
            level, label = self.heatmap_bucket(value)
            current.days.append(HeatmapCell(date=d, value=value, level=level, label=label))
            d += timedelta(days=1)

        if current.days:
            weeks.append(current)
        return weeks

    def heatmap_bucket(self, value: int) -> tuple[int, str]:
        for level, (upper, label) in enumerate(HEATMAP_BUCKETS):
            if value <= upper:
                return level, label
        return len(HEATMAP_BUCKETS), HEATMAP_TOP_LABEL
