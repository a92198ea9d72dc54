"""
Domain models for study statistics.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass
class Stats:
    """
    Running counters updated by review and creation events.

    Attributes:
        streak: Consecutive calendar days with at least one review.
        last_study_date: Timestamp of the most recent review, None before the first.
        cards_reviewed: Total review events.
        cards_created: Total flashcards newly inserted into the store.
        study_days: ISO date (YYYY-MM-DD) -> reviews on that day.
    """

    streak: int = 0
    last_study_date: datetime | None = None
    cards_reviewed: int = 0
    cards_created: int = 0
    study_days: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ChartPoint:
    """One bar of the activity chart."""

    label: str  # Short weekday, e.g. "Mon"
    date: date
    cards: int


@dataclass(frozen=True)
class HeatmapCell:
    date: date
    value: int
    level: int  # 0 (no activity) .. 4 (30+ cards)
    label: str


@dataclass
class HeatmapWeek:
    """A Sunday-started run of heatmap cells. The first week may be partial."""

    start: date
    days: list[HeatmapCell] = field(default_factory=list)


@dataclass(frozen=True)
class DifficultyBreakdown:
    total: int
    reviewed: int
    easy: int
    medium: int
    hard: int
    easy_percentage: int
    medium_percentage: int
    hard_percentage: int


@dataclass(frozen=True)
class DeckPerformance:
    deck_id: str
    title: str
    card_count: int
    mastery: int
