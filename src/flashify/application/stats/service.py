"""
Stats Service: Application layer orchestrator.

Reads a consistent snapshot from the FlashcardService and runs it through
the StatsAggregator.
"""

import logging
from dataclasses import dataclass
from datetime import date

from flashify.domain.constants import DEFAULT_CHART_DAYS
from flashify.domain.stats.models import (
    ChartPoint,
    DeckPerformance,
    DifficultyBreakdown,
    HeatmapWeek,
    Stats,
)

from .aggregator import StatsAggregator

logger = logging.getLogger(__name__)


@dataclass
class Overview:
    """Everything the stats dashboard shows above the charts."""

    stats: Stats
    deck_count: int
    breakdown: DifficultyBreakdown
    mastery: int
    mastery_level: str
    deck_performance: list[DeckPerformance]


@dataclass
class DeckSummary:
    """Per-deck numbers shown on a deck tile."""

    deck_id: str
    total_cards: int
    due_cards: int
    mastery: int
    last_studied: str


class StatsService:
    """
    Application service for dashboard and per-deck statistics.
    """

    def __init__(self, flashcards, aggregator: StatsAggregator | None = None):
        """
        Args:
            flashcards: The FlashcardService that owns the collections.
            aggregator: Optional custom aggregator; defaults to the service's own.
        """
        self._service = flashcards
        self._agg = aggregator or flashcards.aggregator

    def overview(self, top_decks: int | None = None) -> Overview:
        decks, cards, stats = self._service.snapshot()
        performance = self._agg.deck_performance(decks, cards)
        if top_decks is not None:
            performance = performance[:top_decks]
        return Overview(
            stats=stats,
            deck_count=len(decks),
            breakdown=self._agg.difficulty_breakdown(cards),
            mastery=self._agg.mastery_for_cards(cards),
            mastery_level=self._agg.mastery_level(cards),
            deck_performance=performance,
        )

    def deck_summary(self, deck_id: str, now=None) -> DeckSummary:
        cards = self._service.get_flashcards_for_deck(deck_id)
        due = self._service.get_due_flashcards_for_deck(deck_id, now=now)
        return DeckSummary(
            deck_id=deck_id,
            total_cards=len(cards),
            due_cards=len(due),
            mastery=self._agg.mastery_for_cards(cards),
            last_studied=self._agg.last_studied_label(cards, now),
        )

    def chart(self, days: int = DEFAULT_CHART_DAYS, today: date | None = None) -> list[ChartPoint]:
        return self._agg.chart_series(self._service.get_stats(), days=days, today=today)

    def calendar(self) -> dict[str, int]:
        return self._agg.calendar_data(self._service.get_stats())

    def heatmap(self, time_range: str = "month", today: date | None = None) -> list[HeatmapWeek]:
        return self._agg.heatmap(self._service.get_stats(), time_range=time_range, today=today)
