# Domain Stats Package
from .models import ChartPoint, DeckPerformance, DifficultyBreakdown, HeatmapCell, HeatmapWeek, Stats
from .ports import StatsRepository

__all__ = [
    "Stats",
    "ChartPoint",
    "HeatmapCell",
    "HeatmapWeek",
    "DifficultyBreakdown",
    "DeckPerformance",
    "StatsRepository",
]
