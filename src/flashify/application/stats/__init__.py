# Application Stats Package
from .aggregator import StatsAggregator
from .service import Overview, StatsService

__all__ = ["StatsAggregator", "StatsService", "Overview"]
