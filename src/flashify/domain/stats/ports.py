"""
Port for the process-wide study statistics document.
"""

from abc import ABC, abstractmethod

from .models import Stats


class StatsRepository(ABC):
    """
    Port for loading and saving the single Stats aggregate.

    Implementations:
        - JsonStatsRepository: JSON object stored under a fixed key.
    """

    @abstractmethod
    def get(self) -> Stats:
        """Return the current stats, or a zeroed Stats if none were saved yet."""
        pass

    @abstractmethod
    def save(self, stats: Stats) -> None:
        pass
