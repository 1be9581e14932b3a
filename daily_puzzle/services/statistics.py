"""
Statistics Tracker

Updates the cumulative statistics once per completed puzzle.
"""

from typing import Optional

from ..models.stats import StatsRecord
from ..utils.game_logger import game_logger
from .persistence import PersistenceStore


class StatisticsTracker:
    """Owns the statistics record and writes it through the persistence store."""

    def __init__(self, persistence: PersistenceStore, stats: Optional[StatsRecord] = None):
        self.persistence = persistence
        self.stats = stats if stats is not None else persistence.load_stats()

    def record(self, won: bool, ordinal: int, attempts_used: int) -> bool:
        """
        Record a completed puzzle.

        Args:
            won: Whether the puzzle was solved
            ordinal: Ordinal of the completed puzzle
            attempts_used: Number of scored rows, 1-based

        Returns:
            bool: False if this ordinal was already recorded
        """
        stats = self.stats
        if stats.last_completed_ordinal == ordinal:
            return False

        if won and not 1 <= attempts_used <= len(stats.win_positions):
            raise ValueError(f"attempts_used {attempts_used} outside 1..{len(stats.win_positions)}")

        stats.games_played += 1
        if won:
            stats.games_won += 1
            stats.win_positions[attempts_used - 1] += 1
            if stats.last_completed_ordinal != ordinal - 1:
                stats.current_streak = 1
            else:
                stats.current_streak += 1
        else:
            stats.current_streak = 0

        stats.max_streak = max(stats.max_streak, stats.current_streak)
        stats.last_completed_ordinal = ordinal
        self.persistence.save_stats(stats)

        game_logger.log_game_event(
            ordinal, 'statistics_recorded', won=won, attempts_used=attempts_used,
            games_played=stats.games_played, current_streak=stats.current_streak
        )
        return True

    def summary(self) -> dict:
        """Statistics as returned to clients, including the derived win percentage."""
        data = self.stats.to_dict()
        data['winPercentage'] = self.stats.win_percentage
        return data
