"""
Statistics Data Models

Contains the cumulative player statistics record.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class StatsRecord:
    """Player statistics, kept across puzzles."""
    last_completed_ordinal: Optional[int] = None
    games_played: int = 0
    games_won: int = 0
    current_streak: int = 0
    max_streak: int = 0
    win_positions: List[int] = field(default_factory=list)

    @classmethod
    def new(cls, attempt_count: int) -> "StatsRecord":
        return cls(win_positions=[0] * attempt_count)

    @property
    def win_percentage(self) -> int:
        if not self.games_played:
            return 0
        return round(self.games_won / self.games_played * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lastGame": self.last_completed_ordinal,
            "gamesPlayed": self.games_played,
            "gamesWon": self.games_won,
            "currentStreak": self.current_streak,
            "maxStreak": self.max_streak,
            "winPositions": list(self.win_positions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], attempt_count: int) -> "StatsRecord":
        """
        Parse a stored record, resizing the histogram to ``attempt_count``.

        Raises:
            ValueError: If the record is not an object or a counter is not an integer
        """
        if not isinstance(data, dict):
            raise ValueError(f"Malformed statistics record: expected an object, got {type(data).__name__}")
        try:
            last_game = data.get("lastGame")
            positions = [int(count) for count in data.get("winPositions") or []]
            record = cls(
                last_completed_ordinal=None if last_game is None else int(last_game),
                games_played=int(data.get("gamesPlayed", 0)),
                games_won=int(data.get("gamesWon", 0)),
                current_streak=int(data.get("currentStreak", 0)),
                max_streak=int(data.get("maxStreak", 0)),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Malformed statistics record: {e}")
        positions = positions[:attempt_count]
        record.win_positions = positions + [0] * (attempt_count - len(positions))
        return record
