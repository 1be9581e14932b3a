"""
Word Provider

Deterministic mapping from a calendar day to that day's secret word.
"""

from datetime import date, datetime, timedelta
from typing import List, Union

from ..models.puzzle import PuzzleIdentity


class WordProvider:
    """
    Picks the secret word of a day from a fixed word list.

    Days are counted from ``epoch`` and roll over at ``release_hour`` local
    time, so ``day_index`` changes at the same instant the rotation timer
    expires.
    """

    def __init__(self, words: List[str], epoch: Union[date, str], release_hour: int = 0):
        if not words:
            raise ValueError("Word provider needs at least one word")
        self.words = list(words)
        self.epoch = date.fromisoformat(epoch) if isinstance(epoch, str) else epoch
        self.release_hour = release_hour

    def day_index(self, now: datetime) -> int:
        shifted = now - timedelta(hours=self.release_hour)
        return (shifted.date() - self.epoch).days

    def puzzle_for(self, day_index: int) -> PuzzleIdentity:
        if day_index < 0:
            raise ValueError(f"Day {day_index} is before the puzzle epoch {self.epoch.isoformat()}")
        return PuzzleIdentity(ordinal=day_index, secret_word=self.words[day_index % len(self.words)])

    def puzzle_at(self, now: datetime) -> PuzzleIdentity:
        return self.puzzle_for(self.day_index(now))
