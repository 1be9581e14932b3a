"""
Persistence Store

Saves and loads the in-progress puzzle and the statistics record.
"""

from typing import List, Optional

from ..models.puzzle import Board, SavedPuzzleState
from ..models.stats import StatsRecord
from ..utils.game_logger import game_logger
from .storage import KeyValueStore

GAME_STATE_KEY = 'gameState'
STATISTICS_KEY = 'statistics'


class PersistenceStore:
    """Reads and writes the two fixed storage slots."""

    def __init__(self, store: KeyValueStore, attempt_count: int, word_length: int):
        self.store = store
        self.attempt_count = attempt_count
        self.word_length = word_length

    def save(self, board: Board, transliterations: List[Optional[str]],
             current_row_index: int, ordinal: int) -> SavedPuzzleState:
        """Overwrite the saved puzzle with the current board."""
        record = SavedPuzzleState(
            ordinal=ordinal,
            board=board.snapshot(),
            transliterations=list(transliterations),
            current_row_index=current_row_index,
        )
        self.store.put(GAME_STATE_KEY, record.to_dict())
        return record

    def load(self, active_ordinal: int) -> Optional[SavedPuzzleState]:
        """
        Return the saved puzzle for ``active_ordinal``.

        A record from another day is deleted and treated as absent, as is a
        record that cannot be parsed or does not fit the board.
        """
        data = self.store.get(GAME_STATE_KEY)
        if data is None:
            return None

        try:
            record = SavedPuzzleState.from_dict(data)
            Board.from_snapshot(record.board, self.attempt_count, self.word_length)
        except (ValueError, TypeError, AttributeError) as e:
            game_logger.logger.warning(f"Discarding unreadable saved puzzle: {e}")
            self.store.delete(GAME_STATE_KEY)
            return None

        if record.ordinal != active_ordinal:
            game_logger.log_game_event(
                active_ordinal, 'saved_puzzle_expired', saved_ordinal=record.ordinal
            )
            self.store.delete(GAME_STATE_KEY)
            return None

        if not 0 <= record.current_row_index <= self.attempt_count:
            game_logger.logger.warning(
                f"Discarding saved puzzle with row index {record.current_row_index}"
            )
            self.store.delete(GAME_STATE_KEY)
            return None

        return record

    def load_stats(self) -> StatsRecord:
        """Return the statistics record, or a zeroed one on first run."""
        data = self.store.get(STATISTICS_KEY)
        if data is None:
            return StatsRecord.new(self.attempt_count)
        try:
            return StatsRecord.from_dict(data, self.attempt_count)
        except ValueError as e:
            game_logger.logger.warning(f"Resetting unreadable statistics record: {e}")
            return StatsRecord.new(self.attempt_count)

    def save_stats(self, stats: StatsRecord) -> None:
        self.store.put(STATISTICS_KEY, stats.to_dict())
