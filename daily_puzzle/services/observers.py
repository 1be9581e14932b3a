"""
Puzzle Observers

Callback interface through which the rendering layer follows the engine.
"""

from typing import Any, Dict, List, Optional

from ..utils.game_logger import game_logger


class PuzzleObserver:
    """No-op base; subclasses override the events they care about."""

    def on_letters_changed(self, row_index: int, text: str):
        pass

    def on_row_scored(self, row_index: int, tiles: List[Dict[str, str]], letter_states: Dict[str, str]):
        pass

    def on_row_shake(self, row_index: int, error: str):
        pass

    def on_message(self, message: Optional[str]):
        pass

    def on_row_unlocked(self, row_index: int):
        pass

    def on_word_revealed(self, word: str):
        pass

    def on_puzzle_finished(self, won: bool, attempts_used: int):
        pass

    def on_suggestion(self, row_index: int, suggestion: Optional[str]):
        pass

    def on_countdown(self, remaining: Any):
        pass

    def on_puzzle_expired(self, ordinal: int):
        pass


class ObserverGroup(PuzzleObserver):
    """
    Forwards every event to the registered observers in order.

    A failing observer is logged and skipped so that rendering problems never
    interrupt a board transition.
    """

    def __init__(self):
        self.observers: List[PuzzleObserver] = []

    def add(self, observer: PuzzleObserver):
        self.observers.append(observer)

    def _broadcast(self, event: str, *args):
        for observer in list(self.observers):
            try:
                getattr(observer, event)(*args)
            except Exception as e:
                game_logger.log_error(None, e, event)

    def on_letters_changed(self, row_index, text):
        self._broadcast('on_letters_changed', row_index, text)

    def on_row_scored(self, row_index, tiles, letter_states):
        self._broadcast('on_row_scored', row_index, tiles, letter_states)

    def on_row_shake(self, row_index, error):
        self._broadcast('on_row_shake', row_index, error)

    def on_message(self, message):
        self._broadcast('on_message', message)

    def on_row_unlocked(self, row_index):
        self._broadcast('on_row_unlocked', row_index)

    def on_word_revealed(self, word):
        self._broadcast('on_word_revealed', word)

    def on_puzzle_finished(self, won, attempts_used):
        self._broadcast('on_puzzle_finished', won, attempts_used)

    def on_suggestion(self, row_index, suggestion):
        self._broadcast('on_suggestion', row_index, suggestion)

    def on_countdown(self, remaining):
        self._broadcast('on_countdown', remaining)

    def on_puzzle_expired(self, ordinal):
        self._broadcast('on_puzzle_expired', ordinal)
