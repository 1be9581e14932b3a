"""
Puzzle Engine

Owns the board of one puzzle and every transition on it: typing, deleting,
submitting and scoring attempts, the delayed unlock/reveal/finish steps and
replaying a saved puzzle.
"""

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..config.game_settings import ATTEMPT_COUNT, WORD_LENGTH
from ..models.puzzle import (
    Board, PuzzleIdentity, PuzzleStatus, PuzzleView, SavedPuzzleState, TileState
)
from ..utils.game_logger import game_logger
from .observers import PuzzleObserver
from .persistence import PersistenceStore
from .scheduler import ScheduledCall, Scheduler
from .scoring import is_winning_row, merge_row, score_attempt
from .share import format_share_text
from .statistics import StatisticsTracker
from .suggestion_service import SuggestionLookup, Suggestions


class AttemptError(Enum):
    """Recoverable user input errors on submit."""
    INSUFFICIENT_LETTERS = "insufficient_letters"
    WORD_NOT_RECOGNIZED = "word_not_recognized"
    INPUT_LOCKED = "input_locked"


ERROR_MESSAGES = {
    AttemptError.INSUFFICIENT_LETTERS: "Not enough letters",
    AttemptError.WORD_NOT_RECOGNIZED: "Not in word list",
    AttemptError.INPUT_LOCKED: "Input is locked",
}


class Outcome(Enum):
    WIN = "win"
    CONTINUE = "continue"
    LOSS = "loss"


@dataclass
class AttemptResult:
    """Result of ``submit_attempt``. On failure nothing on the board changed."""
    success: bool
    error: Optional[AttemptError] = None
    message: Optional[str] = None
    row_index: Optional[int] = None
    states: List[TileState] = field(default_factory=list)
    outcome: Optional[Outcome] = None

    def to_dict(self) -> dict:
        return {
            'success': self.success,
            'error': self.error.value if self.error else None,
            'message': self.message,
            'row_index': self.row_index,
            'states': [state.value for state in self.states],
            'outcome': self.outcome.value if self.outcome else None,
        }


class PuzzleEngine:
    """
    Board state machine for one puzzle: ``Editing(row) -> Scoring(row) ->
    Editing(row + 1) | Won | Lost``, with Won and Lost leading to Finished.

    All public methods take the engine lock, so HTTP handlers and timer
    callbacks never interleave inside a transition. Input is locked from the
    moment a row is scored until the delayed unlock or the finish.
    """

    def __init__(self,
                 identity: PuzzleIdentity,
                 persistence: PersistenceStore,
                 statistics: StatisticsTracker,
                 scheduler: Scheduler,
                 lookup: SuggestionLookup,
                 observer: Optional[PuzzleObserver] = None,
                 attempt_count: int = ATTEMPT_COUNT,
                 word_length: int = WORD_LENGTH,
                 reveal_delay: float = 1.5,
                 reveal_word_delay: float = 2.0,
                 message_duration: float = 2.0,
                 on_finished: Optional[Callable[[bool], None]] = None):
        if len(identity.secret_word) != word_length:
            raise ValueError(
                f"Secret word for puzzle {identity.ordinal} is not {word_length} letters long"
            )
        self.identity = identity
        self.persistence = persistence
        self.statistics = statistics
        self.scheduler = scheduler
        self.lookup = lookup
        self.observer = observer or PuzzleObserver()
        self.attempt_count = attempt_count
        self.word_length = word_length
        self.reveal_delay = reveal_delay
        self.reveal_word_delay = reveal_word_delay
        self.message_duration = message_duration
        self.on_finished = on_finished

        self.board = Board(attempt_count, word_length)
        self.current_row_index = 0
        self.letter_states: Dict[str, TileState] = {}
        self.transliterations: List[Optional[str]] = [None] * attempt_count
        self.status = PuzzleStatus.EDITING
        self.input_locked = False
        self.finished = False
        self.won = False
        self.answer_revealed = False
        self.message: Optional[str] = None

        self._suggestions: Dict[int, Suggestions] = {}
        self._message_call: Optional[ScheduledCall] = None
        self._lock = threading.RLock()

    @property
    def secret_word(self) -> str:
        return self.identity.secret_word

    @property
    def ordinal(self) -> int:
        return self.identity.ordinal

    def _accepting_input(self) -> bool:
        return not self.input_locked and not self.finished and self.current_row_index < self.attempt_count

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def submit_letter(self, letter: str) -> bool:
        """Put ``letter`` in the first empty tile of the current row."""
        if not isinstance(letter, str):
            return False
        # Some capitals lower-case to more than one code point
        letter = letter.lower()
        if len(letter) != 1 or not letter.isalpha():
            return False

        with self._lock:
            if not self._accepting_input():
                return False
            row_index = self.current_row_index
            empty = next((tile for tile in self.board.row(row_index) if not tile.letter), None)
            if empty is None:
                return False
            empty.letter = letter
            text = self.board.row_text(row_index)
            self._suggestions.pop(row_index, None)
            self.observer.on_letters_changed(row_index, text)

        self._request_suggestion(row_index, text)
        return True

    def delete_letter(self) -> bool:
        """Clear the last filled tile of the current row."""
        with self._lock:
            if not self._accepting_input():
                return False
            row_index = self.current_row_index
            filled = next((tile for tile in reversed(self.board.row(row_index)) if tile.letter), None)
            if filled is None:
                return False
            filled.letter = ""
            text = self.board.row_text(row_index)
            self._suggestions.pop(row_index, None)
            self.observer.on_letters_changed(row_index, text)

            if not text:
                self.lookup.cancel()
                self.transliterations[row_index] = None
                self.observer.on_suggestion(row_index, None)
                return True

        self._request_suggestion(row_index, text)
        return True

    def _request_suggestion(self, row_index: int, text: str):
        self.lookup.request(
            text, lambda looked_up, result: self._apply_suggestion(row_index, looked_up, result)
        )

    def _apply_suggestion(self, row_index: int, text: str, result: Optional[Suggestions]):
        with self._lock:
            # The row may have been edited or submitted while the lookup ran
            if (row_index != self.current_row_index or not self._accepting_input()
                    or self.board.row_text(row_index) != text):
                return
            if result is None:
                self._suggestions.pop(row_index, None)
                self.transliterations[row_index] = None
            else:
                self._suggestions[row_index] = result
                self.transliterations[row_index] = result.display
            self.observer.on_suggestion(row_index, self.transliterations[row_index])

    # ------------------------------------------------------------------
    # Submitting
    # ------------------------------------------------------------------

    def submit_attempt(self) -> AttemptResult:
        """
        Validate and score the current row.

        The row must be full, and the word must either be confirmed by the
        suggestion service as an exact match or be the secret word itself.
        A lookup that is not cached runs without the engine lock; if the row
        was edited or submitted meanwhile, validation starts over on the
        current row.
        """
        while True:
            with self._lock:
                rejected = self._check_row()
                if rejected is not None:
                    return rejected
                row_index = self.current_row_index
                word = self.board.row_text(row_index)
                recognized = self._known_recognition(row_index, word)
                if recognized is not None:
                    return self._score_row(row_index, word, recognized)

            result = self.lookup.resolve(word)

            with self._lock:
                if (not self._accepting_input() or row_index != self.current_row_index
                        or self.board.row_text(row_index) != word):
                    continue
                if result is not None:
                    self._suggestions[row_index] = result
                    self.transliterations[row_index] = result.display
                return self._score_row(row_index, word, result is not None and result.is_recognized)

    def _check_row(self) -> Optional[AttemptResult]:
        if not self._accepting_input():
            return AttemptResult(False, AttemptError.INPUT_LOCKED,
                                 ERROR_MESSAGES[AttemptError.INPUT_LOCKED])
        if not self.board.is_row_full(self.current_row_index):
            return self._reject(self.current_row_index, AttemptError.INSUFFICIENT_LETTERS)
        return None

    def _known_recognition(self, row_index: int, word: str) -> Optional[bool]:
        """Recognition without a lookup, or None if one is needed."""
        if word == self.secret_word:
            return True
        cached = self._suggestions.get(row_index)
        if cached is None or cached.text != word:
            return None
        return cached.is_recognized

    def _score_row(self, row_index: int, word: str, recognized: bool) -> AttemptResult:
        if not recognized:
            return self._reject(row_index, AttemptError.WORD_NOT_RECOGNIZED)

        self.lookup.cancel()
        states = score_attempt(word, self.secret_word)
        self._apply_scored_row(row_index, states)
        self.persistence.save(self.board, self.transliterations, self.current_row_index, self.ordinal)
        outcome = self._resolve_outcome(states, immediate=False)

        game_logger.log_game_event(
            self.ordinal, 'attempt_scored', row=row_index + 1,
            states=[state.value for state in states], outcome=outcome.value
        )
        return AttemptResult(True, row_index=row_index, states=states, outcome=outcome)

    def _reject(self, row_index: int, error: AttemptError) -> AttemptResult:
        message = ERROR_MESSAGES[error]
        self.show_message(message)
        self.observer.on_row_shake(row_index, error.value)
        game_logger.log_game_event(self.ordinal, 'attempt_rejected', row=row_index + 1, error=error.value)
        return AttemptResult(False, error, message, row_index=row_index)

    def _apply_scored_row(self, row_index: int, states: List[TileState]):
        row = self.board.row(row_index)
        for tile, state in zip(row, states):
            tile.state = state
        merge_row(self.letter_states, [(tile.letter, tile.state) for tile in row])

        self.input_locked = True
        self.status = PuzzleStatus.SCORING
        self.current_row_index = row_index + 1
        self.observer.on_row_scored(
            row_index, [tile.to_dict() for tile in row], self.letter_states_snapshot()
        )

    def _resolve_outcome(self, states: List[TileState], immediate: bool) -> Outcome:
        """
        Decide what follows a scored row. Live play runs the follow-up after
        the reveal delay; a restore runs it straight away.
        """
        if is_winning_row(states):
            self.status = PuzzleStatus.WON
            self._after(self.reveal_delay, lambda: self.finish_puzzle(True), immediate)
            return Outcome.WIN
        if self.current_row_index < self.attempt_count:
            self._after(self.reveal_delay, self._unlock_row, immediate)
            return Outcome.CONTINUE
        self.status = PuzzleStatus.LOST
        self._after(self.reveal_delay, lambda: self._reveal_secret(immediate), immediate)
        return Outcome.LOSS

    def _after(self, delay: float, callback: Callable[[], None], immediate: bool):
        if immediate:
            callback()
        else:
            self.scheduler.call_later(delay, callback)

    def _unlock_row(self):
        with self._lock:
            if self.finished:
                return
            self.input_locked = False
            self.status = PuzzleStatus.EDITING
            self.observer.on_row_unlocked(self.current_row_index)

    def _reveal_secret(self, immediate: bool = False):
        with self._lock:
            if self.finished:
                return
            self.answer_revealed = True
            self.observer.on_word_revealed(self.secret_word)
            self.show_message(self.secret_word.upper())
            game_logger.log_game_event(self.ordinal, 'word_revealed')
        self._after(self.reveal_word_delay, lambda: self.finish_puzzle(False), immediate)

    # ------------------------------------------------------------------
    # Finishing
    # ------------------------------------------------------------------

    def finish_puzzle(self, won: bool) -> bool:
        """
        Mark the puzzle terminal and record statistics.

        Returns:
            bool: False if the puzzle had already finished
        """
        with self._lock:
            if self.finished:
                return False
            self.finished = True
            self.input_locked = True
            self.won = won
            self.status = PuzzleStatus.WON if won else PuzzleStatus.LOST
            if not won:
                self.answer_revealed = True
            attempts_used = self.current_row_index

            recorded = self.statistics.record(won, self.ordinal, attempts_used)
            game_logger.log_game_event(
                self.ordinal, 'puzzle_won' if won else 'puzzle_lost',
                attempts_used=attempts_used, statistics_recorded=recorded
            )
            self.observer.on_puzzle_finished(won, attempts_used)
            callback = self.on_finished

        if callback is not None:
            callback(won)
        return True

    # ------------------------------------------------------------------
    # Restoring
    # ------------------------------------------------------------------

    def restore(self, saved: SavedPuzzleState) -> bool:
        """
        Replay a saved puzzle row by row through the live scoring transitions.

        Saved tile states are trusted as they are; no lookup is made. The
        follow-up of the last row (unlock, or finish) runs synchronously, so
        input is only re-enabled once the whole replay is done.

        Returns:
            bool: False if the record does not belong to this puzzle or is not
            a consistent sequence of scored rows
        """
        with self._lock:
            if saved.ordinal != self.ordinal or self.current_row_index != 0 or self.finished:
                return False

            try:
                saved_board = Board.from_snapshot(saved.board, self.attempt_count, self.word_length)
            except (ValueError, TypeError, AttributeError) as e:
                game_logger.logger.warning(f"Cannot restore puzzle {self.ordinal}: {e}")
                return False

            rows = min(saved.current_row_index, self.attempt_count)
            for row_index in range(rows):
                letters = saved_board.row_text(row_index)
                if len(letters) != self.word_length or not saved_board.is_row_scored(row_index):
                    game_logger.logger.warning(
                        f"Cannot restore puzzle {self.ordinal}: row {row_index + 1} is not fully scored"
                    )
                    return False
                if row_index < rows - 1 and is_winning_row(tile.state for tile in saved_board.row(row_index)):
                    game_logger.logger.warning(
                        f"Cannot restore puzzle {self.ordinal}: rows continue after a win"
                    )
                    return False

            saved_rows = list(saved.transliterations)[:self.attempt_count]
            self.transliterations = saved_rows + [None] * (self.attempt_count - len(saved_rows))

            states: List[TileState] = []
            for row_index in range(rows):
                saved_row = saved_board.row(row_index)
                for tile, saved_tile in zip(self.board.row(row_index), saved_row):
                    tile.letter = saved_tile.letter
                states = [tile.state for tile in saved_row]
                self._apply_scored_row(row_index, states)

            if rows:
                self._resolve_outcome(states, immediate=True)

            game_logger.log_game_event(self.ordinal, 'puzzle_restored', rows=rows, finished=self.finished)
            return True

    # ------------------------------------------------------------------
    # Messages and views
    # ------------------------------------------------------------------

    def show_message(self, message: str):
        """Show a transient message that clears itself after ``message_duration``."""
        with self._lock:
            if self._message_call is not None:
                self._message_call.cancel()
            self.message = message
            self.observer.on_message(message)
            self._message_call = self.scheduler.call_later(self.message_duration, self._clear_message)

    def _clear_message(self):
        with self._lock:
            self.message = None
            self._message_call = None
            self.observer.on_message(None)

    def share_text(self, puzzle_tag: str, trailer: Optional[str] = None) -> Optional[str]:
        with self._lock:
            if not self.finished:
                return None
            return format_share_text(
                puzzle_tag, self.ordinal, self.board, self.current_row_index, self.won, trailer
            )

    def letter_states_snapshot(self) -> Dict[str, str]:
        return {letter: state.value for letter, state in sorted(self.letter_states.items())}

    def view(self) -> PuzzleView:
        with self._lock:
            suggestion = None
            if self.current_row_index < self.attempt_count:
                suggestion = self.transliterations[self.current_row_index]
            return PuzzleView(
                ordinal=self.ordinal,
                word_length=self.word_length,
                attempt_count=self.attempt_count,
                board=self.board.snapshot(),
                current_row_index=self.current_row_index,
                letter_states=self.letter_states_snapshot(),
                transliterations=list(self.transliterations),
                input_locked=self.input_locked or self.finished,
                status=self.status.value,
                finished=self.finished,
                won=self.won,
                message=self.message,
                answer=self.secret_word if (self.finished or self.answer_revealed) else None,
                suggestion=suggestion,
            )
