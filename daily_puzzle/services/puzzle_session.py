"""
Puzzle Session

Wires today's puzzle engine to persistence, statistics, the suggestion
lookup and the rotation countdown. One session exists per application.
"""

import threading
from datetime import datetime
from typing import Callable, List, Optional

from ..config.game_settings import load_word_list
from ..models.puzzle import PuzzleIdentity, PuzzleView
from ..utils.game_logger import game_logger
from .observers import ObserverGroup, PuzzleObserver
from .persistence import PersistenceStore
from .puzzle_engine import PuzzleEngine
from .rotation import Countdown, Remaining, compute_next_release_instant
from .scheduler import Scheduler, ThreadingScheduler
from .statistics import StatisticsTracker
from .storage import KeyValueStore, create_store
from .suggestion_service import (
    HttpSuggestionService, SuggestionLookup, SuggestionService, WordListSuggestionService
)
from .word_provider import WordProvider


class PuzzleSession:
    """
    The single owner of the active puzzle.

    ``start`` resolves today's puzzle and resumes any saved progress. Once the
    puzzle finishes the countdown runs; at expiry ``reload`` swaps in the next
    day's puzzle with a fresh board.
    """

    def __init__(self,
                 config_class,
                 store: Optional[KeyValueStore] = None,
                 scheduler: Optional[Scheduler] = None,
                 clock: Callable[[], datetime] = datetime.now,
                 suggestion_service: Optional[SuggestionService] = None,
                 words: Optional[List[str]] = None):
        self.config = config_class
        self.clock = clock
        self.attempt_count = config_class.ATTEMPT_COUNT
        self.word_length = config_class.WORD_LENGTH

        self.scheduler = scheduler or ThreadingScheduler()
        self.store = store or create_store(config_class)
        self.persistence = PersistenceStore(self.store, self.attempt_count, self.word_length)
        self.statistics = StatisticsTracker(self.persistence)

        if words is None:
            words = load_word_list(config_class.WORD_LIST_PATH, self.word_length)
        self.word_provider = WordProvider(words, config_class.PUZZLE_EPOCH, config_class.RELEASE_HOUR)

        if suggestion_service is None:
            if config_class.SUGGESTION_SERVICE_URL:
                suggestion_service = HttpSuggestionService(
                    config_class.SUGGESTION_SERVICE_URL, config_class.SUGGESTION_TIMEOUT_SECONDS
                )
            else:
                suggestion_service = WordListSuggestionService(words)
        self.lookup = SuggestionLookup(suggestion_service, asynchronous=config_class.SUGGESTION_ASYNC)

        self.observers = ObserverGroup()
        self.countdown = Countdown(self.scheduler, clock, config_class.COUNTDOWN_TICK_SECONDS)
        self.identity: Optional[PuzzleIdentity] = None
        self.engine: Optional[PuzzleEngine] = None
        self._lock = threading.RLock()

    def add_observer(self, observer: PuzzleObserver):
        self.observers.add(observer)

    def _build_engine(self, identity: PuzzleIdentity) -> PuzzleEngine:
        return PuzzleEngine(
            identity=identity,
            persistence=self.persistence,
            statistics=self.statistics,
            scheduler=self.scheduler,
            lookup=self.lookup,
            observer=self.observers,
            attempt_count=self.attempt_count,
            word_length=self.word_length,
            reveal_delay=self.config.REVEAL_DELAY_SECONDS,
            reveal_word_delay=self.config.REVEAL_WORD_DELAY_SECONDS,
            message_duration=self.config.MESSAGE_DURATION_SECONDS,
            on_finished=self._on_finished,
        )

    def start(self) -> PuzzleEngine:
        """Load today's puzzle and replay saved progress for it, if any."""
        with self._lock:
            self.identity = self.word_provider.puzzle_at(self.clock())
            self.engine = self._build_engine(self.identity)

            saved = self.persistence.load(self.identity.ordinal)
            restored = self.engine.restore(saved) if saved is not None else False

            game_logger.log_game_event(
                self.identity.ordinal, 'puzzle_loaded', restored=restored,
                rows=self.engine.current_row_index, finished=self.engine.finished
            )
            return self.engine

    def reload(self):
        """Swap in the puzzle of the current day; called when the countdown expires."""
        with self._lock:
            previous = self.identity.ordinal if self.identity else None
            self.countdown.stop()
            self.start()
            game_logger.log_game_event(self.identity.ordinal, 'puzzle_rotated', previous_ordinal=previous)
        self.observers.on_puzzle_expired(self.identity.ordinal)

    def _on_finished(self, won: bool):
        target = compute_next_release_instant(self.clock(), self.config.RELEASE_HOUR)
        self.countdown.start(target, self.reload, self.observers.on_countdown)

    def view(self) -> PuzzleView:
        return self.engine.view()

    def stats_summary(self) -> dict:
        return self.statistics.summary()

    def share_text(self) -> Optional[str]:
        """Share text of the finished puzzle, or None while it is still running."""
        return self.engine.share_text(self.config.PUZZLE_TAG, self.config.SHARE_TRAILER)

    def remaining(self) -> Optional[Remaining]:
        """Time until the next puzzle, or None while today's puzzle is unfinished."""
        if not self.engine.finished or not self.countdown.running:
            return None
        return self.countdown.remaining()

    def shutdown(self):
        self.countdown.stop()
        self.scheduler.shutdown()
        self.store.close()
