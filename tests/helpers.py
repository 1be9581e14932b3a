"""
Shared test fixtures: a virtual-time scheduler, a recording observer and
engine/session builders that never touch the network or the real clock.
"""

import heapq
import tempfile
from datetime import datetime, timedelta
from types import SimpleNamespace

from daily_puzzle.config import TestingConfig
from daily_puzzle.models.puzzle import PuzzleIdentity
from daily_puzzle.services.observers import PuzzleObserver
from daily_puzzle.services.persistence import PersistenceStore
from daily_puzzle.services.puzzle_engine import PuzzleEngine
from daily_puzzle.services.scheduler import ScheduledCall, Scheduler
from daily_puzzle.services.statistics import StatisticsTracker
from daily_puzzle.services.storage import MemoryStore
from daily_puzzle.services.suggestion_service import SuggestionLookup, WordListSuggestionService
from daily_puzzle.utils.game_logger import game_logger

# Keep test log files out of the working tree
game_logger.configure(tempfile.mkdtemp(prefix='puzzle-test-logs-'))

WORDS = [
    "apple", "paper", "house", "mouse", "slate", "stale", "label", "llama",
    "alley", "spell", "crane", "plead", "pearl", "lemon", "melon", "ghost",
]


class ManualScheduler(Scheduler):
    """Scheduler driven by ``advance``; its ``now`` doubles as the test clock."""

    def __init__(self, start=datetime(2024, 3, 10, 12, 0, 0)):
        self.current = start
        self._queue = []
        self._seq = 0

    def now(self):
        return self.current

    def call_later(self, delay, callback):
        call = ScheduledCall(callback)
        self._seq += 1
        due = self.current + timedelta(seconds=max(delay, 0.0))
        heapq.heappush(self._queue, (due, self._seq, call))
        return call

    def advance(self, seconds=0.0):
        """Move the clock forward, running every callback that falls due on the way."""
        end = self.current + timedelta(seconds=seconds)
        while self._queue and self._queue[0][0] <= end:
            due, _, call = heapq.heappop(self._queue)
            self.current = max(self.current, due)
            if not call.cancelled:
                call.callback()
        self.current = end

    def pending(self):
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def shutdown(self):
        self._queue = []


class RecordingObserver(PuzzleObserver):
    """Keeps every event as ``(name, args)`` in order."""

    def __init__(self):
        self.events = []

    def names(self):
        return [name for name, _ in self.events]

    def _record(self, name, *args):
        self.events.append((name, args))

    def on_letters_changed(self, row_index, text):
        self._record('letters_changed', row_index, text)

    def on_row_scored(self, row_index, tiles, letter_states):
        self._record('row_scored', row_index, tiles, letter_states)

    def on_row_shake(self, row_index, error):
        self._record('row_shake', row_index, error)

    def on_message(self, message):
        self._record('message', message)

    def on_row_unlocked(self, row_index):
        self._record('row_unlocked', row_index)

    def on_word_revealed(self, word):
        self._record('word_revealed', word)

    def on_puzzle_finished(self, won, attempts_used):
        self._record('puzzle_finished', won, attempts_used)

    def on_suggestion(self, row_index, suggestion):
        self._record('suggestion', row_index, suggestion)

    def on_countdown(self, remaining):
        self._record('countdown', remaining)

    def on_puzzle_expired(self, ordinal):
        self._record('puzzle_expired', ordinal)


def build_engine(secret="apple", ordinal=100, words=None, scheduler=None, store=None,
                 observer=None, service=None, reveal_delay=1.5, reveal_word_delay=2.0,
                 message_duration=2.0, on_finished=None, attempt_count=6, word_length=5):
    """Build an engine on an in-memory store; returns the engine and its collaborators."""
    scheduler = scheduler or ManualScheduler()
    store = store if store is not None else MemoryStore()
    persistence = PersistenceStore(store, attempt_count, word_length)
    statistics = StatisticsTracker(persistence)
    service = service or WordListSuggestionService(WORDS if words is None else words)
    lookup = SuggestionLookup(service, asynchronous=False)
    observer = observer or RecordingObserver()
    engine = PuzzleEngine(
        PuzzleIdentity(ordinal, secret), persistence, statistics, scheduler, lookup,
        observer=observer, attempt_count=attempt_count, word_length=word_length,
        reveal_delay=reveal_delay, reveal_word_delay=reveal_word_delay,
        message_duration=message_duration, on_finished=on_finished,
    )
    return SimpleNamespace(
        engine=engine, scheduler=scheduler, store=store, persistence=persistence,
        statistics=statistics, observer=observer, lookup=lookup,
    )


def type_word(engine, word):
    for letter in word:
        engine.submit_letter(letter)


def play(engine, word):
    """Type and submit one attempt."""
    type_word(engine, word)
    return engine.submit_attempt()


class SessionTestConfig(TestingConfig):
    """Fixed values so environment variables cannot change test expectations."""
    WORD_LENGTH = 5
    ATTEMPT_COUNT = 6
    RELEASE_HOUR = 0
    PUZZLE_EPOCH = '2024-01-01'
    COUNTDOWN_TICK_SECONDS = 1.0
    REVEAL_DELAY_SECONDS = 0.0
    REVEAL_WORD_DELAY_SECONDS = 0.0
    MESSAGE_DURATION_SECONDS = 0.0
    PUZZLE_TAG = 'DailyWord'
    SHARE_TRAILER = ''
    LOG_DIR = tempfile.mkdtemp(prefix='puzzle-test-logs-')
    LOG_LEVEL = 'INFO'
