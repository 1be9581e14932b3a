"""
Services Package

Contains all business logic and service classes.
"""

from .puzzle_engine import AttemptError, AttemptResult, Outcome, PuzzleEngine
from .puzzle_session import PuzzleSession
from .persistence import PersistenceStore
from .statistics import StatisticsTracker
from .rotation import Countdown, Remaining, compute_next_release_instant
from .scoring import score_attempt
from .word_provider import WordProvider

__all__ = [
    'AttemptError', 'AttemptResult', 'Outcome', 'PuzzleEngine',
    'PuzzleSession',
    'PersistenceStore',
    'StatisticsTracker',
    'Countdown', 'Remaining', 'compute_next_release_instant',
    'score_attempt',
    'WordProvider'
]
