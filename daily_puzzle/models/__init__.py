"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .puzzle import (
    Board, PuzzleIdentity, PuzzleStatus, PuzzleView, SavedPuzzleState, Tile, TileState
)
from .stats import StatsRecord

__all__ = [
    'Board', 'PuzzleIdentity', 'PuzzleStatus', 'PuzzleView', 'SavedPuzzleState',
    'Tile', 'TileState', 'StatsRecord'
]
