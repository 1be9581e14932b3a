"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import require_session
from .game_logger import game_logger

__all__ = ['require_session', 'game_logger']
