"""
Attempt Scoring

Implements the three-pass letter evaluation and the monotonic key-state merge.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from ..models.puzzle import TileState


def score_attempt(attempt: str, secret: str) -> List[TileState]:
    """
    Score an attempt against the secret word.

    The secret's letters are copied into a scratch list. Exact matches are
    marked first and removed from the scratch; each remaining letter is then
    matched against the first unused scratch occurrence. A letter repeated
    more often than it remains in the scratch is marked Absent.

    Args:
        attempt: Attempted word, same length as the secret
        secret: Secret word

    Returns:
        List[TileState]: One state per position, never EMPTY
    """
    if len(attempt) != len(secret):
        raise ValueError("Attempt and secret word must have the same length")

    scratch: List[Optional[str]] = list(secret)
    result: List[Optional[TileState]] = [None] * len(attempt)

    # Exact pass
    for i, letter in enumerate(attempt):
        if letter == scratch[i]:
            result[i] = TileState.CORRECT
            scratch[i] = None

    # Present pass
    for i, letter in enumerate(attempt):
        if result[i] is not None:
            continue
        if letter in scratch:
            result[i] = TileState.PRESENT
            scratch[scratch.index(letter)] = None

    # Absent pass
    return [state if state is not None else TileState.ABSENT for state in result]


def merge_letter_state(letter_states: Dict[str, TileState], letter: str, new_state: TileState) -> None:
    """
    Record ``new_state`` for ``letter`` unless a better state is already known.

    Correct is never downgraded, Present is never downgraded to Absent and
    Absent is only recorded for a letter with no prior state.
    """
    if new_state == TileState.EMPTY:
        return
    current = letter_states.get(letter)
    if current is None or new_state.rank > current.rank:
        letter_states[letter] = new_state


def merge_row(letter_states: Dict[str, TileState], row: Iterable[Tuple[str, TileState]]) -> None:
    """Merge every tile of a scored row into the key states."""
    for letter, state in row:
        merge_letter_state(letter_states, letter, state)


def is_winning_row(states: Iterable[TileState]) -> bool:
    """Return True if every tile is Correct."""
    states = list(states)
    return bool(states) and all(state == TileState.CORRECT for state in states)
