"""
Puzzle Data Models

Contains the board, tile and persisted-record data structures.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class TileState(Enum):
    """Tile evaluation status. Rank orders the non-empty states for key highlighting."""
    EMPTY = "empty"
    ABSENT = "absent"
    PRESENT = "present"
    CORRECT = "correct"

    @property
    def rank(self) -> int:
        return _TILE_RANK[self]


_TILE_RANK = {
    TileState.EMPTY: 0,
    TileState.ABSENT: 1,
    TileState.PRESENT: 2,
    TileState.CORRECT: 3,
}


class PuzzleStatus(Enum):
    """Per-puzzle state machine: Editing -> Scoring -> Editing | Won | Lost."""
    EDITING = "editing"
    SCORING = "scoring"
    WON = "won"
    LOST = "lost"


@dataclass
class Tile:
    """One letter cell of a row."""
    letter: str = ""
    state: TileState = TileState.EMPTY

    def to_dict(self) -> Dict[str, str]:
        return {"letter": self.letter, "state": self.state.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tile":
        return cls(letter=str(data.get("letter") or ""), state=TileState(data.get("state", "empty")))


class Board:
    """
    Fixed-size grid of tiles: ``attempt_count`` rows of ``word_length`` tiles.

    Rows before the current row are fully scored, the current row is being
    edited and rows after it are empty. The board itself does not enforce
    the cursor; the engine owns that invariant.
    """

    def __init__(self, attempt_count: int, word_length: int):
        if attempt_count < 1 or word_length < 1:
            raise ValueError("Board dimensions must be positive")
        self.attempt_count = attempt_count
        self.word_length = word_length
        self.rows: List[List[Tile]] = [
            [Tile() for _ in range(word_length)] for _ in range(attempt_count)
        ]

    def row(self, index: int) -> List[Tile]:
        return self.rows[index]

    def row_text(self, index: int) -> str:
        return "".join(tile.letter for tile in self.rows[index])

    def is_row_full(self, index: int) -> bool:
        return all(tile.letter for tile in self.rows[index])

    def is_row_scored(self, index: int) -> bool:
        return all(tile.state != TileState.EMPTY for tile in self.rows[index])

    def snapshot(self) -> List[List[Dict[str, str]]]:
        """Return a JSON-serialisable copy of every tile."""
        return [[tile.to_dict() for tile in row] for row in self.rows]

    @classmethod
    def from_snapshot(cls, snapshot: List[List[Dict[str, Any]]],
                      attempt_count: int, word_length: int) -> "Board":
        """
        Rebuild a board from ``snapshot()`` output.

        Raises:
            ValueError: If the snapshot does not match the board dimensions
        """
        if len(snapshot) != attempt_count or any(len(row) != word_length for row in snapshot):
            raise ValueError("Board snapshot does not match the configured dimensions")
        board = cls(attempt_count, word_length)
        board.rows = [[Tile.from_dict(tile) for tile in row] for row in snapshot]
        return board


@dataclass(frozen=True)
class PuzzleIdentity:
    """The puzzle of one calendar day."""
    ordinal: int
    secret_word: str


@dataclass
class SavedPuzzleState:
    """In-progress puzzle record, replaced as a whole after every scored attempt."""
    ordinal: int
    board: List[List[Dict[str, str]]]
    transliterations: List[Optional[str]]
    current_row_index: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gameNo": self.ordinal,
            "board": self.board,
            "transliteratedRows": self.transliterations,
            "currentRowIndex": self.current_row_index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedPuzzleState":
        """
        Parse a stored record.

        Raises:
            ValueError: If a required field is missing or has the wrong type
        """
        try:
            ordinal = int(data["gameNo"])
            board = list(data["board"])
            current_row_index = int(data["currentRowIndex"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed saved puzzle record: {e}")
        transliterations = list(data.get("transliteratedRows") or [])
        return cls(ordinal, board, transliterations, current_row_index)


@dataclass
class PuzzleView:
    """Client-facing puzzle representation. The answer is only included once revealed."""
    ordinal: int
    word_length: int
    attempt_count: int
    board: List[List[Dict[str, str]]]
    current_row_index: int
    letter_states: Dict[str, str]
    transliterations: List[Optional[str]]
    input_locked: bool
    status: str
    finished: bool
    won: bool
    message: Optional[str] = None
    answer: Optional[str] = None
    suggestion: Optional[str] = None
