"""
Share Text

Formats a finished puzzle as the spoiler-free emoji grid.
"""

from typing import Optional

from ..models.puzzle import Board, TileState

TILE_GLYPHS = {
    TileState.CORRECT: "\U0001F7E9",  # green square
    TileState.PRESENT: "\U0001F7E8",  # yellow square
    TileState.ABSENT: "\u2B1B",  # black square
    TileState.EMPTY: "\u2B1C",  # white square
}


def format_share_text(puzzle_tag: str, ordinal: int, board: Board, rows_scored: int,
                      won: bool, trailer: Optional[str] = None) -> str:
    """
    Build ``#<tag> <ordinal> <attempts|X>/<attempt count>`` followed by the grid.

    Args:
        puzzle_tag: Hashtag name of the puzzle
        ordinal: Puzzle ordinal
        board: Board to render
        rows_scored: Number of scored rows to include
        won: Whether the puzzle was solved; a loss shows ``X``
        trailer: Optional text appended after a blank line
    """
    attempts = str(rows_scored) if won else "X"
    header = f"#{puzzle_tag} {ordinal} {attempts}/{board.attempt_count}"
    grid = "\n".join(
        "".join(TILE_GLYPHS[tile.state] for tile in board.row(index))
        for index in range(min(rows_scored, board.attempt_count))
    )
    text = f"{header}\n\n{grid}"
    if trailer:
        text = f"{text}\n\n{trailer}"
    return text
