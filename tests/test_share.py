"""
Tests for the share text.
"""

import unittest

from daily_puzzle.models.puzzle import Board, TileState
from daily_puzzle.services.share import TILE_GLYPHS, format_share_text

GREEN = "\U0001F7E9"
YELLOW = "\U0001F7E8"
BLACK = "\u2B1B"


def scored_board(rows):
    board = Board(6, 5)
    for index, states in enumerate(rows):
        for tile, state in zip(board.row(index), states):
            tile.letter = "x"
            tile.state = state
    return board


C = TileState.CORRECT
P = TileState.PRESENT
A = TileState.ABSENT


class TestShareText(unittest.TestCase):
    """Tests for format_share_text()."""

    def test_win_on_third_row(self):
        board = scored_board([[A, A, P, A, C], [A, C, C, C, C], [C] * 5])
        text = format_share_text("DailyWord", 42, board, 3, True)
        self.assertEqual(text, "\n".join([
            "#DailyWord 42 3/6",
            "",
            BLACK * 2 + YELLOW + BLACK + GREEN,
            BLACK + GREEN * 4,
            GREEN * 5,
        ]))

    def test_loss_shows_x_and_all_rows(self):
        board = scored_board([[A] * 5] * 6)
        text = format_share_text("DailyWord", 7, board, 6, False)
        lines = text.split("\n")
        self.assertEqual(lines[0], "#DailyWord 7 X/6")
        self.assertEqual(len(lines), 8)
        self.assertEqual(lines[-1], BLACK * 5)

    def test_trailer_after_blank_line(self):
        board = scored_board([[C] * 5])
        text = format_share_text("DailyWord", 1, board, 1, True, trailer="https://example.org")
        self.assertTrue(text.endswith(GREEN * 5 + "\n\nhttps://example.org"))

    def test_no_letters_leak(self):
        board = scored_board([[C] * 5])
        self.assertNotIn("x", format_share_text("Tag", 1, board, 1, True).split("\n", 1)[1])

    def test_every_state_has_a_glyph(self):
        self.assertEqual(set(TILE_GLYPHS), set(TileState))


if __name__ == "__main__":
    unittest.main()
