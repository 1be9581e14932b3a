"""
Tests for the statistics record and tracker.
"""

import unittest

from daily_puzzle.models.stats import StatsRecord
from daily_puzzle.services.persistence import PersistenceStore
from daily_puzzle.services.statistics import StatisticsTracker
from daily_puzzle.services.storage import MemoryStore


class TestStatsRecord(unittest.TestCase):
    """Tests for StatsRecord."""

    def test_new_record(self):
        record = StatsRecord.new(6)
        self.assertIsNone(record.last_completed_ordinal)
        self.assertEqual(record.win_positions, [0] * 6)
        self.assertEqual(record.win_percentage, 0)

    def test_win_percentage_rounds(self):
        record = StatsRecord(games_played=3, games_won=2, win_positions=[0] * 6)
        self.assertEqual(record.win_percentage, 67)

    def test_histogram_resized_on_load(self):
        short = StatsRecord.from_dict({'gamesPlayed': 1, 'winPositions': [1, 2]}, 6)
        self.assertEqual(short.win_positions, [1, 2, 0, 0, 0, 0])
        long = StatsRecord.from_dict({'winPositions': [1, 2, 3, 4, 5, 6, 7]}, 6)
        self.assertEqual(long.win_positions, [1, 2, 3, 4, 5, 6])

    def test_malformed_counter(self):
        with self.assertRaises(ValueError):
            StatsRecord.from_dict({'gamesWon': [1]}, 6)


class TestStatisticsTracker(unittest.TestCase):
    """Tests for StatisticsTracker.record()."""

    def setUp(self):
        self.persistence = PersistenceStore(MemoryStore(), 6, 5)
        self.tracker = StatisticsTracker(self.persistence)

    def test_first_win(self):
        self.assertTrue(self.tracker.record(True, 10, 4))
        stats = self.tracker.stats
        self.assertEqual(stats.games_played, 1)
        self.assertEqual(stats.games_won, 1)
        self.assertEqual(stats.current_streak, 1)
        self.assertEqual(stats.max_streak, 1)
        self.assertEqual(stats.win_positions, [0, 0, 0, 1, 0, 0])
        self.assertEqual(stats.last_completed_ordinal, 10)

    def test_same_ordinal_recorded_once(self):
        self.tracker.record(True, 10, 2)
        self.assertFalse(self.tracker.record(True, 10, 2))
        self.assertFalse(self.tracker.record(False, 10, 6))
        self.assertEqual(self.tracker.stats.games_played, 1)
        self.assertEqual(self.tracker.stats.win_positions[1], 1)

    def test_consecutive_wins_extend_streak(self):
        for ordinal in (10, 11, 12):
            self.tracker.record(True, ordinal, 3)
        self.assertEqual(self.tracker.stats.current_streak, 3)
        self.assertEqual(self.tracker.stats.max_streak, 3)

    def test_gap_restarts_streak(self):
        self.tracker.record(True, 10, 3)
        self.tracker.record(True, 11, 3)
        self.tracker.record(True, 13, 3)
        self.assertEqual(self.tracker.stats.current_streak, 1)
        self.assertEqual(self.tracker.stats.max_streak, 2)

    def test_loss_resets_streak(self):
        self.tracker.record(True, 10, 3)
        self.tracker.record(False, 11, 6)
        stats = self.tracker.stats
        self.assertEqual(stats.current_streak, 0)
        self.assertEqual(stats.max_streak, 1)
        self.assertEqual(stats.games_played, 2)
        self.assertEqual(stats.games_won, 1)
        self.assertEqual(sum(stats.win_positions), 1)

    def test_invalid_attempts_on_win(self):
        with self.assertRaises(ValueError):
            self.tracker.record(True, 10, 0)
        with self.assertRaises(ValueError):
            self.tracker.record(True, 10, 7)

    def test_record_is_persisted(self):
        self.tracker.record(True, 10, 1)
        reloaded = StatisticsTracker(self.persistence)
        self.assertEqual(reloaded.stats.games_won, 1)
        self.assertFalse(reloaded.record(True, 10, 1))

    def test_summary(self):
        self.tracker.record(True, 10, 1)
        self.tracker.record(False, 11, 6)
        summary = self.tracker.summary()
        self.assertEqual(summary['gamesPlayed'], 2)
        self.assertEqual(summary['winPercentage'], 50)
        self.assertEqual(summary['lastGame'], 11)

    def test_invariants_hold(self):
        results = [(True, 2), (False, 6), (True, 1), (True, 5), (False, 6), (True, 3)]
        for ordinal, (won, attempts) in enumerate(results, start=1):
            self.tracker.record(won, ordinal, attempts)
            stats = self.tracker.stats
            self.assertEqual(sum(stats.win_positions), stats.games_won)
            self.assertLessEqual(stats.games_won, stats.games_played)
            self.assertLessEqual(stats.current_streak, stats.max_streak)


if __name__ == "__main__":
    unittest.main()
