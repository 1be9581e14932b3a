"""
Tests for the storage backends, the persistence store and restoring a saved puzzle.
"""

import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock

from daily_puzzle.models.stats import StatsRecord
from daily_puzzle.services.persistence import GAME_STATE_KEY, STATISTICS_KEY, PersistenceStore
from daily_puzzle.services.statistics import StatisticsTracker
from daily_puzzle.services.storage import JsonFileStore, MemoryStore, MongoStore, create_store

from tests.helpers import build_engine, play


def play_rows(ctx, words):
    for word in words:
        play(ctx.engine, word)
        ctx.scheduler.advance(1.5)


class TestPersistenceStore(unittest.TestCase):
    """Tests for PersistenceStore save/load."""

    def setUp(self):
        self.store = MemoryStore()
        self.persistence = PersistenceStore(self.store, 6, 5)

    def test_missing_record_loads_none(self):
        self.assertIsNone(self.persistence.load(1))

    def test_record_layout(self):
        ctx = build_engine(store=self.store)
        play(ctx.engine, "paper")
        data = self.store.get(GAME_STATE_KEY)
        self.assertEqual(set(data), {'gameNo', 'board', 'transliteratedRows', 'currentRowIndex'})
        self.assertEqual(data['gameNo'], 100)
        self.assertEqual(data['currentRowIndex'], 1)
        self.assertEqual(len(data['board']), 6)

    def test_stale_record_is_discarded(self):
        ctx = build_engine(store=self.store, ordinal=41)
        play(ctx.engine, "paper")
        self.assertIsNone(self.persistence.load(42))
        self.assertIsNone(self.store.get(GAME_STATE_KEY))

    def test_malformed_record_is_discarded(self):
        self.store.put(GAME_STATE_KEY, {'gameNo': 'abc', 'board': []})
        self.assertIsNone(self.persistence.load(1))
        self.assertIsNone(self.store.get(GAME_STATE_KEY))

    def test_wrong_board_size_is_discarded(self):
        self.store.put(GAME_STATE_KEY, {
            'gameNo': 1, 'board': [[]], 'transliteratedRows': [], 'currentRowIndex': 0,
        })
        self.assertIsNone(self.persistence.load(1))

    def test_row_index_out_of_range_is_discarded(self):
        ctx = build_engine(store=self.store, ordinal=1)
        play(ctx.engine, "paper")
        data = self.store.get(GAME_STATE_KEY)
        data['currentRowIndex'] = 9
        self.store.put(GAME_STATE_KEY, data)
        self.assertIsNone(self.persistence.load(1))

    def test_stats_default_when_missing(self):
        stats = self.persistence.load_stats()
        self.assertEqual(stats.games_played, 0)
        self.assertEqual(stats.win_positions, [0] * 6)

    def test_stats_round_trip_keys(self):
        self.persistence.save_stats(StatsRecord(3, 2, 1, 1, 1, [1, 0, 0, 0, 0, 0]))
        self.assertEqual(self.store.get(STATISTICS_KEY), {
            'lastGame': 3, 'gamesPlayed': 2, 'gamesWon': 1,
            'currentStreak': 1, 'maxStreak': 1, 'winPositions': [1, 0, 0, 0, 0, 0],
        })

    def test_malformed_stats_reset(self):
        self.store.put(STATISTICS_KEY, {'gamesPlayed': 'many'})
        self.assertEqual(self.persistence.load_stats().games_played, 0)

    def test_non_object_stats_reset(self):
        for value in (['not', 'a', 'record'], 'statistics', 7):
            self.store.put(STATISTICS_KEY, value)
            tracker = StatisticsTracker(self.persistence)
            self.assertEqual(tracker.stats.games_played, 0)
            self.assertEqual(tracker.stats.win_positions, [0] * 6)

    def test_non_object_game_state_is_discarded(self):
        self.store.put(GAME_STATE_KEY, ['gameNo', 1])
        self.assertIsNone(self.persistence.load(1))
        self.assertIsNone(self.store.get(GAME_STATE_KEY))


class TestRestore(unittest.TestCase):
    """Tests for PuzzleEngine.restore()."""

    def setUp(self):
        self.store = MemoryStore()

    def restored(self, ordinal=100, secret="apple"):
        ctx = build_engine(store=self.store, ordinal=ordinal, secret=secret)
        saved = ctx.persistence.load(ordinal)
        return ctx, (saved is not None and ctx.engine.restore(saved))

    def test_restore_matches_played_state(self):
        original = build_engine(store=self.store)
        play_rows(original, ["paper", "house"])
        expected = original.engine.view()

        ctx, ok = self.restored()
        self.assertTrue(ok)
        view = ctx.engine.view()
        self.assertEqual(view.board, expected.board)
        self.assertEqual(view.current_row_index, 2)
        self.assertEqual(view.letter_states, expected.letter_states)
        self.assertEqual(view.transliterations, expected.transliterations)
        self.assertFalse(ctx.engine.input_locked)
        self.assertFalse(ctx.engine.finished)

    def test_restored_puzzle_continues(self):
        original = build_engine(store=self.store)
        play_rows(original, ["paper"])
        ctx, _ = self.restored()
        result = play(ctx.engine, "apple")
        self.assertTrue(result.success)
        self.assertEqual(result.row_index, 1)

    def test_restore_won_puzzle_does_not_count_twice(self):
        original = build_engine(store=self.store)
        play_rows(original, ["paper", "apple"])
        self.assertEqual(original.statistics.stats.games_played, 1)

        ctx, ok = self.restored()
        self.assertTrue(ok)
        self.assertTrue(ctx.engine.finished)
        self.assertTrue(ctx.engine.won)
        self.assertEqual(ctx.statistics.stats.games_played, 1)
        self.assertEqual(ctx.persistence.load_stats().games_won, 1)

    def test_restore_lost_puzzle_finishes(self):
        original = build_engine(store=self.store)
        play_rows(original, ["house", "mouse", "slate", "stale", "label", "ghost"])
        original.scheduler.advance(2.0)

        ctx, ok = self.restored()
        self.assertTrue(ok)
        self.assertTrue(ctx.engine.finished)
        self.assertFalse(ctx.engine.won)
        self.assertEqual(ctx.engine.view().answer, "apple")
        self.assertEqual(ctx.statistics.stats.games_played, 1)

    def test_restore_rejects_other_ordinal(self):
        original = build_engine(store=self.store)
        play_rows(original, ["paper"])
        saved = original.persistence.load(100)
        other = build_engine(ordinal=101)
        self.assertFalse(other.engine.restore(saved))

    def test_restore_rejects_unscored_row(self):
        original = build_engine(store=self.store)
        play_rows(original, ["paper"])
        data = self.store.get(GAME_STATE_KEY)
        data['board'][0][0]['state'] = 'empty'
        self.store.put(GAME_STATE_KEY, data)
        ctx, ok = self.restored()
        self.assertFalse(ok)
        self.assertEqual(ctx.engine.current_row_index, 0)


class TestJsonFileStore(unittest.TestCase):
    """Tests for the JSON file backend."""

    def setUp(self):
        self.directory = tempfile.mkdtemp()
        self.path = os.path.join(self.directory, 'nested', 'storage.json')

    def tearDown(self):
        shutil.rmtree(self.directory, ignore_errors=True)

    def test_put_get_delete(self):
        store = JsonFileStore(self.path)
        store.put('statistics', {'gamesPlayed': 1})
        self.assertEqual(JsonFileStore(self.path).get('statistics'), {'gamesPlayed': 1})
        store.delete('statistics')
        self.assertIsNone(store.get('statistics'))

    def test_no_temp_files_left(self):
        store = JsonFileStore(self.path)
        store.put('a', {'x': 1})
        store.put('b', {'y': 2})
        self.assertEqual(os.listdir(os.path.dirname(self.path)), ['storage.json'])

    def test_invalid_file_treated_as_empty(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write('{not json')
        store = JsonFileStore(self.path)
        self.assertIsNone(store.get('gameState'))
        store.put('gameState', {'gameNo': 1})
        with open(self.path, encoding='utf-8') as f:
            self.assertEqual(json.load(f), {'gameState': {'gameNo': 1}})


class TestMongoStore(unittest.TestCase):
    """Tests for the MongoDB backend against a mocked client."""

    def setUp(self):
        self.client = MagicMock()
        self.collection = self.client['daily_puzzle']['storage']
        self.store = MongoStore('mongodb://unused', client=self.client)

    def test_get_unwraps_value(self):
        self.collection.find_one.return_value = {'_id': 'statistics', 'value': {'gamesPlayed': 2}}
        self.assertEqual(self.store.get('statistics'), {'gamesPlayed': 2})
        self.collection.find_one.assert_called_with({'_id': 'statistics'})

    def test_get_missing(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.store.get('gameState'))

    def test_put_upserts_whole_record(self):
        self.store.put('gameState', {'gameNo': 3})
        self.collection.replace_one.assert_called_once_with(
            {'_id': 'gameState'}, {'_id': 'gameState', 'value': {'gameNo': 3}}, upsert=True
        )

    def test_delete(self):
        self.store.delete('gameState')
        self.collection.delete_one.assert_called_once_with({'_id': 'gameState'})

    def test_injected_client_is_not_pinged(self):
        self.client.admin.command.assert_not_called()


class TestCreateStore(unittest.TestCase):
    """Tests for create_store()."""

    def test_memory(self):
        config = type('Cfg', (), {'STORAGE_BACKEND': 'memory'})
        self.assertIsInstance(create_store(config), MemoryStore)

    def test_file(self):
        config = type('Cfg', (), {'STORAGE_BACKEND': 'file', 'STORAGE_PATH': 'x.json'})
        store = create_store(config)
        self.assertIsInstance(store, JsonFileStore)
        self.assertEqual(store.path, 'x.json')

    def test_mongo_without_uri(self):
        config = type('Cfg', (), {'STORAGE_BACKEND': 'mongo', 'MONGO_URI': None})
        with self.assertRaises(ValueError):
            create_store(config)

    def test_unknown_backend(self):
        config = type('Cfg', (), {'STORAGE_BACKEND': 'redis'})
        with self.assertRaises(ValueError):
            create_store(config)


if __name__ == "__main__":
    unittest.main()
