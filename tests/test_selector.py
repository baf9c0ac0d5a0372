"""
Unit tests for the PlayerSelector fairness algorithm.
"""
import unittest

from freecolo.core.errors import ValidationError
from freecolo.core.player import Player
from freecolo.core.selector import PlayerSelector
from tests.test_fixtures import GameFixtures


class TestPlayerSelector(unittest.TestCase):
    """Test cases for selection order, stats and roster edits."""

    def setUp(self):
        """Set up test fixtures."""
        self.players = GameFixtures.create_players("Alice", "Bob", "Charlie", "Dana")
        self.selector = PlayerSelector(self.players)

    def test_create_requires_players(self):
        with self.assertRaises(ValidationError):
            PlayerSelector([])

    def test_create_rejects_duplicate_ids(self):
        alice = Player("Alice")
        with self.assertRaises(ValidationError):
            PlayerSelector([alice, alice.clone()])

    def test_round_robin_in_roster_order(self):
        picked = [self.selector.select_next().name for _ in range(8)]
        self.assertEqual(picked, ["Alice", "Bob", "Charlie", "Dana"] * 2)

    def test_counts_never_drift_more_than_one(self):
        for _ in range(23):
            self.selector.select_next()
            counts = [p.times_selected for p in self.selector.get_players()]
            self.assertLessEqual(max(counts) - min(counts), 1)

    def test_prefers_least_selected_player(self):
        self.players[0].times_selected = 3
        self.players[1].times_selected = 1
        self.players[2].times_selected = 1
        self.players[3].times_selected = 2

        self.assertEqual(self.selector.select_next().name, "Bob")
        self.assertEqual(self.selector.select_next().name, "Charlie")

    def test_create_copies_the_list(self):
        self.players.append(Player("Eve"))
        self.assertEqual(len(self.selector.get_players()), 4)

    def test_selection_stats_before_any_selection(self):
        stats = self.selector.get_selection_stats()
        self.assertEqual(stats.min_selections, 0)
        self.assertEqual(stats.max_selections, 0)
        self.assertEqual(stats.average_selections, 0)
        self.assertEqual(stats.fairness_score, 1.0)

    def test_selection_stats_after_full_rounds(self):
        for _ in range(8):
            self.selector.select_next()
        stats = self.selector.get_selection_stats()
        self.assertEqual(stats.min_selections, 2)
        self.assertEqual(stats.max_selections, 2)
        self.assertEqual(stats.fairness_score, 1.0)

    def test_fairness_score_for_uneven_counts(self):
        # counts 2, 0, 0, 0: mean 0.5, stddev sqrt(0.75)
        self.players[0].times_selected = 2
        stats = self.selector.get_selection_stats()
        self.assertAlmostEqual(stats.fairness_score, 1 - (0.75 ** 0.5) / 2)
        self.assertAlmostEqual(stats.average_selections, 0.5)

    def test_fairness_score_stays_in_unit_interval(self):
        lone = Player("Lone")
        lone.times_selected = 1
        selector = PlayerSelector([lone, Player("P1"), Player("P2")])
        score = selector.get_selection_stats().fairness_score
        self.assertGreaterEqual(score, 0.0)
        self.assertLess(score, 1.0)

    def test_add_player_is_prioritised(self):
        for _ in range(4):
            self.selector.select_next()
        eve = Player("Eve")
        self.selector.add_player(eve)

        self.assertEqual(self.selector.select_next(), eve)
        self.assertEqual(self.selector.get_players()[-1], eve)

    def test_add_duplicate_player_fails(self):
        with self.assertRaises(ValidationError):
            self.selector.add_player(self.players[1].clone())
        self.assertEqual(len(self.selector), 4)

    def test_remove_player_mid_roster(self):
        self.selector.remove_player(self.players[1])
        picked = [self.selector.select_next().name for _ in range(3)]
        self.assertEqual(picked, ["Alice", "Charlie", "Dana"])

    def test_remove_unknown_player_fails(self):
        with self.assertRaises(ValidationError):
            self.selector.remove_player(Player("Stranger"))
        self.assertEqual(len(self.selector), 4)

    def test_remove_last_player_fails(self):
        solo = Player("Solo")
        selector = PlayerSelector([solo])
        with self.assertRaises(ValidationError):
            selector.remove_player(solo)

    def test_reset_all_selections(self):
        for _ in range(5):
            self.selector.select_next()
        self.selector.reset_all_selections()

        self.assertTrue(all(p.times_selected == 0 for p in self.selector.get_players()))
        self.assertTrue(all(s.last_selected_at is None for s in self.selector.get_player_stats()))

    def test_player_stats_percentages(self):
        self.players[0].times_selected = 1
        self.players[1].times_selected = 1
        self.players[2].times_selected = 1
        self.players[3].times_selected = 5

        stats = self.selector.get_player_stats()

        # 1/8 = 12.5% rounds half up
        self.assertEqual([s.selection_percentage for s in stats], [13, 13, 13, 63])
        self.assertEqual([s.player_name for s in stats], ["Alice", "Bob", "Charlie", "Dana"])

    def test_player_stats_without_selections(self):
        stats = self.selector.get_player_stats()
        self.assertTrue(all(s.selection_percentage == 0 for s in stats))
        self.assertTrue(all(s.last_selected_at is None for s in stats))

    def test_player_stats_track_last_selection(self):
        chosen = self.selector.select_next()
        stats = {s.player_id: s for s in self.selector.get_player_stats()}
        self.assertIsNotNone(stats[chosen.id].last_selected_at)
        self.assertIsNone(stats[self.players[1].id].last_selected_at)

    def test_clone_is_deep(self):
        self.selector.select_next()
        copy = self.selector.clone()
        copy.select_next()
        copy.add_player(Player("Eve"))

        self.assertEqual([p.times_selected for p in self.selector.get_players()], [1, 0, 0, 0])
        self.assertEqual(len(self.selector), 4)
        self.assertEqual([p.times_selected for p in copy.get_players()], [1, 1, 0, 0, 0])


if __name__ == '__main__':
    unittest.main()
