import unittest

from ladder_core import (InsufficientPopulation, LadderConfig, Matchmaker, Player, Population,
                         expected_score, win_probability)


def make_population(points):
    return Population([Player(skill_rating=1500.0, tier_points=t) for t in points])


class TestMatchmaker(unittest.TestCase):
    def setUp(self):
        self.matchmaker = Matchmaker()

    def test_skips_when_gap_too_wide(self):
        population = make_population([0, 10])
        self.assertIsNone(self.matchmaker.find_opponent(population, 0))
        self.assertIsNone(self.matchmaker.find_opponent(population, 1))

    def test_matches_within_window(self):
        population = make_population([0, 3])
        self.assertEqual(self.matchmaker.find_opponent(population, 0), 1)
        self.assertEqual(self.matchmaker.find_opponent(population, 1), 0)

    def test_gap_of_four_is_rejected(self):
        population = make_population([0, 4])
        self.assertIsNone(self.matchmaker.find_opponent(population, 0))

    def test_never_matches_self(self):
        population = make_population([5, 5, 5, 5])
        for i in range(len(population)):
            self.assertNotEqual(self.matchmaker.find_opponent(population, i), i)

    def test_self_excluded_even_when_only_exact_match(self):
        population = make_population([20, 30, 40])
        self.assertIsNone(self.matchmaker.find_opponent(population, 1))

    def test_picks_closest(self):
        population = make_population([10, 13, 11, 12])
        self.assertEqual(self.matchmaker.find_opponent(population, 0), 2)

    def test_tie_goes_to_first_after_focal(self):
        population = make_population([5, 7, 3])
        self.assertEqual(self.matchmaker.find_opponent(population, 0), 1)

    def test_scan_wraps_around(self):
        population = make_population([4, 9, 3])
        self.assertEqual(self.matchmaker.find_opponent(population, 2), 0)

    def test_tie_order_follows_wrap(self):
        # From index 2 the scan sees 3 then 0 then 1
        population = make_population([6, 6, 6, 6])
        self.assertEqual(self.matchmaker.find_opponent(population, 2), 3)
        self.assertEqual(self.matchmaker.find_opponent(population, 3), 0)

    def test_result_always_within_window(self):
        points = [0, 2, 7, 11, 12, 19, 30, 33, 50, 51, 80, 95]
        population = make_population(points)
        for i in range(len(population)):
            opp = self.matchmaker.find_opponent(population, i)
            if opp is not None:
                self.assertLessEqual(abs(points[i] - points[opp]), 3)
                self.assertNotEqual(opp, i)

    def test_legend_focal_does_not_search(self):
        population = make_population([96, 96])
        self.assertIsNone(self.matchmaker.find_opponent(population, 0))

    def test_legend_can_be_an_opponent(self):
        population = make_population([94, 96])
        self.assertEqual(self.matchmaker.find_opponent(population, 0), 1)

    def test_insufficient_population(self):
        with self.assertRaises(InsufficientPopulation):
            self.matchmaker.find_opponent(make_population([0]), 0)
        with self.assertRaises(InsufficientPopulation):
            self.matchmaker.find_opponent(Population(), 0)

    def test_bad_index(self):
        with self.assertRaises(IndexError):
            self.matchmaker.find_opponent(make_population([0, 0]), 2)

    def test_custom_window(self):
        matchmaker = Matchmaker(LadderConfig(match_window=10))
        self.assertEqual(matchmaker.find_opponent(make_population([0, 10]), 0), 1)

    def test_custom_legend_threshold_stops_search(self):
        matchmaker = Matchmaker(LadderConfig(legend_threshold=50))
        self.assertIsNone(matchmaker.find_opponent(make_population([60, 60]), 0))
        self.assertEqual(matchmaker.find_opponent(make_population([50, 51]), 0), 1)


class TestWinProbability(unittest.TestCase):
    def test_equal_ratings(self):
        self.assertAlmostEqual(win_probability(1500.0, 1500.0), 0.5)

    def test_400_point_gap(self):
        self.assertAlmostEqual(expected_score(1900.0, 1500.0), 10.0 / 11.0)
        self.assertAlmostEqual(win_probability(1900.0, 1500.0), 10.0 / 11.0)

    def test_bounds(self):
        ratings = [100.0, 500.0, 1200.0, 1500.0, 1800.0, 2500.0, 2900.0, 1e6, -1e6]
        for a in ratings:
            for b in ratings:
                p = win_probability(a, b)
                self.assertGreaterEqual(p, 0.05)
                self.assertLessEqual(p, 0.95)

    def test_clamp_engages_on_big_gaps(self):
        self.assertAlmostEqual(win_probability(2900.0, 100.0), 0.95)
        self.assertAlmostEqual(win_probability(100.0, 2900.0), 0.05)

    def test_complementary_before_clamp(self):
        for a, b in [(1500.0, 1700.0), (1400.0, 1450.0), (1000.0, 1300.0)]:
            self.assertAlmostEqual(expected_score(a, b) + expected_score(b, a), 1.0)
            self.assertAlmostEqual(win_probability(a, b) + win_probability(b, a), 1.0)

    def test_favours_higher_rating(self):
        self.assertGreater(win_probability(1600.0, 1500.0), 0.5)
        self.assertLess(win_probability(1500.0, 1600.0), 0.5)

    def test_custom_fudge(self):
        self.assertAlmostEqual(win_probability(2900.0, 100.0, fudge_factor=0.2), 0.8)

    def test_array_input(self):
        import numpy as np
        p = win_probability(np.array([1500.0, 2900.0]), np.array([1500.0, 100.0]))
        self.assertEqual(p.shape, (2,))
        self.assertAlmostEqual(p[0], 0.5)
        self.assertAlmostEqual(p[1], 0.95)


if __name__ == '__main__':
    unittest.main()
