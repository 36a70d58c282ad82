import unittest
from engines.priority import (
    calculate_priority_score, calculate_ttv_score, calculate_value_score,
    determine_phase, determine_priority_tier, determine_quadrant,
    rank_priorities, recalculate_priorities,
)


class TestComponentScores(unittest.TestCase):
    def test_value_score_is_cohort_relative(self):
        self.assertAlmostEqual(calculate_value_score(50_000, 100_000), 5.0)
        self.assertAlmostEqual(calculate_value_score(100_000, 100_000), 10.0)

    def test_value_score_zero_max(self):
        self.assertEqual(calculate_value_score(0, 0), 0.0)
        self.assertEqual(calculate_value_score(10, -5), 0.0)

    def test_ttv_score(self):
        self.assertAlmostEqual(calculate_ttv_score(6), 12 / 18 + 0.25)
        self.assertAlmostEqual(calculate_ttv_score(10), 8 / 18)
        self.assertEqual(calculate_ttv_score(0), 1.0)
        self.assertEqual(calculate_ttv_score(18), 0.0)
        self.assertEqual(calculate_ttv_score(30), 0.0)

    def test_priority_score_weights(self):
        # 10 x 0.5 + 8 x 0.3 + (1.0 x 10) x 0.2
        self.assertAlmostEqual(calculate_priority_score(10, 8, 1.0), 9.4)


class TestBuckets(unittest.TestCase):
    def test_quadrants(self):
        self.assertEqual(determine_quadrant(8, 8), 'champions')
        self.assertEqual(determine_quadrant(8, 2), 'strategic')
        self.assertEqual(determine_quadrant(2, 8), 'quick_wins')
        self.assertEqual(determine_quadrant(2, 2), 'foundation')
        self.assertEqual(determine_quadrant(5.0, 5.0), 'champions')

    def test_tier_labels(self):
        self.assertEqual(determine_priority_tier(8, 8), 'Tier 1 - Champions')
        self.assertEqual(determine_priority_tier(2, 8), 'Tier 2 - Quick Wins')
        self.assertEqual(determine_priority_tier(8, 2), 'Tier 3 - Strategic')
        self.assertEqual(determine_priority_tier(2, 2), 'Tier 4 - Foundation')
        self.assertEqual(determine_priority_tier(6, 6, threshold=7), 'Tier 4 - Foundation')

    def test_phases(self):
        self.assertEqual(determine_phase(7.0), 'Q1')
        self.assertEqual(determine_phase(6.99), 'Q2')
        self.assertEqual(determine_phase(5.5), 'Q2')
        self.assertEqual(determine_phase(4.0), 'Q3')
        self.assertEqual(determine_phase(3.99), 'Q4')


class TestRecalculatePriorities(unittest.TestCase):
    def setUp(self):
        self.benefits = [
            {'useCaseId': 'UC-1', 'useCaseName': 'Invoice matching', 'strategicTheme': 'Finance',
             'expectedValue': '$100K'},
            {'useCaseId': 'UC-2', 'useCaseName': 'Claims triage', 'expectedValue': '$50K'},
        ]
        self.readiness = [{'useCaseId': 'UC-1', 'readinessScore': 8, 'timeToValue': 6}]

    def test_scores(self):
        first, second = recalculate_priorities(self.benefits, self.readiness)

        self.assertEqual(first['useCaseId'], 'UC-1')
        self.assertEqual(first['valueScore'], 10.0)
        self.assertEqual(first['readinessScore'], 8.0)
        self.assertEqual(first['ttvScore'], 0.92)
        self.assertEqual(first['priorityScore'], 9.23)
        self.assertEqual(first['priorityTier'], 'Tier 1 - Champions')
        self.assertEqual(first['recommendedPhase'], 'Q1')
        self.assertEqual(first['strategicTheme'], 'Finance')

        # no readiness record: default readiness 5, default time-to-value 12 months
        self.assertEqual(second['valueScore'], 5.0)
        self.assertEqual(second['readinessScore'], 5.0)
        self.assertEqual(second['ttvScore'], 0.33)
        self.assertEqual(second['priorityScore'], 4.67)
        self.assertEqual(second['recommendedPhase'], 'Q3')

    def test_explicit_zero_readiness_is_kept(self):
        out = recalculate_priorities(self.benefits, [{'useCaseId': 'UC-1', 'readinessScore': 0, 'timeToValue': 6}])
        self.assertEqual(out[0]['readinessScore'], 0.0)
        self.assertEqual(out[0]['priorityTier'], 'Tier 3 - Strategic')

    def test_scores_within_bounds(self):
        readiness = [{'useCaseId': 'UC-1', 'readinessScore': 14, 'timeToValue': -3}]
        for p in recalculate_priorities(self.benefits, readiness):
            self.assertTrue(0 <= p['valueScore'] <= 10)
            self.assertTrue(0 <= p['readinessScore'] <= 10)
            self.assertTrue(0 <= p['ttvScore'] <= 1)

    def test_zero_value_cohort(self):
        out = recalculate_priorities([{'useCaseId': 'UC-1', 'expectedValue': '$0'}], [])
        self.assertEqual(out[0]['valueScore'], 0.0)

    def test_tier_threshold_parameter(self):
        out = recalculate_priorities(self.benefits, self.readiness, {'tierThreshold': 9})
        self.assertEqual(out[0]['priorityTier'], 'Tier 3 - Strategic')

    def test_empty(self):
        self.assertEqual(recalculate_priorities([], []), [])


class TestRankPriorities(unittest.TestCase):
    def test_descending_and_stable(self):
        rows = [
            {'useCaseId': 'A', 'priorityScore': 4.0},
            {'useCaseId': 'B', 'priorityScore': 8.0},
            {'useCaseId': 'C', 'priorityScore': 4.0},
        ]
        ranked = rank_priorities(rows)
        self.assertEqual([r['useCaseId'] for r in ranked], ['B', 'A', 'C'])
        self.assertEqual([r['useCaseId'] for r in rows], ['A', 'B', 'C'])
