"""
Test suite for gesture signal extraction

Run with: python -m pytest src/zenparticles/hand_gestures -v
"""

import unittest

from zenparticles.hand_gestures import (
    LM,
    GestureSignal,
    GestureTracker,
    extract_pinch_features,
    hand_tension,
    interpret,
    landmarks_to_points,
)


def make_hand(
    wrist=(0.5, 0.5, 0.0),
    thumb_tip=(0.55, 0.5, 0.0),
    index_tip=(0.56, 0.5, 0.0),
    middle_mcp=(0.5, 0.7, 0.0),
):
    """Build a 21-landmark hand; unused landmarks sit on the wrist."""
    points = [wrist] * LM.COUNT
    points[LM.THUMB_TIP] = thumb_tip
    points[LM.INDEX_TIP] = index_tip
    points[LM.MIDDLE_MCP] = middle_mcp
    return points


def hand_with_ratio(ratio: float, wrist=(0.5, 0.5, 0.0)):
    """Hand with palm size 0.2 and pinch distance ratio * 0.2."""
    wx, wy, wz = wrist
    return make_hand(
        wrist=wrist,
        thumb_tip=(wx, wy, wz),
        index_tip=(wx + ratio * 0.2, wy, wz),
        middle_mcp=(wx, wy + 0.2, wz),
    )


class TestInterpretNoHands(unittest.TestCase):
    """Idle behaviour with no hands in frame."""

    def test_empty_returns_idle_signal(self):
        self.assertEqual(interpret([]), GestureSignal(tension=0.0, span=0.5, hand_count=0))

    def test_empty_ignores_previous_span(self):
        self.assertEqual(interpret([], previous_span=0.9), GestureSignal.idle())

    def test_idle_signal_has_no_hands(self):
        self.assertFalse(GestureSignal.idle().has_hands)


class TestTension(unittest.TestCase):
    """Per-hand and aggregate tension."""

    def test_closed_fist_scenario(self):
        hand = make_hand(
            wrist=(0.0, 0.0, 0.0),
            thumb_tip=(0.05, 0.0, 0.0),
            index_tip=(0.06, 0.0, 0.0),
            middle_mcp=(0.0, 0.2, 0.0),
        )
        feats = extract_pinch_features(hand)
        self.assertAlmostEqual(feats.palm_size, 0.2)
        self.assertAlmostEqual(feats.pinch_dist, 0.01)

        signal = interpret([hand])
        self.assertAlmostEqual(signal.tension, 1.0)
        self.assertEqual(signal.hand_count, 1)

    def test_half_open_hand(self):
        # ratio 0.35 -> open_factor (0.35 - 0.1) * 2 = 0.5
        self.assertAlmostEqual(hand_tension(hand_with_ratio(0.35)), 0.5)

    def test_wide_open_hand_is_clamped_to_zero(self):
        self.assertLess(hand_tension(hand_with_ratio(1.0)), 0.0)
        self.assertEqual(interpret([hand_with_ratio(1.0)]).tension, 0.0)

    def test_tension_in_unit_range(self):
        for ratio in [0.0, 0.05, 0.1, 0.2, 0.35, 0.6, 1.0, 3.0]:
            tension = interpret([hand_with_ratio(ratio)]).tension
            self.assertGreaterEqual(tension, 0.0)
            self.assertLessEqual(tension, 1.0)

    def test_tension_monotonic_as_pinch_closes(self):
        ratios = [2.0, 1.0, 0.6, 0.5, 0.4, 0.3, 0.2, 0.15, 0.1, 0.05, 0.0]
        tensions = [interpret([hand_with_ratio(r)]).tension for r in ratios]
        for prev, cur in zip(tensions, tensions[1:]):
            self.assertGreaterEqual(cur, prev)

    def test_mean_over_two_hands(self):
        hands = [hand_with_ratio(0.0), hand_with_ratio(0.35, wrist=(0.2, 0.5, 0.0))]
        self.assertAlmostEqual(interpret(hands).tension, 0.75)

    def test_z_is_ignored_for_pinch(self):
        hand = make_hand(thumb_tip=(0.5, 0.5, 0.0), index_tip=(0.5, 0.5, 0.9))
        self.assertAlmostEqual(hand_tension(hand), 1.0)


class TestDegenerateLandmarks(unittest.TestCase):
    """Near-zero palm size must not blow up."""

    def test_zero_palm_is_skipped(self):
        degenerate = make_hand(middle_mcp=(0.5, 0.5, 0.0))
        self.assertIsNone(hand_tension(degenerate))

    def test_degenerate_hand_still_counted(self):
        degenerate = make_hand(wrist=(0.1, 0.1, 0.0), middle_mcp=(0.1, 0.1, 0.0))
        signal = interpret([degenerate, hand_with_ratio(0.0)])
        self.assertAlmostEqual(signal.tension, 1.0)
        self.assertEqual(signal.hand_count, 2)

    def test_all_degenerate_gives_zero_tension(self):
        degenerate = make_hand(middle_mcp=(0.5, 0.5, 0.0))
        signal = interpret([degenerate])
        self.assertEqual(signal.tension, 0.0)
        self.assertEqual(signal.hand_count, 1)

    def test_short_landmark_list_is_skipped(self):
        self.assertIsNone(hand_tension([(0.0, 0.0, 0.0)] * 5))


class TestSpan(unittest.TestCase):
    """Two-hand wrist distance."""

    def test_two_hands_planar_wrist_distance(self):
        left = hand_with_ratio(0.5, wrist=(0.1, 0.2, 0.9))
        right = hand_with_ratio(0.5, wrist=(0.4, 0.6, 0.0))
        self.assertAlmostEqual(interpret([left, right]).span, 0.5)

    def test_single_hand_keeps_idle_default(self):
        self.assertEqual(interpret([hand_with_ratio(0.5)]).span, 0.5)

    def test_single_hand_keeps_previous_span(self):
        signal = interpret([hand_with_ratio(0.5)], previous_span=0.8)
        self.assertEqual(signal.span, 0.8)

    def test_three_hands_do_not_update_span(self):
        hands = [hand_with_ratio(0.5, wrist=(x, 0.5, 0.0)) for x in (0.1, 0.5, 0.9)]
        signal = interpret(hands, previous_span=0.3)
        self.assertEqual(signal.span, 0.3)
        self.assertEqual(signal.hand_count, 3)

    def test_empty_landmark_list_keeps_previous_span(self):
        signal = interpret([[], hand_with_ratio(0.0)], previous_span=0.7)
        self.assertEqual(signal.span, 0.7)
        self.assertEqual(signal.hand_count, 2)
        self.assertAlmostEqual(signal.tension, 1.0)

    def test_hand_count_not_clamped(self):
        hands = [hand_with_ratio(0.5)] * 7
        self.assertEqual(interpret(hands).hand_count, 7)


class TestGestureTracker(unittest.TestCase):
    """Span retention across frames."""

    def setUp(self):
        self.tracker = GestureTracker()
        self.pair = [
            hand_with_ratio(0.5, wrist=(0.1, 0.1, 0.0)),
            hand_with_ratio(0.5, wrist=(0.4, 0.1, 0.0)),
        ]

    def test_span_retained_after_two_hands(self):
        self.assertAlmostEqual(self.tracker.update(self.pair).span, 0.3)
        single = [self.pair[0]]
        first = self.tracker.update(single)
        second = self.tracker.update(single)
        self.assertAlmostEqual(first.span, 0.3)
        self.assertEqual(first, second)

    def test_no_hands_resets_to_idle(self):
        self.tracker.update(self.pair)
        self.assertEqual(self.tracker.update([]), GestureSignal.idle())
        self.assertEqual(self.tracker.update([self.pair[0]]).span, 0.5)

    def test_deterministic(self):
        a = GestureTracker().update(self.pair)
        b = GestureTracker().update(self.pair)
        self.assertEqual(a, b)


class TestLandmarkConversion(unittest.TestCase):

    def test_landmarks_to_points(self):
        class _Lm:
            def __init__(self, x, y, z):
                self.x, self.y, self.z = x, y, z

        points = landmarks_to_points([_Lm(0.1, 0.2, -0.3), _Lm(1, 0, 0)])
        self.assertEqual(points, [(0.1, 0.2, -0.3), (1.0, 0.0, 0.0)])


if __name__ == '__main__':
    unittest.main(verbosity=2)
