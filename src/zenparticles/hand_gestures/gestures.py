"""Gesture signal extraction: landmark sets -> (tension, span, hand count)."""

import logging
from dataclasses import dataclass
from typing import Sequence

from .math_utils import Point3, clamp, dist2, mean
from .features import extract_pinch_features
from .config import IDLE_SPAN, MIN_PALM_SIZE, OPEN_GAIN, OPEN_OFFSET

logger = logging.getLogger(__name__)

HandLandmarkSet = Sequence[Point3]


@dataclass(frozen=True)
class GestureSignal:
    """Per-frame control signal consumed by the morph engine."""
    tension: float = 0.0
    span: float = IDLE_SPAN
    hand_count: int = 0

    @classmethod
    def idle(cls) -> "GestureSignal":
        return cls(tension=0.0, span=IDLE_SPAN, hand_count=0)

    @property
    def has_hands(self) -> bool:
        return self.hand_count > 0


# =============================================================================
# TENSION
# =============================================================================

def hand_tension(points: HandLandmarkSet) -> float | None:
    """
    Pinch/fist strength for a single hand.

    Returns:
        1 - clamp(pinch/palm - 0.1, 0, 1) * 2, or None when the palm is
        degenerate (near-zero size) and the hand should not contribute
    """
    feats = extract_pinch_features(points)
    if feats is None or feats.palm_size < MIN_PALM_SIZE:
        return None

    open_factor = clamp(feats.pinch_ratio - OPEN_OFFSET, 0.0, 1.0) * OPEN_GAIN
    return 1.0 - open_factor


# =============================================================================
# SIGNAL
# =============================================================================

def interpret(hands: Sequence[HandLandmarkSet], previous_span: float = IDLE_SPAN) -> GestureSignal:
    """
    Convert one frame of hand landmarks into a GestureSignal.

    Args:
        hands: Zero or more hands, each 21 normalized (x, y, z) landmarks
        previous_span: Span reported for frames without exactly two hands

    Returns:
        GestureSignal; fully deterministic for a given input
    """
    if not hands:
        return GestureSignal.idle()

    tensions = []
    for points in hands:
        t = hand_tension(points)
        if t is not None:
            tensions.append(t)

    tension = clamp(mean(tensions), 0.0, 1.0)

    span = previous_span
    if len(hands) == 2 and all(hands):
        span = dist2(hands[0][0], hands[1][0])

    return GestureSignal(tension=tension, span=span, hand_count=len(hands))


@dataclass
class GestureTracker:
    """Carries the last two-hand span across frames."""
    span: float = IDLE_SPAN
    last_count: int = 0

    def update(self, hands: Sequence[HandLandmarkSet]) -> GestureSignal:
        """Interpret a frame and remember its span."""
        signal = interpret(hands, previous_span=self.span)
        self.span = signal.span

        if signal.hand_count != self.last_count:
            logger.debug("Hands detected: %d -> %d", self.last_count, signal.hand_count)
            self.last_count = signal.hand_count

        return signal

    def reset(self) -> None:
        self.span = IDLE_SPAN
        self.last_count = 0
