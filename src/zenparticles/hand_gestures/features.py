"""Hand feature extraction from MediaPipe landmarks."""

from dataclasses import dataclass
from typing import Sequence

from .math_utils import Point3, dist2


# MediaPipe landmark indices
class LM:
    WRIST = 0
    THUMB_MCP, THUMB_IP, THUMB_TIP = 2, 3, 4
    INDEX_MCP, INDEX_PIP, INDEX_DIP, INDEX_TIP = 5, 6, 7, 8
    MIDDLE_MCP, MIDDLE_PIP, MIDDLE_DIP, MIDDLE_TIP = 9, 10, 11, 12
    RING_MCP, RING_PIP, RING_DIP, RING_TIP = 13, 14, 15, 16
    PINKY_MCP, PINKY_PIP, PINKY_DIP, PINKY_TIP = 17, 18, 19, 20

    COUNT = 21


# Highest index read by extract_pinch_features
_REQUIRED_LANDMARKS = max(LM.WRIST, LM.THUMB_TIP, LM.INDEX_TIP, LM.MIDDLE_MCP) + 1


@dataclass(frozen=True)
class PinchFeatures:
    """Planar measurements used for the tension signal."""
    wrist: Point3
    palm_size: float
    pinch_dist: float

    @property
    def pinch_ratio(self) -> float:
        return self.pinch_dist / self.palm_size


def extract_pinch_features(points: Sequence[Point3]) -> PinchFeatures | None:
    """
    Measure palm size and thumb-index distance for one hand.

    Distances are taken in the image plane (x, y); z is relative depth and
    too noisy to weight equally.

    Args:
        points: 21 normalized (x, y, z) landmarks

    Returns:
        PinchFeatures, or None if the hand has too few landmarks
    """
    if len(points) < _REQUIRED_LANDMARKS:
        return None

    wrist = points[LM.WRIST]
    return PinchFeatures(
        wrist=wrist,
        palm_size=dist2(points[LM.MIDDLE_MCP], wrist),
        pinch_dist=dist2(points[LM.THUMB_TIP], points[LM.INDEX_TIP]),
    )


def landmarks_to_points(landmarks) -> list[Point3]:
    """Convert MediaPipe landmark objects (.x, .y, .z) to plain tuples."""
    return [(float(lm.x), float(lm.y), float(lm.z)) for lm in landmarks]
