"""Hand gesture signal module."""

from .config import ViewMode, VIEW_MODE, MAX_NUM_HANDS, IDLE_SPAN
from .features import LM, PinchFeatures, extract_pinch_features, landmarks_to_points
from .gestures import (
    GestureSignal,
    GestureTracker,
    HandLandmarkSet,
    hand_tension,
    interpret,
)

__all__ = [
    "ViewMode",
    "VIEW_MODE",
    "MAX_NUM_HANDS",
    "IDLE_SPAN",
    "LM",
    "PinchFeatures",
    "extract_pinch_features",
    "landmarks_to_points",
    "GestureSignal",
    "GestureTracker",
    "HandLandmarkSet",
    "hand_tension",
    "interpret",
]
