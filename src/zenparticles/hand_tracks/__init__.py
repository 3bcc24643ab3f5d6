"""Landmark source, signal hand-off and particle rendering."""

from .hand_tracker import HandTracker, ensure_model
from .signal_cell import SignalCell
from .landmark_loop import LandmarkLoop, SensorUnavailable, TrackingStatus
from .visualization import ParticleDisplay, compose_frame, hud_lines

__all__ = [
    "HandTracker",
    "ensure_model",
    "SignalCell",
    "LandmarkLoop",
    "SensorUnavailable",
    "TrackingStatus",
    "ParticleDisplay",
    "compose_frame",
    "hud_lines",
]
