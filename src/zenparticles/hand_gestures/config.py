"""Configuration constants for hand tracking and gesture signals."""

from enum import Enum
from pathlib import Path


class ViewMode(Enum):
    FPV_BEHIND_HANDS = "FPV_BEHIND_HANDS"
    SELFIE_WEBCAM = "SELFIE_WEBCAM"


# =============================================================================
# CAMERA / VIEW SETTINGS
# =============================================================================
VIEW_MODE = ViewMode.SELFIE_WEBCAM
FORCE_MIRROR_INPUT = False
MAX_NUM_HANDS = 2

CAMERA_WIDTH = 640
CAMERA_HEIGHT = 480

# Landmarks are never flipped; only the preview inset is mirrored.
DISPLAY_FLIP = VIEW_MODE == ViewMode.SELFIE_WEBCAM

if FORCE_MIRROR_INPUT:
    DISPLAY_FLIP = not DISPLAY_FLIP


# =============================================================================
# DETECTOR
# =============================================================================
MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)
MODEL_PATH = Path.home() / ".cache" / "zenparticles" / "hand_landmarker.task"

MIN_DETECTION_CONFIDENCE = 0.5
MIN_PRESENCE_CONFIDENCE = 0.5
MIN_TRACKING_CONFIDENCE = 0.5


# =============================================================================
# TENSION (PINCH / FIST)
# =============================================================================
# open_factor = clamp(pinch / palm - OPEN_OFFSET, 0, 1) * OPEN_GAIN
OPEN_OFFSET = 0.1
OPEN_GAIN = 2.0
MIN_PALM_SIZE = 1e-6


# =============================================================================
# SPAN (TWO-HAND DISTANCE)
# =============================================================================
IDLE_SPAN = 0.5
