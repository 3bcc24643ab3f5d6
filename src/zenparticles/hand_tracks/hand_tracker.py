"""MediaPipe hand landmarker wrapper."""

import logging
import urllib.request
from pathlib import Path

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision
from numpy.typing import NDArray

from zenparticles.hand_gestures import HandLandmarkSet, landmarks_to_points
from zenparticles.hand_gestures.config import (
    MODEL_URL, MODEL_PATH, MAX_NUM_HANDS,
    MIN_DETECTION_CONFIDENCE, MIN_PRESENCE_CONFIDENCE, MIN_TRACKING_CONFIDENCE,
)

logger = logging.getLogger(__name__)


def ensure_model(model_path: Path = MODEL_PATH, url: str = MODEL_URL) -> Path:
    """Download the landmarker model on first use."""
    model_path = Path(model_path)
    if not model_path.exists():
        model_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading hand landmarker model to %s", model_path)
        urllib.request.urlretrieve(url, str(model_path))
        logger.info("Model download complete")
    return model_path


class HandTracker:
    """Wrapper for MediaPipe hand landmark detection in VIDEO mode."""

    def __init__(
        self,
        model_path: Path = MODEL_PATH,
        max_num_hands: int = MAX_NUM_HANDS,
        min_detection_confidence: float = MIN_DETECTION_CONFIDENCE,
        min_presence_confidence: float = MIN_PRESENCE_CONFIDENCE,
        min_tracking_confidence: float = MIN_TRACKING_CONFIDENCE,
    ):
        options = vision.HandLandmarkerOptions(
            base_options=mp_tasks.BaseOptions(model_asset_path=str(ensure_model(model_path))),
            running_mode=vision.RunningMode.VIDEO,
            num_hands=max_num_hands,
            min_hand_detection_confidence=min_detection_confidence,
            min_hand_presence_confidence=min_presence_confidence,
            min_tracking_confidence=min_tracking_confidence,
        )
        self._landmarker = vision.HandLandmarker.create_from_options(options)
        self._last_ts = -1
        self._last_hands: list[HandLandmarkSet] = []

    def detect(self, frame: NDArray[np.uint8], timestamp_ms: float) -> list[HandLandmarkSet]:
        """
        Detect hands in a BGR frame.

        Args:
            frame: BGR camera frame
            timestamp_ms: Monotonic timestamp; forced strictly increasing

        Returns:
            One list of 21 normalized (x, y, z) tuples per detected hand
        """
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)

        ts = max(int(timestamp_ms), self._last_ts + 1)
        self._last_ts = ts

        result = self._landmarker.detect_for_video(image, ts)
        self._last_hands = [landmarks_to_points(hand) for hand in result.hand_landmarks]
        return self._last_hands

    def draw_landmarks(self, frame: NDArray[np.uint8]) -> None:
        """Draw the last detected landmarks on frame."""
        h, w = frame.shape[:2]
        for hand in self._last_hands:
            for x, y, _ in hand:
                cv2.circle(frame, (int(x * w), int(y * h)), 3, (0, 255, 0), -1)

    def close(self) -> None:
        """Release resources."""
        self._landmarker.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
