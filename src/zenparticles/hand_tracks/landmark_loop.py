"""
Background landmark loop.

Reads the camera, runs hand detection and publishes the newest GestureSignal
to a SignalCell. Camera or detector failures are absorbed here: the status
goes to UNAVAILABLE and the cell keeps (or returns to) the idle signal.
"""

import logging
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import cv2

from zenparticles.hand_gestures import GestureSignal, GestureTracker
from zenparticles.hand_gestures.config import CAMERA_WIDTH, CAMERA_HEIGHT, MODEL_PATH

from .hand_tracker import HandTracker
from .signal_cell import SignalCell

logger = logging.getLogger(__name__)


class TrackingStatus(Enum):
    LOADING = "Loading Model..."
    ACTIVE = "Tracking Active"
    UNAVAILABLE = "NO TRACKING"


class SensorUnavailable(Exception):
    """Camera or landmark detector could not be used."""


class LandmarkLoop:
    """Daemon thread feeding a SignalCell from the camera."""

    def __init__(
        self,
        cell: SignalCell,
        camera_index: int = 0,
        model_path: Path = MODEL_PATH,
        tracker_factory: Callable[[Path], HandTracker] = HandTracker,
        capture_factory: Callable[[int], cv2.VideoCapture] = cv2.VideoCapture,
    ):
        self.cell = cell
        self.camera_index = camera_index
        self.model_path = model_path
        self._tracker_factory = tracker_factory
        self._capture_factory = capture_factory

        self._status = TrackingStatus.LOADING
        self._status_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def status(self) -> TrackingStatus:
        with self._status_lock:
            return self._status

    def _set_status(self, status: TrackingStatus) -> None:
        with self._status_lock:
            changed = status is not self._status
            self._status = status
        if changed:
            logger.info("Tracking status: %s", status.value)

    def start(self) -> "LandmarkLoop":
        if self._thread is None:
            self._thread = threading.Thread(target=self._run, name="landmark-loop", daemon=True)
            self._thread.start()
        return self

    def stop(self, timeout: float = 2.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    # =========================================================================
    # WORKER
    # =========================================================================

    def _open(self):
        try:
            tracker = self._tracker_factory(self.model_path)
        except Exception as e:
            raise SensorUnavailable(f"Hand landmark model unavailable: {e}") from e

        cap = self._capture_factory(self.camera_index)
        if not cap.isOpened():
            tracker.close()
            raise SensorUnavailable(f"Cannot open camera {self.camera_index}")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, CAMERA_WIDTH)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, CAMERA_HEIGHT)
        return tracker, cap

    def _run(self) -> None:
        try:
            tracker, cap = self._open()
        except SensorUnavailable as e:
            logger.warning("%s", e)
            self._set_status(TrackingStatus.UNAVAILABLE)
            self.cell.publish(GestureSignal.idle())
            return

        self._set_status(TrackingStatus.ACTIVE)
        gestures = GestureTracker()
        try:
            while not self._stop.is_set():
                ok, frame = cap.read()
                if not ok:
                    time.sleep(0.01)
                    continue

                hands = tracker.detect(frame, time.monotonic() * 1000.0)
                signal = gestures.update(hands)
                tracker.draw_landmarks(frame)
                self.cell.publish(signal, frame)
        except Exception:
            logger.exception("Landmark detection stopped")
            self._set_status(TrackingStatus.UNAVAILABLE)
            self.cell.publish(GestureSignal.idle())
        finally:
            cap.release()
            tracker.close()

    def __enter__(self):
        return self.start()

    def __exit__(self, *args):
        self.stop()
