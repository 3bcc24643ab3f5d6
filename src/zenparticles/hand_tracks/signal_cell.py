"""Latest-value hand-off between the landmark loop and the frame loop."""

import threading
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from zenparticles.hand_gestures import GestureSignal


class SignalCell:
    """
    Single-slot, last-write-wins holder for the newest GestureSignal.

    There is no queue: a reader that misses a frame just sees the next one,
    and a writer that stalls leaves the previous signal in place.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._signal = GestureSignal.idle()
        self._frame: Optional[NDArray[np.uint8]] = None
        self._updates = 0

    def publish(self, signal: GestureSignal, frame: Optional[NDArray[np.uint8]] = None) -> None:
        with self._lock:
            self._signal = signal
            if frame is not None:
                self._frame = frame
            self._updates += 1

    def latest(self) -> GestureSignal:
        with self._lock:
            return self._signal

    def latest_frame(self) -> Optional[NDArray[np.uint8]]:
        with self._lock:
            return self._frame

    @property
    def updates(self) -> int:
        with self._lock:
            return self._updates
