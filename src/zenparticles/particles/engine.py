"""Morph/animation engine: moves the live particle buffer toward a target cloud."""

import logging
import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from zenparticles.hand_gestures import GestureSignal

from .config import (
    LERP_RATE,
    EXPANSION_BASE, EXPANSION_SPAN_GAIN, BREATH_AMPLITUDE,
    TENSION_DEAD_ZONE, TENSION_PULL, JITTER_AMPLITUDE,
    ROTATION_BASE_SPEED, ROTATION_TENSION_SPEED,
)
from .shapes import PointCloud, adapt_points

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Tunable constants for one engine instance."""
    lerp_rate: float = LERP_RATE
    expansion_base: float = EXPANSION_BASE
    expansion_span_gain: float = EXPANSION_SPAN_GAIN
    breath_amplitude: float = BREATH_AMPLITUDE
    tension_dead_zone: float = TENSION_DEAD_ZONE
    tension_pull: float = TENSION_PULL
    jitter_amplitude: float = JITTER_AMPLITUDE
    rotation_base_speed: float = ROTATION_BASE_SPEED
    rotation_tension_speed: float = ROTATION_TENSION_SPEED


class MorphEngine:
    """
    Owns the live particle positions and advances them once per frame.

    The live buffer is a flat float32 array of 3 * N values, mutated in place.
    The target cloud is only ever read; swapping it redirects the ongoing
    interpolation without touching the live positions.
    """

    def __init__(
        self,
        particle_count: int,
        config: EngineConfig | None = None,
        rng: np.random.Generator | None = None,
    ):
        if particle_count < 0:
            raise ValueError(f"Particle count must be non-negative, got {particle_count}")
        self.config = config or EngineConfig()
        self._rng = rng if rng is not None else np.random.default_rng()
        self.positions: NDArray[np.float32] = np.zeros(3 * particle_count, dtype=np.float32)
        self.rotation_y = 0.0
        self._target: PointCloud = np.zeros(3 * particle_count, dtype=np.float32)

    @property
    def particle_count(self) -> int:
        return self.positions.size // 3

    @property
    def target(self) -> PointCloud:
        return self._target

    def set_target(self, cloud: PointCloud) -> None:
        """Swap the morph target; live positions are left where they are."""
        cloud = np.asarray(cloud, dtype=np.float32).reshape(-1)
        if cloud.size != self.positions.size:
            logger.debug("Adapting target of %d values to %d particles", cloud.size, self.particle_count)
            cloud = adapt_points(cloud, self.particle_count)
        self._target = cloud

    def resize(self, particle_count: int) -> None:
        """Reallocate the live buffer for a new particle count (positions reset to 0)."""
        if particle_count < 0:
            raise ValueError(f"Particle count must be non-negative, got {particle_count}")
        if particle_count == self.particle_count:
            return
        logger.info("Particle buffer resized: %d -> %d", self.particle_count, particle_count)
        self.positions = np.zeros(3 * particle_count, dtype=np.float32)
        self._target = adapt_points(self._target, particle_count)

    # =========================================================================
    # PER-FRAME FACTORS
    # =========================================================================

    def expansion_factor(self, signal: GestureSignal, elapsed: float) -> float:
        """Hand span drives scale; with no hands the field breathes."""
        cfg = self.config
        if signal.has_hands:
            return cfg.expansion_base + signal.span * cfg.expansion_span_gain
        return math.sin(elapsed) * cfg.breath_amplitude + 1.0

    def tension_factor(self, signal: GestureSignal) -> float:
        return signal.tension if signal.has_hands else 0.0

    # =========================================================================
    # TICK
    # =========================================================================

    def tick(self, signal: GestureSignal, delta: float, elapsed: float) -> None:
        """
        Advance the animation by one frame.

        Args:
            signal: Latest gesture signal
            delta: Seconds since the previous tick
            elapsed: Seconds since the session started (drives breathing)
        """
        cfg = self.config
        tension = self.tension_factor(signal)

        if self.positions.size:
            target = self._target * np.float32(self.expansion_factor(signal, elapsed))

            if tension > cfg.tension_dead_zone:
                target *= np.float32(1.0 - tension * cfg.tension_pull)
                amp = cfg.jitter_amplitude * tension
                target += self._rng.uniform(-amp, amp, target.size).astype(np.float32)

            step = min(1.0, cfg.lerp_rate * max(delta, 0.0))
            self.positions += (target - self.positions) * np.float32(step)

        self.rotation_y += cfg.rotation_base_speed + tension * cfg.rotation_tension_speed
