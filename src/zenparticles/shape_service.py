"""
Shape Selection Service.

Holds the current shape selection, feeds target clouds to the morph engine
and runs AI shape generation in the background without stalling the frame loop.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

import numpy as np

from zenparticles.generation import GenerationFailure, ShapeGenerationClient
from zenparticles.particles import MorphEngine, PointCloud, ShapeKind, generate
from zenparticles.particles.config import DEFAULT_COLOR_HEX, DEFAULT_PARTICLE_COUNT

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]


def parse_color(color: Union[str, Sequence[int]]) -> RGB:
    """Accept '#rrggbb' or an (r, g, b) sequence of 0-255 ints."""
    if isinstance(color, str):
        text = color.strip().lstrip("#")
        if len(text) != 6:
            raise ValueError(f"Expected a #rrggbb colour, got {color!r}")
        try:
            return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
        except ValueError:
            raise ValueError(f"Expected a #rrggbb colour, got {color!r}") from None

    rgb = tuple(int(c) for c in color)
    if len(rgb) != 3 or any(c < 0 or c > 255 for c in rgb):
        raise ValueError(f"Expected three 0-255 components, got {color!r}")
    return rgb


@dataclass
class ShapeSelection:
    """What the user has asked to see."""
    kind: ShapeKind = ShapeKind.HEART
    particle_count: int = DEFAULT_PARTICLE_COUNT
    color: RGB = parse_color(DEFAULT_COLOR_HEX)
    custom_points: Optional[PointCloud] = None


@dataclass
class _GenerationResult:
    token: int
    points: Optional[list[float]] = None
    error: Optional[str] = None


class ShapeOrchestrator:
    """
    Mediates between user commands and the morph engine.

    Handles:
    - Shape, colour and particle-count changes
    - Lazy, memoised regeneration of the target cloud
    - One background AI generation request at a time, applied on the frame thread
    """

    def __init__(
        self,
        engine: MorphEngine,
        client: Optional[ShapeGenerationClient] = None,
        selection: Optional[ShapeSelection] = None,
        on_failure: Optional[Callable[[str], None]] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.engine = engine
        self.client = client
        self.selection = selection or ShapeSelection(particle_count=engine.particle_count)
        self.on_failure = on_failure
        self.last_error: Optional[str] = None
        self._rng = rng

        if self.selection.particle_count != engine.particle_count:
            engine.resize(self.selection.particle_count)

        self._revision = 0
        self._target_key: Optional[tuple] = None

        self._lock = threading.Lock()
        self._token = 0
        self._pending: Optional[int] = None
        self._completed: Optional[_GenerationResult] = None
        self._worker: Optional[threading.Thread] = None
        self._closed = False

    @property
    def is_generating(self) -> bool:
        return self._pending is not None

    # =========================================================================
    # SELECTION COMMANDS
    # =========================================================================

    def select_shape(self, kind: ShapeKind) -> None:
        """Switch shape; any stored custom cloud is dropped."""
        logger.info("Shape selected: %s", kind.value)
        self.selection.kind = kind
        self.selection.custom_points = None
        self._revision += 1

    def set_color(self, color: Union[str, Sequence[int]]) -> None:
        self.selection.color = parse_color(color)

    def set_particle_count(self, count: int) -> None:
        """Change the particle count; the live buffer is reallocated."""
        if count < 0:
            raise ValueError(f"Particle count must be non-negative, got {count}")
        if count == self.selection.particle_count:
            return
        self.selection.particle_count = count
        self.engine.resize(count)
        self._revision += 1

    # =========================================================================
    # TARGET CLOUD
    # =========================================================================

    def sync(self) -> bool:
        """
        Hand the engine a fresh target if the selection changed since the last call.

        Returns:
            Whether a new target was generated
        """
        sel = self.selection
        key = (self._revision, sel.kind, sel.particle_count)
        if key == self._target_key:
            return False

        cloud = generate(sel.kind, sel.particle_count, custom_points=sel.custom_points, rng=self._rng)
        self.engine.set_target(cloud)
        self._target_key = key
        return True

    # =========================================================================
    # AI GENERATION
    # =========================================================================

    def generate_from_prompt(self, prompt: str) -> bool:
        """
        Start a background generation request.

        Returns:
            True if a request was started
        """
        if self._closed:
            return False
        if not prompt or not prompt.strip():
            self._report_failure("Prompt is empty")
            return False
        if self.client is None:
            self._report_failure("No generation client configured")
            return False
        if self._pending is not None:
            logger.warning("Generation already in progress; ignoring prompt %r", prompt)
            return False

        self._token += 1
        token = self._token
        self._pending = token
        self.last_error = None

        self._worker = threading.Thread(
            target=self._run_generation, args=(token, prompt), daemon=True
        )
        self._worker.start()
        logger.info("Generation started for prompt %r", prompt)
        return True

    def _run_generation(self, token: int, prompt: str) -> None:
        try:
            result = _GenerationResult(token, points=self.client.generate_points(prompt))
        except GenerationFailure as e:
            result = _GenerationResult(token, error=str(e))
        except Exception as e:
            logger.exception("Unexpected error during generation")
            result = _GenerationResult(token, error=f"Unexpected error: {e}")

        with self._lock:
            self._completed = result

    def poll(self) -> bool:
        """
        Apply a finished generation result. Call from the frame loop.

        Returns:
            Whether the selection changed
        """
        with self._lock:
            result, self._completed = self._completed, None
        if result is None:
            return False

        if self._closed or result.token != self._pending:
            logger.debug("Dropping stale generation result (token %d)", result.token)
            return False
        self._pending = None

        if result.error is not None:
            self._report_failure(result.error)
            return False

        sel = self.selection
        sel.kind = ShapeKind.CUSTOM
        sel.custom_points = np.asarray(result.points, dtype=np.float32)
        self._revision += 1
        logger.info("AI shape applied (%d values)", len(result.points))
        return True

    def wait_for_generation(self, timeout: Optional[float] = None) -> None:
        """Block until the current worker thread (if any) has finished."""
        worker = self._worker
        if worker is not None:
            worker.join(timeout)

    def _report_failure(self, message: str) -> None:
        logger.error("AI generation failed: %s", message)
        self.last_error = message
        if self.on_failure:
            self.on_failure(message)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def close(self) -> None:
        """Tear down; a result still in flight is discarded when it arrives."""
        self._closed = True
        self._pending = None
        if self.client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
