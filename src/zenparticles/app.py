"""
Zen Particles

Hand-gesture-driven particle field. Pinch or make a fist to contract and
agitate the cloud; move two hands apart to expand it.

Controls:
  1-6        - Heart, Sphere, Ringed Planet, Rose, Humanoid, Burst
  c          - Next colour
  [ / ]      - Fewer / more particles
  g          - Type a prompt (Enter generates, ESC cancels)
  'q' or ESC - Quit
"""

import argparse
import logging
import time
from pathlib import Path
from typing import Optional

from zenparticles.generation import ShapeGenerationClient
from zenparticles.hand_gestures.config import MODEL_PATH
from zenparticles.hand_tracks import (
    LandmarkLoop,
    ParticleDisplay,
    SignalCell,
    TrackingStatus,
    compose_frame,
    hud_lines,
)
from zenparticles.logging_config import setup_logging
from zenparticles.particles import MorphEngine, PROCEDURAL_SHAPES
from zenparticles.particles.config import (
    COLOR_PALETTE,
    DEFAULT_COLOR_HEX,
    DEFAULT_PARTICLE_COUNT,
    MAX_PARTICLE_COUNT,
    PARTICLE_COUNT_STEP,
)
from zenparticles.shape_service import ShapeOrchestrator, ShapeSelection, parse_color

FAILURE_NOTICE_S = 4.0
MAX_PROMPT_LENGTH = 200

KEY_ESC = 27
KEY_ENTER = (10, 13)
KEY_BACKSPACE = (8, 127)
KEY_NONE = 255


class Controls:
    """
    Maps window key presses onto orchestrator commands.

    'g' switches to prompt entry: printable keys edit the text shown in the
    HUD, Enter submits it for generation and ESC cancels.
    """

    def __init__(self, service: ShapeOrchestrator, prompt: Optional[str] = None):
        self.service = service
        self.prompt = prompt or ""
        self.editing: Optional[str] = None
        self._color_index = 0

    @property
    def prompt_line(self) -> Optional[str]:
        """HUD text while a prompt is being typed."""
        if self.editing is None:
            return None
        return f"Prompt: {self.editing}_"

    def handle_key(self, key: int) -> bool:
        """
        Apply one key press.

        Returns:
            False when the user asked to quit
        """
        if key == KEY_NONE:
            return True
        if self.editing is not None:
            self._edit_prompt(key)
            return True

        if key in (ord("q"), KEY_ESC):
            return False

        if ord("1") <= key < ord("1") + len(PROCEDURAL_SHAPES):
            self.service.select_shape(PROCEDURAL_SHAPES[key - ord("1")])
        elif key == ord("c"):
            self._color_index = (self._color_index + 1) % len(COLOR_PALETTE)
            self.service.set_color(COLOR_PALETTE[self._color_index])
        elif key == ord("]"):
            self._change_count(PARTICLE_COUNT_STEP)
        elif key == ord("["):
            self._change_count(-PARTICLE_COUNT_STEP)
        elif key == ord("g"):
            self.editing = self.prompt
        return True

    def _edit_prompt(self, key: int) -> None:
        if key == KEY_ESC:
            self.editing = None
        elif key in KEY_ENTER:
            text = self.editing.strip()
            self.editing = None
            if text:
                self.prompt = text
                self.service.generate_from_prompt(text)
        elif key in KEY_BACKSPACE:
            self.editing = self.editing[:-1]
        elif 32 <= key < 127 and len(self.editing) < MAX_PROMPT_LENGTH:
            self.editing += chr(key)

    def _change_count(self, step: int) -> None:
        count = self.service.selection.particle_count + step
        self.service.set_particle_count(max(0, min(MAX_PARTICLE_COUNT, count)))


class FailureNotice:
    """Timed HUD message shown after a failed generation."""

    def __init__(self, duration: float = FAILURE_NOTICE_S):
        self.duration = duration
        self.message = ""
        self._until = 0.0

    def trigger(self, message: str) -> None:
        self.message = message
        self._until = time.monotonic() + self.duration

    def text(self) -> Optional[str]:
        if time.monotonic() >= self._until:
            return None
        if self.message:
            return f"AI generation failed: {self.message}"
        return "AI generation failed"


def run_particle_field(
    camera_index: int = 0,
    particle_count: int = DEFAULT_PARTICLE_COUNT,
    prompt: Optional[str] = None,
    color: str = DEFAULT_COLOR_HEX,
    model_path: Path = MODEL_PATH,
    use_camera: bool = True,
) -> None:
    """Run the particle field until the window is closed."""
    print(__doc__)

    notice = FailureNotice()
    engine = MorphEngine(particle_count)
    selection = ShapeSelection(particle_count=particle_count, color=parse_color(color))
    service = ShapeOrchestrator(
        engine,
        client=ShapeGenerationClient.from_env(),
        selection=selection,
        on_failure=notice.trigger,
    )
    controls = Controls(service, prompt)

    cell = SignalCell()
    loop = LandmarkLoop(cell, camera_index=camera_index, model_path=model_path) if use_camera else None

    with service, ParticleDisplay() as display:
        if loop is not None:
            loop.start()
        try:
            start = last = time.monotonic()
            while True:
                now = time.monotonic()
                delta, last = now - last, now

                service.poll()
                service.sync()

                signal = cell.latest()
                engine.tick(signal, delta, now - start)

                status = loop.status if loop is not None else TrackingStatus.UNAVAILABLE
                lines = hud_lines(
                    signal,
                    selection.kind.value,
                    selection.particle_count,
                    status.value,
                    generating=service.is_generating,
                    prompt_line=controls.prompt_line,
                )
                frame = compose_frame(
                    engine.positions,
                    engine.rotation_y,
                    selection.color,
                    lines,
                    preview=cell.latest_frame(),
                    notice=notice.text(),
                    size=display.size,
                )

                if not controls.handle_key(display.show(frame)):
                    break
        finally:
            if loop is not None:
                loop.stop()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Hand-gesture-driven particle field")
    parser.add_argument("-c", "--camera", type=int, default=0, help="Camera index")
    parser.add_argument("-n", "--particles", type=int, default=DEFAULT_PARTICLE_COUNT,
                        help="Number of particles")
    parser.add_argument("-p", "--prompt", default=None, help="Initial text for the 'g' prompt")
    parser.add_argument("--color", default=DEFAULT_COLOR_HEX, help="Particle colour as #rrggbb")
    parser.add_argument("--model-path", type=Path, default=MODEL_PATH, help="Hand landmarker model file")
    parser.add_argument("--no-camera", action="store_true", help="Run without hand tracking")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    args = parser.parse_args(argv)

    if args.particles < 0:
        parser.error("--particles must be non-negative")
    try:
        parse_color(args.color)
    except ValueError as e:
        parser.error(str(e))

    setup_logging(logging.DEBUG if args.debug else logging.INFO, args.log_file)

    run_particle_field(
        camera_index=args.camera,
        particle_count=min(args.particles, MAX_PARTICLE_COUNT),
        prompt=args.prompt,
        color=args.color,
        model_path=args.model_path,
        use_camera=not args.no_camera,
    )


if __name__ == "__main__":
    main()
