"""Particle field rendering and HUD overlay."""

import math
from typing import Optional, Sequence

import cv2
import numpy as np
from numpy.typing import NDArray

from zenparticles.hand_gestures import GestureSignal
from zenparticles.hand_gestures.config import DISPLAY_FLIP

# =============================================================================
# DISPLAY SETTINGS
# =============================================================================
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
BACKGROUND_BGR = (5, 5, 5)

CAMERA_Z = 8.0
FOV_DEG = 60.0
NEAR_PLANE = 0.1

PARTICLE_OPACITY = 0.8
GLOW_SIGMA = 3.0
GLOW_GAIN = 1.5

PREVIEW_WIDTH = 192
PREVIEW_MARGIN = 16

COLOR_WHITE = (255, 255, 255)
COLOR_GRAY = (150, 150, 150)
COLOR_GREEN = (0, 255, 0)
COLOR_YELLOW = (0, 255, 255)
COLOR_RED = (0, 0, 255)
FONT = cv2.FONT_HERSHEY_SIMPLEX


# =============================================================================
# PROJECTION
# =============================================================================

def rotate_y(xyz: NDArray[np.float32], angle: float) -> NDArray[np.float32]:
    """Rotate (N, 3) points about the Y axis."""
    c, s = math.cos(angle), math.sin(angle)
    x, y, z = xyz[:, 0], xyz[:, 1], xyz[:, 2]
    return np.stack([x * c + z * s, y, -x * s + z * c], axis=-1)


def project_points(
    positions: NDArray[np.float32],
    rotation_y: float,
    width: int,
    height: int,
    camera_z: float = CAMERA_Z,
    fov_deg: float = FOV_DEG,
) -> tuple[NDArray[np.int32], NDArray[np.int32]]:
    """
    Project a flat xyz buffer through a perspective camera looking down -Z.

    Returns:
        (px, py) integer pixel coordinates of the points that land on screen
    """
    xyz = rotate_y(np.asarray(positions, dtype=np.float32).reshape(-1, 3), rotation_y)
    depth = camera_z - xyz[:, 2]
    in_front = depth > NEAR_PLANE

    focal = (height / 2) / math.tan(math.radians(fov_deg) / 2)
    safe = np.where(in_front, depth, 1.0)
    px = np.rint(width / 2 + xyz[:, 0] * focal / safe).astype(np.int32)
    py = np.rint(height / 2 - xyz[:, 1] * focal / safe).astype(np.int32)

    visible = in_front & (px >= 0) & (px < width) & (py >= 0) & (py < height)
    return px[visible], py[visible]


def render_particles(
    canvas: NDArray[np.uint8],
    positions: NDArray[np.float32],
    rotation_y: float,
    color_rgb: Sequence[int],
) -> None:
    """Additively splat particles onto canvas with a soft glow."""
    h, w = canvas.shape[:2]
    px, py = project_points(positions, rotation_y, w, h)
    if px.size == 0:
        return

    layer = np.zeros((h, w), dtype=np.float32)
    np.add.at(layer, (py, px), PARTICLE_OPACITY)
    layer = cv2.dilate(layer, np.ones((2, 2), np.uint8))
    layer += cv2.GaussianBlur(layer, (0, 0), GLOW_SIGMA) * GLOW_GAIN

    bgr = np.array(color_rgb[::-1], dtype=np.float32)
    light = layer[:, :, None] * bgr
    canvas[:] = np.clip(canvas.astype(np.float32) + light, 0, 255).astype(np.uint8)


# =============================================================================
# OVERLAY
# =============================================================================

def hud_lines(
    signal: GestureSignal,
    shape_name: str,
    particle_count: int,
    status_text: str,
    generating: bool = False,
    prompt_line: Optional[str] = None,
) -> list[tuple[str, tuple[int, int, int]]]:
    """Text rows for the top-left HUD."""
    if signal.has_hands:
        noun = "HAND" if signal.hand_count == 1 else "HANDS"
        lines = [(f"{signal.hand_count} {noun} DETECTED", COLOR_GREEN)]
        lines.append((f"Pinch: {signal.tension * 100:.0f}%", COLOR_WHITE))
        lines.append((f"Span: {signal.span * 100:.0f}%", COLOR_WHITE))
    else:
        lines = [("NO HANDS", COLOR_GRAY)]

    lines.append((f"Shape: {shape_name}", COLOR_WHITE))
    lines.append((f"Particles: {particle_count}", COLOR_WHITE))
    if generating:
        lines.append(("Generating...", COLOR_YELLOW))
    if prompt_line is not None:
        lines.append((prompt_line, COLOR_YELLOW))

    status_color = COLOR_GREEN if status_text == "Tracking Active" else COLOR_YELLOW
    if status_text == "NO TRACKING":
        status_color = COLOR_RED
    lines.append((status_text, status_color))
    return lines


def draw_overlay(frame: NDArray[np.uint8], lines: list[tuple[str, tuple[int, int, int]]]) -> None:
    y = 30
    for text, color in lines:
        cv2.putText(frame, text, (10, y), FONT, 0.6, color, 2)
        y += 25


def draw_notice(frame: NDArray[np.uint8], text: str) -> None:
    """Centered warning banner near the bottom edge."""
    h, w = frame.shape[:2]
    (tw, _), _ = cv2.getTextSize(text, FONT, 0.7, 2)
    cv2.putText(frame, text, ((w - tw) // 2, h - 30), FONT, 0.7, COLOR_RED, 2)


def draw_preview(canvas: NDArray[np.uint8], frame: Optional[NDArray[np.uint8]]) -> None:
    """Small camera inset in the bottom-right corner."""
    if frame is None:
        return
    h, w = canvas.shape[:2]
    fh, fw = frame.shape[:2]
    pw = min(PREVIEW_WIDTH, w - 2 * PREVIEW_MARGIN)
    ph = max(1, int(fh * pw / fw))
    if pw <= 0 or ph > h - 2 * PREVIEW_MARGIN:
        return

    inset = cv2.resize(frame, (pw, ph))
    if DISPLAY_FLIP:
        inset = cv2.flip(inset, 1)

    x0 = w - PREVIEW_MARGIN - pw
    y0 = h - PREVIEW_MARGIN - ph
    canvas[y0:y0 + ph, x0:x0 + pw] = inset
    cv2.rectangle(canvas, (x0 - 1, y0 - 1), (x0 + pw, y0 + ph), COLOR_GRAY, 1)


def compose_frame(
    positions: NDArray[np.float32],
    rotation_y: float,
    color_rgb: Sequence[int],
    lines: list[tuple[str, tuple[int, int, int]]],
    preview: Optional[NDArray[np.uint8]] = None,
    notice: Optional[str] = None,
    size: tuple[int, int] = (WINDOW_WIDTH, WINDOW_HEIGHT),
) -> NDArray[np.uint8]:
    """Build one complete BGR frame."""
    width, height = size
    canvas = np.empty((height, width, 3), dtype=np.uint8)
    canvas[:] = BACKGROUND_BGR

    render_particles(canvas, positions, rotation_y, color_rgb)
    draw_preview(canvas, preview)
    draw_overlay(canvas, lines)
    if notice:
        draw_notice(canvas, notice)
    return canvas


class ParticleDisplay:
    """Manages the OpenCV window."""

    def __init__(self, window_name: str = "Zen Particles", size: tuple[int, int] = (WINDOW_WIDTH, WINDOW_HEIGHT)):
        self.window_name = window_name
        self.size = size
        cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(window_name, *size)

    def show(self, frame: NDArray[np.uint8]) -> int:
        """Display frame and return key press."""
        cv2.imshow(self.window_name, frame)
        return cv2.waitKey(1) & 0xFF

    def close(self) -> None:
        """Close display window."""
        cv2.destroyWindow(self.window_name)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
