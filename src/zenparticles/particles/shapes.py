"""
Procedural point cloud generators.

Every generator returns a flat float32 buffer [x0, y0, z0, x1, y1, z1, ...]
of length exactly 3 * count. Sampling is random on every call, so selecting
the same shape twice produces two different clouds.
"""

import math
from enum import Enum
from typing import Callable, Sequence

import numpy as np
from numpy.typing import NDArray

from .config import (
    SPHERE_RADIUS,
    HEART_XY_SCALE, HEART_Z_SCALE, HEART_THICKNESS,
    PLANET_RATIO, PLANET_RADIUS, RING_INNER_RADIUS, RING_WIDTH, RING_THICKNESS,
    ROSE_PETALS_K, ROSE_AMPLITUDE, ROSE_OFFSET,
    BURST_MAX_RADIUS,
)

PointCloud = NDArray[np.float32]

TWO_PI = 2.0 * math.pi


class ShapeKind(Enum):
    HEART = "Heart"
    SPHERE = "Sphere"
    RINGED_PLANET = "Ringed Planet"
    ROSE = "Rose"
    HUMANOID = "Humanoid"
    BURST = "Burst"
    CUSTOM = "AI Generated"


PROCEDURAL_SHAPES = (
    ShapeKind.HEART,
    ShapeKind.SPHERE,
    ShapeKind.RINGED_PLANET,
    ShapeKind.ROSE,
    ShapeKind.HUMANOID,
    ShapeKind.BURST,
)

# Humanoid sections: (cumulative probability, center y, radius, x/y/z squash)
_BODY_SECTIONS = np.array([
    [0.4, -1.5, 1.5, 1.2, 0.6, 1.0],   # base / legs
    [0.8, 0.0, 1.0, 1.0, 1.0, 0.8],    # torso
    [1.0, 1.4, 0.6, 1.0, 1.0, 1.0],    # head
])


def _check_count(count: int) -> None:
    if count < 0:
        raise ValueError(f"Particle count must be non-negative, got {count}")


def _get_rng(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def _flatten(x: NDArray, y: NDArray, z: NDArray) -> PointCloud:
    """Interleave per-axis arrays into a flat xyz buffer."""
    return np.column_stack((x, y, z)).astype(np.float32).reshape(-1)


def _random_directions(rng: np.random.Generator, count: int) -> tuple[NDArray, NDArray, NDArray]:
    """Uniform unit vectors (inverse-CDF polar angle, uniform azimuth)."""
    theta = rng.uniform(0.0, TWO_PI, count)
    phi = np.arccos(2.0 * rng.random(count) - 1.0)
    return np.sin(phi) * np.cos(theta), np.sin(phi) * np.sin(theta), np.cos(phi)


# =============================================================================
# GENERATORS
# =============================================================================

def sphere_points(count: int, rng: np.random.Generator | None = None) -> PointCloud:
    """Uniform points on a sphere of radius 2."""
    _check_count(count)
    dx, dy, dz = _random_directions(_get_rng(rng), count)
    return _flatten(dx * SPHERE_RADIUS, dy * SPHERE_RADIUS, dz * SPHERE_RADIUS)


def heart_points(count: int, rng: np.random.Generator | None = None) -> PointCloud:
    """Parametric heart curve extruded into a slab."""
    _check_count(count)
    rng = _get_rng(rng)
    t = rng.uniform(0.0, TWO_PI, count)
    x = 16.0 * np.sin(t) ** 3
    y = 13.0 * np.cos(t) - 5.0 * np.cos(2 * t) - 2.0 * np.cos(3 * t) - np.cos(4 * t)
    z = (rng.random(count) - 0.5) * HEART_THICKNESS
    return _flatten(x * HEART_XY_SCALE, y * HEART_XY_SCALE, z * HEART_Z_SCALE)


def ringed_planet_points(count: int, rng: np.random.Generator | None = None) -> PointCloud:
    """Small sphere (first 40% of points) inside a thin flat ring."""
    _check_count(count)
    rng = _get_rng(rng)
    planet_count = min(count, math.ceil(count * PLANET_RATIO))
    ring_count = count - planet_count

    dx, dy, dz = _random_directions(rng, planet_count)
    planet = _flatten(dx * PLANET_RADIUS, dy * PLANET_RADIUS, dz * PLANET_RADIUS)

    angle = rng.uniform(0.0, TWO_PI, ring_count)
    r = RING_INNER_RADIUS + rng.random(ring_count) * RING_WIDTH
    y = (rng.random(ring_count) - 0.5) * RING_THICKNESS
    ring = _flatten(r * np.cos(angle), y, r * np.sin(angle))

    return np.concatenate((planet, ring))


def rose_points(count: int, rng: np.random.Generator | None = None) -> PointCloud:
    """Polar rose r = 2cos(4u) + 1 swept around a second angle."""
    _check_count(count)
    rng = _get_rng(rng)
    u = rng.uniform(0.0, TWO_PI, count)
    v = rng.uniform(0.0, math.pi, count)
    r = ROSE_AMPLITUDE * np.cos(ROSE_PETALS_K * u) + ROSE_OFFSET
    return _flatten(r * np.cos(u) * np.sin(v), r * np.cos(v), r * np.sin(u) * np.sin(v))


def humanoid_points(count: int, rng: np.random.Generator | None = None) -> PointCloud:
    """Seated silhouette from three stacked, squashed spheres."""
    _check_count(count)
    rng = _get_rng(rng)
    section = rng.random(count)
    idx = np.searchsorted(_BODY_SECTIONS[:, 0], section, side="right")
    _, cy, r, sx, sy, sz = _BODY_SECTIONS[idx].T

    dx, dy, dz = _random_directions(rng, count)
    return _flatten(r * dx * sx, cy + r * dy * sy, r * dz * sz)


def burst_points(count: int, rng: np.random.Generator | None = None) -> PointCloud:
    """Solid ball of radius 4 (radius sampled uniformly, not by volume)."""
    _check_count(count)
    rng = _get_rng(rng)
    dx, dy, dz = _random_directions(rng, count)
    r = rng.random(count) * BURST_MAX_RADIUS
    return _flatten(dx * r, dy * r, dz * r)


GENERATORS: dict[ShapeKind, Callable[..., PointCloud]] = {
    ShapeKind.HEART: heart_points,
    ShapeKind.SPHERE: sphere_points,
    ShapeKind.RINGED_PLANET: ringed_planet_points,
    ShapeKind.ROSE: rose_points,
    ShapeKind.HUMANOID: humanoid_points,
    ShapeKind.BURST: burst_points,
}


# =============================================================================
# EXTERNAL POINT LISTS
# =============================================================================

def adapt_points(points: Sequence[float] | NDArray, count: int) -> PointCloud:
    """
    Fit an external flat number list to exactly 3 * count floats.

    Missing trailing coordinates become 0 and extra values are dropped.
    The result is always a new array.
    """
    _check_count(count)
    src = np.asarray(points, dtype=np.float32).reshape(-1)
    out = np.zeros(3 * count, dtype=np.float32)
    n = min(src.size, out.size)
    out[:n] = src[:n]
    return out


def generate(
    kind: ShapeKind,
    count: int,
    custom_points: Sequence[float] | NDArray | None = None,
    rng: np.random.Generator | None = None,
) -> PointCloud:
    """
    Build the target cloud for a shape kind.

    Custom shapes use the supplied points; without points they fall back
    to a sphere.
    """
    if kind is ShapeKind.CUSTOM:
        if custom_points is not None:
            return adapt_points(custom_points, count)
        return sphere_points(count, rng)
    return GENERATORS[kind](count, rng)
