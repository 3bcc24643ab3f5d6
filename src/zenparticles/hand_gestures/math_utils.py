"""Vector and geometry utility functions."""

import math

Point2 = tuple[float, float]
Point3 = tuple[float, float, float]


def dist2(a: Point2, b: Point2) -> float:
    """Euclidean distance between 2D points (extra coordinates are ignored)."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def clamp(v: float, lo: float, hi: float) -> float:
    """Clamp value to range [lo, hi]."""
    return max(lo, min(hi, v))


def mean(values: list[float]) -> float:
    """Arithmetic mean; 0.0 for an empty list."""
    if not values:
        return 0.0
    return sum(values) / len(values)
