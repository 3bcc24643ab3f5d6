"""Point cloud generation and particle animation."""

from .shapes import (
    ShapeKind,
    PointCloud,
    PROCEDURAL_SHAPES,
    adapt_points,
    generate,
    sphere_points,
    heart_points,
    ringed_planet_points,
    rose_points,
    humanoid_points,
    burst_points,
)
from .engine import EngineConfig, MorphEngine

__all__ = [
    "ShapeKind",
    "PointCloud",
    "PROCEDURAL_SHAPES",
    "adapt_points",
    "generate",
    "sphere_points",
    "heart_points",
    "ringed_planet_points",
    "rose_points",
    "humanoid_points",
    "burst_points",
    "EngineConfig",
    "MorphEngine",
]
