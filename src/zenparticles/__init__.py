"""Hand-gesture-driven particle field."""

from .hand_gestures import (
    GestureSignal,
    GestureTracker,
    interpret,
)

from .particles import (
    ShapeKind,
    EngineConfig,
    MorphEngine,
    adapt_points,
    generate,
)

from .generation import GenerationFailure, ShapeGenerationClient
from .shape_service import ShapeOrchestrator, ShapeSelection

__all__ = [
    # Gestures
    "GestureSignal",
    "GestureTracker",
    "interpret",
    # Particles
    "ShapeKind",
    "EngineConfig",
    "MorphEngine",
    "adapt_points",
    "generate",
    # Generation
    "GenerationFailure",
    "ShapeGenerationClient",
    "ShapeOrchestrator",
    "ShapeSelection",
]
