"""Text-to-point-cloud generation."""

from .client import GenerationFailure, ShapeGenerationClient

__all__ = [
    "GenerationFailure",
    "ShapeGenerationClient",
]
