"""
AI Shape Generation Client

This module turns a free-text prompt into a flat point list by calling the
Gemini generateContent REST endpoint with a JSON response schema.

Usage:
    from zenparticles.generation import ShapeGenerationClient

    with ShapeGenerationClient.from_env() as client:
        points = client.generate_points("a spiral galaxy")  # [x1, y1, z1, ...]
"""

import json
import logging
import math
import os
from typing import Optional

import numpy as np
import requests

logger = logging.getLogger(__name__)


class GenerationFailure(Exception):
    """Any failure to obtain a usable point list from the generative service."""


SYSTEM_PROMPT = """
You are a 3D geometry generator.
User will provide a description of a shape or object.
You must return a JSON object containing a flat array of 3D coordinates representing a point cloud of that shape.
The array should be named 'points'.
Format: [x1, y1, z1, x2, y2, z2, ...]

Constraints:
- Generate approximately 2000 to 3000 points.
- Coordinates should be normalized roughly between -4.0 and 4.0.
- Focus on the surface of the shape.
- If the user asks for something abstract, be creative.
- Be efficient.
"""

FLOAT32_MAX = float(np.finfo(np.float32).max)

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "points": {
            "type": "ARRAY",
            "items": {"type": "NUMBER"},
        }
    },
}


class ShapeGenerationClient:
    """Client for generating point clouds from text prompts."""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
    DEFAULT_MODEL = "gemini-2.5-flash"
    DEFAULT_TIMEOUT_S = 120.0

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        base_url: str = BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the generation client.

        Args:
            api_key: Gemini API key. A missing key is reported on first use.
            model: Model name used in the request path
            base_url: API root (without trailing slash)
            timeout: Request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls, **kwargs) -> "ShapeGenerationClient":
        """Build a client from GEMINI_API_KEY (or API_KEY) and GEMINI_MODEL."""
        api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
        model = os.environ.get("GEMINI_MODEL", cls.DEFAULT_MODEL)
        return cls(api_key=api_key, model=model, **kwargs)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def _build_request(self, prompt: str) -> dict:
        return {
            "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

    def _response_text(self, body: dict) -> str:
        """Pull the generated text out of a generateContent response."""
        try:
            parts = body["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            raise GenerationFailure("No response from the generation service")
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        if not text:
            raise GenerationFailure("No response from the generation service")
        return text

    def _parse_points(self, text: str) -> list[float]:
        """
        Validate the generated JSON document.

        Args:
            text: JSON text expected to hold {"points": [numbers...]}

        Returns:
            The point list as Python floats
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise GenerationFailure(f"Response is not valid JSON: {e}") from e

        points = data.get("points") if isinstance(data, dict) else None
        if not isinstance(points, list):
            raise GenerationFailure("Invalid format received: 'points' array missing")

        for value in points:
            # bool is an int subclass but not a coordinate
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise GenerationFailure("Invalid format received: non-numeric point value")
        values = []
        for value in points:
            try:
                v = float(value)
            except OverflowError:
                v = math.inf
            if not math.isfinite(v) or abs(v) > FLOAT32_MAX:
                raise GenerationFailure("Invalid format received: point value out of range")
            values.append(v)
        return values

    def generate_points(self, prompt: str) -> list[float]:
        """
        Generate a flat point list for a text prompt.

        Args:
            prompt: Free-text shape description

        Returns:
            Flat [x1, y1, z1, ...] list (length is not guaranteed to be a multiple of 3)

        Raises:
            GenerationFailure: for an empty prompt, missing key, transport
                error, HTTP error or malformed response
        """
        if not prompt or not prompt.strip():
            raise GenerationFailure("Prompt is empty")
        if not self.api_key:
            raise GenerationFailure("API key not found. Set GEMINI_API_KEY.")

        logger.info("Requesting shape from %s for prompt %r", self.model, prompt)
        try:
            response = self.session.post(
                self.endpoint,
                json=self._build_request(prompt.strip()),
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            raise GenerationFailure(f"Generation request failed: {e}") from e
        except ValueError as e:
            raise GenerationFailure(f"Service returned a non-JSON body: {e}") from e

        points = self._parse_points(self._response_text(body))
        logger.info("Received %d values (%d points)", len(points), len(points) // 3)
        return points

    def close(self):
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
