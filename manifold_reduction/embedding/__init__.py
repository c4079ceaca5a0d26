"""Embedding engine and per-method implementations."""

from __future__ import annotations

from .context import EmbeddingContext, EmbeddingResult
from .engine import check_dimensions, embed
from .proximity import initial_coordinates
from .scaling import select_landmarks

__all__ = [
    "EmbeddingContext",
    "EmbeddingResult",
    "embed",
    "check_dimensions",
    "initial_coordinates",
    "select_landmarks",
]
