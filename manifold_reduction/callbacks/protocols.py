"""Narrow data-access capabilities the engine is written against.

Each capability is a single call over observation indices, so any backend
(in-memory features, a precomputed matrix, something on disk) can satisfy
it without the engine knowing which.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class KernelCallback(Protocol):
    """Symmetric similarity between two observations."""

    def __call__(self, i: int, j: int) -> float: ...


@runtime_checkable
class DistanceCallback(Protocol):
    """Symmetric, non-negative dissimilarity with ``distance(i, i) == 0``."""

    def __call__(self, i: int, j: int) -> float: ...


@runtime_checkable
class FeatureVectorCallback(Protocol):
    """The D-dimensional feature vector of one observation."""

    def __call__(self, i: int) -> np.ndarray: ...
