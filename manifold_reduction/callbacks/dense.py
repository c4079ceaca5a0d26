"""Callbacks backed by an in-memory feature matrix.

The matrix is laid out feature x observation, so column ``i`` is the
feature vector of observation ``i``.
"""

from __future__ import annotations

import numpy as np


class _FeatureMatrixCallback:
    def __init__(self, data: np.ndarray) -> None:
        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 2:
            raise ValueError(f"Expected a 2-D feature matrix, got shape {data.shape}")
        self.data = data

    @property
    def n_vectors(self) -> int:
        return self.data.shape[1]

    @property
    def dimension(self) -> int:
        return self.data.shape[0]


class LinearKernel(_FeatureMatrixCallback):
    """Dot product of two feature vectors."""

    def __call__(self, i: int, j: int) -> float:
        return float(self.data[:, i] @ self.data[:, j])


class EuclideanDistance(_FeatureMatrixCallback):
    """Euclidean distance between two feature vectors."""

    def __call__(self, i: int, j: int) -> float:
        diff = self.data[:, i] - self.data[:, j]
        return float(np.sqrt(diff @ diff))


class FeatureVectors(_FeatureMatrixCallback):
    def __call__(self, i: int) -> np.ndarray:
        return self.data[:, i]


__all__ = ["LinearKernel", "EuclideanDistance", "FeatureVectors"]
