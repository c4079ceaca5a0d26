"""Callbacks that read from a dense precomputed N x N matrix."""

from __future__ import annotations

import numpy as np


class _PrecomputedCallback:
    def __init__(self, matrix: np.ndarray) -> None:
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            raise ValueError(f"Expected a square matrix, got shape {matrix.shape}")
        self.matrix = matrix

    def __call__(self, i: int, j: int) -> float:
        return float(self.matrix[i, j])


class PrecomputedKernel(_PrecomputedCallback):
    pass


class PrecomputedDistance(_PrecomputedCallback):
    pass


__all__ = ["PrecomputedKernel", "PrecomputedDistance"]
