"""Dense matrices built by exhaustively evaluating a callback.

Every ordered pair is evaluated, diagonal included, without a symmetry
shortcut, so asymmetric callbacks come out exactly as they are.
"""

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


def matrix_from_callback(
    indices: Sequence[int],
    callback: Callable[[int, int], T],
    dtype=np.float64,
) -> np.ndarray:
    """Evaluate ``callback(i, j)`` for every ordered pair of ``indices``.

    Parameters
    ----------
    indices
        Observation indices; row and column order follow this sequence.
    callback
        Pairwise callback. Scalar results give an ``(N, N)`` matrix; vector
        results of length ``m`` give an ``(N, N, m)`` array.
    dtype
        Element type of the result.

    Returns
    -------
    np.ndarray
    """
    indices = list(indices)
    rows = [[callback(i, j) for j in indices] for i in indices]
    return np.asarray(rows, dtype=dtype)


def cross_matrix(
    rows: Sequence[int],
    columns: Sequence[int],
    callback: Callable[[int, int], float],
) -> np.ndarray:
    """Evaluate ``callback(i, j)`` for ``i`` in ``rows`` and ``j`` in ``columns``."""
    columns = list(columns)
    return np.asarray([[callback(i, j) for j in columns] for i in rows], dtype=np.float64)


def neighbor_matrix(
    indices: Sequence[int],
    neighbors: np.ndarray,
    callback: Callable[[int, int], float],
) -> np.ndarray:
    """Evaluate ``callback`` between each point and its neighbors, ``(N, k)``.

    ``neighbors`` holds positions into ``indices``.
    """
    indices = np.asarray(indices)
    out = np.empty(neighbors.shape, dtype=np.float64)
    for row, nbrs in enumerate(neighbors):
        i = indices[row]
        out[row] = [callback(i, indices[c]) for c in nbrs]
    return out


def feature_matrix(
    indices: Sequence[int],
    feature_vector: Callable[[int], np.ndarray],
) -> np.ndarray:
    """Stack feature vectors column-wise into a ``(D, N)`` matrix."""
    columns = [np.asarray(feature_vector(i), dtype=np.float64).ravel() for i in indices]
    if not columns:
        return np.zeros((0, 0), dtype=np.float64)
    return np.column_stack(columns)


__all__ = ["matrix_from_callback", "cross_matrix", "neighbor_matrix", "feature_matrix"]
