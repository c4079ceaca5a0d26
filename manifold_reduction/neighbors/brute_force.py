"""Exhaustive k-nearest-neighbor search."""

from __future__ import annotations

import heapq
from typing import Callable, List, Sequence

import numpy as np
from joblib import Parallel, delayed

from manifold_reduction.parallel import get_n_jobs


def _row_neighbors(
    row: int,
    indices: Sequence[int],
    distance: Callable[[int, int], float],
    k: int,
) -> List[int]:
    i = indices[row]
    candidates = (
        (distance(i, indices[col]), indices[col], col)
        for col in range(len(indices))
        if col != row
    )
    # Ties go to the smaller observation index, then the earlier position.
    return [col for _, _, col in heapq.nsmallest(k, candidates)]


def brute_force_neighbors(
    indices: Sequence[int],
    distance: Callable[[int, int], float],
    k: int,
) -> np.ndarray:
    """Scan all other points for each point, keeping the ``k`` closest.

    Returns
    -------
    np.ndarray
        ``(N, k)`` positions into ``indices``, rows ordered by distance and
        then by observation index.
    """
    indices = list(indices)
    n = len(indices)
    rows = Parallel(n_jobs=get_n_jobs(n), prefer="threads")(
        delayed(_row_neighbors)(row, indices, distance, k) for row in range(n)
    )
    return np.asarray(rows, dtype=np.intp).reshape(n, k)


__all__ = ["brute_force_neighbors"]
