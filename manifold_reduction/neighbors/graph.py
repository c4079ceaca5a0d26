"""Neighbor-graph construction and sparse adjacency helpers."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

import numpy as np
from scipy import sparse

from manifold_reduction.errors import ConfigurationError
from manifold_reduction.logging import resolve_logger
from manifold_reduction.methods import NeighborsMethod

from .brute_force import brute_force_neighbors
from .cover_tree import cover_tree_neighbors


def find_neighbors(
    indices: Sequence[int],
    distance: Callable[[int, int], float],
    k: int,
    method: NeighborsMethod = NeighborsMethod.BRUTE_FORCE,
    logger: logging.Logger | None = None,
) -> np.ndarray:
    """k-nearest-neighbor graph of ``indices`` under ``distance``.

    Parameters
    ----------
    indices
        Observation indices.
    distance
        Distance callback.
    k
        Neighbors per point; must satisfy ``1 <= k < N``.
    method
        Search strategy.
    logger
        Destination for progress messages.

    Returns
    -------
    np.ndarray
        ``(N, k)`` positions into ``indices``. Self is excluded and each row
        is ordered by distance, then observation index.

    Raises
    ------
    ConfigurationError
        If ``k`` is out of range for the number of points.
    """
    indices = list(indices)
    n = len(indices)
    if k < 1 or k >= n:
        raise ConfigurationError(
            f"Number of neighbors must satisfy 1 <= k < N (k={k}, N={n})"
        )

    logger = resolve_logger(logger)
    logger.debug("Finding %d nearest neighbors of %d vectors (%s)", k, n, method.value)

    if method is NeighborsMethod.COVER_TREE:
        return cover_tree_neighbors(indices, distance, k)
    return brute_force_neighbors(indices, distance, k)


def neighbor_graph(neighbors: np.ndarray, weights: np.ndarray) -> sparse.csr_matrix:
    """Directed sparse ``(N, N)`` k-NN graph, one stored entry per edge.

    Zero weights (duplicate observations) stay stored, so scipy.sparse.csgraph
    still sees them as edges.
    """
    n, k = neighbors.shape
    rows = np.repeat(np.arange(n), k)
    return sparse.csr_matrix(
        (np.asarray(weights, dtype=np.float64).ravel(), (rows, neighbors.ravel())),
        shape=(n, n),
    )


def symmetric_adjacency(neighbors: np.ndarray, weights: np.ndarray) -> sparse.csr_matrix:
    """Symmetrized sparse ``(N, N)`` adjacency from a k-NN graph.

    An edge present in either direction is kept, with the larger weight.
    Zero-weight edges stay stored.
    """
    n, k = neighbors.shape
    heads = np.repeat(np.arange(n), k)
    tails = neighbors.ravel()
    values = np.asarray(weights, dtype=np.float64).ravel()

    rows = np.concatenate([heads, tails])
    cols = np.concatenate([tails, heads])
    values = np.concatenate([values, values])
    order = np.lexsort((cols, rows))
    rows, cols, values = rows[order], cols[order], values[order]

    # An edge listed from both ends keeps the larger weight.
    starts = np.flatnonzero(np.r_[True, (np.diff(rows) != 0) | (np.diff(cols) != 0)])
    return sparse.csr_matrix(
        (np.maximum.reduceat(values, starts), (rows[starts], cols[starts])),
        shape=(n, n),
    )


__all__ = ["find_neighbors", "neighbor_graph", "symmetric_adjacency"]
