"""Stochastic proximity embedding (Agrafiotis, 2003).

Starting from random coordinates, each round samples pairs of points and
moves both ends of every pair along their difference so the embedded
distance approaches the target distance:

    Δ = λ/2 · (r - d) / (d + ε) · (y_i - y_j),   y_i += Δ,  y_j -= Δ

The learning rate λ starts at 1 and decays by ``λ / num_updates`` per round.
Rounds stop after ``SPE_NUM_UPDATES`` or once the mean absolute coordinate
change of a round falls below ``SPE_TOLERANCE``.
"""

from __future__ import annotations

import numpy as np
from sklearn.utils import check_random_state

from manifold_reduction.config import ParameterKey

from .context import EmbeddingContext, EmbeddingResult


def initial_coordinates(n_vectors: int, target_dimension: int, random_state=None) -> np.ndarray:
    """Seed coordinates, ``(target_dimension, N)`` uniform in [-1, 1)."""
    rng = check_random_state(random_state)
    return rng.uniform(-1.0, 1.0, size=(n_vectors, target_dimension)).T.copy()


def _sample_pairs(rng, n: int, neighbors: np.ndarray | None):
    permutation = rng.permutation(n)
    if neighbors is None:
        half = n // 2
        return permutation[:half], permutation[half : 2 * half]
    choice = rng.randint(0, neighbors.shape[1], size=n)
    return permutation, neighbors[permutation, choice[permutation]]


def stochastic_proximity_embedding(ctx: EmbeddingContext) -> EmbeddingResult:
    p = ctx.parameters
    n = ctx.n_vectors
    num_updates = p.get(ParameterKey.SPE_NUM_UPDATES)
    tolerance = p.get(ParameterKey.SPE_TOLERANCE)
    neighbors = None if p.get(ParameterKey.SPE_GLOBAL_STRATEGY) else ctx.neighbors()

    rng = check_random_state(ctx.random_seed)
    coordinates = initial_coordinates(n, ctx.target_dimension, rng).T.copy()
    indices = np.asarray(ctx.indices)

    learning_rate = 1.0
    for round_ in range(num_updates):
        first, second = _sample_pairs(rng, n, neighbors)
        targets = np.array(
            [ctx.distance(i, j) for i, j in zip(indices[first], indices[second])],
            dtype=np.float64,
        )
        differences = coordinates[first] - coordinates[second]
        current = np.sqrt(np.sum(differences**2, axis=1))

        scale = 0.5 * learning_rate * (targets - current) / (current + tolerance)
        delta = scale[:, None] * differences
        np.add.at(coordinates, first, delta)
        np.subtract.at(coordinates, second, delta)

        learning_rate -= learning_rate / num_updates
        change = float(np.mean(np.abs(delta))) if delta.size else 0.0
        if change < tolerance:
            ctx.logger.debug("SPE converged after %d rounds (change %.3g)", round_ + 1, change)
            break

    return EmbeddingResult(embedding=coordinates.T.copy(), method=ctx.method)


__all__ = ["initial_coordinates", "stochastic_proximity_embedding"]
