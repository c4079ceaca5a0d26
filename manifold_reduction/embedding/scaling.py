"""Classical multidimensional scaling and its landmark / geodesic variants.

Landmark variants run the eigendecomposition on a subset of points and place
every point by distance-based triangulation (de Silva & Tenenbaum, 2004):

    y = -1/2 · L♯ (δ_y - δ̄)

where ``L♯`` holds the landmark eigenvectors scaled by ``1/√λ``, ``δ_y`` the
squared distances of ``y`` to the landmarks and ``δ̄`` their mean over
landmarks. Landmarks themselves are reproduced exactly.

Isomap variants replace plain distances by shortest-path distances over the
undirected k-nearest-neighbor graph; zero-length edges between duplicate
observations count as edges.
"""

from __future__ import annotations

import numpy as np
from scipy.sparse.csgraph import shortest_path
from sklearn.utils import check_random_state

from manifold_reduction.callbacks import cross_matrix, matrix_from_callback, neighbor_matrix
from manifold_reduction.config import ParameterKey
from manifold_reduction.eigen import EigenResult
from manifold_reduction.errors import ConfigurationError
from manifold_reduction.neighbors import neighbor_graph

from .context import EmbeddingContext, EmbeddingResult
from .projection import double_center, scale_by_sqrt_eigenvalues

# Eigenvalues at or below this are treated as carrying no variance.
_EIGENVALUE_FLOOR = 1e-12


def landmark_count(n_vectors: int, ratio: float) -> int:
    return min(n_vectors, int(n_vectors * ratio + 1e-9))


def select_landmarks(n_vectors: int, ratio: float, random_state=None) -> np.ndarray:
    """Sorted positions of ``⌊ratio · N⌋`` randomly chosen landmarks."""
    n_landmarks = landmark_count(n_vectors, ratio)
    if n_landmarks >= n_vectors:
        return np.arange(n_vectors)
    rng = check_random_state(random_state)
    return np.sort(rng.permutation(n_vectors)[:n_landmarks])


def _scaling_eigen(ctx: EmbeddingContext, distances: np.ndarray) -> EigenResult:
    return ctx.eigen(-0.5 * double_center(distances**2))


def triangulate(
    eig: EigenResult,
    landmark_distances: np.ndarray,
    distances_to_all: np.ndarray,
) -> np.ndarray:
    """Place points from their distances to the landmarks.

    Parameters
    ----------
    eig
        Eigenpairs of the double-centered landmark matrix.
    landmark_distances
        ``(L, L)`` distances between landmarks.
    distances_to_all
        ``(L, N)`` distances from each landmark to every point.

    Returns
    -------
    np.ndarray
        ``(k, N)`` coordinates.
    """
    values = eig.eigenvalues
    scale = np.zeros_like(values)
    positive = values > _EIGENVALUE_FLOOR
    scale[positive] = 1.0 / np.sqrt(values[positive])
    pseudo_inverse = eig.eigenvectors.T * scale[:, None]

    mean_squared = (landmark_distances**2).mean(axis=1)
    return -0.5 * pseudo_inverse @ (distances_to_all**2 - mean_squared[:, None])


def multidimensional_scaling(ctx: EmbeddingContext) -> EmbeddingResult:
    distances = matrix_from_callback(ctx.indices, ctx.distance)
    return _embed_distances(ctx, distances)


def _embed_distances(ctx: EmbeddingContext, distances: np.ndarray) -> EmbeddingResult:
    eig = _scaling_eigen(ctx, distances)
    return EmbeddingResult(
        embedding=scale_by_sqrt_eigenvalues(eig.eigenvectors, eig.eigenvalues),
        method=ctx.method,
        eigenvalues=eig.eigenvalues,
    )


def _landmarks(ctx: EmbeddingContext) -> np.ndarray:
    landmarks = select_landmarks(
        ctx.n_vectors,
        ctx.parameters.get(ParameterKey.LANDMARK_RATIO),
        ctx.random_seed,
    )
    ctx.logger.debug("Using %d of %d vectors as landmarks", len(landmarks), ctx.n_vectors)
    return landmarks


def _embed_from_landmarks(
    ctx: EmbeddingContext,
    landmarks: np.ndarray,
    distances_to_all: np.ndarray,
) -> EmbeddingResult:
    landmark_distances = distances_to_all[:, landmarks]
    eig = _scaling_eigen(ctx, landmark_distances)
    return EmbeddingResult(
        embedding=triangulate(eig, landmark_distances, distances_to_all),
        method=ctx.method,
        eigenvalues=eig.eigenvalues,
    )


def landmark_multidimensional_scaling(ctx: EmbeddingContext) -> EmbeddingResult:
    landmarks = _landmarks(ctx)
    indices = np.asarray(ctx.indices)
    distances_to_all = cross_matrix(indices[landmarks], ctx.indices, ctx.distance)
    return _embed_from_landmarks(ctx, landmarks, distances_to_all)


def geodesic_distances(
    ctx: EmbeddingContext,
    neighbors: np.ndarray,
    sources: np.ndarray | None = None,
) -> np.ndarray:
    """Dijkstra shortest paths over the neighbor graph.

    Returns ``(N, N)`` distances, or ``(len(sources), N)`` when ``sources`` is
    given.

    Raises
    ------
    ConfigurationError
        If the neighbor graph is disconnected.
    """
    weights = neighbor_matrix(ctx.indices, neighbors, ctx.distance)
    graph = neighbor_graph(neighbors, weights)
    distances = shortest_path(graph, method="D", directed=False, indices=sources)
    if not np.all(np.isfinite(distances)):
        raise ConfigurationError(
            "Neighbor graph is disconnected; increase the number of neighbors "
            f"(currently {neighbors.shape[1]})"
        )
    return distances


def isomap(ctx: EmbeddingContext) -> EmbeddingResult:
    geodesics = geodesic_distances(ctx, ctx.neighbors())
    return _embed_distances(ctx, geodesics)


def landmark_isomap(ctx: EmbeddingContext) -> EmbeddingResult:
    neighbors = ctx.neighbors()
    landmarks = _landmarks(ctx)
    distances_to_all = geodesic_distances(ctx, neighbors, sources=landmarks)
    return _embed_from_landmarks(ctx, landmarks, distances_to_all)


__all__ = [
    "landmark_count",
    "select_landmarks",
    "triangulate",
    "geodesic_distances",
    "multidimensional_scaling",
    "landmark_multidimensional_scaling",
    "isomap",
    "landmark_isomap",
]
