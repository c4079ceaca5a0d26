"""Local-reconstruction embeddings: LLE and LTSA families.

Each neighborhood contributes a small dense block (reconstruction weights or
a tangent-space alignment term) that is scattered into a sparse N x N
matrix. Kernel variants take the smallest non-trivial eigenvectors of that
matrix as coordinates; linear variants (NPE, LLTSA) solve the generalized
problem ``X M Xᵀ a = λ X Xᵀ a`` for a projection instead.

Blocks are computed with joblib threads and assembled in index order, so the
result does not depend on the number of workers.

References
----------
Roweis, S. & Saul, L. (2000). "Nonlinear dimensionality reduction by
    locally linear embedding". Science, 290.
Zhang, Z. & Zha, H. (2004). "Principal manifolds and nonlinear dimension
    reduction via local tangent space alignment". SIAM J. Sci. Comput.
He, X., Cai, D., Yan, S. & Zhang, H.-J. (2005). "Neighborhood preserving
    embedding". ICCV.
Zhang, T., Yang, J., Zhao, D. & Ge, X. (2007). "Linear local tangent space
    alignment and application to face recognition". Neurocomputing.
"""

from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

import numpy as np
import scipy.linalg
from joblib import Parallel, delayed
from scipy import sparse

from manifold_reduction.callbacks import matrix_from_callback
from manifold_reduction.parallel import get_n_jobs

from .context import EmbeddingContext, EmbeddingResult
from .projection import double_center

# Tikhonov regularization of local Gram matrices, relative to their trace.
RECONSTRUCTION_REGULARIZATION: float = 1e-3

Block = Tuple[np.ndarray, np.ndarray]


def reconstruction_weights(
    center: int,
    neighborhood: Sequence[int],
    kernel: Callable[[int, int], float],
) -> np.ndarray:
    """Weights reconstructing ``center`` from ``neighborhood`` in kernel space.

    Solves ``G w = 1`` with ``G[a, b] = <φ(x) - φ(n_a), φ(x) - φ(n_b)>`` and
    normalizes ``w`` to sum to one.
    """
    neighborhood = list(neighborhood)
    k_cc = kernel(center, center)
    k_cn = np.array([kernel(center, n) for n in neighborhood])
    k_nn = matrix_from_callback(neighborhood, kernel)
    gram = k_cc - k_cn[:, None] - k_cn[None, :] + k_nn

    trace = np.trace(gram)
    regularization = RECONSTRUCTION_REGULARIZATION * trace if trace > 0 else RECONSTRUCTION_REGULARIZATION
    gram[np.diag_indices_from(gram)] += regularization

    weights = scipy.linalg.solve(gram, np.ones(len(neighborhood)), assume_a="sym")
    return weights / weights.sum()


def tangent_alignment(
    neighborhood: Sequence[int],
    kernel: Callable[[int, int], float],
    dimension: int,
) -> np.ndarray:
    """Alignment block ``I - G Gᵀ`` of one neighborhood.

    ``G = [1/√m, V]`` where ``V`` holds the top ``dimension`` eigenvectors of
    the centered local kernel matrix.
    """
    local = double_center(matrix_from_callback(neighborhood, kernel))
    m = local.shape[0]
    _, vectors = scipy.linalg.eigh(local, subset_by_index=[m - dimension, m - 1])
    basis = np.hstack([np.full((m, 1), 1.0 / np.sqrt(m)), vectors])
    return np.eye(m) - basis @ basis.T


def _scatter(blocks: List[Block], n: int) -> sparse.csr_matrix:
    """Sum ``(positions, block)`` pairs into an ``(N, N)`` sparse matrix."""
    rows, cols, data = [], [], []
    for positions, block in blocks:
        r, c = np.meshgrid(positions, positions, indexing="ij")
        rows.append(r.ravel())
        cols.append(c.ravel())
        data.append(block.ravel())
    return sparse.coo_matrix(
        (np.concatenate(data), (np.concatenate(rows), np.concatenate(cols))),
        shape=(n, n),
    ).tocsr()


def _parallel(ctx: EmbeddingContext, function, items) -> list:
    return Parallel(n_jobs=get_n_jobs(ctx.n_vectors), prefer="threads")(
        delayed(function)(*item) for item in items
    )


def locally_linear_matrix(ctx: EmbeddingContext, neighbors: np.ndarray) -> sparse.csr_matrix:
    """``M = (I - W)ᵀ (I - W)`` from kernel reconstruction weights."""
    indices = np.asarray(ctx.indices)
    n, k = neighbors.shape
    rows = _parallel(
        ctx,
        reconstruction_weights,
        ((indices[row], indices[neighbors[row]], ctx.kernel) for row in range(n)),
    )
    weights = sparse.csr_matrix(
        (np.concatenate(rows), (np.repeat(np.arange(n), k), neighbors.ravel())),
        shape=(n, n),
    )
    residual = sparse.identity(n, format="csr") - weights
    return (residual.T @ residual).tocsr()


def tangent_alignment_matrix(ctx: EmbeddingContext, neighbors: np.ndarray) -> sparse.csr_matrix:
    """Sum of local tangent-space alignment blocks; neighborhoods include their center."""
    indices = np.asarray(ctx.indices)
    n = neighbors.shape[0]
    neighborhoods = [np.concatenate([[row], neighbors[row]]) for row in range(n)]
    blocks = _parallel(
        ctx,
        tangent_alignment,
        ((indices[positions], ctx.kernel, ctx.target_dimension) for positions in neighborhoods),
    )
    return _scatter(list(zip(neighborhoods, blocks)), n)


def _spectral_result(ctx: EmbeddingContext, matrix: sparse.csr_matrix) -> EmbeddingResult:
    eig = ctx.eigen(matrix)
    return EmbeddingResult(
        embedding=eig.eigenvectors.T,
        method=ctx.method,
        eigenvalues=eig.eigenvalues,
    )


def _linear_result(ctx: EmbeddingContext, matrix: sparse.csr_matrix) -> EmbeddingResult:
    centered, mean = ctx.centered_features()
    lhs = centered @ (matrix @ centered.T)
    rhs = centered @ centered.T
    eig = ctx.eigen(lhs, rhs=rhs)
    projection = eig.eigenvectors.T
    return EmbeddingResult(
        embedding=projection @ centered,
        method=ctx.method,
        eigenvalues=eig.eigenvalues,
        projection=projection,
        mean=mean,
    )


def kernel_locally_linear_embedding(ctx: EmbeddingContext) -> EmbeddingResult:
    return _spectral_result(ctx, locally_linear_matrix(ctx, ctx.neighbors()))


def kernel_local_tangent_space_alignment(ctx: EmbeddingContext) -> EmbeddingResult:
    return _spectral_result(ctx, tangent_alignment_matrix(ctx, ctx.neighbors()))


def neighborhood_preserving_embedding(ctx: EmbeddingContext) -> EmbeddingResult:
    return _linear_result(ctx, locally_linear_matrix(ctx, ctx.neighbors()))


def linear_local_tangent_space_alignment(ctx: EmbeddingContext) -> EmbeddingResult:
    return _linear_result(ctx, tangent_alignment_matrix(ctx, ctx.neighbors()))


__all__ = [
    "reconstruction_weights",
    "tangent_alignment",
    "locally_linear_matrix",
    "tangent_alignment_matrix",
    "kernel_locally_linear_embedding",
    "kernel_local_tangent_space_alignment",
    "neighborhood_preserving_embedding",
    "linear_local_tangent_space_alignment",
]
