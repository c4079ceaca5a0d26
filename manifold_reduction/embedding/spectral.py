"""Graph-Laplacian and diffusion-operator embeddings.

References
----------
Belkin, M. & Niyogi, P. (2003). "Laplacian eigenmaps for dimensionality
    reduction and data representation". Neural Computation, 15(6).
He, X. & Niyogi, P. (2003). "Locality preserving projections". NIPS.
Coifman, R. R. & Lafon, S. (2006). "Diffusion maps". Applied and
    Computational Harmonic Analysis, 21(1), 5-30.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from scipy import sparse

from manifold_reduction.callbacks import matrix_from_callback, neighbor_matrix
from manifold_reduction.config import ParameterKey
from manifold_reduction.neighbors import symmetric_adjacency

from .context import EmbeddingContext, EmbeddingResult


def heat_kernel(distances: np.ndarray, width: float) -> np.ndarray:
    return np.exp(-(distances**2) / width)


def neighbor_laplacian(ctx: EmbeddingContext) -> Tuple[sparse.csr_matrix, sparse.csr_matrix]:
    """Graph Laplacian ``L = D - W`` and degree matrix ``D`` of the heat-kernel graph."""
    neighbors = ctx.neighbors()
    width = ctx.parameters.get(ParameterKey.GAUSSIAN_KERNEL_WIDTH)
    weights = heat_kernel(neighbor_matrix(ctx.indices, neighbors, ctx.distance), width)
    adjacency = symmetric_adjacency(neighbors, weights)
    degree = sparse.diags(np.asarray(adjacency.sum(axis=1)).ravel(), format="csr")
    return (degree - adjacency).tocsr(), degree


def laplacian_eigenmaps(ctx: EmbeddingContext) -> EmbeddingResult:
    """Smallest non-trivial solutions of ``L v = λ D v``."""
    laplacian, degree = neighbor_laplacian(ctx)
    eig = ctx.eigen(laplacian, rhs=degree)
    return EmbeddingResult(
        embedding=eig.eigenvectors.T,
        method=ctx.method,
        eigenvalues=eig.eigenvalues,
    )


def locality_preserving_projections(ctx: EmbeddingContext) -> EmbeddingResult:
    """Smallest solutions of ``X L Xᵀ a = λ X D Xᵀ a``; coordinates ``Aᵀ X``."""
    laplacian, degree = neighbor_laplacian(ctx)
    centered, mean = ctx.centered_features()
    lhs = centered @ (laplacian @ centered.T)
    rhs = centered @ (degree @ centered.T)
    eig = ctx.eigen(lhs, rhs=rhs)
    projection = eig.eigenvectors.T
    return EmbeddingResult(
        embedding=projection @ centered,
        method=ctx.method,
        eigenvalues=eig.eigenvalues,
        projection=projection,
        mean=mean,
    )


def diffusion_map(ctx: EmbeddingContext) -> EmbeddingResult:
    """Diffusion coordinates ``λᵗ ψ`` of the row-normalized Markov operator.

    ``P = D⁻¹ K`` shares its spectrum with the symmetric ``D^{-1/2} K D^{-1/2}``,
    which is what gets decomposed; right eigenvectors of ``P`` are recovered
    as ``ψ = D^{-1/2} v``. The stationary (trivial) pair is skipped and the
    ``t``-step diffusion is applied through the eigenvalue power.
    """
    width = ctx.parameters.get(ParameterKey.GAUSSIAN_KERNEL_WIDTH)
    timesteps = ctx.parameters.get(ParameterKey.DIFFUSION_MAP_TIMESTEPS)

    kernel = heat_kernel(matrix_from_callback(ctx.indices, ctx.distance), width)
    degree = kernel.sum(axis=1)
    inv_sqrt_degree = 1.0 / np.sqrt(degree)
    symmetric = kernel * np.outer(inv_sqrt_degree, inv_sqrt_degree)

    eig = ctx.eigen(symmetric)
    psi = eig.eigenvectors * inv_sqrt_degree[:, None]
    return EmbeddingResult(
        embedding=(psi * eig.eigenvalues**timesteps).T,
        method=ctx.method,
        eigenvalues=eig.eigenvalues,
    )


__all__ = [
    "heat_kernel",
    "neighbor_laplacian",
    "laplacian_eigenmaps",
    "locality_preserving_projections",
    "diffusion_map",
]
