"""Principal component analysis, linear and kernelized."""

from __future__ import annotations

import numpy as np

from manifold_reduction.callbacks import matrix_from_callback

from .context import EmbeddingContext, EmbeddingResult


def double_center(matrix: np.ndarray) -> np.ndarray:
    """``H M H`` with ``H = I - 11ᵀ/N``."""
    return (
        matrix
        - matrix.mean(axis=0, keepdims=True)
        - matrix.mean(axis=1, keepdims=True)
        + matrix.mean()
    )


def scale_by_sqrt_eigenvalues(eigenvectors: np.ndarray, eigenvalues: np.ndarray) -> np.ndarray:
    """``(k, N)`` coordinates ``√λ · v``; non-positive eigenvalues give zeros."""
    return (eigenvectors * np.sqrt(np.maximum(eigenvalues, 0.0))).T


def principal_component_analysis(ctx: EmbeddingContext) -> EmbeddingResult:
    """Project centered features onto the top eigenvectors of ``X Xᵀ / N``."""
    centered, mean = ctx.centered_features()
    covariance = centered @ centered.T / ctx.n_vectors
    eig = ctx.eigen(covariance)
    projection = eig.eigenvectors.T
    return EmbeddingResult(
        embedding=projection @ centered,
        method=ctx.method,
        eigenvalues=eig.eigenvalues,
        projection=projection,
        mean=mean,
    )


def kernel_pca(ctx: EmbeddingContext) -> EmbeddingResult:
    kernel_matrix = double_center(matrix_from_callback(ctx.indices, ctx.kernel))
    eig = ctx.eigen(kernel_matrix)
    return EmbeddingResult(
        embedding=scale_by_sqrt_eigenvalues(eig.eigenvectors, eig.eigenvalues),
        method=ctx.method,
        eigenvalues=eig.eigenvalues,
    )


__all__ = [
    "double_center",
    "scale_by_sqrt_eigenvalues",
    "principal_component_analysis",
    "kernel_pca",
]
