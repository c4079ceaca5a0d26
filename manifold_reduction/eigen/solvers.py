"""Symmetric (generalized) eigenproblem backends.

All backends return eigenpairs sorted towards the requested end of the
spectrum, after discarding ``skip`` leading (trivial) pairs, with a fixed sign
convention: the largest-magnitude component of every eigenvector is positive.

- ``dense``: :func:`scipy.linalg.eigh`, exact, O(N³).
- ``arpack``: :func:`scipy.sparse.linalg.eigsh`; the largest pairs directly,
  the smallest by shift-invert around ``-eigenshift``.
- ``randomized``: randomized range finder followed by Rayleigh-Ritz on the
  sampled subspace (Halko, Martinsson & Tropp, 2011). Approximate, never
  reports non-convergence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import scipy.linalg
from scipy import sparse
from scipy.sparse.linalg import ArpackNoConvergence, eigsh
from sklearn.utils import check_random_state
from sklearn.utils.extmath import randomized_range_finder

from manifold_reduction.errors import ConvergenceFailure, DimensionalityError
from manifold_reduction.logging import resolve_logger
from manifold_reduction.methods import EigenDirection, EigenMethod

# Power iterations used by the randomized range finder.
RANDOMIZED_POWER_ITERATIONS: int = 7


@dataclass
class EigenResult:
    """Eigenvalues ``(k,)`` and matching eigenvectors as columns ``(N, k)``."""

    eigenvalues: np.ndarray
    eigenvectors: np.ndarray


def _as_dense(matrix) -> np.ndarray:
    if sparse.issparse(matrix):
        matrix = matrix.toarray()
    matrix = np.asarray(matrix, dtype=np.float64)
    return 0.5 * (matrix + matrix.T)


def fix_signs(vectors: np.ndarray) -> np.ndarray:
    """Flip columns so their largest-magnitude component is positive."""
    if vectors.size == 0:
        return vectors
    rows = np.argmax(np.abs(vectors), axis=0)
    signs = np.sign(vectors[rows, np.arange(vectors.shape[1])])
    signs[signs == 0] = 1.0
    return vectors * signs


def _select(
    values: np.ndarray,
    vectors: np.ndarray,
    k: int,
    direction: EigenDirection,
    skip: int,
) -> EigenResult:
    keys = -values if direction is EigenDirection.LARGEST else values
    order = np.argsort(keys, kind="stable")[skip : skip + k]
    return EigenResult(
        eigenvalues=values[order].copy(),
        eigenvectors=fix_signs(vectors[:, order]),
    )


def dense_eigen(
    matrix,
    k: int,
    direction: EigenDirection,
    rhs=None,
    skip: int = 0,
) -> EigenResult:
    """Exact eigenpairs from the full spectrum."""
    a = _as_dense(matrix)
    b = _as_dense(rhs) if rhs is not None else None
    try:
        values, vectors = scipy.linalg.eigh(a, b)
    except np.linalg.LinAlgError as exc:
        raise DimensionalityError(
            f"Generalized eigenproblem is ill-posed (right-hand side not positive definite): {exc}"
        ) from exc
    return _select(values, vectors, k, direction, skip)


def arpack_eigen(
    matrix,
    k: int,
    direction: EigenDirection,
    rhs=None,
    skip: int = 0,
    eigenshift: float = 0.0,
    max_iterations: int = 1000,
    random_state: Optional[int] = None,
) -> EigenResult:
    """Krylov-subspace eigenpairs via ARPACK.

    Requests that leave ARPACK too small a subspace (``k + skip >= N - 1``)
    are answered by :func:`dense_eigen`.

    Raises
    ------
    ConvergenceFailure
        If ARPACK exhausts ``max_iterations`` or the shift-invert
        factorization fails.
    """
    n = matrix.shape[0]
    n_eigs = k + skip
    if n_eigs >= n - 1:
        return dense_eigen(matrix, k, direction, rhs=rhs, skip=skip)

    v0 = check_random_state(random_state).uniform(-1.0, 1.0, n)
    try:
        if direction is EigenDirection.LARGEST:
            values, vectors = eigsh(
                matrix, k=n_eigs, M=rhs, which="LA", v0=v0, maxiter=max_iterations
            )
        else:
            values, vectors = eigsh(
                matrix,
                k=n_eigs,
                M=rhs,
                sigma=-eigenshift,
                which="LM",
                v0=v0,
                maxiter=max_iterations,
            )
    except ArpackNoConvergence as exc:
        raise ConvergenceFailure(
            f"ARPACK did not converge to {n_eigs} eigenpairs within {max_iterations} iterations",
            method=EigenMethod.ARPACK.value,
        ) from exc
    except RuntimeError as exc:
        raise ConvergenceFailure(
            f"ARPACK shift-invert factorization failed (eigenshift={eigenshift}): {exc}",
            method=EigenMethod.ARPACK.value,
        ) from exc
    return _select(values, vectors, k, direction, skip)


def _gershgorin_bound(matrix: np.ndarray) -> float:
    return float(np.max(np.sum(np.abs(matrix), axis=1))) if matrix.size else 0.0


def randomized_eigen(
    matrix,
    k: int,
    direction: EigenDirection,
    rhs=None,
    skip: int = 0,
    oversampling: int = 10,
    random_state: Optional[int] = None,
) -> EigenResult:
    """Approximate eigenpairs from a randomly sampled subspace.

    The smallest end is reached by working on ``c I - A`` with ``c`` a
    Gershgorin bound on the spectrum. Generalized problems are reduced to
    standard form with the Cholesky factor of ``rhs``.
    """
    a = _as_dense(matrix)

    if rhs is not None:
        b = _as_dense(rhs)
        try:
            lower = scipy.linalg.cholesky(b, lower=True)
        except np.linalg.LinAlgError as exc:
            raise DimensionalityError(
                f"Generalized eigenproblem is ill-posed (right-hand side not positive definite): {exc}"
            ) from exc
        half = scipy.linalg.solve_triangular(lower, a, lower=True)
        reduced = scipy.linalg.solve_triangular(lower, half.T, lower=True)
        result = randomized_eigen(
            reduced,
            k,
            direction,
            skip=skip,
            oversampling=oversampling,
            random_state=random_state,
        )
        vectors = scipy.linalg.solve_triangular(lower.T, result.eigenvectors, lower=False)
        return EigenResult(result.eigenvalues, fix_signs(vectors))

    n = a.shape[0]
    size = min(n, k + skip + oversampling)
    if direction is EigenDirection.SMALLEST:
        shift = _gershgorin_bound(a)
        work = shift * np.eye(n) - a
    else:
        work = a

    basis = randomized_range_finder(
        work,
        size=size,
        n_iter=RANDOMIZED_POWER_ITERATIONS,
        random_state=check_random_state(random_state),
    )
    values, small_vectors = scipy.linalg.eigh(basis.T @ a @ basis)
    vectors = basis @ small_vectors
    return _select(values, vectors, k, direction, skip)


def eigendecompose(
    matrix,
    k: int,
    method: EigenMethod,
    direction: EigenDirection,
    *,
    rhs=None,
    skip: int = 0,
    eigenshift: float = 0.0,
    oversampling: int = 10,
    max_iterations: int = 1000,
    random_state: Optional[int] = None,
    dense_fallback: bool = False,
    logger: logging.Logger | None = None,
) -> EigenResult:
    """Compute ``k`` eigenpairs of ``matrix`` (optionally against ``rhs``).

    Parameters
    ----------
    matrix
        Symmetric ``(N, N)`` dense array or scipy sparse matrix.
    k
        Number of eigenpairs returned.
    method
        Backend.
    direction
        ``LARGEST`` sorts descending, ``SMALLEST`` ascending.
    rhs
        Symmetric positive-definite right-hand side of a generalized problem.
    skip
        Leading eigenpairs discarded before the ``k`` returned ones.
    dense_fallback
        When the iterative backend fails to converge, solve densely instead of
        raising.

    Returns
    -------
    EigenResult
    """
    logger = resolve_logger(logger)
    n = matrix.shape[0]
    if k < 1 or k + skip > n:
        raise DimensionalityError(
            f"Cannot compute {k} eigenpairs (skipping {skip}) of a {n}x{n} matrix"
        )

    logger.debug(
        "Computing %d %s eigenpairs of a %dx%d matrix (%s)",
        k,
        direction.value,
        n,
        n,
        method.value,
    )

    if method is EigenMethod.DENSE:
        return dense_eigen(matrix, k, direction, rhs=rhs, skip=skip)

    if method is EigenMethod.RANDOMIZED:
        return randomized_eigen(
            matrix,
            k,
            direction,
            rhs=rhs,
            skip=skip,
            oversampling=oversampling,
            random_state=random_state,
        )

    try:
        return arpack_eigen(
            matrix,
            k,
            direction,
            rhs=rhs,
            skip=skip,
            eigenshift=eigenshift,
            max_iterations=max_iterations,
            random_state=random_state,
        )
    except ConvergenceFailure as exc:
        if not dense_fallback:
            raise
        logger.warning("%s; falling back to the dense solver", exc)
        return dense_eigen(matrix, k, direction, rhs=rhs, skip=skip)


__all__ = [
    "EigenResult",
    "fix_signs",
    "dense_eigen",
    "arpack_eigen",
    "randomized_eigen",
    "eigendecompose",
]
