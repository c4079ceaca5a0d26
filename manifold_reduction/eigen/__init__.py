"""Eigen-decomposition backends."""

from __future__ import annotations

from .solvers import (
    EigenResult,
    arpack_eigen,
    dense_eigen,
    eigendecompose,
    fix_signs,
    randomized_eigen,
)

__all__ = [
    "EigenResult",
    "fix_signs",
    "dense_eigen",
    "arpack_eigen",
    "randomized_eigen",
    "eigendecompose",
]
