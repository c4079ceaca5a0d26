"""Method selectors and per-method traits.

Three independent vocabularies select the reduction method, the neighbor
search strategy and the eigen-decomposition backend. ``lookup_*`` is the total
form (returns ``None`` for unknown tokens); ``parse_*`` raises
:class:`~manifold_reduction.errors.UnsupportedMethod` naming the token.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Type, TypeVar

from manifold_reduction.errors import UnsupportedMethod


class ReductionMethod(str, Enum):
    PCA = "pca"
    KERNEL_PCA = "kpca"
    MULTIDIMENSIONAL_SCALING = "mds"
    LANDMARK_MULTIDIMENSIONAL_SCALING = "lmds"
    ISOMAP = "isomap"
    LANDMARK_ISOMAP = "lisomap"
    DIFFUSION_MAP = "diffusion_map"
    LAPLACIAN_EIGENMAPS = "laplacian_eigenmaps"
    LOCALITY_PRESERVING_PROJECTIONS = "lpp"
    NEIGHBORHOOD_PRESERVING_EMBEDDING = "npe"
    KERNEL_LOCALLY_LINEAR_EMBEDDING = "klle"
    KERNEL_LOCAL_TANGENT_SPACE_ALIGNMENT = "kltsa"
    LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT = "lltsa"
    STOCHASTIC_PROXIMITY_EMBEDDING = "spe"


class NeighborsMethod(str, Enum):
    BRUTE_FORCE = "brute"
    COVER_TREE = "covertree"


class EigenMethod(str, Enum):
    DENSE = "dense"
    ARPACK = "arpack"
    RANDOMIZED = "randomized"


class EigenDirection(str, Enum):
    """Which end of the spectrum an embedding is read from."""

    LARGEST = "largest"
    SMALLEST = "smallest"


_E = TypeVar("_E", bound=Enum)


def _lookup(enum_cls: Type[_E], token: str) -> Optional[_E]:
    try:
        return enum_cls(token)
    except ValueError:
        return None


def lookup_reduction_method(token: str) -> Optional[ReductionMethod]:
    return _lookup(ReductionMethod, token)


def lookup_neighbors_method(token: str) -> Optional[NeighborsMethod]:
    return _lookup(NeighborsMethod, token)


def lookup_eigen_method(token: str) -> Optional[EigenMethod]:
    return _lookup(EigenMethod, token)


def parse_reduction_method(token: str) -> ReductionMethod:
    method = lookup_reduction_method(token)
    if method is None:
        raise UnsupportedMethod(token, "reduction method")
    return method


def parse_neighbors_method(token: str) -> NeighborsMethod:
    method = lookup_neighbors_method(token)
    if method is None:
        raise UnsupportedMethod(token, "neighbors method")
    return method


def parse_eigen_method(token: str) -> EigenMethod:
    method = lookup_eigen_method(token)
    if method is None:
        raise UnsupportedMethod(token, "eigen method")
    return method


# --- Traits ---

LANDMARK_METHODS = frozenset(
    {
        ReductionMethod.LANDMARK_MULTIDIMENSIONAL_SCALING,
        ReductionMethod.LANDMARK_ISOMAP,
    }
)

GEODESIC_METHODS = frozenset({ReductionMethod.ISOMAP, ReductionMethod.LANDMARK_ISOMAP})

NEIGHBOR_METHODS = frozenset(
    {
        ReductionMethod.ISOMAP,
        ReductionMethod.LANDMARK_ISOMAP,
        ReductionMethod.LAPLACIAN_EIGENMAPS,
        ReductionMethod.LOCALITY_PRESERVING_PROJECTIONS,
        ReductionMethod.NEIGHBORHOOD_PRESERVING_EMBEDDING,
        ReductionMethod.KERNEL_LOCALLY_LINEAR_EMBEDDING,
        ReductionMethod.KERNEL_LOCAL_TANGENT_SPACE_ALIGNMENT,
        ReductionMethod.LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT,
    }
)

# Methods that produce an explicit D -> target projection matrix.
LINEAR_METHODS = frozenset(
    {
        ReductionMethod.PCA,
        ReductionMethod.LOCALITY_PRESERVING_PROJECTIONS,
        ReductionMethod.NEIGHBORHOOD_PRESERVING_EMBEDDING,
        ReductionMethod.LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT,
    }
)

SMALLEST_METHODS = frozenset(
    {
        ReductionMethod.LAPLACIAN_EIGENMAPS,
        ReductionMethod.LOCALITY_PRESERVING_PROJECTIONS,
        ReductionMethod.NEIGHBORHOOD_PRESERVING_EMBEDDING,
        ReductionMethod.KERNEL_LOCALLY_LINEAR_EMBEDDING,
        ReductionMethod.KERNEL_LOCAL_TANGENT_SPACE_ALIGNMENT,
        ReductionMethod.LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT,
    }
)

# Number of leading eigenpairs discarded as trivial (constant eigenvector).
_TRIVIAL_EIGENPAIRS = {
    ReductionMethod.LAPLACIAN_EIGENMAPS: 1,
    ReductionMethod.KERNEL_LOCALLY_LINEAR_EMBEDDING: 1,
    ReductionMethod.KERNEL_LOCAL_TANGENT_SPACE_ALIGNMENT: 1,
    ReductionMethod.DIFFUSION_MAP: 1,
}


def eigen_direction(method: ReductionMethod) -> Optional[EigenDirection]:
    """Spectrum end used by ``method``; ``None`` when no eigensolver runs."""
    if method is ReductionMethod.STOCHASTIC_PROXIMITY_EMBEDDING:
        return None
    if method in SMALLEST_METHODS:
        return EigenDirection.SMALLEST
    return EigenDirection.LARGEST


def trivial_eigenpairs(method: ReductionMethod) -> int:
    return _TRIVIAL_EIGENPAIRS.get(method, 0)


def needs_neighbors(method: ReductionMethod) -> bool:
    return method in NEIGHBOR_METHODS


__all__ = [
    "ReductionMethod",
    "NeighborsMethod",
    "EigenMethod",
    "EigenDirection",
    "lookup_reduction_method",
    "lookup_neighbors_method",
    "lookup_eigen_method",
    "parse_reduction_method",
    "parse_neighbors_method",
    "parse_eigen_method",
    "LANDMARK_METHODS",
    "GEODESIC_METHODS",
    "NEIGHBOR_METHODS",
    "LINEAR_METHODS",
    "SMALLEST_METHODS",
    "eigen_direction",
    "trivial_eigenpairs",
    "needs_neighbors",
]
