"""Data-access callbacks and the matrices built from them."""

from __future__ import annotations

from .dense import EuclideanDistance, FeatureVectors, LinearKernel
from .materialize import cross_matrix, feature_matrix, matrix_from_callback, neighbor_matrix
from .precomputed import PrecomputedDistance, PrecomputedKernel
from .protocols import DistanceCallback, FeatureVectorCallback, KernelCallback

__all__ = [
    "KernelCallback",
    "DistanceCallback",
    "FeatureVectorCallback",
    "LinearKernel",
    "EuclideanDistance",
    "FeatureVectors",
    "PrecomputedKernel",
    "PrecomputedDistance",
    "matrix_from_callback",
    "cross_matrix",
    "neighbor_matrix",
    "feature_matrix",
]
