"""Shared data sets and parameter builders for the test suite."""

from __future__ import annotations

import numpy as np

from manifold_reduction.callbacks import EuclideanDistance, FeatureVectors, LinearKernel
from manifold_reduction.config import ConfigurationStore, ParameterKey, default_parameters


def curved_grid(n_u: int = 8, n_v: int = 8) -> np.ndarray:
    """A bent 2-D sheet in 3-D, returned feature x observation ``(3, n_u * n_v)``."""
    u, v = np.meshgrid(np.linspace(0.0, 3.0, n_u), np.linspace(0.0, 2.0, n_v), indexing="ij")
    u, v = u.ravel(), v.ravel()
    return np.vstack([u, v, np.sin(u)])


def callbacks_for(data: np.ndarray):
    return LinearKernel(data), EuclideanDistance(data), FeatureVectors(data)


def make_parameters(
    method: str,
    *,
    target: int = 2,
    k: int = 8,
    eigen: str = "dense",
    neighbors: str = "brute",
    dimension: int | None = 3,
    **overrides,
) -> ConfigurationStore:
    """CLI-style parameters: the default pre-population plus the five positionals."""
    parameters = ConfigurationStore(default_parameters())
    parameters.set(ParameterKey.REDUCTION_METHOD, method)
    parameters.set(ParameterKey.NEIGHBORS_METHOD, neighbors)
    parameters.set(ParameterKey.EIGEN_METHOD, eigen)
    parameters.set(ParameterKey.NUMBER_OF_NEIGHBORS, k)
    parameters.set(ParameterKey.TARGET_DIMENSION, target)
    if dimension is not None:
        parameters.set(ParameterKey.CURRENT_DIMENSION, dimension)
    for key, value in overrides.items():
        parameters.set(ParameterKey[key.upper()], value)
    return parameters
