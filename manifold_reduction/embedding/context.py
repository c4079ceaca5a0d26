"""Per-call state shared by the method implementations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from manifold_reduction.callbacks import (
    DistanceCallback,
    FeatureVectorCallback,
    KernelCallback,
    feature_matrix,
)
from manifold_reduction.config import ConfigurationStore, ParameterKey
from manifold_reduction.eigen import EigenResult, eigendecompose
from manifold_reduction.errors import DimensionalityError
from manifold_reduction.methods import (
    EigenDirection,
    ReductionMethod,
    eigen_direction,
    trivial_eigenpairs,
)
from manifold_reduction.neighbors import find_neighbors


@dataclass
class EmbeddingResult:
    """Output of one embedding call.

    Attributes
    ----------
    embedding
        ``(target_dimension, N)``; column ``j`` embeds observation ``j``.
    method
        Reduction method that produced it.
    eigenvalues
        Eigenvalues behind the coordinates, when an eigensolver ran.
    projection
        ``(target_dimension, D)`` linear map, for linear methods only.
    mean
        ``(D,)`` feature mean subtracted before projecting.
    """

    embedding: np.ndarray
    method: ReductionMethod
    eigenvalues: Optional[np.ndarray] = None
    projection: Optional[np.ndarray] = None
    mean: Optional[np.ndarray] = None

    def project(self, features: np.ndarray) -> np.ndarray:
        """Map new ``(D, M)`` feature columns with the learned projection."""
        if self.projection is None:
            raise DimensionalityError(f"{self.method.value} does not learn a linear projection")
        features = np.asarray(features, dtype=np.float64)
        return self.projection @ (features - self.mean[:, None])


@dataclass
class EmbeddingContext:
    """Inputs of one embedding call plus the helpers every method needs."""

    method: ReductionMethod
    indices: List[int]
    kernel: KernelCallback
    distance: DistanceCallback
    feature_vector: FeatureVectorCallback
    parameters: ConfigurationStore
    logger: logging.Logger

    @property
    def n_vectors(self) -> int:
        return len(self.indices)

    @property
    def target_dimension(self) -> int:
        return self.parameters.get(ParameterKey.TARGET_DIMENSION)

    @property
    def random_seed(self) -> int:
        return self.parameters.get(ParameterKey.RANDOM_SEED)

    def neighbors(self) -> np.ndarray:
        return find_neighbors(
            self.indices,
            self.distance,
            self.parameters.get(ParameterKey.NUMBER_OF_NEIGHBORS),
            self.parameters.get(ParameterKey.NEIGHBORS_METHOD),
            logger=self.logger,
        )

    def centered_features(self) -> Tuple[np.ndarray, np.ndarray]:
        """Mean-centered ``(D, N)`` feature matrix and the ``(D,)`` mean."""
        features = feature_matrix(self.indices, self.feature_vector)
        expected = self.parameters.get(ParameterKey.CURRENT_DIMENSION)
        if features.shape[0] != expected:
            raise DimensionalityError(
                f"Feature vectors have dimension {features.shape[0]}, "
                f"but current_dimension is {expected}"
            )
        mean = features.mean(axis=1)
        return features - mean[:, None], mean

    def eigen(
        self,
        matrix,
        direction: EigenDirection | None = None,
        rhs=None,
        skip: int | None = None,
    ) -> EigenResult:
        """Solve for ``target_dimension`` eigenpairs with the configured backend."""
        p = self.parameters
        return eigendecompose(
            matrix,
            self.target_dimension,
            p.get(ParameterKey.EIGEN_METHOD),
            direction or eigen_direction(self.method),
            rhs=rhs,
            skip=trivial_eigenpairs(self.method) if skip is None else skip,
            eigenshift=p.get(ParameterKey.EIGENSHIFT, 0.0),
            oversampling=p.get(ParameterKey.RANDOMIZED_OVERSAMPLING, 0),
            max_iterations=p.get(ParameterKey.MAX_ITERATIONS, 1),
            random_state=self.random_seed,
            dense_fallback=p.get(ParameterKey.DENSE_FALLBACK, False),
            logger=self.logger,
        )


__all__ = ["EmbeddingResult", "EmbeddingContext"]
