"""Embedding engine: validates a request and dispatches it to a method.

All preconditions that depend on the data size (target dimension, neighbor
count, landmark count) are checked here, before any neighbor search or
eigensolver runs.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Sequence, Union

from manifold_reduction.callbacks import DistanceCallback, FeatureVectorCallback, KernelCallback
from manifold_reduction.config import ConfigurationStore, ParameterKey
from manifold_reduction.errors import ConfigurationError, DimensionalityError
from manifold_reduction.logging import log_method_start, resolve_logger
from manifold_reduction.methods import (
    LANDMARK_METHODS,
    LINEAR_METHODS,
    ReductionMethod,
    needs_neighbors,
    trivial_eigenpairs,
)

from .context import EmbeddingContext, EmbeddingResult
from .local import (
    kernel_local_tangent_space_alignment,
    kernel_locally_linear_embedding,
    linear_local_tangent_space_alignment,
    neighborhood_preserving_embedding,
)
from .projection import kernel_pca, principal_component_analysis
from .proximity import stochastic_proximity_embedding
from .scaling import (
    isomap,
    landmark_count,
    landmark_isomap,
    landmark_multidimensional_scaling,
    multidimensional_scaling,
)
from .spectral import diffusion_map, laplacian_eigenmaps, locality_preserving_projections

_IMPLEMENTATIONS: Dict[ReductionMethod, Callable[[EmbeddingContext], EmbeddingResult]] = {
    ReductionMethod.PCA: principal_component_analysis,
    ReductionMethod.KERNEL_PCA: kernel_pca,
    ReductionMethod.MULTIDIMENSIONAL_SCALING: multidimensional_scaling,
    ReductionMethod.LANDMARK_MULTIDIMENSIONAL_SCALING: landmark_multidimensional_scaling,
    ReductionMethod.ISOMAP: isomap,
    ReductionMethod.LANDMARK_ISOMAP: landmark_isomap,
    ReductionMethod.DIFFUSION_MAP: diffusion_map,
    ReductionMethod.LAPLACIAN_EIGENMAPS: laplacian_eigenmaps,
    ReductionMethod.LOCALITY_PRESERVING_PROJECTIONS: locality_preserving_projections,
    ReductionMethod.NEIGHBORHOOD_PRESERVING_EMBEDDING: neighborhood_preserving_embedding,
    ReductionMethod.KERNEL_LOCALLY_LINEAR_EMBEDDING: kernel_locally_linear_embedding,
    ReductionMethod.KERNEL_LOCAL_TANGENT_SPACE_ALIGNMENT: kernel_local_tangent_space_alignment,
    ReductionMethod.LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT: linear_local_tangent_space_alignment,
    ReductionMethod.STOCHASTIC_PROXIMITY_EMBEDDING: stochastic_proximity_embedding,
}


def check_dimensions(method: ReductionMethod, parameters: ConfigurationStore, n_vectors: int) -> None:
    """Reject requests the data cannot support.

    Raises
    ------
    DimensionalityError
        Target dimension too large for the data size, the original
        dimension (linear methods), the neighborhood size (LTSA family) or
        the landmark count.
    ConfigurationError
        Neighbor count not below the number of vectors.
    """
    target = parameters.get(ParameterKey.TARGET_DIMENSION)
    if n_vectors < 2:
        raise DimensionalityError(f"At least 2 vectors are required, got {n_vectors}")

    available = n_vectors - trivial_eigenpairs(method)
    if target > available or target >= n_vectors:
        raise DimensionalityError(
            f"Target dimension {target} is too large for {n_vectors} vectors with {method.value}"
        )

    if method in LINEAR_METHODS:
        current = parameters.get(ParameterKey.CURRENT_DIMENSION)
        if target > current:
            raise DimensionalityError(
                f"Target dimension {target} exceeds the original dimension {current} "
                f"for linear method {method.value}"
            )

    uses_neighbors = needs_neighbors(method) or (
        method is ReductionMethod.STOCHASTIC_PROXIMITY_EMBEDDING
        and not parameters.get(ParameterKey.SPE_GLOBAL_STRATEGY)
    )
    if uses_neighbors:
        k = parameters.get(ParameterKey.NUMBER_OF_NEIGHBORS)
        if k >= n_vectors:
            raise ConfigurationError(
                f"Number of neighbors {k} must be smaller than the number of vectors {n_vectors}"
            )
        if (
            method
            in (
                ReductionMethod.KERNEL_LOCAL_TANGENT_SPACE_ALIGNMENT,
                ReductionMethod.LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT,
            )
            and target > k
        ):
            raise DimensionalityError(
                f"Target dimension {target} exceeds the number of neighbors {k} for {method.value}"
            )

    if method in LANDMARK_METHODS:
        n_landmarks = landmark_count(n_vectors, parameters.get(ParameterKey.LANDMARK_RATIO))
        if target >= n_landmarks:
            raise DimensionalityError(
                f"Target dimension {target} requires more than {n_landmarks} landmarks; "
                "increase the landmark ratio"
            )


def embed(
    indices: Sequence[int],
    kernel: KernelCallback,
    distance: DistanceCallback,
    feature_vector: FeatureVectorCallback,
    parameters: Union[ConfigurationStore, Mapping[Any, Any]],
    logger: logging.Logger | None = None,
) -> EmbeddingResult:
    """Embed the observations referenced by ``indices``.

    Parameters
    ----------
    indices
        Observation indices; the embedding's columns follow this order.
    kernel, distance, feature_vector
        Data-access callbacks over observation indices.
    parameters
        Configuration; a plain mapping is wrapped in a
        :class:`~manifold_reduction.config.ConfigurationStore`.
    logger
        Destination for progress messages; defaults to the package logger.

    Returns
    -------
    EmbeddingResult
        ``embedding`` has shape ``(target_dimension, N)``.
    """
    logger = resolve_logger(logger)
    if not isinstance(parameters, ConfigurationStore):
        parameters = ConfigurationStore(parameters)

    method = parameters.validate()
    indices = list(indices)
    check_dimensions(method, parameters, len(indices))

    ctx = EmbeddingContext(
        method=method,
        indices=indices,
        kernel=kernel,
        distance=distance,
        feature_vector=feature_vector,
        parameters=parameters,
        logger=logger,
    )
    log_method_start(method.value, len(indices), logger)
    result = _IMPLEMENTATIONS[method](ctx)
    logger.debug("Embedding of shape %s computed", result.embedding.shape)
    return result


__all__ = ["embed", "check_dimensions"]
