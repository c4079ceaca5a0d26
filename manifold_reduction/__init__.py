"""Spectral and manifold-learning dimensionality reduction.

The entry point is :func:`embed`, which takes observation indices, three
data-access callbacks and a :class:`ConfigurationStore`.
"""

from __future__ import annotations

from manifold_reduction.config import ConfigurationStore, ParameterKey, default_parameters
from manifold_reduction.embedding import EmbeddingResult, embed
from manifold_reduction.errors import (
    ConfigurationError,
    ConvergenceFailure,
    DataFormatError,
    DimensionalityError,
    ManifoldReductionError,
    UnsupportedMethod,
)
from manifold_reduction.methods import EigenMethod, NeighborsMethod, ReductionMethod

__version__ = "0.1.0"

__all__ = [
    "embed",
    "EmbeddingResult",
    "ConfigurationStore",
    "ParameterKey",
    "default_parameters",
    "ReductionMethod",
    "NeighborsMethod",
    "EigenMethod",
    "ManifoldReductionError",
    "ConfigurationError",
    "UnsupportedMethod",
    "DataFormatError",
    "ConvergenceFailure",
    "DimensionalityError",
]
