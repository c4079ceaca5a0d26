"""
Central configuration for the manifold reduction engine.

Module-level constants hold the values the command line pre-populates; the
engine itself never falls back to them. :class:`ConfigurationStore` is the
typed mapping handed to :func:`manifold_reduction.embedding.embed`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Iterable, Mapping, NamedTuple

import numpy as np

from manifold_reduction.errors import ConfigurationError
from manifold_reduction.methods import (
    LANDMARK_METHODS,
    LINEAR_METHODS,
    EigenDirection,
    EigenMethod,
    NeighborsMethod,
    ReductionMethod,
    eigen_direction,
    needs_neighbors,
    parse_eigen_method,
    parse_neighbors_method,
    parse_reduction_method,
)

# --- Caller-side defaults ---

# Power of the Markov transition operator used by diffusion maps.
DIFFUSION_MAP_TIMESTEPS: int = 3

# Width of the Gaussian (heat) kernel exp(-d^2 / width).
GAUSSIAN_KERNEL_WIDTH: float = 1000.0

# Stochastic proximity embedding: sample pairs globally (True) or from the
# neighbor graph only (False).
SPE_GLOBAL_STRATEGY: bool = True

# Stop SPE once the mean coordinate change of a round falls below this.
SPE_TOLERANCE: float = 1e-5

# Maximum number of SPE update rounds.
SPE_NUM_UPDATES: int = 100

# Fraction of points used as landmarks by landmark MDS / Isomap.
LANDMARK_RATIO: float = 0.2

# Diagonal shift applied when solving for the smallest eigenpairs of
# (near-)singular matrices.
EIGENSHIFT: float = 1e-9

# Seed for every random choice (landmarks, start vectors, SPE).
RANDOM_SEED: int = 0

# Extra columns sampled by the randomized eigensolver.
RANDOMIZED_OVERSAMPLING: int = 10

# Iteration budget of the Krylov (ARPACK) eigensolver.
MAX_ITERATIONS: int = 1000


class ParameterKey(str, Enum):
    REDUCTION_METHOD = "reduction_method"
    NEIGHBORS_METHOD = "neighbors_method"
    EIGEN_METHOD = "eigen_method"
    NUMBER_OF_NEIGHBORS = "number_of_neighbors"
    TARGET_DIMENSION = "target_dimension"
    CURRENT_DIMENSION = "current_dimension"
    GAUSSIAN_KERNEL_WIDTH = "gaussian_kernel_width"
    DIFFUSION_MAP_TIMESTEPS = "diffusion_map_timesteps"
    SPE_GLOBAL_STRATEGY = "spe_global_strategy"
    SPE_TOLERANCE = "spe_tolerance"
    SPE_NUM_UPDATES = "spe_num_updates"
    LANDMARK_RATIO = "landmark_ratio"
    EIGENSHIFT = "eigenshift"
    RANDOM_SEED = "random_seed"
    RANDOMIZED_OVERSAMPLING = "randomized_oversampling"
    MAX_ITERATIONS = "max_iterations"
    DENSE_FALLBACK = "dense_fallback"


class _Domain(NamedTuple):
    coerce: Callable[[Any], Any]
    check: Callable[[Any], bool]
    description: str


def _as_uint(value: Any) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"expected an integer, got {value!r}")
    return int(value)


def _as_float(value: Any) -> float:
    if isinstance(value, (bool, np.bool_)) or not isinstance(
        value, (int, float, np.integer, np.floating)
    ):
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)


def _as_bool(value: Any) -> bool:
    if not isinstance(value, (bool, np.bool_)):
        raise TypeError(f"expected a boolean, got {value!r}")
    return bool(value)


def _as_enum(enum_cls, parse):
    def coerce(value: Any):
        if isinstance(value, enum_cls):
            return value
        if isinstance(value, str):
            return parse(value)
        raise TypeError(f"expected a {enum_cls.__name__} or token, got {value!r}")

    return coerce


def _always(_value: Any) -> bool:
    return True


_DOMAINS: Dict[ParameterKey, _Domain] = {
    ParameterKey.REDUCTION_METHOD: _Domain(
        _as_enum(ReductionMethod, parse_reduction_method), _always, "a reduction method"
    ),
    ParameterKey.NEIGHBORS_METHOD: _Domain(
        _as_enum(NeighborsMethod, parse_neighbors_method), _always, "a neighbors method"
    ),
    ParameterKey.EIGEN_METHOD: _Domain(
        _as_enum(EigenMethod, parse_eigen_method), _always, "an eigen method"
    ),
    ParameterKey.NUMBER_OF_NEIGHBORS: _Domain(_as_uint, lambda v: v >= 1, ">= 1"),
    ParameterKey.TARGET_DIMENSION: _Domain(_as_uint, lambda v: v >= 1, ">= 1"),
    ParameterKey.CURRENT_DIMENSION: _Domain(_as_uint, lambda v: v >= 1, ">= 1"),
    ParameterKey.GAUSSIAN_KERNEL_WIDTH: _Domain(_as_float, lambda v: v > 0, "> 0"),
    ParameterKey.DIFFUSION_MAP_TIMESTEPS: _Domain(_as_uint, lambda v: v >= 1, ">= 1"),
    ParameterKey.SPE_GLOBAL_STRATEGY: _Domain(_as_bool, _always, "a boolean"),
    ParameterKey.SPE_TOLERANCE: _Domain(_as_float, lambda v: v > 0, "> 0"),
    ParameterKey.SPE_NUM_UPDATES: _Domain(_as_uint, lambda v: v >= 0, ">= 0"),
    ParameterKey.LANDMARK_RATIO: _Domain(_as_float, lambda v: 0 < v <= 1, "in (0, 1]"),
    ParameterKey.EIGENSHIFT: _Domain(_as_float, lambda v: v >= 0, ">= 0"),
    ParameterKey.RANDOM_SEED: _Domain(_as_uint, lambda v: v >= 0, ">= 0"),
    ParameterKey.RANDOMIZED_OVERSAMPLING: _Domain(_as_uint, lambda v: v >= 0, ">= 0"),
    ParameterKey.MAX_ITERATIONS: _Domain(_as_uint, lambda v: v >= 1, ">= 1"),
    ParameterKey.DENSE_FALLBACK: _Domain(_as_bool, _always, "a boolean"),
}

_MISSING = object()

# Keys any method may read when present.
_OPTIONAL_KEYS = frozenset({ParameterKey.DENSE_FALLBACK})


class ConfigurationStore:
    """Typed parameter mapping with per-method validation.

    Values are coerced on :meth:`set` (wrong kinds raise
    :class:`ConfigurationError`); ranges are checked by :meth:`validate`.
    """

    def __init__(self, values: Mapping[ParameterKey | str, Any] | None = None) -> None:
        self._values: Dict[ParameterKey, Any] = {}
        if values:
            self.update(values)

    @staticmethod
    def _key(key: ParameterKey | str) -> ParameterKey:
        try:
            return ParameterKey(key)
        except ValueError:
            raise ConfigurationError(f"Unknown parameter {key!r}") from None

    def set(self, key: ParameterKey | str, value: Any) -> None:
        key = self._key(key)
        try:
            self._values[key] = _DOMAINS[key].coerce(value)
        except TypeError as exc:
            raise ConfigurationError(f"Parameter {key.value}: {exc}") from None

    def update(self, values: Mapping[ParameterKey | str, Any]) -> None:
        for key, value in values.items():
            self.set(key, value)

    def get(self, key: ParameterKey | str, default: Any = _MISSING) -> Any:
        key = self._key(key)
        if key in self._values:
            return self._values[key]
        if default is _MISSING:
            raise ConfigurationError(f"Missing required parameter {key.value!r}")
        return default

    def __contains__(self, key: object) -> bool:
        try:
            return ParameterKey(key) in self._values
        except ValueError:
            return False

    def as_dict(self) -> Dict[ParameterKey, Any]:
        return dict(self._values)

    def validate(self, method: ReductionMethod | str | None = None) -> ReductionMethod:
        """Check the keys required by ``method`` and the range of the values it reads.

        ``method`` defaults to the stored ``REDUCTION_METHOD``. Stored keys the
        method never reads are left unchecked. Returns the validated method.
        """
        if method is None:
            method = self.get(ParameterKey.REDUCTION_METHOD)
        elif not isinstance(method, ReductionMethod):
            method = parse_reduction_method(method)

        required = list(required_keys(method, self))
        missing = [k.value for k in required if k not in self._values]
        if missing:
            raise ConfigurationError(
                f"Missing required parameters for {method.value}: {', '.join(missing)}"
            )

        read = set(required) | _OPTIONAL_KEYS
        for key, value in self._values.items():
            if key not in read:
                continue
            domain = _DOMAINS[key]
            if not domain.check(value):
                raise ConfigurationError(
                    f"Parameter {key.value}={value!r} out of range (expected {domain.description})"
                )
        return method

    def __repr__(self) -> str:
        items = ", ".join(f"{k.value}={v!r}" for k, v in self._values.items())
        return f"ConfigurationStore({items})"


def required_keys(
    method: ReductionMethod, store: ConfigurationStore | None = None
) -> Iterable[ParameterKey]:
    """Keys that must be present before ``method`` can be dispatched.

    ``store`` refines the set where it depends on other values (eigen backend,
    SPE strategy).
    """
    keys = [ParameterKey.REDUCTION_METHOD, ParameterKey.TARGET_DIMENSION]
    direction = eigen_direction(method)

    if direction is not None:
        keys += [ParameterKey.EIGEN_METHOD, ParameterKey.RANDOM_SEED]
        eigen_method = store.get(ParameterKey.EIGEN_METHOD, None) if store else None
        if eigen_method is EigenMethod.RANDOMIZED:
            keys.append(ParameterKey.RANDOMIZED_OVERSAMPLING)
        elif eigen_method is EigenMethod.ARPACK:
            keys.append(ParameterKey.MAX_ITERATIONS)
    if direction is EigenDirection.SMALLEST:
        keys.append(ParameterKey.EIGENSHIFT)

    if needs_neighbors(method):
        keys += [ParameterKey.NUMBER_OF_NEIGHBORS, ParameterKey.NEIGHBORS_METHOD]
    if method in LINEAR_METHODS:
        keys.append(ParameterKey.CURRENT_DIMENSION)
    if method in LANDMARK_METHODS:
        keys.append(ParameterKey.LANDMARK_RATIO)
    if method in (
        ReductionMethod.LAPLACIAN_EIGENMAPS,
        ReductionMethod.LOCALITY_PRESERVING_PROJECTIONS,
        ReductionMethod.DIFFUSION_MAP,
    ):
        keys.append(ParameterKey.GAUSSIAN_KERNEL_WIDTH)
    if method is ReductionMethod.DIFFUSION_MAP:
        keys.append(ParameterKey.DIFFUSION_MAP_TIMESTEPS)
    if method is ReductionMethod.STOCHASTIC_PROXIMITY_EMBEDDING:
        keys += [
            ParameterKey.SPE_GLOBAL_STRATEGY,
            ParameterKey.SPE_TOLERANCE,
            ParameterKey.SPE_NUM_UPDATES,
            ParameterKey.RANDOM_SEED,
        ]
        if store is not None and store.get(ParameterKey.SPE_GLOBAL_STRATEGY, True) is False:
            keys += [ParameterKey.NUMBER_OF_NEIGHBORS, ParameterKey.NEIGHBORS_METHOD]
    return keys


def default_parameters() -> Dict[ParameterKey, Any]:
    """Values the command line pre-populates before parsing its arguments."""
    return {
        ParameterKey.DIFFUSION_MAP_TIMESTEPS: DIFFUSION_MAP_TIMESTEPS,
        ParameterKey.GAUSSIAN_KERNEL_WIDTH: GAUSSIAN_KERNEL_WIDTH,
        ParameterKey.SPE_GLOBAL_STRATEGY: SPE_GLOBAL_STRATEGY,
        ParameterKey.SPE_TOLERANCE: SPE_TOLERANCE,
        ParameterKey.SPE_NUM_UPDATES: SPE_NUM_UPDATES,
        ParameterKey.LANDMARK_RATIO: LANDMARK_RATIO,
        ParameterKey.EIGENSHIFT: EIGENSHIFT,
        ParameterKey.RANDOM_SEED: RANDOM_SEED,
        ParameterKey.RANDOMIZED_OVERSAMPLING: RANDOMIZED_OVERSAMPLING,
        ParameterKey.MAX_ITERATIONS: MAX_ITERATIONS,
    }


__all__ = [
    "ParameterKey",
    "ConfigurationStore",
    "required_keys",
    "default_parameters",
]
