from __future__ import annotations

import pytest

from manifold_reduction.config import (
    ConfigurationStore,
    ParameterKey,
    default_parameters,
    required_keys,
)
from manifold_reduction.errors import ConfigurationError, UnsupportedMethod
from manifold_reduction.methods import EigenMethod, ReductionMethod

from tests.helpers import make_parameters


def test_get_missing_key_names_the_key():
    store = ConfigurationStore()
    with pytest.raises(ConfigurationError, match="target_dimension"):
        store.get(ParameterKey.TARGET_DIMENSION)


def test_get_with_default_does_not_raise():
    store = ConfigurationStore()
    assert store.get(ParameterKey.DENSE_FALLBACK, False) is False


def test_set_coerces_method_tokens():
    store = ConfigurationStore()
    store.set(ParameterKey.REDUCTION_METHOD, "isomap")
    store.set("eigen_method", "arpack")
    assert store.get(ParameterKey.REDUCTION_METHOD) is ReductionMethod.ISOMAP
    assert store.get(ParameterKey.EIGEN_METHOD) is EigenMethod.ARPACK


def test_set_unknown_method_token_raises_unsupported():
    store = ConfigurationStore()
    with pytest.raises(UnsupportedMethod) as excinfo:
        store.set(ParameterKey.REDUCTION_METHOD, "tsne")
    assert excinfo.value.token == "tsne"


@pytest.mark.parametrize(
    "key, value",
    [
        (ParameterKey.NUMBER_OF_NEIGHBORS, 2.5),
        (ParameterKey.NUMBER_OF_NEIGHBORS, True),
        (ParameterKey.SPE_GLOBAL_STRATEGY, 1),
        (ParameterKey.GAUSSIAN_KERNEL_WIDTH, "wide"),
    ],
)
def test_set_rejects_wrong_kind(key, value):
    with pytest.raises(ConfigurationError, match=key.value):
        ConfigurationStore().set(key, value)


def test_unknown_key_rejected():
    with pytest.raises(ConfigurationError):
        ConfigurationStore().set("no_such_parameter", 1)


@pytest.mark.parametrize(
    "method, override",
    [
        ("isomap", {"number_of_neighbors": 0}),
        ("lmds", {"target_dimension": 0}),
        ("lmds", {"landmark_ratio": 1.5}),
        ("lisomap", {"landmark_ratio": 0.0}),
        ("laplacian_eigenmaps", {"gaussian_kernel_width": 0.0}),
        ("spe", {"spe_tolerance": -1.0}),
        ("kltsa", {"eigenshift": -1.0}),
    ],
)
def test_validate_rejects_out_of_range(method, override):
    parameters = make_parameters(method, **override)
    with pytest.raises(ConfigurationError, match="out of range"):
        parameters.validate()


def test_validate_reports_missing_required_keys():
    store = ConfigurationStore(
        {
            ParameterKey.REDUCTION_METHOD: "isomap",
            ParameterKey.TARGET_DIMENSION: 2,
            ParameterKey.EIGEN_METHOD: "dense",
            ParameterKey.RANDOM_SEED: 0,
        }
    )
    with pytest.raises(ConfigurationError) as excinfo:
        store.validate()
    message = str(excinfo.value)
    assert "number_of_neighbors" in message
    assert "neighbors_method" in message


def test_validate_returns_method():
    assert make_parameters("pca").validate() is ReductionMethod.PCA
    assert make_parameters("pca").validate("mds") is ReductionMethod.MULTIDIMENSIONAL_SCALING


def test_required_keys_depend_on_solver_and_strategy():
    store = make_parameters("spe", eigen="randomized", spe_global_strategy=False)
    spe_keys = set(required_keys(ReductionMethod.STOCHASTIC_PROXIMITY_EMBEDDING, store))
    assert ParameterKey.NUMBER_OF_NEIGHBORS in spe_keys
    assert ParameterKey.EIGEN_METHOD not in spe_keys

    mds_keys = set(required_keys(ReductionMethod.MULTIDIMENSIONAL_SCALING, store))
    assert ParameterKey.RANDOMIZED_OVERSAMPLING in mds_keys
    assert ParameterKey.NUMBER_OF_NEIGHBORS not in mds_keys


def test_default_parameters_match_command_line_values():
    defaults = default_parameters()
    assert defaults[ParameterKey.DIFFUSION_MAP_TIMESTEPS] == 3
    assert defaults[ParameterKey.GAUSSIAN_KERNEL_WIDTH] == 1000.0
    assert defaults[ParameterKey.SPE_GLOBAL_STRATEGY] is True
    assert defaults[ParameterKey.SPE_NUM_UPDATES] == 100
    assert defaults[ParameterKey.LANDMARK_RATIO] == 0.2
    assert defaults[ParameterKey.EIGENSHIFT] == 1e-9
    assert ParameterKey.TARGET_DIMENSION not in defaults


def test_store_does_not_invent_defaults():
    assert ParameterKey.LANDMARK_RATIO not in ConfigurationStore()


@pytest.mark.parametrize(
    "method, override",
    [
        ("pca", {"number_of_neighbors": 0}),
        ("mds", {"gaussian_kernel_width": 0.0}),
        ("isomap", {"landmark_ratio": 1.5}),
        ("kpca", {"spe_tolerance": -1.0}),
    ],
)
def test_validate_ignores_keys_the_method_never_reads(method, override):
    parameters = make_parameters(method, **override)
    assert parameters.validate() is ReductionMethod(method)
