from __future__ import annotations

import numpy as np

from manifold_reduction.callbacks import (
    DistanceCallback,
    EuclideanDistance,
    FeatureVectorCallback,
    FeatureVectors,
    KernelCallback,
    LinearKernel,
    PrecomputedDistance,
    cross_matrix,
    feature_matrix,
    matrix_from_callback,
    neighbor_matrix,
)


def _random_data(n: int = 7, d: int = 4, seed: int = 0) -> np.ndarray:
    return np.random.default_rng(seed).standard_normal((d, n))


def test_symmetric_callback_gives_symmetric_matrix():
    data = _random_data()
    kernel = LinearKernel(data)
    matrix = matrix_from_callback(range(data.shape[1]), kernel)
    assert matrix.shape == (7, 7)
    np.testing.assert_array_equal(matrix, matrix.T)
    for i in range(7):
        assert matrix[i, i] == kernel(i, i)


def test_distance_matrix_has_zero_diagonal():
    data = _random_data()
    matrix = matrix_from_callback(range(7), EuclideanDistance(data))
    assert np.all(np.diag(matrix) == 0.0)
    assert np.all(matrix >= 0.0)


def test_asymmetric_callback_is_not_symmetrized():
    matrix = matrix_from_callback([0, 1, 2], lambda i, j: float(i - j))
    np.testing.assert_array_equal(
        matrix,
        np.array([[0.0, -1.0, -2.0], [1.0, 0.0, -1.0], [2.0, 1.0, 0.0]]),
    )


def test_rows_follow_index_order():
    matrix = matrix_from_callback([2, 0], lambda i, j: float(10 * i + j))
    np.testing.assert_array_equal(matrix, np.array([[22.0, 20.0], [2.0, 0.0]]))


def test_vector_valued_callback():
    data = _random_data()
    difference = lambda i, j: data[:, i] - data[:, j]  # noqa: E731
    tensor = matrix_from_callback(range(7), difference)
    assert tensor.shape == (7, 7, 4)
    np.testing.assert_allclose(tensor[3, 5], data[:, 3] - data[:, 5])


def test_cross_and_neighbor_matrices():
    data = _random_data()
    distance = EuclideanDistance(data)
    cross = cross_matrix([1, 4], range(7), distance)
    assert cross.shape == (2, 7)
    assert cross[0, 1] == 0.0 and cross[1, 4] == 0.0

    neighbors = np.array([[1, 2], [0, 2], [0, 1]])
    values = neighbor_matrix([4, 5, 6], neighbors, distance)
    assert values[0, 0] == distance(4, 5)
    assert values[2, 1] == distance(6, 5)


def test_feature_matrix_stacks_columns():
    data = _random_data()
    np.testing.assert_array_equal(feature_matrix(range(7), FeatureVectors(data)), data)
    np.testing.assert_array_equal(feature_matrix([3], FeatureVectors(data)), data[:, [3]])


def test_precomputed_callback_matches_source():
    data = _random_data()
    distance = EuclideanDistance(data)
    cached = PrecomputedDistance(matrix_from_callback(range(7), distance))
    assert cached(2, 5) == distance(2, 5)


def test_backends_satisfy_capabilities():
    data = _random_data()
    assert isinstance(LinearKernel(data), KernelCallback)
    assert isinstance(EuclideanDistance(data), DistanceCallback)
    assert isinstance(FeatureVectors(data), FeatureVectorCallback)
