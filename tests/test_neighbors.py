from __future__ import annotations

import numpy as np
import pytest

from manifold_reduction.callbacks import EuclideanDistance, matrix_from_callback
from manifold_reduction.errors import ConfigurationError
from manifold_reduction.methods import NeighborsMethod
from manifold_reduction.neighbors import (
    CoverTree,
    brute_force_neighbors,
    cover_tree_neighbors,
    find_neighbors,
    neighbor_graph,
    symmetric_adjacency,
)


def _random_distance(n: int = 50, d: int = 3, seed: int = 0) -> EuclideanDistance:
    return EuclideanDistance(np.random.default_rng(seed).standard_normal((d, n)))


def _integer_grid_distance() -> EuclideanDistance:
    x, y = np.meshgrid(np.arange(6), np.arange(5), indexing="ij")
    return EuclideanDistance(np.vstack([x.ravel(), y.ravel()]).astype(float))


@pytest.mark.parametrize("k", [1, 3, 7, 49])
def test_cover_tree_matches_brute_force(k):
    distance = _random_distance()
    brute = brute_force_neighbors(range(50), distance, k)
    tree = cover_tree_neighbors(range(50), distance, k)
    assert brute.shape == (50, k)
    np.testing.assert_array_equal(brute, tree)


@pytest.mark.parametrize("k", [1, 4, 8, 29])
def test_ties_are_broken_by_smaller_index(k):
    distance = _integer_grid_distance()
    brute = brute_force_neighbors(range(30), distance, k)
    tree = cover_tree_neighbors(range(30), distance, k)
    np.testing.assert_array_equal(brute, tree)

    # Point 7 = (1, 2) has four neighbors at distance 1: 2, 6, 8 and 12.
    if k == 4:
        assert list(brute[7]) == [2, 6, 8, 12]


def test_duplicate_points_are_handled():
    data = np.array([[0.0, 1.0, 0.0, 1.0, 0.0, 5.0], [0.0, 0.0, 0.0, 0.0, 0.0, 5.0]])
    distance = EuclideanDistance(data)
    brute = brute_force_neighbors(range(6), distance, 3)
    tree = cover_tree_neighbors(range(6), distance, 3)
    np.testing.assert_array_equal(brute, tree)
    assert list(brute[0]) == [2, 4, 1]


def test_rows_sorted_by_distance_and_exclude_self():
    distance = _random_distance(n=30)
    neighbors = find_neighbors(range(30), distance, 5, NeighborsMethod.COVER_TREE)
    full = matrix_from_callback(range(30), distance)
    for row, nbrs in enumerate(neighbors):
        assert row not in nbrs
        assert np.all(np.diff(full[row, nbrs]) >= 0)
        assert full[row, nbrs[-1]] <= np.sort(np.delete(full[row], row))[4]


def test_positions_refer_to_index_sequence():
    distance = _random_distance(n=20)
    subset = [3, 9, 11, 15, 19]
    neighbors = find_neighbors(subset, distance, 2)
    assert neighbors.max() < len(subset)
    full = matrix_from_callback(subset, distance)
    expected = np.argsort(full[0] + np.where(np.arange(5) == 0, np.inf, 0.0), kind="stable")[:2]
    assert list(neighbors[0]) == list(expected)


@pytest.mark.parametrize("k", [0, 10, 11])
def test_neighbor_count_must_be_below_n(k):
    with pytest.raises(ConfigurationError):
        find_neighbors(range(10), _random_distance(n=10), k)


def test_cover_tree_subtree_bounds_hold():
    distance = _random_distance(n=40, seed=3)
    tree = CoverTree(range(40), distance)
    assert len(tree) == 40

    stack = [tree.root]
    while stack:
        node = stack.pop()
        descendants, frontier = [], list(node.children)
        while frontier:
            child = frontier.pop()
            descendants.append(child.point)
            frontier.extend(child.children)
        for point in descendants:
            assert distance(node.point, point) <= node.maxdist + 1e-12
        stack.extend(node.children)


def test_symmetric_adjacency_keeps_one_sided_edges():
    neighbors = np.array([[1], [2], [1]])
    weights = np.array([[0.5], [2.0], [2.0]])
    adjacency = symmetric_adjacency(neighbors, weights).toarray()
    np.testing.assert_array_equal(adjacency, adjacency.T)
    assert adjacency[0, 1] == 0.5
    assert adjacency[1, 2] == 2.0
    assert adjacency[0, 2] == 0.0


def test_ties_follow_observation_index_not_position():
    # observation values: 0 -> 0.0, 1 -> 1.0, 2 -> -1.0, 3 -> 5.0
    distance = EuclideanDistance(np.array([[0.0, 1.0, -1.0, 5.0]]))
    indices = [0, 2, 1, 3]
    brute = brute_force_neighbors(indices, distance, 1)
    tree = cover_tree_neighbors(indices, distance, 1)
    # observations 2 and 1 are both at distance 1 from observation 0; 1 wins
    assert brute[0, 0] == 2
    np.testing.assert_array_equal(brute, tree)


def test_shuffled_indices_select_the_same_observations():
    distance = _integer_grid_distance()
    indices = list(np.random.default_rng(3).permutation(30))
    for neighbors in (
        brute_force_neighbors(indices, distance, 4),
        cover_tree_neighbors(indices, distance, 4),
    ):
        chosen = {indices[row]: [indices[p] for p in neighbors[row]] for row in range(30)}
        expected = brute_force_neighbors(range(30), distance, 4)
        for observation in range(30):
            assert chosen[observation] == list(expected[observation])


def test_zero_weight_edges_stay_in_the_graph():
    neighbors = np.array([[1], [0], [1]])
    weights = np.array([[0.0], [0.0], [2.0]])

    directed = neighbor_graph(neighbors, weights).tocoo()
    assert set(zip(directed.row.tolist(), directed.col.tolist())) == {(0, 1), (1, 0), (2, 1)}

    symmetric = symmetric_adjacency(neighbors, weights).tocoo()
    edges = {(r, c): v for r, c, v in zip(symmetric.row.tolist(), symmetric.col.tolist(), symmetric.data)}
    assert edges == {(0, 1): 0.0, (1, 0): 0.0, (1, 2): 2.0, (2, 1): 2.0}
