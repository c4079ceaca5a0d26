"""Nearest-neighbor search strategies."""

from __future__ import annotations

from .brute_force import brute_force_neighbors
from .cover_tree import CoverTree, cover_tree_neighbors
from .graph import find_neighbors, neighbor_graph, symmetric_adjacency

__all__ = [
    "CoverTree",
    "brute_force_neighbors",
    "cover_tree_neighbors",
    "find_neighbors",
    "neighbor_graph",
    "symmetric_adjacency",
]
