"""Cover tree over observation indices.

Nodes sit at integer levels with covering radius ``2**level``; a point is
inserted below the deepest node whose radius covers it. Each node also keeps
``maxdist``, the exact largest distance to anything in its subtree, which is
the only bound the k-NN search prunes with. Searches are therefore exact for
any metric callback, and the covering structure only decides how much of the
tree is visited.

References
----------
Beygelzimer, A., Kakade, S. & Langford, J. (2006). "Cover trees for nearest
    neighbor". ICML.
Izbicki, M. & Shelton, C. (2015). "Faster cover trees". ICML.
"""

from __future__ import annotations

import heapq
import itertools
import math
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
from joblib import Parallel, delayed

from manifold_reduction.parallel import get_n_jobs


class _Node:
    __slots__ = ("point", "level", "children", "maxdist")

    def __init__(self, point: int, level: int) -> None:
        self.point = point
        self.level = level
        self.children: List[_Node] = []
        self.maxdist = 0.0


class CoverTree:
    """Hierarchical index answering exact k-NN queries by position.

    Parameters
    ----------
    indices
        Observation indices; points are referred to by their position in
        this sequence.
    distance
        Metric callback over observation indices.
    """

    def __init__(self, indices: Sequence[int], distance: Callable[[int, int], float]) -> None:
        self.indices = list(indices)
        self._distance = distance
        self.root: Optional[_Node] = None
        for position in range(len(self.indices)):
            self.insert(position)

    def __len__(self) -> int:
        return len(self.indices)

    def _dist(self, a: int, b: int) -> float:
        return float(self._distance(self.indices[a], self.indices[b]))

    def insert(self, point: int) -> None:
        if self.root is None:
            self.root = _Node(point, 0)
            return

        d = self._dist(self.root.point, point)
        if not math.isfinite(d):
            raise ValueError(f"Non-finite distance {d} between points {self.root.point} and {point}")

        # Lift the root until it covers the new point; the old root becomes
        # the only child of a copy of itself one level up.
        while d > 2.0**self.root.level:
            lifted = _Node(self.root.point, self.root.level + 1)
            lifted.children.append(self.root)
            lifted.maxdist = self.root.maxdist
            self.root = lifted

        node = self.root
        while True:
            node.maxdist = max(node.maxdist, d)
            for child in node.children:
                dc = self._dist(child.point, point)
                if dc <= 2.0**child.level:
                    node, d = child, dc
                    break
            else:
                node.children.append(_Node(point, node.level - 1))
                return

    def query(self, point: int, k: int) -> List[int]:
        """Positions of the ``k`` nearest points to ``point``, itself excluded.

        Ordered by distance, then observation index, then position.
        """
        if self.root is None or k <= 0:
            return []

        cache: Dict[int, float] = {}

        def dist(p: int) -> float:
            if p not in cache:
                cache[p] = self._dist(point, p)
            return cache[p]

        # Max-heap of the current best keys, stored negated.
        best: List[tuple] = []
        seen = set()

        def worst() -> float:
            return -best[0][0] if len(best) == k else math.inf

        order = itertools.count()
        root = self.root
        frontier = [(max(dist(root.point) - root.maxdist, 0.0), next(order), root)]

        while frontier:
            bound, _, node = heapq.heappop(frontier)
            if bound > worst():
                break

            p = node.point
            if p != point and p not in seen:
                seen.add(p)
                key = (-dist(p), -self.indices[p], -p)
                if len(best) < k:
                    heapq.heappush(best, key)
                elif key > best[0]:
                    heapq.heapreplace(best, key)

            for child in node.children:
                child_bound = max(dist(child.point) - child.maxdist, 0.0)
                # Ties are kept: an equidistant point may win on its index.
                if child_bound <= worst():
                    heapq.heappush(frontier, (child_bound, next(order), child))

        return [-neg_p for _, _, neg_p in sorted(best, reverse=True)]


def cover_tree_neighbors(
    indices: Sequence[int],
    distance: Callable[[int, int], float],
    k: int,
) -> np.ndarray:
    """Build a :class:`CoverTree` once and query every point.

    Returns
    -------
    np.ndarray
        ``(N, k)`` positions into ``indices``, rows ordered by distance and
        then by observation index.
    """
    tree = CoverTree(indices, distance)
    n = len(tree)
    rows = Parallel(n_jobs=get_n_jobs(n), prefer="threads")(
        delayed(tree.query)(row, k) for row in range(n)
    )
    return np.asarray(rows, dtype=np.intp).reshape(n, k)


__all__ = ["CoverTree", "cover_tree_neighbors"]
