"""Starting structures for each domain (random arrays, circular graphs, a seed BST)."""

from typing import List, Optional, Tuple

import numpy as np


DEFAULT_TREE_VALUES = [50, 30, 70, 20, 40, 60, 80]


def random_array(size: int = 20, seed: Optional[int] = None) -> List[int]:
    """Values between 50 and 349, which keeps bar heights readable."""
    rng = np.random.default_rng(seed)
    return [int(v) for v in rng.integers(50, 350, size=size)]


def sorted_array(size: int = 15) -> List[int]:
    return [(i + 1) * 10 for i in range(size)]


def circle_layout(node_count: int, width: float = 600.0, height: float = 400.0,
                  padding: float = 60.0) -> List[Tuple[float, float]]:
    angles = np.arange(node_count) * 2 * np.pi / max(node_count, 1)
    radius = min(width, height) / 2 - padding
    xs = width / 2 + np.cos(angles) * radius
    ys = height / 2 + np.sin(angles) * radius
    return [(round(float(x), 2), round(float(y), 2)) for x, y in zip(xs, ys)]


def random_graph(node_count: int = 8, seed: Optional[int] = None):
    """
    Nodes on a circle, each proposing one or two undirected edges to random
    partners with weights 1..9. Self loops and duplicate pairs are skipped.

    Returns:
        (positions, edges) where edges are (source, target, weight) triples
    """
    rng = np.random.default_rng(seed)
    positions = circle_layout(node_count)

    edges: List[Tuple[int, int, int]] = []
    seen = set()
    for i in range(node_count):
        connections = int(rng.integers(1, 3))
        for _ in range(connections):
            to = int(rng.integers(0, node_count))
            pair = frozenset((i, to))
            if to != i and pair not in seen:
                seen.add(pair)
                edges.append((i, to, int(rng.integers(1, 10))))
    return positions, edges
