# palette_recolor/neighbour_graph.py
from __future__ import annotations

"""
k-nearest-neighbour graph over the original colours.

Candidates are picked with the cheap Euclidean Lab distance; each kept edge
stores the CIEDE2000 distance, which the refinement pass tries to preserve.
"""

from typing import Dict, List, Sequence, Tuple

import numpy as np

from .colour_convert import delta_e76, delta_e2000_vec
from .core_types import ColourSample, Lab, NeighbourEdge
from .palette_data import stack_lab


def knn_candidate_pairs(lab: Lab, k: int) -> List[Tuple[int, int]]:
    """
    Undirected (a, b) pairs with a < b from the union of each row's k
    nearest other rows by dE76. Order of first appearance is kept.
    """
    n = int(lab.shape[0])
    if n < 2 or k < 1:
        return []
    d76 = delta_e76(lab[:, None, :], lab[None, :, :])
    np.fill_diagonal(d76, np.inf)
    keep = min(k, n - 1)

    seen: Dict[Tuple[int, int], None] = {}
    for i in range(n):
        # stable so equal distances resolve by index
        for j in np.argsort(d76[i], kind="stable")[:keep].tolist():
            pair = (i, j) if i < j else (j, i)
            seen.setdefault(pair, None)
    return list(seen)


def build_neighbour_graph(
    samples: Sequence[ColourSample], k: int
) -> List[NeighbourEdge]:
    """Edges over samples (indexed by list position) with dE2000 weights."""
    lab = stack_lab(samples)
    pairs = knn_candidate_pairs(lab, k)
    if not pairs:
        return []
    a_idx = np.array([a for a, _ in pairs], dtype=np.int64)
    b_idx = np.array([b for _, b in pairs], dtype=np.int64)
    dist = delta_e2000_vec(lab[a_idx], lab[b_idx])
    return [
        NeighbourEdge(a=a, b=b, original_distance=float(d))
        for (a, b), d in zip(pairs, dist.tolist())
    ]


def incident_edges(edges: Sequence[NeighbourEdge], n: int) -> List[List[int]]:
    """Per node, the positions in edges that touch it."""
    out: List[List[int]] = [[] for _ in range(n)]
    for e_idx, edge in enumerate(edges):
        out[edge.a].append(e_idx)
        out[edge.b].append(e_idx)
    return out


__all__ = ["knn_candidate_pairs", "build_neighbour_graph", "incident_edges"]
