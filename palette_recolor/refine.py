# palette_recolor/refine.py
from __future__ import annotations

"""
Pairwise-swap local search over an assignment.

Objective:
  sum_i cost[i, assign[i]]
  + DELTA * sum_edges |edge.original_distance - pal_de[assign[a], assign[b]]|

Each trial picks two distinct rows, evaluates the exact change from
swapping their palette columns (node terms plus edges touching either
row), and commits only strictly improving swaps.
"""

from typing import List, Optional, Sequence, Set, Tuple

import numpy as np

from .core_types import Assignment, CostMatrix, NeighbourEdge, RefineStats
from .neighbour_graph import incident_edges


def edge_distortion(
    edge: NeighbourEdge, assignment: Assignment, pal_de: np.ndarray
) -> float:
    """|original distance - distance between the two assigned palette colours|."""
    return abs(
        edge.original_distance
        - float(pal_de[assignment[edge.a], assignment[edge.b]])
    )


def objective(
    cost: CostMatrix,
    assignment: Assignment,
    edges: Sequence[NeighbourEdge],
    pal_de: np.ndarray,
    delta: float,
) -> float:
    """Full objective value for an assignment."""
    rows = np.arange(len(assignment))
    node = float(np.asarray(cost)[rows, assignment].sum())
    distortion = sum(edge_distortion(e, assignment, pal_de) for e in edges)
    return node + delta * distortion


def swap_delta(
    i: int,
    j: int,
    cost: CostMatrix,
    assignment: Assignment,
    edges: Sequence[NeighbourEdge],
    touching: Sequence[Sequence[int]],
    pal_de: np.ndarray,
    delta: float,
) -> float:
    """Objective change if rows i and j exchange their palette columns."""
    ci, cj = int(assignment[i]), int(assignment[j])
    change = (cost[i, cj] + cost[j, ci]) - (cost[i, ci] + cost[j, cj])
    if delta == 0.0:
        return float(change)

    def col_after(node: int) -> int:
        if node == i:
            return cj
        if node == j:
            return ci
        return int(assignment[node])

    affected: Set[int] = set(touching[i])
    affected.update(touching[j])
    edge_change = 0.0
    for e_idx in affected:
        edge = edges[e_idx]
        before = abs(
            edge.original_distance
            - float(pal_de[assignment[edge.a], assignment[edge.b]])
        )
        after = abs(
            edge.original_distance
            - float(pal_de[col_after(edge.a), col_after(edge.b)])
        )
        edge_change += after - before
    return float(change + delta * edge_change)


def _pick_pair(rng: np.random.Generator, n: int) -> Tuple[int, int]:
    """Uniformly random pair of distinct rows."""
    i = int(rng.integers(n))
    j = int(rng.integers(n - 1))
    if j >= i:
        j += 1
    return i, j


def refine_assignment(
    assignment: Assignment,
    cost: CostMatrix,
    edges: Sequence[NeighbourEdge],
    pal_de: np.ndarray,
    delta: float,
    iterations: int,
    rng: np.random.Generator,
    *,
    record_history: bool = False,
) -> Tuple[Assignment, RefineStats]:
    """
    Greedy swap refinement. Returns a new assignment; the input is untouched.

    Args:
      assignment: int [n], columns of cost
      cost: float [n, m]
      edges: neighbour graph over rows 0..n-1
      pal_de: float [m, m] dE2000 between palette columns
      delta: edge-distortion weight
      iterations: number of trials
      rng: injected generator, the only source of randomness
      record_history: keep the objective after every trial in stats.history
    """
    current = np.array(assignment, dtype=np.int64, copy=True)
    n = int(current.shape[0])
    cost_arr = np.asarray(cost, dtype=np.float64)

    value = objective(cost_arr, current, edges, pal_de, delta)
    stats = RefineStats(initial_objective=value, final_objective=value)
    if n < 2 or iterations <= 0:
        return current, stats

    touching: List[List[int]] = incident_edges(edges, n)
    history: Optional[List[float]] = [] if record_history else None

    for _ in range(iterations):
        i, j = _pick_pair(rng, n)
        d = swap_delta(i, j, cost_arr, current, edges, touching, pal_de, delta)
        if d < 0.0:
            current[i], current[j] = current[j], current[i]
            value += d
            stats.swaps += 1
        stats.iterations += 1
        if history is not None:
            history.append(value)

    stats.final_objective = value
    if history is not None:
        stats.history = history
    return current, stats


__all__ = [
    "edge_distortion",
    "objective",
    "swap_delta",
    "refine_assignment",
]
