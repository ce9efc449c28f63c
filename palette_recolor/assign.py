# palette_recolor/assign.py
from __future__ import annotations

"""
Minimum-cost one-to-one assignment (Kuhn-Munkres, shortest augmenting path
with row/column potentials).

Exports:
  hungarian(cost) -> int64 [n] column per row, n <= m
  assignment_cost(cost, assignment) -> float
"""

import numpy as np

from .core_types import Assignment, CostMatrix


def _validate(cost: np.ndarray) -> np.ndarray:
    try:
        mat = np.asarray(cost, dtype=np.float64)
    except ValueError:
        # ragged nested lists
        raise ValueError("cost matrix rows must all have the same length") from None
    if mat.ndim != 2:
        raise ValueError(f"cost matrix must be 2-D, got shape {mat.shape}")
    n, m = mat.shape
    if n == 0 or m == 0:
        raise ValueError("cost matrix is empty")
    if n > m:
        raise ValueError(f"need rows <= columns, got {n}x{m}")
    if not np.all(np.isfinite(mat)):
        raise ValueError("cost matrix contains non-finite values")
    return mat


def hungarian(cost: CostMatrix) -> Assignment:
    """
    Assign every row to a distinct column with minimum total cost.

    Rows are inserted one at a time; each insertion grows a shortest
    augmenting path over the reduced costs cost[i, j] - u[i] - v[j], which
    stay non-negative on every column visited. O(n^2 * m).

    Args:
      cost: float [n, m], n <= m, finite
    Returns:
      int64 [n], result[i] = column assigned to row i
    """
    c = _validate(cost)
    n, m = c.shape

    # 1-based with a virtual column 0 holding the row being inserted
    u = np.zeros(n + 1, dtype=np.float64)
    v = np.zeros(m + 1, dtype=np.float64)
    row_of = np.zeros(m + 1, dtype=np.int64)  # 0 = free column
    way = np.zeros(m + 1, dtype=np.int64)

    for i in range(1, n + 1):
        row_of[0] = i
        j0 = 0
        minv = np.full(m + 1, np.inf, dtype=np.float64)
        used = np.zeros(m + 1, dtype=bool)

        while True:
            used[j0] = True
            i0 = int(row_of[j0])
            free = ~used[1:]

            reduced = c[i0 - 1] - u[i0] - v[1:]
            better = free & (reduced < minv[1:])
            minv[1:][better] = reduced[better]
            way[1:][better] = j0

            candidates = np.where(free, minv[1:], np.inf)
            j1 = int(np.argmin(candidates)) + 1
            step = float(candidates[j1 - 1])

            u[row_of[used]] += step
            v[used] -= step
            minv[~used] -= step

            j0 = j1
            if row_of[j0] == 0:
                break

        # flip the augmenting path back to the virtual column
        while j0 != 0:
            j1 = int(way[j0])
            row_of[j0] = row_of[j1]
            j0 = j1

    result = np.full(n, -1, dtype=np.int64)
    for j in range(1, m + 1):
        if row_of[j] != 0:
            result[row_of[j] - 1] = j - 1
    return result


def assignment_cost(cost: CostMatrix, assignment: Assignment) -> float:
    """Sum of cost[i, assignment[i]]."""
    mat = np.asarray(cost, dtype=np.float64)
    rows = np.arange(len(assignment))
    return float(mat[rows, np.asarray(assignment, dtype=np.int64)].sum())


__all__ = ["hungarian", "assignment_cost"]
