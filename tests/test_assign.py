import itertools

import numpy as np
import pytest

from palette_recolor.assign import assignment_cost, hungarian


def _brute_force(cost: np.ndarray) -> float:
    n, m = cost.shape
    best = np.inf
    for cols in itertools.permutations(range(m), n):
        best = min(best, float(sum(cost[i, c] for i, c in enumerate(cols))))
    return best


def test_known_square_case() -> None:
    cost = np.array([[4.0, 1.0, 3.0], [2.0, 0.0, 5.0], [3.0, 2.0, 2.0]])
    result = hungarian(cost)
    assert assignment_cost(cost, result) == pytest.approx(5.0)
    assert sorted(result.tolist()) == [0, 1, 2]


@pytest.mark.parametrize("seed", range(8))
@pytest.mark.parametrize("shape", [(1, 1), (2, 5), (4, 4), (5, 7), (6, 6)])
def test_matches_brute_force(seed, shape) -> None:
    cost = np.random.default_rng(seed).uniform(0.0, 50.0, size=shape)
    result = hungarian(cost)
    assert len(set(result.tolist())) == shape[0]
    assert all(0 <= c < shape[1] for c in result.tolist())
    assert assignment_cost(cost, result) == pytest.approx(_brute_force(cost), abs=1e-9)


def test_integer_ties_still_optimal_and_injective() -> None:
    cost = np.ones((4, 4))
    result = hungarian(cost)
    assert sorted(result.tolist()) == [0, 1, 2, 3]


def test_deterministic() -> None:
    cost = np.random.default_rng(11).uniform(size=(6, 9))
    assert hungarian(cost).tolist() == hungarian(cost).tolist()


def test_accepts_nested_lists() -> None:
    assert hungarian([[1.0, 0.0], [0.0, 1.0]]).tolist() == [1, 0]


@pytest.mark.parametrize(
    "bad",
    [
        np.zeros((0, 3)),
        np.zeros((3, 0)),
        np.zeros((3, 2)),
        np.array([1.0, 2.0]),
        np.array([[1.0, np.inf]]),
        [[1.0, 2.0], [3.0]],
    ],
)
def test_rejects_malformed(bad) -> None:
    with pytest.raises(ValueError):
        hungarian(bad)
