import numpy as np
import pytest

from palette_recolor.colour_convert import delta_e2000_pair
from palette_recolor.neighbour_graph import (
    build_neighbour_graph,
    incident_edges,
    knn_candidate_pairs,
)
from palette_recolor.palette_data import build_colour_cache


def test_knn_pairs_line() -> None:
    lab = np.array([[0.0, 0, 0], [1.0, 0, 0], [3.0, 0, 0], [10.0, 0, 0]])
    pairs = knn_candidate_pairs(lab, 1)
    assert set(pairs) == {(0, 1), (1, 2), (2, 3)}


def test_knn_pairs_are_undirected_and_unique() -> None:
    lab = np.random.default_rng(3).uniform(0, 100, size=(12, 3))
    pairs = knn_candidate_pairs(lab, 3)
    assert len(pairs) == len(set(pairs))
    assert all(a < b for a, b in pairs)
    # each node keeps 3 candidates, so degree >= 3 and edges <= n*k
    degree = np.zeros(12, dtype=int)
    for a, b in pairs:
        degree[a] += 1
        degree[b] += 1
    assert degree.min() >= 3
    assert len(pairs) <= 12 * 3


def test_k_larger_than_population() -> None:
    lab = np.array([[0.0, 0, 0], [5.0, 0, 0], [9.0, 0, 0]])
    assert set(knn_candidate_pairs(lab, 10)) == {(0, 1), (0, 2), (1, 2)}


def test_single_colour_has_no_edges() -> None:
    samples = build_colour_cache(["#abcdef"])
    assert build_neighbour_graph(samples, 4) == []


def test_edges_carry_ciede2000() -> None:
    hexes = ["#ff0000", "#ee1111", "#0000ff", "#1111ee"]
    samples = build_colour_cache(hexes)
    edges = build_neighbour_graph(samples, 1)
    assert {(e.a, e.b) for e in edges} == {(0, 1), (2, 3)}
    for e in edges:
        expected = delta_e2000_pair(samples[e.a].lab, samples[e.b].lab)
        assert e.original_distance == pytest.approx(expected, abs=1e-9)


def test_incident_edges_lists_both_ends() -> None:
    samples = build_colour_cache(["#000000", "#101010", "#202020"])
    edges = build_neighbour_graph(samples, 2)
    touching = incident_edges(edges, 3)
    for node, idxs in enumerate(touching):
        for e_idx in idxs:
            assert node in (edges[e_idx].a, edges[e_idx].b)
    assert sum(len(t) for t in touching) == 2 * len(edges)
