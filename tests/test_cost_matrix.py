import numpy as np
import pytest

from palette_recolor.colour_convert import delta_e2000_pair
from palette_recolor.config import MatchConfig
from palette_recolor.core_types import hue_difference_degrees
from palette_recolor.cost_matrix import build_cost_matrix, hue_distance_matrix
from palette_recolor.palette_data import build_colour_cache, build_palette_cache


def _cfg(**kw) -> MatchConfig:
    base = dict(alpha=1.2, beta=0.15, gamma=0.08, delta=0.35, c_neutral=6.0, k=2, iterations=50)
    base.update(kw)
    return MatchConfig(**base)


def test_zero_weights_reduce_to_ciede2000() -> None:
    originals = build_colour_cache(["#fe0100", "#010001"], weights=[1.0, 1.0])
    palette = build_palette_cache(["#ff0000", "#00ff00", "#0000ff"])
    cost = build_cost_matrix(originals, palette, _cfg(alpha=0.0, beta=0.0, gamma=0.0))
    for i, s in enumerate(originals):
        for j, p in enumerate(palette):
            assert cost[i, j] == pytest.approx(delta_e2000_pair(s.lab, p.lab), abs=1e-9)


def test_each_term_matches_formula() -> None:
    cfg = _cfg()
    originals = build_colour_cache(["#808080", "#3366cc", "#cc3322"], weights=[2.0, 1.0, 0.5])
    palette = build_palette_cache(["#777777", "#2255dd", "#dd2211", "#ffcc00"])
    cost = build_cost_matrix(originals, palette, cfg)
    assert cost.shape == (3, 4)
    for i, s in enumerate(originals):
        for j, p in enumerate(palette):
            neutral = cfg.gamma * max(0.0, p.C - s.C) if s.C < cfg.c_neutral else 0.0
            expected = s.weight * (
                delta_e2000_pair(s.lab, p.lab)
                + cfg.alpha * abs(s.lightness_rank - p.lightness_rank)
                + cfg.beta * hue_difference_degrees(s.h, p.h)
                + neutral
            )
            assert cost[i, j] == pytest.approx(expected, rel=1e-9, abs=1e-9)


def test_neutral_penalty_prefers_grey() -> None:
    # grey source sits between a grey and a saturated target at similar dE
    originals = build_colour_cache(["#7f7f7f"])
    palette = build_palette_cache(["#8a8a8a", "#8a7a6a"])
    plain = build_cost_matrix(originals, palette, _cfg(alpha=0, beta=0, gamma=0))
    penalised = build_cost_matrix(originals, palette, _cfg(alpha=0, beta=0, gamma=5.0))
    assert penalised[0, 0] == pytest.approx(plain[0, 0], abs=1e-3)
    assert penalised[0, 1] > plain[0, 1]


def test_weight_scales_row() -> None:
    palette = build_palette_cache(["#ff0000", "#0000ff"])
    one = build_cost_matrix(build_colour_cache(["#aa2233"], weights=[1.0]), palette, _cfg())
    five = build_cost_matrix(build_colour_cache(["#aa2233"], weights=[5.0]), palette, _cfg())
    assert np.allclose(five, 5.0 * one)


def test_hue_distance_matrix_range() -> None:
    d = hue_distance_matrix(np.array([0.0, 350.0]), np.array([10.0, 180.0, 359.0]))
    assert np.allclose(d, [[10.0, 180.0, 1.0], [20.0, 170.0, 9.0]])


def test_empty_sides() -> None:
    palette = build_palette_cache(["#ffffff"])
    assert build_cost_matrix([], palette, _cfg()).shape == (0, 1)
