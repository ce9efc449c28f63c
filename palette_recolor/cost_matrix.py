# palette_recolor/cost_matrix.py
from __future__ import annotations

"""
Original x palette cost matrix.

  base    = dE2000(i, j)
  scale   = ALPHA * |rank_i - rank_j|
  hue     = BETA  * hue_distance(h_i, h_j)
  neutral = GAMMA * max(0, C_j - C_i)   only when C_i < C_NEUTRAL
  cost    = weight_i * (base + scale + hue + neutral)
"""

from typing import Sequence

import numpy as np

from .colour_convert import delta_e2000_matrix
from .config import MatchConfig
from .core_types import ColourSample, CostMatrix
from .palette_data import stack_lab, stack_lch


def hue_distance_matrix(src_hue: np.ndarray, tgt_hue: np.ndarray) -> np.ndarray:
    """Circular hue distance in degrees [0,180] for every (src, tgt) pair."""
    delta = np.abs(src_hue[:, None] - tgt_hue[None, :]) % 360.0
    return np.where(delta > 180.0, 360.0 - delta, delta)


def build_cost_matrix(
    originals: Sequence[ColourSample],
    palette: Sequence[ColourSample],
    config: MatchConfig,
) -> CostMatrix:
    """
    Dense [n, m] cost matrix for originals (rows) against palette (columns).
    lightness_rank of each side must have been computed within its own list.
    """
    n, m = len(originals), len(palette)
    if n == 0 or m == 0:
        return np.zeros((n, m), dtype=np.float64)

    src_lch = stack_lch(originals)
    tgt_lch = stack_lch(palette)
    src_rank = np.array([s.lightness_rank for s in originals], dtype=np.float64)
    tgt_rank = np.array([p.lightness_rank for p in palette], dtype=np.float64)
    weight = np.array([s.weight for s in originals], dtype=np.float64)

    base = delta_e2000_matrix(stack_lab(originals), stack_lab(palette))
    scale = config.alpha * np.abs(src_rank[:, None] - tgt_rank[None, :])
    hue = config.beta * hue_distance_matrix(src_lch[:, 2], tgt_lch[:, 2])

    src_c = src_lch[:, 1][:, None]
    tgt_c = tgt_lch[:, 1][None, :]
    neutral = np.where(
        src_c < config.c_neutral,
        config.gamma * np.maximum(0.0, tgt_c - src_c),
        0.0,
    )

    return weight[:, None] * (base + scale + hue + neutral)


__all__ = ["hue_distance_matrix", "build_cost_matrix"]
