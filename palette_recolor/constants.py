# palette_recolor/constants.py
"""
Tunables used across the project.

- Default cost weights, neighbour degree, refinement trials (CLI defaults only;
  library calls always receive an explicit MatchConfig)
- Reference white and Lab constants
- Swatch sheet geometry
"""
from __future__ import annotations

from typing import Tuple

# =========================
# Cost model defaults
# =========================
DEFAULT_ALPHA = 1.2  # lightness-rank deviation
DEFAULT_BETA = 0.15  # hue deviation, per degree
DEFAULT_GAMMA = 0.08  # chroma added to a neutral source
DEFAULT_DELTA = 0.35  # neighbour-pair distortion
DEFAULT_C_NEUTRAL = 6.0  # sources below this chroma count as neutral
DEFAULT_K = 4
DEFAULT_ITER = 2000
DEFAULT_SEED = 0

# =========================
# Colour science (D65)
# =========================
WHITE_D65: Tuple[float, float, float] = (0.95047, 1.00000, 1.08883)
LAB_EPSILON = 216.0 / 24389.0  # (6/29)^3
LAB_KAPPA = 24389.0 / 27.0

# =========================
# Swatch sheet
# =========================
SWATCH_SIZE = 32
SWATCH_GAP = 6
SWATCH_TEXT_WIDTH = 360
SWATCH_BG: Tuple[int, int, int] = (255, 255, 255)
SWATCH_INK: Tuple[int, int, int] = (0, 0, 0)
