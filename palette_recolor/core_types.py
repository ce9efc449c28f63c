# palette_recolor/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .errors import InvalidColourError

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

Lab = NDArray[np.float64]  # (..., 3) CIE Lab
Lch = NDArray[np.float64]  # (..., 3) CIE LCh
CostMatrix = NDArray[np.float64]  # (n, m)
Assignment = NDArray[np.int64]  # (n,) original row -> palette column
HexToIndex = Dict[HexStr, int]  # "#rrggbb" -> palette index

_STRICT_HEX = re.compile(r"#[0-9a-f]{6}")

# Caller-facing entries


@dataclass(frozen=True)
class PaletteEntry:
    """Palette entry as supplied by the caller."""

    hex: str
    label: Optional[str] = None


@dataclass(frozen=True)
class OriginalEntry:
    """Colour used in the source drawing, with its usage weight."""

    hex: str
    weight: float = 1.0
    label: Optional[str] = None


# Value objects


@dataclass(frozen=True)
class ColourSample:
    """
    Colour with precomputed Lab and LCh rows and its lightness rank.

    index is the caller's list position for palette samples and the
    position in the active subset for original samples.
    """

    index: int
    hex: HexStr
    lab: Lab  # shape (3,)
    lch: Lch  # shape (3,)
    lightness_rank: int
    weight: float = 1.0
    label: Optional[str] = None

    @property
    def L(self) -> float:
        return float(self.lab[0])

    @property
    def a(self) -> float:
        return float(self.lab[1])

    @property
    def b(self) -> float:
        return float(self.lab[2])

    @property
    def C(self) -> float:
        return float(self.lch[1])

    @property
    def h(self) -> float:
        return float(self.lch[2])


@dataclass(frozen=True)
class NeighbourEdge:
    """Undirected edge between two original colours, a < b."""

    a: int
    b: int
    original_distance: float  # dE2000 between the two originals


@dataclass
class RefineStats:
    """Bookkeeping from one refinement pass."""

    iterations: int = 0
    swaps: int = 0
    initial_objective: float = 0.0
    final_objective: float = 0.0
    history: List[float] = field(default_factory=list)


@dataclass
class MappingResult:
    """Final mapping plus diagnostics."""

    mapping: HexToIndex
    active_count: int
    overflow: List[HexStr] = field(default_factory=list)
    objective: float = 0.0
    stats: Optional[RefineStats] = None

    def as_hex_map(self, palette: List[ColourSample]) -> Dict[HexStr, HexStr]:
        """Original hex -> replacement palette hex."""
        hex_of = {p.index: p.hex for p in palette}
        return {src: hex_of[idx] for src, idx in self.mapping.items()}


# Small helpers


def hue_difference_degrees(hue_a: float, hue_b: float) -> float:
    """Minimal absolute difference between two hues in degrees [0..180]."""
    d = abs((hue_a - hue_b) % 360.0)
    return 360.0 - d if d > 180.0 else d


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not _STRICT_HEX.fullmatch(s):
        raise InvalidColourError(f"expected '#rrggbb', got {hex_str!r}")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def hex_list_to_u8_rgb_array(hex_list: List[str]) -> NDArray[np.uint8]:
    """Convert a sequence of '#rrggbb' strings to a (N,3) uint8 array."""
    out = np.empty((len(hex_list), 3), dtype=np.uint8)
    for i, hx in enumerate(hex_list):
        r, g, b = hex_to_rgb(hx)
        out[i, 0] = r
        out[i, 1] = g
        out[i, 2] = b
    return out


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "Lab",
    "Lch",
    "CostMatrix",
    "Assignment",
    "HexToIndex",
    # entries / value objects
    "PaletteEntry",
    "OriginalEntry",
    "ColourSample",
    "NeighbourEdge",
    "RefineStats",
    "MappingResult",
    # helpers
    "hue_difference_degrees",
    "rgb_to_hex",
    "hex_to_rgb",
    "hex_list_to_u8_rgb_array",
]
