# palette_recolor/palette_data.py
from __future__ import annotations

"""
Boundary parsing and colour caches.

Exports:
  normalise_colour(value) -> Optional['#rrggbb']
  parse_palette(entries) -> list[PaletteEntry with index]
  parse_originals(entries, weights=None) -> list[OriginalEntry]
  lightness_ranks(L) -> int array, permutation of 0..N-1
  build_colour_cache(hexes, weights=None, labels=None, indices=None) -> list[ColourSample]
  build_palette_cache(entries) -> list[ColourSample]
  stack_lab(samples), stack_lch(samples)
"""

import math
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .colour_convert import hexes_to_lab, lab_to_lch
from .core_types import (
    ColourSample,
    HexStr,
    Lab,
    Lch,
    OriginalEntry,
    PaletteEntry,
    rgb_to_hex,
)
from .utils import warn

_HEX6 = re.compile(r"^#?([0-9a-f]{6})$")
_HEX3 = re.compile(r"^#([0-9a-f]{3})$")
_RGB_FUNC = re.compile(
    r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*(?:,\s*[0-9.]+%?\s*)?\)$"
)


def normalise_colour(value: Any) -> Optional[HexStr]:
    """
    Lowercase '#rrggbb' for '#rrggbb', 'rrggbb', '#rgb', 'rgb(r,g,b)' or
    'rgba(r,g,b,a)' input; None for anything else.
    """
    if not isinstance(value, str):
        return None
    s = value.strip().lower()
    m = _HEX6.match(s)
    if m:
        return "#" + m.group(1)
    m = _HEX3.match(s)
    if m:
        r, g, b = m.group(1)
        return f"#{r}{r}{g}{g}{b}{b}"
    m = _RGB_FUNC.match(s)
    if m:
        channels = tuple(int(x) for x in m.groups())
        if all(0 <= c <= 255 for c in channels):
            return rgb_to_hex(channels)  # type: ignore[arg-type]
    return None


# Entry coercion


def _palette_fields(item: Any) -> Tuple[Any, Optional[str]]:
    if isinstance(item, PaletteEntry):
        return item.hex, item.label
    if isinstance(item, str):
        return item, None
    if isinstance(item, Mapping):
        return item.get("hex"), item.get("label")
    if isinstance(item, (tuple, list)) and item:
        return item[0], (item[1] if len(item) > 1 else None)
    return None, None


def _original_fields(item: Any) -> Tuple[Any, Any, Optional[str]]:
    if isinstance(item, OriginalEntry):
        return item.hex, item.weight, item.label
    if isinstance(item, str):
        return item, None, None
    if isinstance(item, Mapping):
        return item.get("hex"), item.get("weight"), item.get("label")
    if isinstance(item, (tuple, list)) and item:
        weight = item[1] if len(item) > 1 else None
        label = item[2] if len(item) > 2 else None
        return item[0], weight, label
    return None, None, None


def _coerce_weight(raw: Any) -> Optional[float]:
    if raw is None:
        return 1.0
    if isinstance(raw, bool):
        return None
    try:
        w = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(w) or w <= 0.0:
        return None
    return w


def parse_palette(entries: Sequence[Any]) -> List[Tuple[int, PaletteEntry]]:
    """
    Validate palette entries. Returns (caller index, entry) pairs for the
    usable ones; invalid colours are dropped with a warning.
    """
    out: List[Tuple[int, PaletteEntry]] = []
    for i, item in enumerate(entries):
        raw_hex, label = _palette_fields(item)
        hx = normalise_colour(raw_hex)
        if hx is None:
            warn(f"palette entry {i}: invalid colour {raw_hex!r}, dropped")
            continue
        out.append((i, PaletteEntry(hex=hx, label=label or None)))
    return out


def parse_originals(
    entries: Sequence[Any], weights: Optional[Mapping[str, float]] = None
) -> List[OriginalEntry]:
    """
    Validate original colours.

    - invalid colours and non-positive / non-finite weights are dropped
    - missing weight defaults to 1
    - duplicates merge into the first occurrence: weights add, first label wins
    - weights (hex -> weight), when given, overrides the entry's own weight
    """
    override: Dict[HexStr, Any] = {}
    for key, value in (weights or {}).items():
        hx = normalise_colour(key)
        if hx is None:
            warn(f"weight override for invalid colour {key!r} ignored")
            continue
        override[hx] = value

    order: List[HexStr] = []
    merged: Dict[HexStr, Tuple[float, Optional[str]]] = {}
    for i, item in enumerate(entries):
        raw_hex, raw_weight, label = _original_fields(item)
        hx = normalise_colour(raw_hex)
        if hx is None:
            warn(f"colour entry {i}: invalid colour {raw_hex!r}, dropped")
            continue
        w = 1.0 if hx in override else _coerce_weight(raw_weight)
        if w is None:
            warn(f"colour entry {i} ({hx}): weight must be > 0, dropped")
            continue
        if hx in merged:
            prev_w, prev_label = merged[hx]
            merged[hx] = (prev_w + w, prev_label or label or None)
        else:
            order.append(hx)
            merged[hx] = (w, label or None)

    out: List[OriginalEntry] = []
    for hx in order:
        w, label = merged[hx]
        if hx in override:
            w = _coerce_weight(override[hx])
            if w is None:
                warn(f"weight override for {hx} must be > 0, colour dropped")
                continue
        out.append(OriginalEntry(hex=hx, weight=w, label=label))
    return out


# Caches


def lightness_ranks(lightness: np.ndarray) -> np.ndarray:
    """Rank of each L within its own list, ascending; ties keep input order."""
    values = np.asarray(lightness, dtype=np.float64).reshape(-1)
    order = np.argsort(values, kind="stable")
    ranks = np.empty(values.shape[0], dtype=np.int64)
    ranks[order] = np.arange(values.shape[0], dtype=np.int64)
    return ranks


def build_colour_cache(
    hexes: Sequence[HexStr],
    weights: Optional[Sequence[float]] = None,
    labels: Optional[Sequence[Optional[str]]] = None,
    indices: Optional[Sequence[int]] = None,
) -> List[ColourSample]:
    """
    Enrich validated '#rrggbb' colours with Lab, LCh and lightness rank.
    indices default to list positions; weights default to 1.
    """
    n = len(hexes)
    lab: Lab = hexes_to_lab(hexes)
    lch: Lch = lab_to_lch(lab)
    ranks = lightness_ranks(lab[:, 0])

    samples: List[ColourSample] = []
    for i in range(n):
        samples.append(
            ColourSample(
                index=int(indices[i]) if indices is not None else i,
                hex=hexes[i],
                lab=lab[i].copy(),
                lch=lch[i].copy(),
                lightness_rank=int(ranks[i]),
                weight=float(weights[i]) if weights is not None else 1.0,
                label=labels[i] if labels is not None else None,
            )
        )
    return samples


def build_palette_cache(entries: Sequence[Any]) -> List[ColourSample]:
    """
    Palette entries (strings, (hex, label) pairs, dicts or PaletteEntry) to
    ColourSamples. Each sample's index is the caller's list position.
    """
    parsed = parse_palette(entries)
    return build_colour_cache(
        [e.hex for _, e in parsed],
        labels=[e.label for _, e in parsed],
        indices=[i for i, _ in parsed],
    )


def stack_lab(samples: Sequence[ColourSample]) -> Lab:
    """Lab rows of samples as a (N,3) array."""
    if not samples:
        return np.zeros((0, 3), dtype=np.float64)
    return np.stack([s.lab for s in samples]).astype(np.float64, copy=False)


def stack_lch(samples: Sequence[ColourSample]) -> Lch:
    """LCh rows of samples as a (N,3) array."""
    if not samples:
        return np.zeros((0, 3), dtype=np.float64)
    return np.stack([s.lch for s in samples]).astype(np.float64, copy=False)


__all__ = [
    "normalise_colour",
    "parse_palette",
    "parse_originals",
    "lightness_ranks",
    "build_colour_cache",
    "build_palette_cache",
    "stack_lab",
    "stack_lch",
]
