# palette_recolor/mapping.py
from __future__ import annotations

"""
Mapping orchestrator.

Picks the active subset when there are more colours than palette slots,
runs cache -> cost matrix -> Kuhn-Munkres -> swap refinement on it, then
resolves the overflow colours to their nearest already-used palette entry.
"""

import time
from typing import Any, List, Mapping, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .assign import assignment_cost, hungarian
from .colour_convert import delta_e2000_matrix, delta_e2000_vec
from .config import MatchConfig
from .core_types import (
    ColourSample,
    HexStr,
    HexToIndex,
    MappingResult,
    OriginalEntry,
)
from .cost_matrix import build_cost_matrix
from .errors import EmptyPaletteError
from .neighbour_graph import build_neighbour_graph
from .palette_data import build_colour_cache, parse_originals, stack_lab
from .refine import refine_assignment
from .utils import debug_log, format_seconds_compact, key_value_pairs_to_string


class ReportRow(NamedTuple):
    hex: HexStr
    label: Optional[str]
    weight: float
    palette_index: int
    palette_hex: HexStr
    palette_label: Optional[str]
    delta_e: float
    overflow: bool


def select_active(
    entries: Sequence[OriginalEntry], capacity: int
) -> Tuple[List[int], List[int]]:
    """
    Split entry positions into (active, overflow). Active holds the top
    `capacity` by weight (ties by input order), both lists in input order.
    """
    if len(entries) <= capacity:
        return list(range(len(entries))), []
    by_weight = sorted(range(len(entries)), key=lambda i: -entries[i].weight)
    chosen = set(by_weight[:capacity])
    active = [i for i in range(len(entries)) if i in chosen]
    overflow = [i for i in range(len(entries)) if i not in chosen]
    return active, overflow


def resolve_overflow(
    overflow: Sequence[OriginalEntry],
    used_columns: Sequence[int],
    palette: Sequence[ColourSample],
) -> List[int]:
    """
    Palette column for each overflow colour: the used column with the
    smallest dE2000, first encountered on ties. Not injective.
    """
    if not overflow:
        return []
    cols = np.asarray(used_columns, dtype=np.int64)
    used_lab = stack_lab(palette)[cols]
    src = build_colour_cache([e.hex for e in overflow])
    de = delta_e2000_matrix(stack_lab(src), used_lab)
    # argmin returns the first minimum
    return [int(cols[k]) for k in np.argmin(de, axis=1).tolist()]


def compute_mapping(
    originals: Sequence[Any],
    weights: Optional[Mapping[str, float]],
    config: MatchConfig,
    palette: Sequence[ColourSample],
    *,
    rng: Optional[np.random.Generator] = None,
    seed: int = 0,
    debug: bool = False,
) -> MappingResult:
    """
    Map original colours onto palette indices.

    Args:
      originals: entries as OriginalEntry, '#hex' strings, (hex, weight, label)
                 tuples or dicts; invalid ones are dropped with a warning
      weights: optional hex -> weight override
      config: validated MatchConfig
      palette: palette cache from build_palette_cache
      rng: generator for the refinement pass; default_rng(seed) when None
      seed: used only when rng is None
      debug: print stage timings and stats

    Returns:
      MappingResult with mapping '#rrggbb' -> caller palette index

    Raises:
      EmptyPaletteError: colours present but palette empty
    """
    entries = parse_originals(originals, weights)
    if not entries:
        return MappingResult(mapping={}, active_count=0)
    if not palette:
        raise EmptyPaletteError(
            f"{len(entries)} colour(s) to map but the palette has no usable entries"
        )
    if rng is None:
        rng = np.random.default_rng(seed)

    t0 = time.perf_counter()
    active_pos, overflow_pos = select_active(entries, len(palette))
    active = [entries[i] for i in active_pos]
    samples = build_colour_cache(
        [e.hex for e in active],
        weights=[e.weight for e in active],
        labels=[e.label for e in active],
    )

    cost = build_cost_matrix(samples, palette, config)
    t_cost = time.perf_counter()

    columns = hungarian(cost)
    t_solve = time.perf_counter()
    solved_cost = assignment_cost(cost, columns)

    edges = build_neighbour_graph(samples, config.k)
    pal_lab = stack_lab(palette)
    pal_de = delta_e2000_matrix(pal_lab, pal_lab)
    columns, stats = refine_assignment(
        columns,
        cost,
        edges,
        pal_de,
        config.delta,
        config.iterations,
        rng,
    )
    t_refine = time.perf_counter()

    mapping: HexToIndex = {}
    for entry, col in zip(active, columns.tolist()):
        mapping[entry.hex] = palette[col].index

    overflow = [entries[i] for i in overflow_pos]
    for entry, col in zip(overflow, resolve_overflow(overflow, columns.tolist(), palette)):
        mapping[entry.hex] = palette[col].index

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Colours", len(entries)),
                    ("Palette", len(palette)),
                    ("Active", len(active)),
                    ("Overflow", len(overflow)),
                    ("Edges", len(edges)),
                ]
            )
        )
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Cost", format_seconds_compact(t_cost - t0)),
                    ("Solve", format_seconds_compact(t_solve - t_cost)),
                    ("Refine", format_seconds_compact(t_refine - t_solve)),
                ]
            )
        )
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Assignment cost", solved_cost),
                    ("Objective before", stats.initial_objective),
                    ("Objective after", stats.final_objective),
                    ("Swaps", stats.swaps),
                ]
            )
        )

    return MappingResult(
        mapping=mapping,
        active_count=len(active),
        overflow=[e.hex for e in overflow],
        objective=stats.final_objective,
        stats=stats,
    )


def mapping_report(
    result: MappingResult,
    entries: Sequence[OriginalEntry],
    palette: Sequence[ColourSample],
) -> List[ReportRow]:
    """One row per mapped colour, heaviest first. entries come from parse_originals."""
    by_index = {p.index: p for p in palette}
    overflow = set(result.overflow)
    rows: List[ReportRow] = []
    for entry in entries:
        idx = result.mapping.get(entry.hex)
        if idx is None:
            continue
        target = by_index[idx]
        src = build_colour_cache([entry.hex])[0]
        rows.append(
            ReportRow(
                hex=entry.hex,
                label=entry.label,
                weight=entry.weight,
                palette_index=idx,
                palette_hex=target.hex,
                palette_label=target.label,
                delta_e=float(delta_e2000_vec(src.lab, target.lab)),
                overflow=entry.hex in overflow,
            )
        )
    rows.sort(key=lambda r: -r.weight)
    return rows


__all__ = [
    "ReportRow",
    "select_active",
    "resolve_overflow",
    "compute_mapping",
    "mapping_report",
]
