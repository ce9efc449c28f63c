#!/usr/bin/env python3
"""
palette_recolor CLI
Map the colours of a drawing onto a fixed palette.

Usage:
  python -m palette_recolor INPUT.json [--palette PALETTE.json] [--out OUT.json]
      [--swatch OUT.png] [--alpha A] [--beta B] [--gamma G] [--delta D]
      [--c-neutral C] [--k K] [--iter N] [--seed S] [--debug]

Input:
  JSON object with
    "colours": [{"hex": "#rrggbb", "weight": 3, "label": "sky"}, "#aabbcc", ...]
    "palette": ["#ff0000", {"hex": "#00ff00", "label": "Green"}, ...]   (optional)
    "config":  {"ALPHA": 1.2, "ITER": 500, ...}                          (optional)
  --palette reads a JSON list (or an object with a "palette" key) and wins
  over the palette inside INPUT.

Output:
  JSON {"mapping", "active_count", "overflow", "hex_map"} to --out or stdout.
  With --out a readable report is printed as well; otherwise warnings and
  debug lines go to stderr.
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import MatchConfig, default_config
from .constants import DEFAULT_SEED
from .core_types import ColourSample, MappingResult, OriginalEntry
from .errors import ConfigError, RecolourError
from .mapping import ReportRow, compute_mapping, mapping_report
from .palette_data import build_palette_cache, parse_originals
from .utils import (
    error,
    format_seconds_compact,
    load_json_document,
    log,
    print_banner,
    print_config_line,
    save_swatch_sheet,
    set_log_stream,
    write_json_document,
)

# Flag dest -> config field
_CONFIG_FLAGS = {
    "alpha": "alpha",
    "beta": "beta",
    "gamma": "gamma",
    "delta": "delta",
    "c_neutral": "c_neutral",
    "k": "k",
    "iter": "iterations",
}


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to the input document
        palette: optional Path to a palette document
        out: optional Path for the JSON result
        swatch: optional Path for a PNG swatch sheet
        alpha..iter: optional overrides of the matching config
        seed: refinement seed
        debug: bool for verbose stage details
    """
    parser = argparse.ArgumentParser(
        prog="palette_recolor",
        description="Map drawing colours onto a fixed palette.",
    )
    parser.add_argument("src", type=Path, help="Input JSON document")
    parser.add_argument("--palette", type=Path, default=None, help="Palette JSON")
    parser.add_argument("--out", type=Path, default=None, help="Result JSON path")
    parser.add_argument(
        "--swatch", type=Path, default=None, help="Write a PNG swatch sheet"
    )
    parser.add_argument("--alpha", type=float, default=None, help="Lightness-rank weight")
    parser.add_argument("--beta", type=float, default=None, help="Hue weight")
    parser.add_argument("--gamma", type=float, default=None, help="Neutral-chroma weight")
    parser.add_argument("--delta", type=float, default=None, help="Edge-distortion weight")
    parser.add_argument(
        "--c-neutral", type=float, default=None, help="Neutral chroma threshold"
    )
    parser.add_argument("--k", type=int, default=None, help="Neighbour graph degree")
    parser.add_argument("--iter", type=int, default=None, help="Refinement trials")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Refinement seed")
    parser.add_argument("--debug", action="store_true", help="Verbose mapping details")
    return parser.parse_args(argv)


def resolve_config(document: Dict[str, Any], args: argparse.Namespace) -> MatchConfig:
    """Defaults, then the document's "config", then command-line flags."""
    config = default_config()
    from_doc = document.get("config") or {}
    if not isinstance(from_doc, dict):
        raise ConfigError("config must be a JSON object")
    if from_doc:
        config = MatchConfig.from_mapping(from_doc, defaults=config)
    overrides = {
        name: getattr(args, flag)
        for flag, name in _CONFIG_FLAGS.items()
        if getattr(args, flag) is not None
    }
    return replace(config, **overrides) if overrides else config


def _load_palette(document: Dict[str, Any], palette_path: Optional[Path]) -> List[Any]:
    if palette_path is not None:
        raw = load_json_document(palette_path)
        if isinstance(raw, dict):
            raw = raw.get("palette", [])
    else:
        raw = document.get("palette", [])
    if not isinstance(raw, list):
        raise RecolourError("palette must be a JSON list")
    return raw


def _print_report(rows: List[ReportRow]) -> None:
    for r in rows:
        tag = " (overflow)" if r.overflow else ""
        src_label = f" {r.label}" if r.label else ""
        dst_label = f" {r.palette_label}" if r.palette_label else ""
        log(
            f"  {r.hex}{src_label}  w={r.weight:g} -> [{r.palette_index}] "
            f"{r.palette_hex}{dst_label}  dE={r.delta_e:.2f}{tag}"
        )


def _swatch_rows(rows: List[ReportRow]) -> List[Tuple[str, str, str]]:
    out: List[Tuple[str, str, str]] = []
    for r in rows:
        caption = f"{r.hex} -> {r.palette_hex}  dE {r.delta_e:.1f}"
        if r.palette_label:
            caption += f"  {r.palette_label}"
        out.append((r.hex, r.palette_hex, caption))
    return out


def result_payload(
    result: MappingResult, palette: List[ColourSample]
) -> Dict[str, Any]:
    """JSON-ready view of a MappingResult."""
    return {
        "mapping": result.mapping,
        "active_count": result.active_count,
        "overflow": result.overflow,
        "hex_map": result.as_hex_map(palette),
    }


def run(args: argparse.Namespace) -> int:
    """Load, map, write. Returns the process exit status."""
    t_start = time.perf_counter()
    document = load_json_document(args.src)
    if not isinstance(document, dict):
        raise RecolourError("input must be a JSON object")

    config = resolve_config(document, args)
    palette = build_palette_cache(_load_palette(document, args.palette))
    entries: List[OriginalEntry] = parse_originals(document.get("colours", []))

    if args.out is not None:
        print_banner(args.src.name)
        print_config_line("match", config.items(), args.debug)
    elif args.debug:
        print_config_line("match", config.items(), True)

    result = compute_mapping(
        entries, None, config, palette, seed=args.seed, debug=args.debug
    )
    rows = mapping_report(result, entries, palette)

    payload = result_payload(result, palette)
    if args.out is None:
        print(json.dumps(payload, indent=2))
    else:
        write_json_document(args.out, payload)
        _print_report(rows)
        log(
            f"Mapped {len(result.mapping)} colour(s), {result.active_count} active, "
            f"in {format_seconds_compact(time.perf_counter() - t_start)} -> {args.out}"
        )

    if args.swatch is not None:
        save_swatch_sheet(args.swatch, _swatch_rows(rows))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_cli_args(argv)
    # stdout carries the JSON result when there is no --out
    previous = set_log_stream(sys.stderr if args.out is None else None)
    try:
        return run(args)
    except (RecolourError, OSError, json.JSONDecodeError) as exc:
        error(str(exc))
        return 2
    finally:
        set_log_stream(previous)


if __name__ == "__main__":
    sys.exit(main())
