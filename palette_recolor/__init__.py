# palette_recolor/__init__.py
"""
palette_recolor package.

Purpose:
  Map the colours used in a drawing onto a fixed palette while keeping
  perceptual distance low, lightness order intact, and neighbouring colours
  apart. See palette_recolor.cli for the command line.

Public API:
  compute_mapping     : orchestrates the whole match, returns MappingResult.
  build_palette_cache : palette entries -> ColourSamples (Lab, LCh, rank).
  MatchConfig         : ALPHA/BETA/GAMMA/DELTA/C_NEUTRAL/K/ITER tunables.
  colour_convert      : sRGB -> Lab, CIE76 and CIEDE2000.
  assign              : Kuhn-Munkres solver.
  refine              : swap refinement and objective.
  core_types          : entries, value objects, type aliases.
  errors              : RecolourError and subclasses.

Quick start:
  from palette_recolor import MatchConfig, build_palette_cache, compute_mapping
  palette = build_palette_cache(["#ff0000", "#00ff00", "#0000ff"])
  cfg = MatchConfig(alpha=1.2, beta=0.15, gamma=0.08, delta=0.35,
                    c_neutral=6.0, k=2, iterations=50)
  result = compute_mapping([("#fe0100", 5), ("#010001", 1)], None, cfg, palette)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import assign
from . import colour_convert
from . import core_types
from . import cost_matrix
from . import errors
from . import neighbour_graph
from . import palette_data
from . import refine
from . import utils

from .config import MatchConfig, default_config  # noqa: E402,F401
from .core_types import (  # noqa: E402,F401
    ColourSample,
    MappingResult,
    NeighbourEdge,
    OriginalEntry,
    PaletteEntry,
)
from .errors import (  # noqa: E402,F401
    ConfigError,
    EmptyPaletteError,
    InvalidColourError,
    RecolourError,
)
from .mapping import compute_mapping, mapping_report  # noqa: E402,F401
from .palette_data import build_palette_cache, normalise_colour  # noqa: E402,F401

__all__ = [
    "__version__",
    "assign",
    "colour_convert",
    "core_types",
    "cost_matrix",
    "errors",
    "neighbour_graph",
    "palette_data",
    "refine",
    "utils",
    "MatchConfig",
    "default_config",
    "ColourSample",
    "MappingResult",
    "NeighbourEdge",
    "OriginalEntry",
    "PaletteEntry",
    "ConfigError",
    "EmptyPaletteError",
    "InvalidColourError",
    "RecolourError",
    "compute_mapping",
    "mapping_report",
    "build_palette_cache",
    "normalise_colour",
]
