# palette_recolor/utils.py
from __future__ import annotations

"""
Shared utilities for palette_recolor.

Includes time / number formatting, JSON document loading, the swatch sheet
writer used by the CLI, and tidy logging.
"""

import json
import sys
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, TextIO, Tuple

from PIL import Image, ImageDraw, ImageFont

from .constants import (
    SWATCH_BG,
    SWATCH_GAP,
    SWATCH_INK,
    SWATCH_SIZE,
    SWATCH_TEXT_WIDTH,
)
from .core_types import hex_to_rgb
from .errors import RecolourError

# Where log/debug_log/warn go when no stream is passed; None means stdout
_log_stream: Optional[TextIO] = None


#  Time / size formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, int):
        return f"{value:,}"
    if isinstance(value, float):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return text
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def set_log_stream(stream: Optional[TextIO]) -> Optional[TextIO]:
    """
    Redirect log(), debug_log(), warn() and print_banner() for the process.
    None restores stdout. Returns the previous setting.
    """
    global _log_stream
    previous = _log_stream
    _log_stream = stream
    return previous


def _emit(line: str, stream: Optional[TextIO]) -> None:
    print(line, file=stream if stream is not None else _log_stream, flush=True)


def print_config_line(
    section: str,
    pairs: Iterable[Tuple[str, Any]],
    debug: bool,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [match] ALPHA: 1.2  BETA: 0.15  K: 4  ITER: 2,000
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line, stream)


def print_banner(title: str, stream: Optional[TextIO] = None) -> None:
    """Section banner."""
    _emit(f"\n=== {title} ===", stream)


def log(message: str, stream: Optional[TextIO] = None) -> None:
    """Plain log line."""
    _emit(message, stream)


def debug_log(message: str, stream: Optional[TextIO] = None) -> None:
    """Debug log line."""
    _emit(f"[debug] {message}", stream)


def warn(message: str, stream: Optional[TextIO] = None) -> None:
    """Warning log line."""
    _emit(f"[warn] {message}", stream)


def error(message: str, stream: Optional[TextIO] = None) -> None:
    """Error log line, stderr unless a stream is given."""
    print(f"[error] {message}", file=stream or sys.stderr, flush=True)


#  I/O helpers


def load_json_document(path: Path) -> Any:
    """Read a UTF-8 JSON file. Undecodable bytes raise RecolourError."""
    try:
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except UnicodeDecodeError as exc:
        raise RecolourError(f"{path}: not valid UTF-8 ({exc.reason})") from exc


def write_json_document(path: Path, payload: Any) -> None:
    """Write payload as indented UTF-8 JSON."""
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def save_swatch_sheet(path: Path, rows: Sequence[Tuple[str, str, str]]) -> None:
    """
    Write a PNG with one row per (source hex, replacement hex, caption):
    two colour squares followed by the caption text.
    """
    step = SWATCH_SIZE + SWATCH_GAP
    width = SWATCH_GAP + 2 * step + SWATCH_TEXT_WIDTH
    height = SWATCH_GAP + max(1, len(rows)) * step

    img = Image.new("RGB", (width, height), SWATCH_BG)
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default()

    for r, (src_hex, dst_hex, caption) in enumerate(rows):
        y0 = SWATCH_GAP + r * step
        for c, hx in enumerate((src_hex, dst_hex)):
            x0 = SWATCH_GAP + c * step
            draw.rectangle(
                [x0, y0, x0 + SWATCH_SIZE - 1, y0 + SWATCH_SIZE - 1],
                fill=hex_to_rgb(hx),
                outline=SWATCH_INK,
            )
        text_y = y0 + SWATCH_SIZE // 2 - 6
        draw.text((SWATCH_GAP + 2 * step, text_y), caption, fill=SWATCH_INK, font=font)

    img.save(path)


__all__ = [
    # formatting
    "format_seconds_compact",
    "format_bool_on_off",
    "format_number_compact",
    "key_value_pairs_to_string",
    # logging
    "set_log_stream",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
    # I/O
    "load_json_document",
    "write_json_document",
    "save_swatch_sheet",
]
