# palette_recolor/errors.py
"""
Exceptions raised at the engine boundary.

All derive from ValueError so callers that already guard numeric input
with `except ValueError` keep working.
"""


class RecolourError(ValueError):
    """Base class for palette_recolor errors."""


class InvalidColourError(RecolourError):
    """A string is not a valid '#rrggbb' colour."""


class EmptyPaletteError(RecolourError):
    """Original colours were supplied but the palette has no usable entries."""


class ConfigError(RecolourError):
    """Malformed tunables: negative weights, K < 1, ITER < 0, non-numeric values."""


__all__ = [
    "RecolourError",
    "InvalidColourError",
    "EmptyPaletteError",
    "ConfigError",
]
