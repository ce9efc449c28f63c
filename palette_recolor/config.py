# palette_recolor/config.py
from __future__ import annotations

"""
Matching configuration.

Exports:
  MatchConfig(alpha, beta, gamma, delta, c_neutral, k, iterations)
  MatchConfig.from_mapping(d)  # accepts ALPHA/BETA/... or field names
  default_config()             # CLI defaults from constants
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .constants import (
    DEFAULT_ALPHA,
    DEFAULT_BETA,
    DEFAULT_C_NEUTRAL,
    DEFAULT_DELTA,
    DEFAULT_GAMMA,
    DEFAULT_ITER,
    DEFAULT_K,
)
from .errors import ConfigError

# Upper-case tunable names -> field names
_ALIASES: Dict[str, str] = {
    "ALPHA": "alpha",
    "BETA": "beta",
    "GAMMA": "gamma",
    "DELTA": "delta",
    "C_NEUTRAL": "c_neutral",
    "K": "k",
    "ITER": "iterations",
}


@dataclass(frozen=True)
class MatchConfig:
    """Weights and iteration limits for one mapping computation. All fields required."""

    alpha: float
    beta: float
    gamma: float
    delta: float
    c_neutral: float
    k: int
    iterations: int

    def __post_init__(self) -> None:
        for name in ("alpha", "beta", "gamma", "delta", "c_neutral"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value < 0.0:
                raise ConfigError(f"{name} must be finite and >= 0, got {value!r}")
        for name, lo in (("k", 1), ("iterations", 0)):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
            if value < lo:
                raise ConfigError(f"{name} must be >= {lo}, got {value}")

    @classmethod
    def from_mapping(
        cls, values: Mapping[str, Any], defaults: Optional["MatchConfig"] = None
    ) -> "MatchConfig":
        """
        Build from a dict using either ALPHA/ITER style keys or field names.
        Keys absent from values are taken from defaults; without defaults
        every key is required.
        """
        given: Dict[str, Any] = {}
        fields = set(_ALIASES.values())
        for key, value in values.items():
            name = _ALIASES.get(key, key)
            if name not in fields:
                raise ConfigError(f"unknown config key {key!r}")
            if name in given:
                raise ConfigError(f"config key {key!r} given twice")
            given[name] = value
        kwargs: Dict[str, Any] = asdict(defaults) if defaults is not None else {}
        kwargs.update(given)
        missing = sorted(fields - set(kwargs))
        if missing:
            raise ConfigError(f"missing config keys: {', '.join(missing)}")
        return cls(**kwargs)

    def items(self) -> List[Tuple[str, Any]]:
        """(NAME, value) pairs in display order, for log lines."""
        by_field = asdict(self)
        return [(alias, by_field[name]) for alias, name in _ALIASES.items()]


def default_config() -> MatchConfig:
    """MatchConfig populated from the constants module."""
    return MatchConfig(
        alpha=DEFAULT_ALPHA,
        beta=DEFAULT_BETA,
        gamma=DEFAULT_GAMMA,
        delta=DEFAULT_DELTA,
        c_neutral=DEFAULT_C_NEUTRAL,
        k=DEFAULT_K,
        iterations=DEFAULT_ITER,
    )


__all__ = ["MatchConfig", "default_config"]
