"""Normalization helpers for command line options."""

from __future__ import annotations

import math

from .publisher import DEFAULT_TIMEOUT_S

MIN_TIMEOUT_S = 0.5
MAX_TIMEOUT_S = 60.0


def resolve_log_level(*, verbose: bool, quiet: bool) -> str:
    """Resolve effective log level from CLI flags.

    Precedence is deterministic: --quiet overrides --verbose.
    """
    if quiet:
        return "WARNING"
    if verbose:
        return "DEBUG"
    return "INFO"


def resolve_timeout(value: float | None) -> float:
    """Clamp a publish timeout to a sane range, defaulting when unset."""
    if value is None or not math.isfinite(value):
        return DEFAULT_TIMEOUT_S
    return min(MAX_TIMEOUT_S, max(MIN_TIMEOUT_S, float(value)))
