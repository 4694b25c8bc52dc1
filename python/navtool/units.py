"""Angle conversion and fixed-point scaling helpers."""

from __future__ import annotations

import math


def deg2rad(degrees: float) -> float:
    """Convert degrees to radians."""
    return degrees * math.pi / 180


def rad2deg(radians: float) -> float:
    """Convert radians to degrees."""
    return radians * 180 / math.pi


def to_fixed(value: float, scale: float, bits: int, signed: bool = True) -> int:
    """Scale *value* and narrow it to a *bits*-wide integer.

    The scaled value is truncated toward zero and wrapped into range, the
    same as a C float-to-int cast followed by a narrowing store.  NaN and
    infinities encode as 0.
    """
    scaled = value * scale
    if not math.isfinite(scaled):
        return 0
    n = math.trunc(scaled) & ((1 << bits) - 1)
    if signed and n >= 1 << (bits - 1):
        n -= 1 << bits
    return n
