"""Tolerance grid keys for approximate point equality.

Points are snapped to a decimal grid derived from the tolerance so
they can be used as dictionary keys.  This is a grid snap, not a
metric test: two points closer than the tolerance may still land in
neighbouring cells when they straddle a rounding boundary.
"""

from __future__ import annotations

from math import floor, log10
from typing import Sequence, Tuple

from brepjoin.config import DEFAULT_TOLERANCE
from brepjoin.geometry_utils import to_vec3

QuantizedPoint = Tuple[int, int, int]


def decimal_places(tol: float = DEFAULT_TOLERANCE) -> int:
    """Number of decimal places kept for tolerance ``tol``."""

    if tol <= 0.0:
        raise ValueError(f"tolerance must be positive, got {tol!r}")
    return int(round(-log10(tol)))


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero.

    Python's ``round`` rounds ties to even, which would make the grid
    asymmetric about the origin.
    """

    if value >= 0.0:
        return int(floor(value + 0.5))
    return -int(floor(-value + 0.5))


def quantize(p: Sequence[float], tol: float = DEFAULT_TOLERANCE) -> QuantizedPoint:
    """Return the integer grid key for point ``p``."""

    scale = 10.0 ** decimal_places(tol)
    x, y, z = to_vec3(p)
    return (round_half_away(x * scale),
            round_half_away(y * scale),
            round_half_away(z * scale))


def dequantize(key: QuantizedPoint, tol: float = DEFAULT_TOLERANCE) -> Tuple[float, float, float]:
    """Return the grid point represented by ``key``."""

    scale = 10.0 ** decimal_places(tol)
    return (key[0] / scale, key[1] / scale, key[2] / scale)


def points_close(a: Sequence[float], b: Sequence[float], tol: float = DEFAULT_TOLERANCE) -> bool:
    """``True`` if ``a`` and ``b`` agree to within ``tol`` in every coordinate."""

    a3 = to_vec3(a)
    b3 = to_vec3(b)
    return (abs(a3[0] - b3[0]) < tol
            and abs(a3[1] - b3[1]) < tol
            and abs(a3[2] - b3[2]) < tol)


__all__ = [
    "QuantizedPoint",
    "decimal_places",
    "round_half_away",
    "quantize",
    "dequantize",
    "points_close",
]
