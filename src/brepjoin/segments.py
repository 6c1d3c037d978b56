"""Line and arc segments, the two curve kinds that can be joined.

A ``Segment`` is either a :class:`Line` or an :class:`Arc`.  Both are
immutable values exposing ``start``, ``end``, ``length``, ``sample(u)``
and ``reversed()``; reversing never mutates, it returns a new segment
whose ``start`` and ``end`` are swapped.

Arcs follow the yapCAD conventions: angles are in degrees, measured
counter-clockwise about the arc normal from the arc's reference
``xaxis``; ``start_angle == 0 and end_angle == 360`` denotes a full
circle; a *sample-reversed* arc has the same center, radius and angle
values but is parameterised from the end angle back to the start angle.
Reversing an arc toggles that flag, so two arcs that differ only in
direction still compare equal on everything except ``samplereverse``.

``to_segments`` accepts the list geometry used throughout yapCAD::

    [p0, p1]                                   # line
    [center, [r, start, end, w]]               # arc, w == -1 or -2
    [center, [r, start, end, w], normal]       # arc in another plane
    [p0, p1, p2, ...]                          # polyline -> lines
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from math import cos, pi, radians, sin
from typing import List, Optional, Sequence, Union

from brepjoin.errors import UnsupportedCurveError
from brepjoin.geometry_utils import (
    Vec3,
    add3,
    cross3,
    dist3,
    dot3,
    normalize3,
    perpendicular_axis,
    scale3,
    sub3,
    to_vec3,
)

pi2 = 2.0 * pi


@dataclass(frozen=True)
class Line:
    """Straight segment from ``p0`` to ``p1``."""

    p0: Vec3
    p1: Vec3

    def __post_init__(self):
        object.__setattr__(self, "p0", to_vec3(self.p0))
        object.__setattr__(self, "p1", to_vec3(self.p1))

    @property
    def start(self) -> Vec3:
        return self.p0

    @property
    def end(self) -> Vec3:
        return self.p1

    @property
    def length(self) -> float:
        return dist3(self.p0, self.p1)

    def sample(self, u: float) -> Vec3:
        return add3(scale3(self.p0, 1.0 - u), scale3(self.p1, u))

    def reversed(self) -> "Line":
        return Line(self.p1, self.p0)


@dataclass(frozen=True)
class Arc:
    """Circular arc about ``center`` in the plane with unit ``normal``."""

    center: Vec3
    radius: float
    start_angle: float = 0
    end_angle: float = 360
    normal: Vec3 = (0.0, 0.0, 1.0)
    xaxis: Optional[Vec3] = None
    samplereverse: bool = False

    def __post_init__(self):
        object.__setattr__(self, "center", to_vec3(self.center))
        if self.radius < 0:
            raise ValueError('negative radius not allowed for arc')
        n = normalize3(to_vec3(self.normal))
        if n is None:
            raise ValueError('bad (zero-length) plane vector for arc')
        object.__setattr__(self, "normal", n)
        if self.xaxis is None:
            x = perpendicular_axis(n)
        else:
            raw = to_vec3(self.xaxis)
            # project the reference axis into the arc plane
            x = normalize3(sub3(raw, scale3(n, dot3(raw, n))))
            if x is None:
                raise ValueError('arc reference axis is parallel to the arc normal')
        object.__setattr__(self, "xaxis", x)

    @property
    def yaxis(self) -> Vec3:
        return cross3(self.normal, self.xaxis)

    def iscircle(self) -> bool:
        return self.start_angle == 0 and self.end_angle == 360

    def sweep(self) -> float:
        """Angular extent in degrees, ``0 <= sweep <= 360``."""

        if self.iscircle() or self.end_angle - self.start_angle >= 360.0:
            return 360.0
        start = self.start_angle % 360.0
        end = self.end_angle % 360.0
        if end < start:
            end += 360.0
        return end - start

    @property
    def length(self) -> float:
        return self.radius * pi2 * self.sweep() / 360.0

    def sample(self, u: float) -> Vec3:
        """Point on the arc at parameter ``u``; ``u=0`` is ``start``."""

        if self.samplereverse:
            u = 1.0 - u
        start = 0.0 if self.iscircle() else self.start_angle % 360.0
        angle = radians(start + self.sweep() * u)
        offset = add3(scale3(self.xaxis, cos(angle) * self.radius),
                      scale3(self.yaxis, sin(angle) * self.radius))
        return add3(self.center, offset)

    @property
    def start(self) -> Vec3:
        return self.sample(0.0)

    @property
    def end(self) -> Vec3:
        return self.sample(1.0)

    def reversed(self) -> "Arc":
        return replace(self, samplereverse=not self.samplereverse)


Segment = Union[Line, Arc]


def is_segment(x) -> bool:
    return isinstance(x, (Line, Arc))


def _isgoodnum(n) -> bool:
    return (not isinstance(n, bool)) and isinstance(n, (int, float))


def _is_point_like(x) -> bool:
    if not isinstance(x, (list, tuple)) or len(x) not in (3, 4):
        return False
    if not all(_isgoodnum(c) for c in x):
        return False
    return len(x) == 3 or x[3] > 0


def is_line_geom(g) -> bool:
    """Is ``g`` a yapCAD line, ``[p0, p1]``?"""

    return isinstance(g, list) and len(g) == 2 \
        and _is_point_like(g[0]) and _is_point_like(g[1])


def is_arc_geom(g) -> bool:
    """Is ``g`` a yapCAD arc, ``[center, [r, start, end, w], <normal>]``?"""

    if not isinstance(g, list) or len(g) not in (2, 3):
        return False
    if not _is_point_like(g[0]):
        return False
    psu = g[1]
    if not isinstance(psu, (list, tuple)) or len(psu) != 4 \
            or not all(_isgoodnum(c) for c in psu):
        return False
    if psu[3] not in (-1, -2) or psu[0] < 0:
        return False
    return len(g) == 2 or _is_point_like(g[2])


def is_polyline_geom(g) -> bool:
    return isinstance(g, list) and len(g) >= 3 and all(_is_point_like(p) for p in g)


def to_segments(geom, tol: float = 1e-12) -> List[Segment]:
    """Convert a curve to the list of segments it contributes.

    Lines and arcs give one segment, polylines one line per non-degenerate
    piece.  Anything else raises ``UnsupportedCurveError``.
    """

    if is_segment(geom):
        return [geom]
    if is_line_geom(geom):
        return [Line(geom[0], geom[1])]
    if is_arc_geom(geom):
        psu = geom[1]
        normal = geom[2] if len(geom) == 3 else (0.0, 0.0, 1.0)
        return [Arc(geom[0], psu[0], psu[1], psu[2],
                    normal=normal, samplereverse=(psu[3] == -2))]
    if is_polyline_geom(geom):
        pieces = []
        for a, b in zip(geom[:-1], geom[1:]):
            if dist3(to_vec3(a), to_vec3(b)) > tol:
                pieces.append(Line(a, b))
        return pieces
    raise UnsupportedCurveError(
        "can only join line and arc segment types",
        {"curve": repr(geom)})


def segments_from_curves(curves: Sequence) -> List[Segment]:
    """Flatten a sequence of curves into segments, preserving order."""

    result: List[Segment] = []
    for curve in curves:
        result.extend(to_segments(curve))
    return result


__all__ = [
    "Line",
    "Arc",
    "Segment",
    "is_segment",
    "is_line_geom",
    "is_arc_geom",
    "is_polyline_geom",
    "to_segments",
    "segments_from_curves",
]
