"""Triangulation of planar faces with holes.

We delegate to ``mapbox-earcut`` (the fast ear clipping implementation
used by Mapbox GL).  Faces are projected onto a right-handed basis of
their own plane, triangulated in 2D, and lifted back; the resulting
triangles wind counter-clockwise about the face normal.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import numpy as np

try:
    import mapbox_earcut as _earcut
except ImportError as exc:  # pragma: no cover - import guard
    raise ImportError(
        "mapbox-earcut must be installed to triangulate faces with voids"
    ) from exc

from brepjoin.geometry_utils import Vec3, add3, dot3, plane_basis, scale3, sub3

Point2D = Tuple[float, float]
Triangle3D = Tuple[Vec3, Vec3, Vec3]


def _project(loop: Sequence[Vec3], origin: Vec3, u: Vec3, v: Vec3) -> List[Point2D]:
    return [(dot3(sub3(p, origin), u), dot3(sub3(p, origin), v)) for p in loop]


def _signed_area(loop: Sequence[Point2D]) -> float:
    total = 0.0
    for i, (x0, y0) in enumerate(loop):
        x1, y1 = loop[(i + 1) % len(loop)]
        total += x0 * y1 - x1 * y0
    return total / 2.0


def _oriented(loop: List[Point2D], want_ccw: bool) -> List[Point2D]:
    area = _signed_area(loop)
    if (want_ccw and area < 0) or (not want_ccw and area > 0):
        return list(reversed(loop))
    return loop


def triangulate_face(outer: Sequence[Vec3], voids: Iterable[Sequence[Vec3]],
                     normal: Vec3) -> List[Triangle3D]:
    """Return 3D triangles covering ``outer`` minus ``voids``.

    ``normal`` is the unit normal of the face plane; triangles are wound
    counter-clockwise about it regardless of the loops' own winding.
    Loops with fewer than three vertices are ignored.
    """

    if len(outer) < 3:
        return []
    origin = outer[0]
    u, v = plane_basis(normal)

    point_map: List[Point2D] = []
    ring_ends: List[int] = []

    def _append(loop: Sequence[Point2D]) -> None:
        point_map.extend(loop)
        ring_ends.append(len(point_map))

    _append(_oriented(_project(outer, origin, u, v), want_ccw=True))
    for void in voids:
        if len(void) < 3:
            continue
        _append(_oriented(_project(void, origin, u, v), want_ccw=False))

    vertices = np.asarray(point_map, dtype=np.float64)
    rings = np.asarray(ring_ends, dtype=np.uint32)
    indices = _earcut.triangulate_float64(vertices, rings)

    def _lift(p: Point2D) -> Vec3:
        return add3(origin, add3(scale3(u, p[0]), scale3(v, p[1])))

    triangles: List[Triangle3D] = []
    for i in range(0, len(indices), 3):
        a, b, c = (point_map[int(indices[i])],
                   point_map[int(indices[i + 1])],
                   point_map[int(indices[i + 2])])
        # earcut does not promise a winding; enforce CCW in the face basis
        if (b[0] - a[0]) * (c[1] - a[1]) - (c[0] - a[0]) * (b[1] - a[1]) < 0:
            b, c = c, b
        triangles.append((_lift(a), _lift(b), _lift(c)))
    return triangles


__all__ = [
    "triangulate_face",
]
