"""Common vector helpers shared by the joining, polygon and orientation code."""

from __future__ import annotations

from math import sqrt
from typing import Iterable, List, Sequence, Tuple

Vec3 = Tuple[float, float, float]


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point/vector as a tuple.

    Accepts plain ``(x, y, z)`` sequences as well as yapCAD-style
    homogeneous points ``[x, y, z, w]``; the latter are projected back
    to ``w == 1``.
    """

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    if len(point_like) >= 4:
        w = float(point_like[3])
        if w > 0.0 and w != 1.0:
            return (float(point_like[0]) / w,
                    float(point_like[1]) / w,
                    float(point_like[2]) / w)
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def to_point(vec: Sequence[float]) -> List[float]:
    """Lift an XYZ tuple into homogeneous point form ``[x, y, z, 1.0]``."""

    if len(vec) < 3:
        raise ValueError("vector must have three components")
    return [float(vec[0]), float(vec[1]), float(vec[2]), 1.0]


def to_vector(vec: Sequence[float]) -> List[float]:
    """Lift an XYZ tuple into homogeneous direction form (w=0)."""

    if len(vec) < 3:
        raise ValueError("vector must have three components")
    return [float(vec[0]), float(vec[1]), float(vec[2]), 0.0]


def add3(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub3(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale3(a: Vec3, c: float) -> Vec3:
    return (a[0] * c, a[1] * c, a[2] * c)


def dot3(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross3(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def mag3(v: Vec3) -> float:
    return sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def dist3(a: Vec3, b: Vec3) -> float:
    return mag3(sub3(a, b))


def normalize3(v: Vec3, tol: float = 1e-12) -> Vec3 | None:
    """Return ``v`` scaled to unit length, or ``None`` if it is (nearly) zero."""

    m = mag3(v)
    if m <= tol:
        return None
    return (v[0] / m, v[1] / m, v[2] / m)


def newell_normal(points: Sequence[Vec3]) -> Vec3:
    """Return the (unnormalised) Newell normal of a closed vertex loop.

    The magnitude of the result is twice the enclosed area; the direction
    follows the right-hand rule for the vertex order.
    """

    nx = ny = nz = 0.0
    count = len(points)
    for i in range(count):
        x0, y0, z0 = points[i]
        x1, y1, z1 = points[(i + 1) % count]
        nx += (y0 - y1) * (z0 + z1)
        ny += (z0 - z1) * (x0 + x1)
        nz += (x0 - x1) * (y0 + y1)
    return (nx, ny, nz)


def perpendicular_axis(normal: Vec3) -> Vec3:
    """Return a stable unit vector perpendicular to the unit ``normal``.

    For normals along Z this is global X, so XY-plane geometry keeps its
    conventional angle reference.
    """

    if abs(normal[2]) >= 1.0 - 1e-9:
        return (1.0, 0.0, 0.0)
    axis = normalize3(cross3((0.0, 0.0, 1.0), normal))
    # normal is not parallel to Z here, so the cross product is non-zero
    return axis  # type: ignore[return-value]


def plane_basis(normal: Vec3) -> Tuple[Vec3, Vec3]:
    """Return ``(u, v)`` so that ``(u, v, normal)`` is right-handed."""

    u = perpendicular_axis(normal)
    v = cross3(normal, u)
    return u, v


def centroid_of(points: Iterable[Vec3]) -> Vec3:
    """Arithmetic mean of a set of points."""

    sx = sy = sz = 0.0
    count = 0
    for p in points:
        sx += p[0]
        sy += p[1]
        sz += p[2]
        count += 1
    if count == 0:
        raise ValueError("centroid of an empty point set")
    return (sx / count, sy / count, sz / count)


__all__ = [
    "Vec3",
    "to_vec3",
    "to_point",
    "to_vector",
    "add3",
    "sub3",
    "scale3",
    "dot3",
    "cross3",
    "mag3",
    "dist3",
    "normalize3",
    "newell_normal",
    "perpendicular_axis",
    "plane_basis",
    "centroid_of",
]
