"""Planar polygons and profiles.

A ``Polygon`` is an ordered loop of coplanar vertices without a repeated
closing vertex.  Construction validates the loop and raises
``DegenerateLoopError`` when it has fewer than three distinct vertices,
when all of its vertices are collinear, or when it encloses no area.

A ``Profile`` is one planar face boundary: an outer ``perimeter`` and
zero or more ``voids``.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Optional, Sequence

from brepjoin.config import DEFAULT_TOLERANCE
from brepjoin.errors import DegenerateLoopError
from brepjoin.geometry_utils import (
    Vec3,
    add3,
    centroid_of,
    cross3,
    dist3,
    dot3,
    mag3,
    newell_normal,
    scale3,
    sub3,
    to_vec3,
)
from brepjoin.tolerance import points_close


class Containment(Enum):
    INSIDE = "inside"
    OUTSIDE = "outside"
    BOUNDARY = "boundary"


def remove_sequential_duplicates(points: Sequence[Sequence[float]], wrap: bool = False,
                                 tol: float = DEFAULT_TOLERANCE) -> List[Vec3]:
    """Drop points that repeat their predecessor within ``tol``.

    With ``wrap`` the loop is treated as closed and a last point equal to
    the first is dropped as well.
    """

    if not points:
        return []
    result = [to_vec3(points[0])]
    count = len(points)
    for i in range(1, count):
        vertex = to_vec3(points[i])
        if points_close(vertex, result[-1], tol):
            continue
        if wrap and i == count - 1 and points_close(vertex, result[0], tol):
            continue
        result.append(vertex)
    return result


class Polygon:
    """Closed planar vertex loop."""

    def __init__(self, vertices: Iterable[Sequence[float]], tol: float = DEFAULT_TOLERANCE):
        pts = remove_sequential_duplicates(list(vertices), wrap=True, tol=tol)
        if len(pts) < 3:
            raise DegenerateLoopError(
                f"polygon needs at least three distinct vertices, got {len(pts)}",
                {"reason": "too_few_vertices", "count": len(pts)})
        n = newell_normal(pts)
        area = 0.5 * mag3(n)
        if area <= tol * tol:
            raise DegenerateLoopError(
                "polygon vertices are collinear or enclose no area",
                {"reason": "zero_area", "area": area})
        self.vertices: List[Vec3] = pts
        self.tol = tol
        self._normal = scale3(n, 1.0 / mag3(n))
        self._area = area

    def __len__(self) -> int:
        return len(self.vertices)

    def __iter__(self):
        return iter(self.vertices)

    def __repr__(self) -> str:
        return f"Polygon({self.vertices!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polygon):
            return NotImplemented
        return len(other) == len(self) and all(
            points_close(a, b, self.tol) for a, b in zip(self.vertices, other.vertices))

    def normal(self) -> Vec3:
        """Unit normal following the right-hand rule for the vertex order."""

        return self._normal

    def area(self) -> float:
        return self._area

    def centroid(self) -> Vec3:
        """Area centroid, computed from a triangle fan about the first vertex."""

        origin = self.vertices[0]
        n = self._normal
        weighted = (0.0, 0.0, 0.0)
        total = 0.0
        for a, b in zip(self.vertices[1:-1], self.vertices[2:]):
            w = dot3(cross3(sub3(a, origin), sub3(b, origin)), n)
            tri_centroid = scale3(add3(origin, add3(a, b)), 1.0 / 3.0)
            weighted = add3(weighted, scale3(tri_centroid, w))
            total += w
        if abs(total) <= self.tol * self.tol:
            return centroid_of(self.vertices)
        return scale3(weighted, 1.0 / total)

    def reversed(self) -> "Polygon":
        return Polygon(list(reversed(self.vertices)), tol=self.tol)

    def edges(self):
        """Consecutive vertex pairs, including the closing edge."""

        count = len(self.vertices)
        return [(self.vertices[i], self.vertices[(i + 1) % count]) for i in range(count)]

    def plane_distance(self, p: Sequence[float]) -> float:
        return dot3(sub3(to_vec3(p), self.vertices[0]), self._normal)

    def contains(self, p: Sequence[float], tol: Optional[float] = None) -> Containment:
        """Classify a point lying in the polygon plane.

        Uses an even-odd crossing test on the projection that drops the
        dominant normal axis.
        """

        if tol is None:
            tol = self.tol
        q = to_vec3(p)
        for a, b in self.edges():
            if _point_segment_distance(q, a, b) <= tol:
                return Containment.BOUNDARY

        drop = max(range(3), key=lambda i: abs(self._normal[i]))
        i0, i1 = [i for i in range(3) if i != drop]
        x, y = q[i0], q[i1]
        inside = False
        count = len(self.vertices)
        j = count - 1
        for i in range(count):
            xi, yi = self.vertices[i][i0], self.vertices[i][i1]
            xj, yj = self.vertices[j][i0], self.vertices[j][i1]
            if (yi > y) != (yj > y):
                xcross = (xj - xi) * (y - yi) / (yj - yi) + xi
                if x < xcross:
                    inside = not inside
            j = i
        return Containment.INSIDE if inside else Containment.OUTSIDE


def _point_segment_distance(p: Vec3, a: Vec3, b: Vec3) -> float:
    ab = sub3(b, a)
    denom = dot3(ab, ab)
    if denom == 0.0:
        return dist3(p, a)
    u = max(0.0, min(1.0, dot3(sub3(p, a), ab) / denom))
    return dist3(p, add3(a, scale3(ab, u)))


class Profile:
    """Planar face boundary: outer ``perimeter`` plus ``voids``."""

    def __init__(self, perimeter: Polygon, voids: Optional[Sequence[Polygon]] = None):
        if perimeter is None:
            raise ValueError("profile needs a perimeter polygon")
        self.perimeter = perimeter
        self.voids: List[Polygon] = list(voids or [])

    def __repr__(self) -> str:
        return f"Profile({self.perimeter!r}, voids={len(self.voids)})"

    def reversed(self) -> "Profile":
        return Profile(self.perimeter.reversed(), [void.reversed() for void in self.voids])

    def normal(self) -> Vec3:
        return self.perimeter.normal()

    def area(self) -> float:
        return self.perimeter.area() - sum(void.area() for void in self.voids)

    def contains(self, p: Sequence[float], tol: Optional[float] = None) -> Containment:
        """Classify an in-plane point; points in a void are outside."""

        outer = self.perimeter.contains(p, tol)
        if outer is not Containment.INSIDE:
            return outer
        for void in self.voids:
            state = void.contains(p, tol)
            if state is Containment.BOUNDARY:
                return Containment.BOUNDARY
            if state is Containment.INSIDE:
                return Containment.OUTSIDE
        return Containment.INSIDE


__all__ = [
    "Containment",
    "Polygon",
    "Profile",
    "remove_sequential_duplicates",
]
