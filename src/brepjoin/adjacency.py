"""Shared-edge queries between polygons and profiles."""

from __future__ import annotations

from typing import List, Sequence, Tuple

from brepjoin.config import DEFAULT_TOLERANCE
from brepjoin.errors import NonManifoldEdgeError
from brepjoin.polygon import Polygon, Profile
from brepjoin.tolerance import points_close

Edge = Tuple[Sequence[float], Sequence[float]]


def _endpoints(line) -> Edge:
    if hasattr(line, "start") and hasattr(line, "end"):
        return line.start, line.end
    return line[0], line[1]


def lines_almost_equal(a, b, tol: float = DEFAULT_TOLERANCE, strict: bool = False) -> bool:
    """Do ``a`` and ``b`` join the same endpoints?

    Lines may be ``Line`` segments or ``(start, end)`` pairs.  With
    ``strict`` the lines must also run in the same direction.
    """

    a0, a1 = _endpoints(a)
    b0, b1 = _endpoints(b)
    if points_close(a0, b0, tol) and points_close(a1, b1, tol):
        return True
    if strict:
        return False
    return points_close(a0, b1, tol) and points_close(a1, b0, tol)


def find_equal(line, lines, tol: float = DEFAULT_TOLERANCE, strict: bool = False) -> list:
    """All entries of ``lines`` almost equal to ``line``."""
    return [other for other in lines if lines_almost_equal(line, other, tol, strict)]


def polygon_adjacent(polygon: Polygon, polygons: Sequence[Polygon],
                     tol: float = DEFAULT_TOLERANCE) -> List[Polygon]:
    """Polygons of ``polygons`` sharing at least one edge with ``polygon``.

    Shared edges may run in either direction.  An edge of ``polygon``
    found in more than one other polygon raises ``NonManifoldEdgeError``.
    """

    others = [other for other in polygons if other is not polygon]
    adjacent: List[Polygon] = []
    for edge in polygon.edges():
        sharing = [other for other in others if find_equal(edge, other.edges(), tol)]
        if len(sharing) > 1:
            raise NonManifoldEdgeError(
                "edge has more than one adjacent polygon",
                {"edge": edge, "count": len(sharing)})
        if sharing and not any(found is sharing[0] for found in adjacent):
            adjacent.append(sharing[0])
    return adjacent


def profile_adjacent(profile: Profile, profiles: Sequence[Profile],
                     tol: float = DEFAULT_TOLERANCE) -> List[Profile]:
    """Profiles sharing an edge with ``profile``'s perimeter or voids."""

    adjacent: List[Profile] = []
    for other in profiles:
        if other is profile:
            continue
        loops = [other.perimeter] + other.voids
        if polygon_adjacent(profile.perimeter, loops, tol):
            adjacent.append(other)
        elif any(polygon_adjacent(void, loops, tol) for void in profile.voids):
            adjacent.append(other)
    return adjacent


__all__ = [
    "lines_almost_equal",
    "find_equal",
    "polygon_adjacent",
    "profile_adjacent",
]
