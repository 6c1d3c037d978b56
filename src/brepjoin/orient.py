"""Consistent outward orientation for the planar faces of a solid.

For each profile a ray is cast from its perimeter centroid along its
perimeter normal, and every *other* profile hit inside its perimeter
is counted.  An odd count means the ray enters the solid immediately, so
the stated normal points inward and the profile is reversed.

This is a best-effort parity heuristic.  It assumes the profiles form a
closed shell and can mis-orient faces of open or self-intersecting
shells; closure is not checked here.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from brepjoin.config import DEFAULT_TOLERANCE
from brepjoin.geometry_utils import Vec3, add3, dot3, scale3, sub3, to_vec3
from brepjoin.polygon import Containment, Polygon, Profile
from brepjoin.trace import Tracer, ensure_tracer

logger = logging.getLogger(__name__)


def ray_plane_hit(origin: Sequence[float], direction: Sequence[float], polygon: Polygon,
                  tol: float = DEFAULT_TOLERANCE) -> Optional[Vec3]:
    """Forward intersection of a ray with the polygon's plane, or ``None``.

    Rays parallel to the plane and hits at (or behind) the origin do not
    count.
    """

    o = to_vec3(origin)
    d = to_vec3(direction)
    n = polygon.normal()
    denom = dot3(n, d)
    if abs(denom) < tol:
        return None
    t = dot3(n, sub3(polygon.vertices[0], o)) / denom
    if t <= tol:
        return None
    return add3(o, scale3(d, t))


def ray_polygon_intersect(origin: Sequence[float], direction: Sequence[float], target,
                          tol: float = DEFAULT_TOLERANCE) -> Tuple[Optional[Vec3], Containment]:
    """Intersect a ray with a ``Polygon`` or ``Profile``.

    Returns the hit point (or ``None``) and its containment with respect
    to the target; a miss is ``OUTSIDE``.
    """

    perimeter = target.perimeter if isinstance(target, Profile) else target
    hit = ray_plane_hit(origin, direction, perimeter, tol)
    if hit is None:
        return None, Containment.OUTSIDE
    return hit, target.contains(hit, tol)


def orientation_parity(profile: Profile, others: Sequence[Profile],
                       tol: float = DEFAULT_TOLERANCE, voids: bool = False) -> int:
    """Number of ``others`` the profile's normal ray hits strictly inside.

    Hits are classified against each other profile's perimeter; with
    ``voids`` a hit inside one of its voids does not count.
    """

    origin = profile.perimeter.centroid()
    direction = profile.perimeter.normal()
    hits = 0
    for other in others:
        target = other if voids else other.perimeter
        _, containment = ray_polygon_intersect(origin, direction, target, tol)
        if containment is Containment.INSIDE:
            hits += 1
    return hits


def orient(profiles: Sequence[Profile], tol: float = DEFAULT_TOLERANCE,
           tracer: Optional[Tracer] = None, voids: bool = False) -> List[Profile]:
    """Return the profiles, in input order, wound to face outward."""

    trace = ensure_tracer(tracer)
    items = list(profiles)
    oriented: List[Profile] = []
    for index, profile in enumerate(items):
        others = items[:index] + items[index + 1:]
        hits = orientation_parity(profile, others, tol, voids=voids)
        flip = hits % 2 != 0
        trace("orient.face", index=index, hits=hits, reversed=flip)
        if flip:
            logger.debug("reversing face %d (%d interior hits)", index, hits)
            oriented.append(profile.reversed())
        else:
            oriented.append(profile)
    return oriented


__all__ = [
    "ray_plane_hit",
    "ray_polygon_intersect",
    "orientation_parity",
    "orient",
]
