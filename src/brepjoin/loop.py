"""Turn a closed chain into a polygon.

``to_polygon`` never raises for bad geometry.  It returns a
``LoopResult`` that is truthy when a polygon was built and otherwise
carries the ``DegenerateLoopError`` (or ``OpenLoopError``) describing
why the loop is unusable, so the caller decides whether losing the loop
invalidates whatever it was building.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from brepjoin.assemble import JoinResult, is_closed_chain
from brepjoin.config import DEFAULT_TOLERANCE
from brepjoin.errors import DegenerateLoopError, JoinError, OpenLoopError
from brepjoin.geometry_utils import Vec3
from brepjoin.polygon import Polygon
from brepjoin.segments import Arc, Segment
from brepjoin.trace import Tracer, ensure_tracer

logger = logging.getLogger(__name__)


@dataclass
class LoopResult:
    """Outcome of building a polygon from a loop."""

    polygon: Optional[Polygon]
    error: Optional[JoinError] = None

    @property
    def ok(self) -> bool:
        return self.polygon is not None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> Polygon:
        """Return the polygon or raise the recorded error."""

        if self.polygon is None:
            raise self.error if self.error is not None else DegenerateLoopError("no polygon")
        return self.polygon


def chain_vertices(chain: Sequence[Segment], arc_divisions: int = 1) -> List[Vec3]:
    """Ordered vertex list of a chain: every segment's start point.

    With ``arc_divisions > 1`` arcs also contribute interior sample points,
    polygonizing them.  The final end point is not repeated.
    """

    if arc_divisions < 1:
        raise ValueError("arc_divisions must be at least 1")
    vertices: List[Vec3] = []
    for seg in chain:
        vertices.append(seg.start)
        if isinstance(seg, Arc) and arc_divisions > 1:
            for k in range(1, arc_divisions):
                vertices.append(seg.sample(k / arc_divisions))
    return vertices


def to_polygon(chain, tol: float = DEFAULT_TOLERANCE, arc_divisions: int = 1,
               tracer: Optional[Tracer] = None) -> LoopResult:
    """Build a polygon from a closed chain (a ``JoinResult`` or segment list)."""

    trace = ensure_tracer(tracer)
    if isinstance(chain, JoinResult):
        closed = chain.closed
        segments = chain.chain
    else:
        segments = list(chain)
        closed = is_closed_chain(segments, tol)
    if not closed:
        trace("loop.degenerate", reason="open")
        return LoopResult(None, OpenLoopError(
            "cannot build a polygon from an open chain", {"segments": len(segments)}))

    try:
        polygon = Polygon(chain_vertices(segments, arc_divisions), tol=tol)
    except DegenerateLoopError as exc:
        logger.info("dropping degenerate loop: %s", exc)
        trace("loop.degenerate", reason=exc.details.get("reason"))
        return LoopResult(None, exc)
    return LoopResult(polygon)


__all__ = [
    "LoopResult",
    "chain_vertices",
    "to_polygon",
]
