"""B-rep loop sourcing and planar solid reconstruction.

The input is an index-linked boundary representation:

- ``curves``: 3D curves (``Line``/``Arc`` values or yapCAD line, arc and
  polyline lists),
- edges, each referencing one curve by index,
- trims, each referencing one edge by index,
- loops, an unordered collection of trims tagged ``'outer'`` or
  ``'inner'``,
- faces, each a list of loops.

Trims of a loop are not assumed to be ordered or consistently directed;
the trim curves are joined into one closed chain first.  All faces are
assumed planar.

Structures use the tagged-list layout of the native B-rep helpers::

    ['brep_edge', curve_index, metadata]
    ['brep_trim', edge_index, metadata]
    ['brep_loop', [trim, ...], metadata]
    ['brep_face', [loop, ...], metadata]
    ['brep', curves, edges, faces, metadata]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from brepjoin.assemble import JoinResult, join_segments
from brepjoin.config import JoinSettings, resolve_settings
from brepjoin.errors import (
    BrokenChainError,
    EmptyLoopError,
    JoinError,
    LoopJoinError,
    MissingOuterLoopError,
    TopologyError,
)
from brepjoin.loop import LoopResult, to_polygon
from brepjoin.orient import orient
from brepjoin.polygon import Polygon, Profile
from brepjoin.segments import Segment, to_segments
from brepjoin.solid import Solid, build_solid
from brepjoin.trace import Tracer

logger = logging.getLogger(__name__)

OUTER = 'outer'
INNER = 'inner'


# -----------------------------------------------------------------------------
# Structures
# -----------------------------------------------------------------------------

def brep_edge(curve_index, *, tags=None):
    """Create an edge referencing ``curves[curve_index]``."""
    return ['brep_edge', int(curve_index), {'tags': tags or {}}]


def is_brep_edge(obj):
    return (isinstance(obj, list) and len(obj) == 3 and obj[0] == 'brep_edge'
            and isinstance(obj[1], int) and isinstance(obj[2], dict))


def edge_curve_index(e):
    if not is_brep_edge(e):
        raise ValueError("Not a BREP edge")
    return e[1]


def brep_trim(edge_index, *, tags=None):
    """Create a trim (use of ``edges[edge_index]`` on a face)."""
    return ['brep_trim', int(edge_index), {'tags': tags or {}}]


def is_brep_trim(obj):
    return (isinstance(obj, list) and len(obj) == 3 and obj[0] == 'brep_trim'
            and isinstance(obj[1], int) and isinstance(obj[2], dict))


def trim_edge_index(t):
    if not is_brep_trim(t):
        raise ValueError("Not a BREP trim")
    return t[1]


def brep_loop(trims, *, loop_type=OUTER, tags=None):
    """Create a loop from trims or bare edge indices.

    Parameters
    ----------
    trims : list
        Trims, or integers taken as edge indices.
    loop_type : str, optional
        'outer' for the outer boundary, 'inner' for a void.
    """
    if loop_type not in (OUTER, INNER):
        raise ValueError(f"loop_type must be 'outer' or 'inner', got {loop_type!r}")
    trim_list = [t if is_brep_trim(t) else brep_trim(t) for t in trims]
    return ['brep_loop', trim_list, {'loop_type': loop_type, 'tags': tags or {}}]


def is_brep_loop(obj):
    return (isinstance(obj, list) and len(obj) == 3 and obj[0] == 'brep_loop'
            and isinstance(obj[1], list) and isinstance(obj[2], dict))


def loop_trims(loop):
    if not is_brep_loop(loop):
        raise ValueError("Not a BREP loop")
    return list(loop[1])


def loop_type(loop):
    """Return the loop type ('outer' or 'inner')."""
    if not is_brep_loop(loop):
        raise ValueError("Not a BREP loop")
    return loop[2].get('loop_type', OUTER)


def brep_face(loops, *, tags=None):
    return ['brep_face', list(loops), {'tags': tags or {}}]


def is_brep_face(obj):
    return (isinstance(obj, list) and len(obj) == 3 and obj[0] == 'brep_face'
            and isinstance(obj[1], list) and isinstance(obj[2], dict))


def face_loops(f):
    if not is_brep_face(f):
        raise ValueError("Not a BREP face")
    return list(f[1])


def brep(curves, edges, faces, *, tags=None):
    """Create a B-rep from curve, edge and face lists.

    Edges may be given as bare curve indices.
    """
    edge_list = [e if is_brep_edge(e) else brep_edge(e) for e in edges]
    b = ['brep', list(curves), edge_list, list(faces), {'tags': tags or {}}]
    if not is_brep(b):
        raise ValueError('bad arguments to brep')
    return b


def is_brep(obj):
    if not (isinstance(obj, list) and len(obj) == 5 and obj[0] == 'brep'
            and isinstance(obj[4], dict)):
        return False
    return all(is_brep_edge(e) for e in obj[2]) and all(is_brep_face(f) for f in obj[3])


def brep_curves(b):
    return b[1]


def brep_edges(b):
    return b[2]


def brep_faces(b):
    return b[3]


# -----------------------------------------------------------------------------
# Loop and face reconstruction
# -----------------------------------------------------------------------------

@dataclass
class ProfileResult:
    """Outcome of reconstructing one face.

    ``dropped`` lists ``(loop_index, error)`` for void loops that were
    discarded as degenerate.
    """

    profile: Optional[Profile]
    error: Optional[JoinError] = None
    dropped: List[Tuple[int, JoinError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.profile is not None

    def __bool__(self) -> bool:
        return self.ok


@dataclass
class ReconstructionReport:
    """Profiles recovered from a B-rep plus the faces that were lost.

    ``failed`` holds ``(face_index, error)`` pairs.  ``solid`` is set by
    ``reconstruct_solid``.
    """

    profiles: List[Profile] = field(default_factory=list)
    face_indices: List[int] = field(default_factory=list)
    failed: List[Tuple[int, JoinError]] = field(default_factory=list)
    solid: Optional[Solid] = None

    @property
    def complete(self) -> bool:
        return not self.failed


def loop_segments(loop, b) -> List[Segment]:
    """Resolve a loop's trims to segments, sorted by ascending length.

    The sort only fixes which segment the assembler meets first.
    """
    curves = brep_curves(b)
    edges = brep_edges(b)
    segments: List[Segment] = []
    for t in loop_trims(loop):
        edge = edges[trim_edge_index(t)]
        segments.extend(to_segments(curves[edge_curve_index(edge)]))
    return sorted(segments, key=lambda seg: seg.length)


def loop_chain(loop, b, settings: Optional[JoinSettings] = None,
               tracer: Optional[Tracer] = None) -> JoinResult:
    """Join a loop's trim curves into a single chain."""

    cfg = resolve_settings(settings)
    segments = loop_segments(loop, b)
    try:
        return join_segments(segments, tol=cfg.tolerance, tie_break=cfg.tie_break,
                             tracer=tracer)
    except (TopologyError, BrokenChainError, EmptyLoopError) as exc:
        raise LoopJoinError(
            f"loop could not be transformed into a single polygon: {exc}",
            {'cause': exc, 'loop_type': loop_type(loop), 'segments': len(segments)}) from exc


def loop_to_polygon(loop, b, settings: Optional[JoinSettings] = None,
                    tracer: Optional[Tracer] = None) -> LoopResult:
    """Join a loop and build its polygon.

    Topology failures raise ``LoopJoinError``; a degenerate polygon comes
    back as a failed ``LoopResult``.
    """

    cfg = resolve_settings(settings)
    chain = loop_chain(loop, b, cfg, tracer)
    return to_polygon(chain, tol=cfg.tolerance, arc_divisions=cfg.arc_divisions,
                      tracer=tracer)


def face_to_profile(face, b, settings: Optional[JoinSettings] = None,
                    tracer: Optional[Tracer] = None) -> ProfileResult:
    """Rebuild one face as a profile: outer loop perimeter, inner loops voids."""

    cfg = resolve_settings(settings)
    outer: Optional[LoopResult] = None
    voids: List[Polygon] = []
    dropped: List[Tuple[int, JoinError]] = []

    for index, loop in enumerate(face_loops(face)):
        kind = loop_type(loop)
        if kind == OUTER:
            if outer is not None:
                logger.warning("face has more than one outer loop; ignoring loop %d", index)
                continue
            outer = loop_to_polygon(loop, b, cfg, tracer)
        else:
            result = loop_to_polygon(loop, b, cfg, tracer)
            if result:
                voids.append(result.polygon)
            else:
                dropped.append((index, result.error))

    if outer is None:
        raise MissingOuterLoopError("face has no outer loop",
                                    {'loops': len(face_loops(face))})
    if not outer:
        return ProfileResult(None, outer.error, dropped)
    return ProfileResult(Profile(outer.polygon, voids), None, dropped)


def faces_to_profiles(b, settings: Optional[JoinSettings] = None,
                      tracer: Optional[Tracer] = None,
                      on_degenerate: Optional[str] = None) -> ReconstructionReport:
    """Rebuild every face of ``b``.

    A face that cannot be rebuilt (its outer loop is degenerate, its trims
    do not join, or it has no outer loop) is skipped and listed in
    ``report.failed``; the remaining faces are still processed.  With
    ``on_degenerate`` (default taken from ``settings``) set to ``'raise'``
    the first such failure propagates instead.
    """

    cfg = resolve_settings(settings, on_degenerate=on_degenerate)
    report = ReconstructionReport()
    for index, face in enumerate(brep_faces(b)):
        try:
            result = face_to_profile(face, b, cfg, tracer)
        except (LoopJoinError, MissingOuterLoopError) as exc:
            if cfg.on_degenerate == 'raise':
                raise
            logger.warning("face %d could not be rebuilt: %s", index, exc)
            report.failed.append((index, exc))
            continue
        if result.dropped and cfg.on_degenerate == 'raise':
            raise result.dropped[0][1]
        if result:
            report.profiles.append(result.profile)
            report.face_indices.append(index)
            continue
        if cfg.on_degenerate == 'raise':
            raise result.error
        logger.warning("face %d contributes no geometry: %s", index, result.error)
        report.failed.append((index, result.error))
    return report


def orient_faces(b, settings: Optional[JoinSettings] = None,
                 tracer: Optional[Tracer] = None) -> List[Profile]:
    """Rebuild the faces of ``b`` and orient them outward."""

    cfg = resolve_settings(settings)
    report = faces_to_profiles(b, cfg, tracer)
    return orient(report.profiles, tol=cfg.tolerance, tracer=tracer)


def reconstruct_solid(b, settings: Optional[JoinSettings] = None,
                      tracer: Optional[Tracer] = None) -> ReconstructionReport:
    """Rebuild, orient and assemble every face of a planar B-rep."""

    cfg = resolve_settings(settings)
    report = faces_to_profiles(b, cfg, tracer)
    report.profiles = orient(report.profiles, tol=cfg.tolerance, tracer=tracer)
    report.solid = build_solid(report.profiles)
    if report.failed:
        logger.warning("solid assembled without %d face(s)", len(report.failed))
    return report


def brep_to_solid(b, settings: Optional[JoinSettings] = None,
                  tracer: Optional[Tracer] = None) -> Solid:
    """Convert a planar B-rep into a ``Solid``.  Assumes all faces are planar."""

    return reconstruct_solid(b, settings, tracer).solid


__all__ = [
    'OUTER',
    'INNER',
    'brep_edge',
    'is_brep_edge',
    'edge_curve_index',
    'brep_trim',
    'is_brep_trim',
    'trim_edge_index',
    'brep_loop',
    'is_brep_loop',
    'loop_trims',
    'loop_type',
    'brep_face',
    'is_brep_face',
    'face_loops',
    'brep',
    'is_brep',
    'brep_curves',
    'brep_edges',
    'brep_faces',
    'ProfileResult',
    'ReconstructionReport',
    'loop_segments',
    'loop_chain',
    'loop_to_polygon',
    'face_to_profile',
    'faces_to_profiles',
    'orient_faces',
    'reconstruct_solid',
    'brep_to_solid',
]
