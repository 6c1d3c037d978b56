"""Walk a classified ``SegmentGraph`` into a single ordered chain.

The walk starts at a free end for open sets (preferring a terminus whose
segment already begins there) or at the first segment for closed sets,
and then repeatedly looks up the node at the end of the last placed
segment.  The continuation is the incident segment that is not the
current one; it is reversed when its end, rather than its start, lies
on the junction.  Each placed segment removes its start node from a
working copy of the node map, so the walk ends when the map is empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from brepjoin.config import DEFAULT_TOLERANCE
from brepjoin.errors import AmbiguousContinuationError, BrokenChainError
from brepjoin.graph import CLOSED, OPEN, SegmentGraph
from brepjoin.segments import Segment
from brepjoin.tolerance import QuantizedPoint, dequantize, points_close
from brepjoin.trace import Tracer, ensure_tracer

logger = logging.getLogger(__name__)

Chain = List[Segment]


@dataclass
class JoinResult:
    """An assembled chain and whether it closes on itself."""

    chain: Chain
    closed: bool
    order: List[int]
    reversed_flags: List[bool]

    def __len__(self) -> int:
        return len(self.chain)

    def __iter__(self):
        return iter(self.chain)


def _far_key(graph: SegmentGraph, index: int, junction: QuantizedPoint) -> QuantizedPoint:
    if graph.start_key(index) == junction:
        return graph.end_key(index)
    return graph.start_key(index)


def _choose_start(graph: SegmentGraph, kind: str,
                  nodes: Dict[QuantizedPoint, List[int]]) -> Tuple[int, bool]:
    if kind == OPEN:
        termini = [key for key, incident in nodes.items() if len(incident) == 1]
        for key in termini:
            index = nodes[key][0]
            if graph.start_key(index) == key:
                return index, False
        # no terminus segment begins at its free end; start reversed
        return nodes[termini[0]][0], True
    first = next(iter(nodes.values()))
    return first[0], False


def assemble(graph: SegmentGraph, tie_break: str = "first",
             tracer: Optional[Tracer] = None) -> JoinResult:
    """Assemble every segment of ``graph`` into one chain.

    ``tie_break`` decides between several valid continuations at a
    junction: ``"first"`` takes the earliest in input order,
    ``"strict"`` raises ``AmbiguousContinuationError``.
    """

    trace = ensure_tracer(tracer)
    kind = graph.classify()
    segments = graph.segments
    nodes: Dict[QuantizedPoint, List[int]] = {key: list(incident)
                                              for key, incident in graph.nodes.items()}

    start_index, start_reversed = _choose_start(graph, kind, nodes)
    start_seg = segments[start_index].reversed() if start_reversed else segments[start_index]
    chain: Chain = [start_seg]
    order = [start_index]
    flags = [start_reversed]
    used: Set[int] = {start_index}
    head_key = graph.end_key(start_index) if start_reversed else graph.start_key(start_index)
    nodes.pop(head_key, None)
    trace("assemble.start", segment=start_seg, index=start_index, kind=kind)

    current_start = head_key
    current_end = graph.start_key(start_index) if start_reversed else graph.end_key(start_index)

    while nodes:
        current_index = order[-1]
        if len(order) == len(segments):
            # every segment is placed; only an open chain's far end may remain
            if kind == OPEN and list(nodes) == [current_end]:
                del nodes[current_end]
                break
            raise BrokenChainError(
                "segments consumed but nodes remain; the set may hold disjoint loops",
                {"remaining": [dequantize(key, graph.tol) for key in nodes]})

        incident = nodes.get(current_end)
        if incident is None:
            raise BrokenChainError(
                "no node at the end of the current segment",
                {"junction": dequantize(current_end, graph.tol),
                 "placed": len(order), "total": len(segments)})

        candidates = sorted({index for index in incident
                             if index != current_index and index not in used})
        valid = [index for index in candidates
                 if _far_key(graph, index, current_end) != current_start]
        if not valid and kind == CLOSED and len(candidates) == 1 \
                and len(order) == len(segments) - 1:
            # the last segment of a two-piece closed loop returns to its start
            valid = candidates
        if not valid:
            raise BrokenChainError(
                "no valid continuation at junction",
                {"junction": dequantize(current_end, graph.tol),
                 "incident": list(incident)})
        if len(valid) > 1:
            if tie_break == "strict":
                raise AmbiguousContinuationError(
                    "several continuations at junction",
                    {"junction": dequantize(current_end, graph.tol), "candidates": valid})
            logger.debug("ambiguous junction, taking segment %d of %s", valid[0], valid)

        next_index = valid[0]
        flip = graph.start_key(next_index) != current_end
        candidate = segments[next_index]
        next_seg = candidate.reversed() if flip else candidate
        chain.append(next_seg)
        order.append(next_index)
        flags.append(flip)
        used.add(next_index)
        nodes.pop(current_end, None)
        trace("assemble.step", current=chain[-2], next=next_seg, reversed=flip,
              remaining=len(nodes))

        current_start = current_end
        current_end = graph.start_key(next_index) if flip else graph.end_key(next_index)

    if len(order) != len(segments):
        raise BrokenChainError(
            "node map exhausted before every segment was placed",
            {"placed": len(order), "total": len(segments)})

    closed = kind == CLOSED
    trace("assemble.done", count=len(chain), closed=closed)
    return JoinResult(chain=chain, closed=closed, order=order, reversed_flags=flags)


def join_segments(segments: Sequence[Segment], tol: float = DEFAULT_TOLERANCE,
                  tie_break: str = "first", tracer: Optional[Tracer] = None) -> JoinResult:
    """Build the endpoint graph for ``segments`` and assemble it."""

    graph = SegmentGraph(segments, tol=tol, tracer=tracer)
    return assemble(graph, tie_break=tie_break, tracer=tracer)


def is_continuous(chain: Sequence[Segment], tol: float = DEFAULT_TOLERANCE) -> bool:
    """``True`` if every segment starts where the previous one ends."""

    return all(points_close(a.end, b.start, tol) for a, b in zip(chain[:-1], chain[1:]))


def is_closed_chain(chain: Sequence[Segment], tol: float = DEFAULT_TOLERANCE) -> bool:
    return bool(chain) and is_continuous(chain, tol) \
        and points_close(chain[-1].end, chain[0].start, tol)


__all__ = [
    "Chain",
    "JoinResult",
    "assemble",
    "join_segments",
    "is_continuous",
    "is_closed_chain",
]
