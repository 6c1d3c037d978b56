"""Endpoint graph over a set of segments.

Every segment is registered at the grid key of its start point and at
the grid key of its end point.  The graph then tells whether the set can
form one simple chain, and whether that chain is closed or open:

* a node with more than two incident segments is a branch point and the
  set cannot be joined (``AmbiguousTopologyError``);
* a node with exactly one incident segment is a *terminus* (free end);
  zero termini means closed, two means open, anything else is an error.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from brepjoin.config import DEFAULT_TOLERANCE
from brepjoin.errors import (
    AmbiguousTopologyError,
    EmptyLoopError,
    InconsistentTerminiError,
    TooManyTerminiError,
)
from brepjoin.segments import Segment
from brepjoin.tolerance import QuantizedPoint, dequantize, quantize
from brepjoin.trace import Tracer, ensure_tracer

logger = logging.getLogger(__name__)

CLOSED = "closed"
OPEN = "open"


class SegmentGraph:
    """Map from quantized endpoint to the indices of incident segments.

    Node lists keep insertion order, which is input order, and may hold
    the same index twice when both ends of a segment share a key.
    """

    def __init__(self, segments: Sequence[Segment], tol: float = DEFAULT_TOLERANCE,
                 tracer: Optional[Tracer] = None):
        self.segments: List[Segment] = list(segments)
        self.tol = tol
        self.tracer = ensure_tracer(tracer)
        self.nodes: Dict[QuantizedPoint, List[int]] = {}
        self._start_keys: List[QuantizedPoint] = []
        self._end_keys: List[QuantizedPoint] = []
        for index, seg in enumerate(self.segments):
            skey = quantize(seg.start, tol)
            ekey = quantize(seg.end, tol)
            self._start_keys.append(skey)
            self._end_keys.append(ekey)
            self.nodes.setdefault(skey, []).append(index)
            self.nodes.setdefault(ekey, []).append(index)
        self.tracer("graph.built", node_count=len(self.nodes),
                    segment_count=len(self.segments), termini=len(self.termini()))

    def __len__(self) -> int:
        return len(self.nodes)

    def start_key(self, index: int) -> QuantizedPoint:
        return self._start_keys[index]

    def end_key(self, index: int) -> QuantizedPoint:
        return self._end_keys[index]

    def key(self, p) -> QuantizedPoint:
        return quantize(p, self.tol)

    def termini(self) -> List[QuantizedPoint]:
        """Keys of the nodes with exactly one incident segment."""

        return [key for key, incident in self.nodes.items() if len(incident) == 1]

    def branches(self) -> List[QuantizedPoint]:
        return [key for key, incident in self.nodes.items() if len(incident) > 2]

    def classify(self) -> str:
        """Return ``'closed'`` or ``'open'``, or raise if the set cannot be joined."""

        if not self.segments:
            raise EmptyLoopError("no segments to join")

        branches = self.branches()
        if branches:
            logger.debug("unable to join segments: %d branch points", len(branches))
            raise AmbiguousTopologyError(
                "unable to join segments: more than two segments meet at a point",
                {"nodes": [dequantize(key, self.tol) for key in branches],
                 "counts": [len(self.nodes[key]) for key in branches]})

        termini = self.termini()
        count = len(termini)
        if count > 2:
            logger.debug("unable to join segments: %d termini", count)
            raise TooManyTerminiError(
                f"unable to join segments: {count} termini found",
                {"termini": [dequantize(key, self.tol) for key in termini]})
        if count == 1:
            raise InconsistentTerminiError(
                "unable to determine chain start: single terminus found",
                {"termini": [dequantize(key, self.tol) for key in termini]})

        kind = CLOSED if count == 0 else OPEN
        self.tracer("graph.classified", kind=kind, termini=count)
        return kind


def build_graph(segments: Sequence[Segment], tol: float = DEFAULT_TOLERANCE,
                tracer: Optional[Tracer] = None) -> SegmentGraph:
    return SegmentGraph(segments, tol=tol, tracer=tracer)


__all__ = [
    "CLOSED",
    "OPEN",
    "SegmentGraph",
    "build_graph",
]
