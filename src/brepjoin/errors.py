"""Exception taxonomy for segment joining and solid reconstruction."""

from __future__ import annotations


class JoinError(ValueError):
    """Base class for all joining/reconstruction failures.

    ``details`` carries structured context (node keys, counts, indices)
    for callers that want more than the message.
    """

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TopologyError(JoinError):
    """The segment set cannot form a single simple chain."""


class AmbiguousTopologyError(TopologyError):
    """More than two segments meet at one point."""


class TooManyTerminiError(TopologyError):
    """More than two free ends were found."""


class InconsistentTerminiError(TopologyError):
    """Exactly one free end was found, which no set of 1-D segments can have."""


class AmbiguousContinuationError(TopologyError):
    """Several valid continuations exist at a junction (strict tie-break)."""


class BrokenChainError(JoinError):
    """The node map stopped offering a continuation during assembly.

    After a successful classification this indicates an internal
    inconsistency, or several disjoint loops passed as one set.
    """


class EmptyLoopError(JoinError):
    """No segments were supplied."""


class OpenLoopError(JoinError):
    """A polygon was requested from an open chain."""


class DegenerateLoopError(JoinError):
    """A closed chain whose vertices do not form a valid polygon."""


class UnsupportedCurveError(JoinError, NotImplementedError):
    """Only lines, arcs and polylines can be joined."""


class LoopJoinError(JoinError):
    """A B-rep loop's trim curves could not be joined into one chain."""


class MissingOuterLoopError(JoinError):
    """A face has no loop tagged ``outer``."""


class NonManifoldEdgeError(JoinError):
    """An edge is shared with more than one other polygon."""


__all__ = [
    "JoinError",
    "TopologyError",
    "AmbiguousTopologyError",
    "TooManyTerminiError",
    "InconsistentTerminiError",
    "AmbiguousContinuationError",
    "BrokenChainError",
    "EmptyLoopError",
    "OpenLoopError",
    "DegenerateLoopError",
    "UnsupportedCurveError",
    "LoopJoinError",
    "MissingOuterLoopError",
    "NonManifoldEdgeError",
]
