# -*- coding: utf-8 -*-
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("brepjoin")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from brepjoin.assemble import JoinResult, assemble, join_segments
from brepjoin.brep import brep_to_solid, faces_to_profiles, reconstruct_solid
from brepjoin.config import DEFAULT_TOLERANCE, JoinSettings, load_settings
from brepjoin.errors import JoinError
from brepjoin.graph import SegmentGraph
from brepjoin.loop import LoopResult, to_polygon
from brepjoin.orient import orient
from brepjoin.polygon import Containment, Polygon, Profile
from brepjoin.segments import Arc, Line
from brepjoin.solid import Solid, build_solid

__all__ = [
    "__version__",
    "DEFAULT_TOLERANCE",
    "JoinSettings",
    "load_settings",
    "JoinError",
    "Line",
    "Arc",
    "SegmentGraph",
    "JoinResult",
    "assemble",
    "join_segments",
    "LoopResult",
    "to_polygon",
    "Containment",
    "Polygon",
    "Profile",
    "orient",
    "Solid",
    "build_solid",
    "faces_to_profiles",
    "reconstruct_solid",
    "brep_to_solid",
]
