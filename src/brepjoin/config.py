"""Tolerance and policy settings for segment joining.

The defaults can be overridden per call (``JoinSettings`` instances are
accepted by the high-level entry points), process-wide through the
``BREPJOIN_TOLERANCE`` and ``BREPJOIN_TIE_BREAK`` environment variables,
or from a YAML file::

    tolerance: 1.0e-5
    tie_break: strict
    arc_divisions: 8
    on_degenerate: raise
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

DEFAULT_TOLERANCE = 1e-6

TIE_BREAK_POLICIES = ("first", "strict")
DEGENERATE_POLICIES = ("drop", "raise")

ENV_TOLERANCE = "BREPJOIN_TOLERANCE"
ENV_TIE_BREAK = "BREPJOIN_TIE_BREAK"


@dataclass(frozen=True)
class JoinSettings:
    """Settings shared by joining, polygon construction and orientation.

    ``tie_break`` selects what happens when a junction offers more than
    one continuation: ``"first"`` takes the earliest in input order,
    ``"strict"`` raises.  ``on_degenerate`` decides whether faces whose
    loops do not form valid polygons are dropped (and reported) or abort
    the reconstruction.
    """

    tolerance: float = DEFAULT_TOLERANCE
    tie_break: str = "first"
    arc_divisions: int = 1
    on_degenerate: str = "drop"

    def __post_init__(self) -> None:
        if not isinstance(self.tolerance, (int, float)) or isinstance(self.tolerance, bool):
            raise ValueError(f"tolerance must be a number, got {self.tolerance!r}")
        if not self.tolerance > 0.0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance!r}")
        if self.tie_break not in TIE_BREAK_POLICIES:
            raise ValueError(
                f"tie_break must be one of {', '.join(TIE_BREAK_POLICIES)}, got {self.tie_break!r}")
        if not isinstance(self.arc_divisions, int) or self.arc_divisions < 1:
            raise ValueError(f"arc_divisions must be a positive integer, got {self.arc_divisions!r}")
        if self.on_degenerate not in DEGENERATE_POLICIES:
            raise ValueError(
                f"on_degenerate must be one of {', '.join(DEGENERATE_POLICIES)}, got {self.on_degenerate!r}")

    def with_overrides(self, **overrides: Any) -> "JoinSettings":
        return replace(self, **overrides)


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    raw_tol = environ.get(ENV_TOLERANCE)
    if raw_tol:
        try:
            overrides["tolerance"] = float(raw_tol)
        except ValueError as exc:
            raise ValueError(f"{ENV_TOLERANCE} must be a number, got {raw_tol!r}") from exc
    raw_tie = environ.get(ENV_TIE_BREAK)
    if raw_tie:
        overrides["tie_break"] = raw_tie.strip().lower()
    return overrides


def default_settings(environ: Optional[Mapping[str, str]] = None) -> JoinSettings:
    """Return the defaults, with environment overrides applied."""

    if environ is None:
        environ = os.environ
    return JoinSettings(**_env_overrides(environ))


def settings_from_mapping(data: Mapping[str, Any],
                          base: Optional[JoinSettings] = None) -> JoinSettings:
    """Build settings from a plain mapping, rejecting unknown keys."""

    if not isinstance(data, Mapping):
        raise ValueError(f"settings must be a mapping, got {type(data)!r}")
    known = {f.name for f in fields(JoinSettings)}
    unknown = sorted(key for key in data if key not in known)
    if unknown:
        raise ValueError(f"unknown settings keys: {', '.join(unknown)}")
    values = dict(data)
    if "tolerance" in values:
        values["tolerance"] = float(values["tolerance"])
    if base is None:
        base = default_settings()
    return replace(base, **values)


def load_settings(path: Path | str, base: Optional[JoinSettings] = None) -> JoinSettings:
    """Load a YAML settings file and return the resulting ``JoinSettings``."""

    settings_path = Path(path)
    if not settings_path.exists():
        raise FileNotFoundError(f"settings file not found: {settings_path}")
    import yaml

    with settings_path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    return settings_from_mapping(data, base=base)


def resolve_settings(settings: Optional[JoinSettings] = None, **overrides: Any) -> JoinSettings:
    """Return ``settings`` (or the defaults) with non-``None`` overrides applied."""

    base = settings if settings is not None else default_settings()
    chosen = {key: value for key, value in overrides.items() if value is not None}
    if chosen:
        return replace(base, **chosen)
    return base


__all__ = [
    "DEFAULT_TOLERANCE",
    "TIE_BREAK_POLICIES",
    "DEGENERATE_POLICIES",
    "ENV_TOLERANCE",
    "ENV_TIE_BREAK",
    "JoinSettings",
    "default_settings",
    "settings_from_mapping",
    "load_settings",
    "resolve_settings",
]
