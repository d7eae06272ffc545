"""Core data models shared across buildgroups components."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Single:
    """A package that declares one build target."""

    label: str

    @property
    def labels(self) -> Tuple[str, ...]:
        return (self.label,)


@dataclass(frozen=True)
class Many:
    """A package that declares an ordered list of build targets."""

    items: Tuple[str, ...]

    @property
    def labels(self) -> Tuple[str, ...]:
        return self.items


BuildTargets = Union[Single, Many]


def parse_build_targets(raw: Any) -> Optional[BuildTargets]:
    """Convert a raw manifest ``build`` value into a tagged target variant.

    Falsy values mean the package is not buildable. Values that are neither a
    string nor a list are accepted and rendered to a label, since manifests
    are not validated beyond that.
    """
    if not raw:
        return None
    if isinstance(raw, str):
        return Single(raw)
    if isinstance(raw, (list, tuple)):
        return Many(tuple(_as_label(item) for item in raw))
    return Single(_as_label(raw))


def _as_label(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True)


@dataclass(frozen=True)
class WorkspacePackage:
    """A package location reported by the workspace tool."""

    name: str
    path: str


@dataclass(frozen=True)
class ProjectInfo:
    """Metadata extracted from one package manifest."""

    path: str
    name: Optional[str] = None
    version: Optional[str] = None
    identifier: Optional[str] = None
    build: Any = None
    targets: Tuple[str, ...] = field(default=(), repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-ready form, omitting absent fields."""
        payload: Dict[str, Any] = {
            "path": self.path,
            "name": self.name,
            "version": self.version,
            "identifier": self.identifier,
            "build": self.build,
        }
        return {key: value for key, value in payload.items() if value is not None}


GroupedResult = Dict[str, List[ProjectInfo]]


def grouped_result_to_dict(result: GroupedResult) -> Dict[str, List[Dict[str, Any]]]:
    """Return the JSON-ready form of a grouped result, preserving order."""
    return {label: [project.to_dict() for project in projects] for label, projects in result.items()}


__all__ = [
    "BuildTargets",
    "GroupedResult",
    "Many",
    "ProjectInfo",
    "Single",
    "WorkspacePackage",
    "grouped_result_to_dict",
    "parse_build_targets",
]
