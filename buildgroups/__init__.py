"""Discover monorepo packages and group them by build target."""

from .errors import (
    BuildGroupsError,
    InvalidToolOutputError,
    ManifestParseError,
    PackageRetrievalError,
    RootManifestReadError,
    ToolExecutionError,
    ToolNotInstalledError,
)
from .identifiers import normalize_identifier
from .models import GroupedResult, ProjectInfo, WorkspacePackage, grouped_result_to_dict
from .orchestrator import ProjectGrouper, group_projects

__version__ = "0.1.0"

__all__ = [
    "BuildGroupsError",
    "GroupedResult",
    "InvalidToolOutputError",
    "ManifestParseError",
    "PackageRetrievalError",
    "ProjectGrouper",
    "ProjectInfo",
    "RootManifestReadError",
    "ToolExecutionError",
    "ToolNotInstalledError",
    "WorkspacePackage",
    "group_projects",
    "grouped_result_to_dict",
    "normalize_identifier",
]
