"""Error taxonomy for the discovery pipeline."""

from __future__ import annotations

from pathlib import Path


class BuildGroupsError(RuntimeError):
    """Base class for fatal pipeline failures."""


class RootManifestReadError(BuildGroupsError):
    """Raised when the workspace root manifest exists but cannot be parsed."""


class ToolNotInstalledError(BuildGroupsError):
    """Raised when no workspace tool version can be resolved."""


class ToolExecutionError(BuildGroupsError):
    """Raised when the workspace tool exits with a non-zero status."""

    def __init__(self, message: str, *, stderr: str = "", exit_code: int | None = None) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.exit_code = exit_code


class InvalidToolOutputError(BuildGroupsError):
    """Raised when the workspace tool output holds no JSON object."""


class PackageRetrievalError(BuildGroupsError):
    """Raised for any other failure while listing workspace packages."""


class ManifestParseError(BuildGroupsError):
    """Raised when a package manifest exists but is not a valid document."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Failed to retrieve package info: {path}")
        self.path = path


__all__ = [
    "BuildGroupsError",
    "InvalidToolOutputError",
    "ManifestParseError",
    "PackageRetrievalError",
    "RootManifestReadError",
    "ToolExecutionError",
    "ToolNotInstalledError",
]
