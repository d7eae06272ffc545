"""Package manifest reading and workspace tool version resolution."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from .errors import ManifestParseError, RootManifestReadError
from .identifiers import normalize_identifier
from .logging import get_logger
from .models import ProjectInfo, parse_build_targets

MANIFEST_FILENAME = "package.json"

_DEPENDENCY_SECTIONS = ("devDependencies", "dependencies")

logger = get_logger("manifest")


def read_project_info(
    root: Path | str,
    package_path: str,
    manifest_filename: str = MANIFEST_FILENAME,
) -> Optional[ProjectInfo]:
    """Return project metadata for ``package_path`` or ``None`` without a manifest.

    ``package_path`` is resolved against ``root`` unless it is already
    absolute. The returned ``ProjectInfo.path`` keeps the value as given.
    """
    manifest_path = (Path(root) / package_path / manifest_filename).resolve()
    if not manifest_path.is_file():
        logger.warning("No %s found in %s", manifest_filename, package_path)
        return None

    try:
        data = _load_json(manifest_path)
    except (OSError, ValueError) as exc:
        raise ManifestParseError(manifest_path) from exc
    if not isinstance(data, dict):
        raise ManifestParseError(manifest_path)

    name = _as_str(data.get("name"))
    raw_build = data.get("build")
    targets = parse_build_targets(raw_build)

    return ProjectInfo(
        path=package_path,
        name=name,
        version=_as_str(data.get("version")),
        identifier=normalize_identifier(name) if name is not None else None,
        build=raw_build,
        targets=targets.labels if targets is not None else (),
    )


def resolve_tool_version(
    root: Path | str,
    tool: str = "turbo",
    manifest_filename: str = MANIFEST_FILENAME,
) -> Optional[str]:
    """Return the version of ``tool`` declared by the workspace root manifest.

    ``devDependencies`` wins over ``dependencies``. Returns ``None`` when the
    manifest is missing or neither section names the tool.
    """
    manifest_path = Path(root) / manifest_filename
    if not manifest_path.is_file():
        return None

    try:
        data = _load_json(manifest_path)
    except (OSError, ValueError) as exc:
        raise RootManifestReadError(
            f"Failed to fetch {manifest_filename} in repo root folder"
        ) from exc
    if not isinstance(data, dict):
        raise RootManifestReadError(f"Failed to fetch {manifest_filename} in repo root folder")

    for section in _DEPENDENCY_SECTIONS:
        dependencies = data.get(section)
        if not isinstance(dependencies, dict):
            continue
        version = _as_str(dependencies.get(tool))
        if version:
            return version
    return None


def _load_json(path: Path) -> Any:
    # UnicodeDecodeError and JSONDecodeError are both ValueError subclasses.
    return json.loads(path.read_text(encoding="utf-8"))


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    return None


__all__ = ["MANIFEST_FILENAME", "read_project_info", "resolve_tool_version"]
