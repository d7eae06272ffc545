"""Configuration loading for buildgroups (.buildgroups.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import BuildGroupsError
from .manifest import MANIFEST_FILENAME
from .stores.fetch_cache import DEFAULT_ARTIFACT_DIR

CONFIG_FILENAME = ".buildgroups.yml"
DEFAULT_CACHE_DIR = Path("~/.cache/buildgroups")


class ConfigError(BuildGroupsError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CacheConfig:
    """Settings for the tool download cache."""

    enabled: bool = True
    cache_dir: Path = DEFAULT_CACHE_DIR
    artifact_dir: Path = DEFAULT_ARTIFACT_DIR


@dataclass
class BuildGroupsConfig:
    """Represents the settings defined in .buildgroups.yml."""

    root: Path
    tool: str = "turbo"
    runner: str = "npx"
    manifest: str = MANIFEST_FILENAME
    cache: CacheConfig = field(default_factory=CacheConfig)


def load_config(config_path: Path) -> BuildGroupsConfig:
    """Load configuration from disk.

    ``config_path`` may be the workspace root or the config file itself.
    """
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return BuildGroupsConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = BuildGroupsConfig(root=root)
    config.tool = _as_str(data.get("tool")) or config.tool
    config.runner = _as_str(data.get("runner")) or config.runner
    config.manifest = _as_str(data.get("manifest")) or config.manifest

    cache_data = _as_dict(data.get("cache"))
    if cache_data:
        enabled = _as_bool(cache_data.get("enabled"))
        if enabled is not None:
            config.cache.enabled = enabled
        cache_dir = _as_str(cache_data.get("dir"))
        if cache_dir:
            config.cache.cache_dir = _resolve_path(root, cache_dir)
        artifact_dir = _as_str(cache_data.get("artifact_dir"))
        if artifact_dir:
            config.cache.artifact_dir = _resolve_path(root, artifact_dir)

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return root / path


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return str(value)


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "BuildGroupsConfig",
    "CONFIG_FILENAME",
    "CacheConfig",
    "ConfigError",
    "DEFAULT_CACHE_DIR",
    "load_config",
]
