"""Best-effort caching of the workspace tool download."""

from __future__ import annotations

import platform
from pathlib import Path

from ..logging import get_logger
from ..tooling.runner import ToolRunner
from .cache_store import CacheStore

DEFAULT_ARTIFACT_DIR = Path("~/.npm/_npx")

# Node.js spells platforms and architectures differently from Python.
_NODE_PLATFORMS = {
    "windows": "win32",
    "darwin": "darwin",
    "linux": "linux",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "sunos": "sunos",
    "aix": "aix",
}

_NODE_ARCHES = {
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64",
    "s390x": "s390x",
}


def host_platform() -> str:
    system = platform.system().lower()
    return _NODE_PLATFORMS.get(system, system or "unknown")


def host_arch() -> str:
    machine = platform.machine().lower()
    return _NODE_ARCHES.get(machine, machine or "unknown")


class FetchCache:
    """Restores or seeds the runner's download directory for one tool version.

    Every failure is logged as a warning; warming the cache never aborts a run.
    """

    def __init__(
        self,
        runner: ToolRunner,
        store: CacheStore,
        artifact_dir: Path | str = DEFAULT_ARTIFACT_DIR,
    ) -> None:
        self.runner = runner
        self.store = store
        self.artifact_dir = Path(artifact_dir).expanduser()
        self.logger = get_logger("stores.fetch_cache")

    def cache_key(self, version: str) -> str:
        return f"{self.runner.executable}-{self.runner.tool}-{version}-{host_platform()}-{host_arch()}"

    def warm(self, version: str) -> bool:
        """Return True when a saved snapshot was restored."""
        tool = f"{self.runner.tool}@{version}"
        key = self.cache_key(version)
        paths = [self.artifact_dir]
        self.logger.info("Looking for cached %s in %s", tool, self.artifact_dir)
        self.logger.debug("Cache key: %s", key)

        try:
            if self.store.restore(paths, key):
                self.logger.info("Restored cache for %s", tool)
                return True
        except Exception as exc:
            self.logger.warning("Cache restore failed: %s", exc)

        self.logger.info("No cache found, pre-downloading %s", tool)
        try:
            result = self.runner.probe(version)
        except Exception as exc:
            self.logger.warning("Failed to pre-download %s: %s", tool, exc)
            return False
        if result.exit_code != 0:
            self.logger.warning(
                "Failed to pre-download %s: exit code %d", tool, result.exit_code
            )
            return False

        self.logger.info("%s downloaded successfully", tool)
        try:
            self.store.save(paths, key)
        except Exception as exc:
            self.logger.warning("Failed to save cache: %s", exc)
        else:
            self.logger.info("Cached %s for future runs", tool)
        return False


__all__ = ["DEFAULT_ARTIFACT_DIR", "FetchCache", "host_arch", "host_platform"]
