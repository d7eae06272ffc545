"""Directory snapshot stores keyed by cache key."""

from __future__ import annotations

import re
import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Protocol, Sequence

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class CacheStore(Protocol):
    """Contract for saving and restoring directory snapshots."""

    def restore(self, paths: Sequence[Path | str], key: str) -> bool:
        """Repopulate ``paths`` from the snapshot saved under ``key``."""

    def save(self, paths: Sequence[Path | str], key: str) -> None:
        """Persist the current contents of ``paths`` under ``key``."""


class LocalCacheStore:
    """Stores one gzip tarball per key inside a local cache directory."""

    def __init__(self, cache_dir: Path | str) -> None:
        self.cache_dir = Path(cache_dir).expanduser()

    def archive_path(self, key: str) -> Path:
        safe_key = _UNSAFE_KEY_CHARS.sub("_", key).strip("._") or "default"
        return self.cache_dir / f"{safe_key}.tar.gz"

    def restore(self, paths: Sequence[Path | str], key: str) -> bool:
        archive = self.archive_path(key)
        if not archive.is_file():
            return False

        targets = [Path(path).expanduser() for path in paths]
        with tempfile.TemporaryDirectory(dir=self.cache_dir) as staging:
            with tarfile.open(archive, "r:gz") as handle:
                handle.extractall(staging, filter="data")
            for index, target in enumerate(targets):
                source = Path(staging) / str(index)
                if not source.exists():
                    continue
                target.mkdir(parents=True, exist_ok=True)
                _merge_tree(source, target)
        return True

    def save(self, paths: Sequence[Path | str], key: str) -> None:
        sources = [(index, Path(path).expanduser()) for index, path in enumerate(paths)]
        existing = [(index, source) for index, source in sources if source.exists()]
        if not existing:
            missing = ", ".join(str(source) for _, source in sources)
            raise FileNotFoundError(f"No cache paths exist: {missing}")

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        archive = self.archive_path(key)
        handle_fd, temp_name = tempfile.mkstemp(dir=self.cache_dir, suffix=".tmp")
        temp_path = Path(temp_name)
        try:
            with open(handle_fd, "wb") as raw, tarfile.open(fileobj=raw, mode="w:gz") as handle:
                for index, source in existing:
                    handle.add(source, arcname=str(index))
            # Readers only ever see a complete archive.
            temp_path.replace(archive)
        finally:
            temp_path.unlink(missing_ok=True)


def _merge_tree(source: Path, target: Path) -> None:
    """Copy ``source`` over ``target``, replacing entries that already exist."""
    for entry in source.iterdir():
        destination = target / entry.name
        if entry.is_dir() and not entry.is_symlink():
            if destination.is_symlink() or destination.is_file():
                destination.unlink()
            destination.mkdir(exist_ok=True)
            _merge_tree(entry, destination)
            continue

        if destination.is_symlink() or destination.is_file():
            destination.unlink()
        elif destination.is_dir():
            shutil.rmtree(destination)
        if entry.is_symlink():
            destination.symlink_to(entry.readlink())
        else:
            shutil.copy2(entry, destination)


__all__ = ["CacheStore", "LocalCacheStore"]
