"""Pipeline orchestration: resolve, warm, scan, read and group."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional

from .config import BuildGroupsConfig, load_config
from .errors import ToolNotInstalledError
from .identifiers import normalize_identifier
from .logging import get_logger
from .manifest import read_project_info, resolve_tool_version
from .models import GroupedResult, ProjectInfo
from .stores import FetchCache, LocalCacheStore
from .tooling import ToolRunner, WorkspaceScanner

_TOOL_LABELS = {"turbo": "Turborepo"}


def group_projects(projects: Iterable[ProjectInfo]) -> GroupedResult:
    """Group projects by build target, keeping first-seen label order."""
    result: GroupedResult = {}
    for project in projects:
        for label in project.targets:
            result.setdefault(label, []).append(project)
    return result


class ProjectGrouper:
    """Discovers workspace packages and groups the buildable ones."""

    def __init__(
        self,
        root: Path | str,
        config: BuildGroupsConfig | None = None,
        *,
        runner: ToolRunner | None = None,
        scanner: WorkspaceScanner | None = None,
        fetch_cache: FetchCache | None = None,
        use_cache: bool | None = None,
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.config = config or load_config(self.root)
        self.runner = runner or ToolRunner(
            self.root,
            tool=self.config.tool,
            executable=self.config.runner,
        )
        self.scanner = scanner or WorkspaceScanner(self.runner)

        cache_enabled = self.config.cache.enabled if use_cache is None else use_cache
        self.fetch_cache: Optional[FetchCache] = None
        if cache_enabled:
            self.fetch_cache = fetch_cache or FetchCache(
                self.runner,
                LocalCacheStore(self.config.cache.cache_dir),
                self.config.cache.artifact_dir,
            )
        self.logger = get_logger("orchestrator")

    def run(self) -> GroupedResult:
        """Return buildable projects grouped by build target.

        A manifest without a ``name`` takes the name the tool reported for
        that package, so the project still carries a name and identifier.
        """
        tool = self.config.tool
        label = _TOOL_LABELS.get(tool, tool)
        version = resolve_tool_version(self.root, tool, self.config.manifest)
        if not version:
            raise ToolNotInstalledError(f"Repo does not have {label} installed")
        self.logger.info("Resolved %s: %s", label, version)

        if self.fetch_cache is not None:
            self.fetch_cache.warm(version)
        else:
            self.logger.debug("Tool cache disabled")

        packages = self.scanner.list_packages(version)

        projects = []
        for package in packages:
            info = read_project_info(self.root, package.path, self.config.manifest)
            if info is None:
                continue
            if info.name is None and package.name:
                info = replace(
                    info,
                    name=package.name,
                    identifier=normalize_identifier(package.name),
                )
            if not info.targets:
                self.logger.debug("Skipping %s: no build target", package.path)
                continue
            projects.append(info)

        result = group_projects(projects)
        self._log_summary(result)
        return result

    def _log_summary(self, result: GroupedResult) -> None:
        if not result:
            self.logger.info("Nothing to build")
            return

        for build_type, projects in result.items():
            self.logger.info("%s", build_type)
            for project in projects:
                self.logger.info(
                    "  %s@%s: %s (%s)",
                    project.name or "N/A",
                    project.version or "N/A",
                    project.path,
                    project.identifier or "N/A",
                )

        total = sum(len(projects) for projects in result.values())
        self.logger.info("Done: %d build target(s), %d project(s)", len(result), total)


__all__ = ["ProjectGrouper", "group_projects"]
