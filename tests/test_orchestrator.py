"""End-to-end tests for the grouping pipeline with a fake workspace tool."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Tuple

import pytest

from buildgroups.config import BuildGroupsConfig
from buildgroups.errors import (
    InvalidToolOutputError,
    ManifestParseError,
    RootManifestReadError,
    ToolExecutionError,
    ToolNotInstalledError,
)
from buildgroups.models import ProjectInfo, grouped_result_to_dict
from buildgroups.orchestrator import ProjectGrouper, group_projects
from buildgroups.tooling import CommandResult
from tests._fixtures.workspace_builder import FakeToolProcess, WorkspaceBuilder, turbo_listing


def _grouper(
    workspace: WorkspaceBuilder,
    packages: Iterable[Tuple[str, str]] = (),
    *,
    listing: CommandResult | None = None,
) -> Tuple[ProjectGrouper, FakeToolProcess]:
    process = FakeToolProcess(listing=listing or CommandResult(0, turbo_listing(packages), ""))
    config = BuildGroupsConfig(root=workspace.path())
    grouper = ProjectGrouper(
        workspace.path(),
        config,
        runner=process.runner(workspace.path()),
        use_cache=False,
    )
    return grouper, process


def test_missing_root_manifest_fails_as_not_installed(workspace: WorkspaceBuilder) -> None:
    grouper, process = _grouper(workspace)

    with pytest.raises(ToolNotInstalledError, match="Repo does not have Turborepo installed"):
        grouper.run()
    assert process.calls == []


def test_root_manifest_without_turbo_fails_as_not_installed(workspace: WorkspaceBuilder) -> None:
    workspace.write_root(None)
    grouper, _ = _grouper(workspace)

    with pytest.raises(ToolNotInstalledError):
        grouper.run()


def test_malformed_root_manifest_is_fatal(workspace: WorkspaceBuilder) -> None:
    workspace.write({"package.json": "{"})
    grouper, _ = _grouper(workspace)

    with pytest.raises(RootManifestReadError):
        grouper.run()


def test_tool_failure_surfaces_stderr(workspace: WorkspaceBuilder) -> None:
    workspace.write_root()
    grouper, _ = _grouper(workspace, listing=CommandResult(1, "", "boom"))

    with pytest.raises(ToolExecutionError) as excinfo:
        grouper.run()
    assert "boom" in str(excinfo.value)


def test_tool_output_without_json_is_invalid(workspace: WorkspaceBuilder) -> None:
    workspace.write_root()
    grouper, _ = _grouper(workspace, listing=CommandResult(0, "no json here", ""))

    with pytest.raises(InvalidToolOutputError):
        grouper.run()


def test_packages_without_build_are_excluded(workspace: WorkspaceBuilder) -> None:
    workspace.write_root()
    workspace.write_manifest("a", {"build": "docker"})
    workspace.write_manifest("b", {})
    grouper, process = _grouper(workspace, [("@x/a", "./a"), ("@x/b", "./b")])

    result = grouper.run()

    assert grouped_result_to_dict(result) == {
        "docker": [
            {"path": "./a", "name": "@x/a", "identifier": "x-a", "build": "docker"},
        ]
    }
    assert process.commands() == [["npx", "turbo@2.5.8", "ls", "--output=json"]]


def test_multiple_build_targets_fan_out(workspace: WorkspaceBuilder) -> None:
    workspace.write_root()
    workspace.write_manifest("lib", {"name": "@My/Lib!!", "build": ["npm", "docker"]})
    grouper, _ = _grouper(workspace, [("@My/Lib!!", "lib")])

    result = grouper.run()

    assert list(result) == ["npm", "docker"]
    assert result["npm"][0].identifier == "my-lib"
    assert result["npm"][0].to_dict() == result["docker"][0].to_dict()


def test_empty_result_when_nothing_is_buildable(workspace: WorkspaceBuilder) -> None:
    workspace.write_root()
    workspace.write_manifest("a", {"name": "a"})
    workspace.write_manifest("b", {"name": "b", "build": ""})
    grouper, _ = _grouper(workspace, [("a", "a"), ("b", "b")])

    assert grouper.run() == {}


def test_missing_package_manifest_is_skipped(workspace: WorkspaceBuilder) -> None:
    workspace.write_root()
    (workspace.path() / "ghost").mkdir()
    workspace.write_manifest("real", {"name": "real", "build": "npm"})
    grouper, _ = _grouper(workspace, [("ghost", "ghost"), ("real", "real")])

    result = grouper.run()

    assert [project.path for project in result["npm"]] == ["real"]


def test_malformed_package_manifest_is_fatal(workspace: WorkspaceBuilder) -> None:
    workspace.write_root()
    workspace.write({"bad/package.json": "{ nope"})
    grouper, _ = _grouper(workspace, [("bad", "bad")])

    with pytest.raises(ManifestParseError):
        grouper.run()


def test_group_order_follows_discovery(workspace: WorkspaceBuilder) -> None:
    workspace.write_root()
    workspace.write_manifest("apps/web", {"name": "web", "version": "1.0.0", "build": ["docker", "npm"]})
    workspace.write_manifest("apps/docs", {"name": "docs"})
    workspace.write_manifest("apps/api", {"name": "api", "version": "2.0.0", "build": "docker"})
    workspace.write_manifest("packages/ui", {"name": "@acme/ui", "build": "npm"})
    grouper, _ = _grouper(
        workspace,
        [("web", "apps/web"), ("docs", "apps/docs"), ("api", "apps/api"), ("@acme/ui", "packages/ui")],
    )

    result = grouper.run()

    assert list(result) == ["docker", "npm"]
    assert [project.name for project in result["docker"]] == ["web", "api"]
    assert [project.name for project in result["npm"]] == ["web", "@acme/ui"]
    assert all(project.build for projects in result.values() for project in projects)


def test_grouping_is_deterministic(workspace: WorkspaceBuilder) -> None:
    workspace.write_root()
    workspace.write_manifest("a", {"name": "a", "version": "0.1.0", "build": ["x", "y"]})
    workspace.write_manifest("b", {"name": "b", "build": "y"})
    packages = [("a", "a"), ("b", "b")]

    first, _ = _grouper(workspace, packages)
    second, _ = _grouper(workspace, packages)

    dump_first = json.dumps(grouped_result_to_dict(first.run()))
    dump_second = json.dumps(grouped_result_to_dict(second.run()))
    assert dump_first == dump_second


def test_root_is_independent_of_working_directory(workspace: WorkspaceBuilder, tmp_path: Path, monkeypatch) -> None:
    workspace.write_root()
    workspace.write_manifest("a", {"name": "a", "build": "npm"})
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)
    grouper, process = _grouper(workspace, [("a", "a")])

    assert list(grouper.run()) == ["npm"]
    assert process.calls[0][1] == workspace.path()


def test_cache_is_warmed_before_scanning(workspace: WorkspaceBuilder, tmp_path: Path) -> None:
    workspace.write_root("2.5.8")
    process = FakeToolProcess()
    config = BuildGroupsConfig(root=workspace.path())
    config.cache.cache_dir = tmp_path / "cache"
    config.cache.artifact_dir = tmp_path / "npx"
    (tmp_path / "npx" / "pkg").mkdir(parents=True)

    ProjectGrouper(workspace.path(), config, runner=process.runner(workspace.path())).run()

    assert process.commands() == [
        ["npx", "turbo@2.5.8", "--version"],
        ["npx", "turbo@2.5.8", "ls", "--output=json"],
    ]
    assert len(list((tmp_path / "cache").glob("*.tar.gz"))) == 1


def test_cache_failures_do_not_stop_the_pipeline(workspace: WorkspaceBuilder, tmp_path: Path) -> None:
    workspace.write_root()
    workspace.write_manifest("a", {"name": "a", "build": "npm"})
    process = FakeToolProcess(
        listing=CommandResult(0, turbo_listing([("a", "a")]), ""),
        probe=CommandResult(1, "", "network down"),
    )
    config = BuildGroupsConfig(root=workspace.path())
    config.cache.cache_dir = tmp_path / "cache"
    config.cache.artifact_dir = tmp_path / "missing"

    result = ProjectGrouper(workspace.path(), config, runner=process.runner(workspace.path())).run()

    assert list(result) == ["npm"]


def test_disabled_cache_skips_download(workspace: WorkspaceBuilder) -> None:
    workspace.write_root()
    grouper, process = _grouper(workspace)

    grouper.run()

    assert process.commands() == [["npx", "turbo@2.5.8", "ls", "--output=json"]]


def test_group_projects_ignores_projects_without_targets() -> None:
    tagged = ProjectInfo(path="a", build="npm", targets=("npm",))
    untagged = ProjectInfo(path="b")

    assert group_projects([untagged, tagged]) == {"npm": [tagged]}
