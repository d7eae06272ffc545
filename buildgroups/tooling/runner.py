"""Version-pinned execution of the workspace tool."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List

from ..logging import get_logger


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of one subprocess invocation."""

    exit_code: int
    stdout: str
    stderr: str


class ToolRunner:
    """Runs ``<executable> <tool>@<version> ...`` from the workspace root.

    The executable (``npx`` by default) fetches the exact tool version on
    demand, so the pinned version runs regardless of any global install.
    """

    def __init__(
        self,
        root: Path | str,
        *,
        tool: str = "turbo",
        executable: str = "npx",
        runner: Callable[..., CommandResult] | None = None,
    ) -> None:
        self.root = Path(root)
        self.tool = tool
        self.executable = executable
        self._runner = runner or self._default_runner
        self.logger = get_logger("tooling.runner")

    def command(self, version: str, *args: str) -> List[str]:
        return [self.executable, f"{self.tool}@{version}", *args]

    def run(self, version: str, *args: str) -> CommandResult:
        command = self.command(version, *args)
        self.logger.debug("Running %s in %s", " ".join(command), self.root)
        result = self._runner(command, cwd=self.root)
        self.logger.debug("%s exited with %d", command[0], result.exit_code)
        return result

    def list_packages(self, version: str) -> CommandResult:
        """Ask the tool for a JSON listing of workspace packages."""
        return self.run(version, "ls", "--output=json")

    def probe(self, version: str) -> CommandResult:
        """Run ``--version`` so the runner downloads the tool into its cache."""
        return self.run(version, "--version")

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> CommandResult:
        argv = list(args)
        argv[0] = shutil.which(argv[0]) or argv[0]
        env = os.environ.copy()
        # npx would otherwise prompt before installing a missing package.
        env.setdefault("npm_config_yes", "true")
        completed = subprocess.run(
            argv,
            cwd=str(cwd),
            check=False,
            text=True,
            capture_output=True,
            env=env,
        )
        return CommandResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


__all__ = ["CommandResult", "ToolRunner"]
