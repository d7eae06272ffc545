"""Workspace package discovery through the workspace tool."""

from __future__ import annotations

import json
from typing import Any, List, Optional

from ..errors import InvalidToolOutputError, PackageRetrievalError, ToolExecutionError
from ..logging import get_logger
from ..models import WorkspacePackage
from .runner import ToolRunner


def extract_json_document(text: str) -> Optional[str]:
    """Return the span from the first ``{`` to the last ``}`` in ``text``.

    The tool may print banner lines around its JSON payload. When the output
    carries more than one object the span covers all of them and will not
    decode; that case surfaces as a retrieval error rather than a guess.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start : end + 1]


class WorkspaceScanner:
    """Lists workspace packages in the order the tool reports them."""

    def __init__(self, runner: ToolRunner) -> None:
        self.runner = runner
        self.logger = get_logger("tooling.scanner")

    def list_packages(self, version: str) -> List[WorkspacePackage]:
        tool = self.runner.tool
        try:
            result = self.runner.list_packages(version)
            if result.exit_code != 0:
                raise ToolExecutionError(
                    f"Failed to get {tool} packages: {result.stderr.strip()}",
                    stderr=result.stderr,
                    exit_code=result.exit_code,
                )

            document = extract_json_document(result.stdout)
            if document is None:
                raise InvalidToolOutputError(f"{tool} output is not valid JSON")

            packages = _parse_packages(json.loads(document))
        except (ToolExecutionError, InvalidToolOutputError):
            raise
        except Exception as exc:
            self.logger.debug("Package listing failed: %s", exc)
            raise PackageRetrievalError(f"Failed to retrieve {tool} packages") from exc

        self.logger.info(
            "Found %d %s package(s): %s",
            len(packages),
            tool,
            ", ".join(package.name for package in packages),
        )
        return packages


def _parse_packages(payload: Any) -> List[WorkspacePackage]:
    items = payload["packages"]["items"]
    if not isinstance(items, list):
        raise TypeError("packages.items must be a list")

    packages: List[WorkspacePackage] = []
    for item in items:
        name = item["name"]
        path = item["path"]
        if not isinstance(name, str) or not isinstance(path, str):
            raise TypeError("package entries need string name and path fields")
        packages.append(WorkspacePackage(name=name, path=path))
    return packages


__all__ = ["WorkspaceScanner", "extract_json_document"]
