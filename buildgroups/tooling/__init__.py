"""Workspace tool invocation and package listing."""

from .runner import CommandResult, ToolRunner
from .scanner import WorkspaceScanner, extract_json_document

__all__ = ["CommandResult", "ToolRunner", "WorkspaceScanner", "extract_json_document"]
