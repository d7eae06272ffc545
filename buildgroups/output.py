"""Result and failure reporting for the hosting automation environment."""

from __future__ import annotations

import os
import sys
import uuid
from pathlib import Path
from typing import Mapping, Optional, TextIO


def emit_output(
    name: str,
    value: str,
    *,
    environ: Optional[Mapping[str, str]] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Publish ``value`` as the named step output.

    On GitHub Actions the value is appended to the ``GITHUB_OUTPUT`` file with
    a random heredoc delimiter; elsewhere it is written to ``stream``.
    """
    env = os.environ if environ is None else environ
    output_file = env.get("GITHUB_OUTPUT")
    if output_file:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with Path(output_file).open("a", encoding="utf-8") as handle:
            handle.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
        return
    print(value, file=stream or sys.stdout)


def report_failure(
    message: str,
    *,
    environ: Optional[Mapping[str, str]] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Emit an error annotation when running under GitHub Actions."""
    env = os.environ if environ is None else environ
    if env.get("GITHUB_ACTIONS") != "true":
        return
    print(f"::error::{escape_annotation(message)}", file=stream or sys.stdout)


def escape_annotation(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


__all__ = ["emit_output", "escape_annotation", "report_failure"]
