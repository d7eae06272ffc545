"""Diagnostic channel for buildgroups runs.

Progress goes to stderr. Under GitHub Actions, warnings and errors are also
written to stdout as workflow commands (``::warning::``/``::error::``) so
skipped packages and cache failures show up as run annotations.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Optional, TextIO

from .output import escape_annotation

ROOT_LOGGER = "buildgroups"
CONSOLE_FORMAT = "[buildgroups] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AnnotationHandler(logging.Handler):
    """Turns WARNING and ERROR records into Actions workflow commands."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        super().__init__(logging.WARNING)
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            command = "error" if record.levelno >= logging.ERROR else "warning"
            stream = self.stream or sys.stdout
            stream.write(f"::{command}::{escape_annotation(self.format(record))}\n")
            stream.flush()
        except Exception:
            self.handleError(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``buildgroups.<name>``, or the root project logger."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    environ: Optional[Mapping[str, str]] = None,
    annotation_stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Install the console, annotation and optional file handlers.

    Calling it again replaces the previous handlers.
    """
    env = os.environ if environ is None else environ
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if env.get("GITHUB_ACTIONS") == "true":
        logger.addHandler(AnnotationHandler(annotation_stream))

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)

    return logger


__all__ = ["AnnotationHandler", "configure_logging", "get_logger"]
