"""CLI entrypoint for buildgroups."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import NoReturn

from .config import load_config
from .errors import BuildGroupsError
from .logging import configure_logging
from .models import grouped_result_to_dict
from .orchestrator import ProjectGrouper
from .output import emit_output, report_failure

OUTPUT_NAME = "projects"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buildgroups",
        description="Group monorepo workspace packages by their declared build targets.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the workspace root (defaults to current directory).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .buildgroups.yml file (defaults to the one in the workspace root).",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Skip restoring and saving the tool download cache.",
    )
    parser.add_argument(
        "--cache-dir",
        type=Path,
        default=None,
        help="Directory holding tool download snapshots.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Also write the grouped projects JSON to this file.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write detailed logs to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for buildgroups."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    root = Path(args.path).expanduser().resolve()
    try:
        config = load_config(args.config or root)
        config.root = root
        if args.cache_dir is not None:
            config.cache.cache_dir = args.cache_dir.expanduser()
        grouper = ProjectGrouper(root, config, use_cache=False if args.no_cache else None)
        result = grouper.run()
    except BuildGroupsError as exc:
        _fail(parser, str(exc))

    payload = json.dumps(grouped_result_to_dict(result), separators=(",", ":"))
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload + "\n", encoding="utf-8")
    emit_output(OUTPUT_NAME, payload)


def _fail(parser: argparse.ArgumentParser, message: str) -> NoReturn:
    report_failure(f"Analysis failed: {message}")
    parser.exit(1, f"buildgroups failed: {message}\nRun with --verbose for more details.\n")


if __name__ == "__main__":
    main(sys.argv[1:])
