"""CLI orchestration module; coordinates config, selection, and output steps."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import (
    load_config,
    resolve_config_path,
    resolve_output_path,
    write_default_config,
    write_json_file,
)
from .errors import ConfigError
from .logging_utils import configure_logging
from .selector import run_selection


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_RULE_ERRORS = 2
EXIT_INTERRUPTED = 130


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for a selection run."""
    parser = argparse.ArgumentParser(
        description="Select which rotated log file(s) to tail from glob patterns."
    )
    parser.add_argument(
        "--config",
        default=None,
        help=(
            "Path to JSON configuration file. "
            "If omitted, finder looks in current directory and executable folder."
        ),
    )
    parser.add_argument(
        "--init-config",
        metavar="PATH",
        help="Create a starter config file and exit.",
    )
    parser.add_argument(
        "--include",
        action="append",
        dest="include",
        help="Override matching.include from config (repeatable).",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        dest="exclude",
        help="Override matching.exclude from config (repeatable).",
    )
    parser.add_argument(
        "--output",
        help="Write the report to this file instead of stdout.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Log verbosity (DEBUG, INFO, WARNING, ERROR).",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write DEBUG-level logs to this file.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 when any sort rule reported an error.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the finder CLI workflow as the process entrypoint."""
    args = parse_args(argv)
    log_file = Path(args.log_file).expanduser() if args.log_file else None
    logger = configure_logging(args.log_level, log_file)
    logger.info("STEP_START: cli")

    if args.init_config:
        config_target = Path(args.init_config).expanduser()
        if config_target.exists():
            print(f"Config already exists: {config_target}", file=sys.stderr)
            return EXIT_FAILED
        write_default_config(config_target)
        logger.info("STEP_DONE: init_config")
        print(f"Created starter config: {config_target}")
        return EXIT_OK

    logger.info("STEP_START: load_config")
    config_path = resolve_config_path(args.config)
    try:
        config = load_config(config_path)
    except (OSError, ValueError) as exc:
        logger.error("STEP_FAILED: load_config")
        print(f"Failed to load config: {exc}", file=sys.stderr)
        return EXIT_FAILED
    logger.info("STEP_DONE: load_config")

    if args.include:
        config["matching"]["include"] = args.include
    if args.exclude:
        config["matching"]["exclude"] = args.exclude
    if args.output:
        config["output"]["path"] = args.output

    logger.info("STEP_START: run_selection")
    try:
        report = run_selection(config, logger)
    except KeyboardInterrupt:
        logger.warning("STEP_ABORTED: run_selection")
        print("Selection interrupted by user.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except ConfigError as exc:
        logger.error("STEP_FAILED: run_selection")
        print(f"Invalid matching criteria: {exc}", file=sys.stderr)
        return EXIT_FAILED
    logger.info("STEP_DONE: run_selection")

    pretty = bool(config["output"].get("pretty", True))
    output_path = resolve_output_path(str(config["output"].get("path", "")))
    if output_path is None:
        print(json.dumps(report, indent=2 if pretty else None, ensure_ascii=False))
    else:
        try:
            write_json_file(output_path, report, pretty=pretty)
        except OSError as exc:
            logger.error("STEP_FAILED: write_report")
            print(f"Failed to write report: {exc}", file=sys.stderr)
            return EXIT_FAILED
        print(
            f"Selection completed. Candidates: {report['stats']['candidates']} | "
            f"Selected: {report['stats']['selected']} | "
            f"Errors: {report['stats']['errors']}"
        )
        print(f"Output JSON: {output_path.resolve()}")

    logger.info("STEP_DONE: cli")
    if args.strict and report["errors"]:
        return EXIT_RULE_ERRORS
    return EXIT_OK
