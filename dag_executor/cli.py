#!/usr/bin/env python3
"""CLI for the DAG executor."""

import argparse
import asyncio
import sys

from .config import Settings, parse_max_workers
from .errors import ConfigMissing, DagExecutorError
from .reporter import ConsoleReporter

USAGE_HINT = "Usage: dag-executor <config.yaml> [--dry-run]"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dag-executor",
        description="Run shell tasks in parallel, respecting their dependencies",
    )
    parser.add_argument(
        "config",
        nargs="?",
        help="Path to the YAML file declaring the tasks",
    )
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Validate and show a possible execution order without running anything",
    )
    parser.add_argument(
        "--max-workers",
        "-c",
        default=None,
        help="Maximum commands running at once (default: $DAG_EXECUTOR_MAX_WORKERS or CPU count)",
    )
    parser.add_argument(
        "--workdir",
        "-C",
        default=None,
        help="Directory the commands run in (default: current directory)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except DagExecutorError as e:
        ConsoleReporter().error(f"Fatal error: {e}")
        return 1

    reporter = ConsoleReporter(color=settings.color and not args.no_color)
    workdir = args.workdir or settings.workdir

    from .commands import CommandExecutor
    from .executor import dry_run, execute_config

    try:
        if not args.config:
            raise ConfigMissing(f"Configuration file path is missing. {USAGE_HINT}")

        max_workers = settings.max_workers
        if args.max_workers is not None:
            max_workers = parse_max_workers(args.max_workers)

        if args.dry_run:
            reporter.info("Running in dry-run mode.")
            asyncio.run(dry_run(args.config, reporter=reporter))
        else:
            asyncio.run(
                execute_config(
                    args.config,
                    max_workers=max_workers,
                    reporter=reporter,
                    command_executor=CommandExecutor(cwd=workdir),
                )
            )
    except DagExecutorError as e:
        reporter.error(f"Fatal error: {e}")
        return 1
    except KeyboardInterrupt:
        reporter.warn("Interrupted.")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
