# src/tasker/cli/main.py

"""
CLI entrypoint.

One invocation runs exactly one command:
parse argv -> configure logging -> open the store -> dispatch -> exit.

Exit codes: 0 on success (a missing task is a normal outcome),
2 on a usage error, 1 on any storage failure.
"""

from __future__ import annotations

import logging
import sqlite3
import sys
from collections.abc import Sequence

from .. import __version__
from ..config import get_settings
from ..logging_setup import setup_logging
from ..tasks.task_store import TaskStore, TaskStoreError
from .commands import (
    PROG,
    HelpRequested,
    UsageError,
    VersionRequested,
    dispatch,
    parse_args,
    registry,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    try:
        setup_logging(console_level=settings.console_level, log_file=settings.log_file)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    if argv is None:
        argv = sys.argv[1:]

    try:
        command = parse_args(argv)
    except HelpRequested:
        print(registry.build_usage())
        return EXIT_OK
    except VersionRequested:
        print(f"{PROG} {__version__}")
        return EXIT_OK
    except UsageError as exc:
        print(f"error: {exc}", file=sys.stderr)
        print("", file=sys.stderr)
        print(registry.build_usage(), file=sys.stderr)
        return EXIT_USAGE

    try:
        with TaskStore(settings.db_path) as store:
            dispatch(store, command)
    except (sqlite3.Error, TaskStoreError, OSError) as exc:
        logger.debug("Command %r failed", command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    return EXIT_OK


def run() -> None:
    """Console-script entry: exit with main()'s status."""
    sys.exit(main())


if __name__ == "__main__":
    run()
