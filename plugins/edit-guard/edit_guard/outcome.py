"""Outcome policies for hook processes.

Both hooks share the same ingestion code and differ only in what an
exception means to the host:

- advisory hooks fail open: any error becomes a silent exit 0
- the gate fails closed: an error becomes a visible message and exit 1
"""
import sys
from collections.abc import Callable
from typing import IO

from .logging_config import get_logger

logger = get_logger("outcome")

EXIT_PASS = 0
EXIT_FAIL = 1

Handler = Callable[[], int]


def run_fail_open(handler: Handler) -> int:
    """Run handler; exceptions are logged and reported as success."""
    try:
        return handler()
    except Exception:
        logger.exception("Advisory hook failed; continuing silently")
        return EXIT_PASS


def run_fail_closed(handler: Handler, stderr: IO[str] | None = None) -> int:
    """Run handler; exceptions are reported on stderr as a failure."""
    if stderr is None:
        stderr = sys.stderr
    try:
        return handler()
    except Exception as e:
        logger.exception("Gate hook failed")
        print(f"[typecheck] Gate error: {e}", file=stderr)
        return EXIT_FAIL
