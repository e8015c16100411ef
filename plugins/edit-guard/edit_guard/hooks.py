"""Entry points behind the executable hook scripts.

Each function reads one event from stdin, does its work and returns the
process exit code. The scripts under hooks/ only call these and sys.exit.
"""
import sys
from collections.abc import Mapping
from typing import IO

from .advisory import generate_advisory, track_edit
from .config import Settings, load_settings
from .errors import EventError
from .events import HookEvent, read_event
from .gate import INACTIVE_SUMMARY, format_failure, run_gate
from .logging_config import configure_logging, get_logger
from .outcome import EXIT_FAIL, EXIT_PASS, run_fail_closed, run_fail_open
from .session_store import SessionStore

logger = get_logger("hooks")


def _prepare(
    stdin: IO[str],
    environ: Mapping[str, str] | None,
) -> tuple[HookEvent, Settings, SessionStore]:
    event = read_event(stdin)
    settings = load_settings(environ, cwd=event.cwd)
    configure_logging(settings.log_dir, settings.log_level)
    return event, settings, SessionStore(settings.cache_root)


def edit_tracker_main(
    stdin: IO[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """PostToolUse: record the files touched by Write/Edit/MultiEdit."""
    stdin = stdin or sys.stdin

    def handler() -> int:
        event, _, store = _prepare(stdin, environ)
        track_edit(event, store)
        return EXIT_PASS

    return run_fail_open(handler)


def edit_advisory_main(
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Stop: print the error-handling self-check if the session warrants one."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    def handler() -> int:
        event, settings, store = _prepare(stdin, environ)
        advisory = generate_advisory(
            event,
            store,
            project_dir=settings.project_dir,
            skip=settings.skip_advisory,
        )
        if advisory:
            print(advisory, file=stdout)
        return EXIT_PASS

    return run_fail_open(handler)


def typecheck_gate_main(
    stdin: IO[str] | None = None,
    stderr: IO[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """PostToolUse: run the type check and block the host on errors."""
    stdin = stdin or sys.stdin
    stderr = stderr or sys.stderr

    def handler() -> int:
        try:
            event, settings, store = _prepare(stdin, environ)
        except EventError as e:
            # Unreadable payload: we cannot tell whether anything was written,
            # but housekeeping still runs on every invocation
            logger.warning(f"Ignoring event: {e}")
            settings = load_settings(environ)
            SessionStore(settings.cache_root).sweep_expired(settings.cache_max_age_days)
            return EXIT_PASS

        result = run_gate(event, settings, store)
        if result.skipped:
            if result.summary != INACTIVE_SUMMARY:
                print(result.summary, file=stderr)
            return EXIT_PASS

        if result.passed:
            print(f"[typecheck] {result.summary}", file=stderr)
            return EXIT_PASS

        print(format_failure(result), file=stderr)
        if settings.typecheck_warn_only:
            print("[typecheck] TYPECHECK_WARN_ONLY is set, not blocking", file=stderr)
            return EXIT_PASS
        return EXIT_FAIL

    return run_fail_closed(handler, stderr)
