"""Type-check gate: run tsc after write-like edits and block on type errors.

Command resolution inspects the project root once per session and caches the
result. A run fails when tsc exits non-zero OR prints an "error TS" line;
some configurations exit 0 while still reporting errors, so the output wins.

Problems running the check at all (no project dir, no executable, tsc not installed, timeout)
pass through with a warning. The gate exists to catch introduced errors,
not to fail on an unrelated environment.
"""
import shlex
import shutil
import subprocess
from pathlib import Path

from pydantic import BaseModel

from .analyzer import SOURCE_EXTENSIONS
from .config import Settings
from .errors import GateError
from .events import HookEvent
from .logging_config import get_logger
from .session_store import SessionStore

logger = get_logger("gate")

APP_CONFIG = "tsconfig.app.json"
BASE_CONFIG = "tsconfig.json"
DEFAULT_COMMAND = "npx tsc --noEmit"

TYPE_ERROR_MARKER = "error TS"
MAX_DISPLAYED_ERRORS = 10
COMMAND_NOT_FOUND = 127
# npx prints this when the package providing the binary is not installed
NPX_UNRESOLVED = "could not determine executable to run"

BANNER = "=" * 56
INACTIVE_SUMMARY = "No source files edited"


class GateResult(BaseModel):
    """Outcome of one gate invocation."""

    passed: bool
    skipped: bool = False
    command: str | None = None
    exit_code: int | None = None
    error_lines: list[str] = []
    output: str = ""
    summary: str


def is_source_path(path: str) -> bool:
    return Path(path).suffix.lower() in SOURCE_EXTENSIONS


def should_check(event: HookEvent) -> bool:
    """True for write-like tools touching at least one source file."""
    if not event.tool_kind.is_write_like:
        return False
    return any(is_source_path(p) for p in event.touched_paths())


def detect_command(project_dir: Path) -> str:
    if (project_dir / APP_CONFIG).is_file():
        return f"npx tsc --project {APP_CONFIG} --noEmit"
    if (project_dir / BASE_CONFIG).is_file():
        return f"npx tsc --project {BASE_CONFIG} --noEmit"
    return DEFAULT_COMMAND


def resolve_command(
    project_dir: Path,
    store: SessionStore,
    session_id: str,
    force: bool = False,
) -> str:
    """Cached command for the session, or a freshly detected one (then cached)."""
    if not force:
        cached = store.get_cached_command(session_id)
        if cached:
            return cached

    command = detect_command(project_dir)
    store.set_cached_command(session_id, command)
    logger.info(f"Resolved type-check command for session {session_id}: {command}")
    return command


def extract_error_lines(output: str) -> list[str]:
    return [line for line in output.splitlines() if TYPE_ERROR_MARKER in line]


def is_failure(exit_code: int, output: str) -> bool:
    return exit_code != 0 or TYPE_ERROR_MARKER in output


def _executable_available(command: str) -> bool:
    try:
        argv = shlex.split(command)
    except ValueError:
        return False
    return bool(argv) and shutil.which(argv[0]) is not None


def _skip(summary: str, command: str | None = None) -> GateResult:
    logger.warning(summary)
    return GateResult(passed=True, skipped=True, command=command, summary=summary)


def run_typecheck(
    command: str,
    project_dir: Path,
    timeout: float | None = None,
) -> GateResult:
    """Run command from project_dir and judge its output."""
    if not _executable_available(command):
        return _skip(f"[typecheck] Warning: {command.split()[0]} not found, skipping type check", command)

    try:
        result = subprocess.run(
            command,
            shell=True,
            cwd=project_dir,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return _skip(f"[typecheck] Warning: timed out after {timeout:g}s", command)

    output = (result.stdout or "") + (result.stderr or "")

    if TYPE_ERROR_MARKER not in output:
        if result.returncode == COMMAND_NOT_FOUND:
            return _skip("[typecheck] Warning: command not found, skipping type check", command)
        if result.returncode != 0 and NPX_UNRESOLVED in output:
            return _skip("[typecheck] Warning: tsc not installed, skipping type check", command)

    if not is_failure(result.returncode, output):
        return GateResult(
            passed=True,
            command=command,
            exit_code=result.returncode,
            output=output,
            summary="TypeScript check passed",
        )

    error_lines = extract_error_lines(output)
    count = len(error_lines)
    summary = (
        f"TypeScript check found {count} error(s)"
        if count
        else f"TypeScript check failed with exit code {result.returncode}"
    )
    return GateResult(
        passed=False,
        command=command,
        exit_code=result.returncode,
        error_lines=error_lines,
        output=output,
        summary=summary,
    )


def format_failure(result: GateResult) -> str:
    """Delimited block with the first errors and a count of the rest."""
    lines = [BANNER, f"TYPE CHECK FAILED: {result.summary}", f"Command: {result.command}", BANNER]

    shown = result.error_lines[:MAX_DISPLAYED_ERRORS]
    if shown:
        lines.extend(shown)
        remaining = len(result.error_lines) - len(shown)
        if remaining > 0:
            lines.append(f"... and {remaining} more error(s)")
    else:
        # Non-zero exit without marker lines: show the tail of the raw output
        tail = result.output.strip().splitlines()[-MAX_DISPLAYED_ERRORS:]
        lines.extend(tail)

    lines.append(BANNER)
    lines.append("Fix these type errors before continuing.")
    return "\n".join(lines)


def run_gate(event: HookEvent, settings: Settings, store: SessionStore) -> GateResult:
    """Full gate flow for one host event.

    Raises:
        GateError: the failure could not be persisted to the session cache
    """
    store.sweep_expired(settings.cache_max_age_days)

    if not should_check(event):
        return GateResult(passed=True, skipped=True, summary=INACTIVE_SUMMARY)

    if settings.typecheck_disabled:
        return _skip("[typecheck] Disabled via TYPECHECK_DISABLE")

    project_dir = settings.project_dir
    if not project_dir.is_dir():
        return _skip(f"[typecheck] Warning: project dir {project_dir} not found, skipping type check")

    try:
        command = resolve_command(project_dir, store, event.session_id, settings.force_redetect)
    except OSError as e:
        raise GateError(f"could not cache type-check command: {e}") from e

    result = run_typecheck(command, project_dir, settings.typecheck_timeout)
    logger.info(f"Session {event.session_id}: {result.summary}")

    if not result.passed:
        try:
            store.write_failure(event.session_id, result.output, command)
        except OSError as e:
            raise GateError(f"could not save type-check output: {e}") from e

    return result
