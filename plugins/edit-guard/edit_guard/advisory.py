"""Edit tracking (PostToolUse) and the error-handling advisory (Stop).

The advisory is a reminder printed after Claude finishes a turn in which it
touched backend or database files. It never blocks.
"""
from pathlib import Path

from .analyzer import ContentAnalysis, analyze_file, is_eligible_for_analysis
from .classifier import FileCategory, classify_path
from .events import HookEvent
from .logging_config import get_logger
from .session_store import EditRecord, SessionStore

logger = get_logger("advisory")

RULE = "-" * 56

ERROR_HANDLING_QUESTION = "Did you add logging in catch blocks before rethrowing or swallowing?"
DATA_ACCESS_QUESTION = "Are Prisma/database calls wrapped so failures surface as domain errors?"
REQUEST_HANDLER_QUESTION = "Do controller errors reach an exception filter with a consistent response?"
DOMAIN_ERROR_QUESTION = "Do the thrown exceptions map to appropriate HTTP status codes?"
ASYNC_ONLY_QUESTION = "Are awaited calls covered by error handling where they can reject?"

STOP_EVENTS = ("Stop", "SubagentStop")

DATABASE_QUESTIONS = (
    "Did you verify column names and types against the Prisma schema?",
    "Did you generate and test the migration against a local database?",
)


def track_edit(event: HookEvent, store: SessionStore) -> int:
    """Append one EditRecord per path touched by a write-like tool.

    Returns:
        Number of records appended
    """
    kind = event.tool_kind
    if not kind.is_write_like:
        return 0

    paths = event.touched_paths()
    for path in paths:
        store.append_edit(event.session_id, EditRecord.now(kind, path))
    return len(paths)


def _resolve(path: str, project_dir: Path | None) -> Path:
    candidate = Path(path)
    if project_dir is not None and not candidate.is_absolute():
        return project_dir / candidate
    return candidate


def _questions(analyses: list[ContentAnalysis]) -> list[str]:
    questions = []
    if any(a.has_error_handling_block for a in analyses):
        questions.append(ERROR_HANDLING_QUESTION)
    if any(a.has_data_access_call for a in analyses):
        questions.append(DATA_ACCESS_QUESTION)
    if any(a.has_request_handler_marker for a in analyses):
        questions.append(REQUEST_HANDLER_QUESTION)
    if any(a.has_thrown_domain_error for a in analyses):
        questions.append(DOMAIN_ERROR_QUESTION)
    if not questions and any(a.has_async_operation for a in analyses):
        questions.append(ASYNC_ONLY_QUESTION)
    return questions


def build_advisory(records: list[EditRecord], project_dir: Path | None = None) -> str | None:
    """Render the advisory for a session log, or None when nothing warrants it.

    The advisory fires when any eligible file raised an indicator, or when a
    database file was touched at all. Paths edited several times are counted
    once. Questions follow every indicator that fired, whatever the category
    of the file that raised it.
    """
    seen: set[str] = set()
    analyses: list[ContentAnalysis] = []
    backend_count = 0
    database_count = 0

    for record in records:
        if record.path in seen:
            continue
        seen.add(record.path)

        if not is_eligible_for_analysis(record.path):
            continue

        category = classify_path(record.path)
        analyses.append(analyze_file(_resolve(record.path, project_dir)))

        if category is FileCategory.BACKEND:
            backend_count += 1
        elif category is FileCategory.DATABASE:
            database_count += 1

    needs_attention = any(a.needs_attention for a in analyses)
    if not needs_attention and not database_count:
        return None

    lines = [RULE, "ERROR HANDLING SELF-CHECK", RULE]
    questions = _questions(analyses)

    if backend_count:
        lines.append("")
        lines.append(f"Backend changes: {backend_count} file(s) edited")
        lines.extend(f"  ? {q}" for q in questions)
    elif questions:
        flagged = sum(1 for a in analyses if a.needs_attention)
        lines.append("")
        lines.append(f"Code changes: {flagged} file(s) need a look")
        lines.extend(f"  ? {q}" for q in questions)

    if database_count:
        lines.append("")
        lines.append(f"Database changes: {database_count} file(s) edited")
        lines.extend(f"  ? {q}" for q in DATABASE_QUESTIONS)

    lines.append(RULE)
    return "\n".join(lines)


def generate_advisory(
    event: HookEvent,
    store: SessionStore,
    project_dir: Path | None = None,
    skip: bool = False,
) -> str | None:
    """Advisory text for the event's session, or None."""
    if skip or event.hook_event_name not in STOP_EVENTS:
        return None
    # Prevent infinite loops - the host is already continuing from a Stop hook
    if event.stop_hook_active:
        return None
    if not store.has_log(event.session_id):
        return None

    records = store.read_log(event.session_id)
    advisory = build_advisory(records, project_dir)
    if advisory:
        logger.info(f"Advisory for session {event.session_id} covering {len(records)} record(s)")
    return advisory
