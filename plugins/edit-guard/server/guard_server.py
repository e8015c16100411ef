#!/usr/bin/env python3
"""
MCP server for inspecting edit-guard session state.

The hooks leave their state in the session cache directory: the log of
edited files and, after a failed type check, the raw compiler output and the
command that produced it. These tools let Claude (or the user) read that
state back instead of re-running the check:

- session_edits: files touched this session, with their category
- last_typecheck_failure: errors from the most recent failed type check
- review_session: the error-handling self-check, on demand
"""
import sys
from pathlib import Path

from fastmcp import FastMCP
from pydantic import BaseModel, Field

# Make the edit_guard package importable when run straight from the plugin
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from edit_guard.advisory import build_advisory
from edit_guard.classifier import classify_path
from edit_guard.config import load_settings
from edit_guard.gate import extract_error_lines
from edit_guard.session_store import SessionStore


class SessionEdit(BaseModel):
    """A file touched during the session."""

    timestamp: str
    tool: str
    path: str
    category: str


class TypecheckFailure(BaseModel):
    """The most recent failed type check of a session."""

    found: bool
    command: str
    error_count: int
    error_lines: list[str]
    output: str


class SessionReview(BaseModel):
    """Advisory for the session, if any."""

    needs_attention: bool
    edits: int
    advisory: str


mcp = FastMCP(
    name="edit-guard",
    version="1.0.0",
    instructions="""Inspection tools for the edit-guard hooks.

Use last_typecheck_failure after the type-check gate blocks an edit to read the
full compiler output instead of re-running tsc. Use review_session before
finishing a task that touched controllers, services or Prisma code.""",
)


def get_store() -> SessionStore:
    return SessionStore(load_settings().cache_root)


@mcp.tool()
def session_edits(
    session_id: str = Field(description="Session identifier from the hook payload."),
) -> list[SessionEdit]:
    """List the files edited in a session, oldest first, with their category."""
    return [
        SessionEdit(
            timestamp=record.timestamp,
            tool=record.tool.value,
            path=record.path,
            category=classify_path(record.path).value,
        )
        for record in get_store().read_log(session_id)
    ]


@mcp.tool()
def last_typecheck_failure(
    session_id: str = Field(description="Session identifier from the hook payload."),
) -> TypecheckFailure:
    """Return the output of the most recent failed type check in a session."""
    failure = get_store().read_failure(session_id)
    if failure is None:
        return TypecheckFailure(found=False, command="", error_count=0, error_lines=[], output="")

    error_lines = extract_error_lines(failure.output)
    return TypecheckFailure(
        found=True,
        command=failure.command,
        error_count=len(error_lines),
        error_lines=error_lines,
        output=failure.output,
    )


@mcp.tool()
def review_session(
    session_id: str = Field(description="Session identifier from the hook payload."),
) -> SessionReview:
    """Render the error-handling self-check for the files edited in a session."""
    settings = load_settings()
    records = SessionStore(settings.cache_root).read_log(session_id)
    advisory = build_advisory(records, settings.project_dir)

    if advisory is None:
        return SessionReview(
            needs_attention=False,
            edits=len(records),
            advisory="Nothing to review: no backend or database files need attention.",
        )
    return SessionReview(needs_attention=True, edits=len(records), advisory=advisory)


if __name__ == "__main__":
    mcp.run(transport="stdio")
