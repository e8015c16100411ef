"""Shared fixtures for edit-guard tests.

Nothing here touches the real home directory or a real TypeScript toolchain:
cache and log directories live under tmp_path, and `npx` is replaced by a
shell script that prints whatever the test asks for.
"""

import os
import stat

import pytest

from edit_guard.events import HookEvent
from edit_guard.session_store import SessionStore

FAKE_NPX = """#!/bin/sh
printf '%s' "$FAKE_TSC_OUTPUT"
exit "${FAKE_TSC_EXIT:-0}"
"""


@pytest.fixture
def cache_root(tmp_path):
    return tmp_path / "tsc-cache"


@pytest.fixture
def store(cache_root):
    return SessionStore(cache_root)


@pytest.fixture
def project(tmp_path):
    """An empty project root."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def environ(project, cache_root, tmp_path):
    """Environment mapping pointing every directory into tmp_path."""
    return {
        "CLAUDE_PROJECT_DIR": str(project),
        "EDIT_GUARD_CACHE_DIR": str(cache_root),
        "EDIT_GUARD_LOG_DIR": str(tmp_path / "logs"),
    }


@pytest.fixture
def fake_tsc(tmp_path, monkeypatch):
    """Put a fake `npx` first on PATH; returns a setter for its output and exit code."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    npx = bin_dir / "npx"
    npx.write_text(FAKE_NPX)
    npx.chmod(npx.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def configure(output: str = "", exit_code: int = 0) -> None:
        monkeypatch.setenv("FAKE_TSC_OUTPUT", output)
        monkeypatch.setenv("FAKE_TSC_EXIT", str(exit_code))

    configure()
    return configure


@pytest.fixture
def make_event():
    """Build a HookEvent for a tool call."""

    def build(
        tool_name: str = "Edit",
        file_path: str | None = None,
        session_id: str = "session-1",
        hook_event_name: str = "PostToolUse",
        stop_hook_active: bool = False,
        **tool_input,
    ) -> HookEvent:
        if file_path is not None:
            tool_input["file_path"] = file_path
        return HookEvent(
            session_id=session_id,
            hook_event_name=hook_event_name,
            tool_name=tool_name,
            tool_input=tool_input,
            stop_hook_active=stop_hook_active,
        )

    return build
