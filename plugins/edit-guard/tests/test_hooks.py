"""End-to-end tests for the hook entry points and their outcome policies."""

import io
import json
import os
import time

import pytest

from edit_guard.advisory import DATA_ACCESS_QUESTION
from edit_guard.errors import GateError
from edit_guard.hooks import edit_advisory_main, edit_tracker_main, typecheck_gate_main
from edit_guard.outcome import EXIT_FAIL, EXIT_PASS, run_fail_closed, run_fail_open


def _payload(tool_name="Edit", file_path=None, session_id="session-1", hook_event_name="PostToolUse"):
    tool_input = {"file_path": file_path} if file_path else {}
    return io.StringIO(json.dumps({
        "session_id": session_id,
        "hook_event_name": hook_event_name,
        "tool_name": tool_name,
        "tool_input": tool_input,
    }))


def _stop(stop_hook_active=False):
    return io.StringIO(json.dumps({
        "session_id": "session-1",
        "hook_event_name": "Stop",
        "stop_hook_active": stop_hook_active,
    }))


def _write(project, relative, text):
    path = project / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return str(path)


# ============================================================================
# Tests: Outcome policies
# ============================================================================

class TestOutcomePolicies:

    def test_fail_open_returns_handler_code(self):
        assert run_fail_open(lambda: 0) == EXIT_PASS

    def test_fail_open_swallows_errors(self):
        def boom():
            raise RuntimeError("disk on fire")
        assert run_fail_open(boom) == EXIT_PASS

    def test_fail_closed_reports_errors(self):
        stderr = io.StringIO()

        def boom():
            raise GateError("could not save")
        assert run_fail_closed(boom, stderr) == EXIT_FAIL
        assert "could not save" in stderr.getvalue()

    def test_fail_closed_passes_through_codes(self):
        assert run_fail_closed(lambda: EXIT_PASS, io.StringIO()) == EXIT_PASS
        assert run_fail_closed(lambda: EXIT_FAIL, io.StringIO()) == EXIT_FAIL


# ============================================================================
# Tests: Advisory path
# ============================================================================

class TestAdvisoryHooks:

    def test_empty_session_prints_nothing(self, environ):
        stdout = io.StringIO()
        assert edit_advisory_main(_stop(), stdout, environ) == EXIT_PASS
        assert stdout.getvalue() == ""

    def test_tracker_then_advisory(self, environ, project):
        path = _write(project, "src/users/users.service.ts", "return this.prisma.user.findMany();")
        assert edit_tracker_main(_payload("Edit", path), environ) == EXIT_PASS

        stdout = io.StringIO()
        assert edit_advisory_main(_stop(), stdout, environ) == EXIT_PASS
        output = stdout.getvalue()
        assert "Backend changes: 1 file(s) edited" in output
        assert DATA_ACCESS_QUESTION in output
        assert "Database changes" not in output

    def test_database_only(self, environ, project):
        path = _write(project, "src/users/user.entity.ts", "export class User {}")
        edit_tracker_main(_payload("Write", path), environ)

        stdout = io.StringIO()
        edit_advisory_main(_stop(), stdout, environ)
        output = stdout.getvalue()
        assert "Database changes: 1 file(s) edited" in output
        assert "Backend changes" not in output

    def test_continuing_from_stop_hook_prints_nothing(self, environ, project):
        path = _write(project, "src/users/user.entity.ts", "export class User {}")
        edit_tracker_main(_payload("Write", path), environ)

        stdout = io.StringIO()
        assert edit_advisory_main(_stop(stop_hook_active=True), stdout, environ) == EXIT_PASS
        assert stdout.getvalue() == ""

    def test_skip_reminder_env(self, environ, project):
        path = _write(project, "src/users/user.entity.ts", "export class User {}")
        edit_tracker_main(_payload("Write", path), environ)

        stdout = io.StringIO()
        edit_advisory_main(_stop(), stdout, {**environ, "SKIP_ERROR_REMINDER": "true"})
        assert stdout.getvalue() == ""

    @pytest.mark.parametrize("raw", ["", "{not json", "[]"])
    def test_malformed_payload_is_silent_success(self, environ, raw):
        stdout = io.StringIO()
        assert edit_tracker_main(io.StringIO(raw), environ) == EXIT_PASS
        assert edit_advisory_main(io.StringIO(raw), stdout, environ) == EXIT_PASS
        assert stdout.getvalue() == ""

    def test_unwritable_cache_is_silent_success(self, environ, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        env = {**environ, "EDIT_GUARD_CACHE_DIR": str(blocker / "cache")}
        assert edit_tracker_main(_payload("Edit", "src/a.ts"), env) == EXIT_PASS


# ============================================================================
# Tests: Gate path
# ============================================================================

class TestTypecheckGateHook:

    def test_pass(self, environ, fake_tsc):
        stderr = io.StringIO()
        assert typecheck_gate_main(_payload("Edit", "src/a.ts"), stderr, environ) == EXIT_PASS
        assert "TypeScript check passed" in stderr.getvalue()

    def test_marker_with_zero_exit_blocks(self, environ, fake_tsc, cache_root):
        fake_tsc("src/a.ts(3,1): error TS2304: Cannot find name 'foo'.\n", exit_code=0)
        stderr = io.StringIO()

        assert typecheck_gate_main(_payload("Edit", "src/a.ts"), stderr, environ) == EXIT_FAIL
        output = stderr.getvalue()
        assert "TYPE CHECK FAILED" in output
        assert "error TS2304" in output
        assert (cache_root / "session-1" / "last-errors.txt").is_file()
        assert (cache_root / "session-1" / "last-command.txt").read_text() == "npx tsc --noEmit"

    def test_warn_only_does_not_block(self, environ, fake_tsc):
        fake_tsc("src/a.ts(3,1): error TS2304: Cannot find name 'foo'.\n", exit_code=2)
        stderr = io.StringIO()
        env = {**environ, "TYPECHECK_WARN_ONLY": "1"}

        assert typecheck_gate_main(_payload("Edit", "src/a.ts"), stderr, env) == EXIT_PASS
        assert "error TS2304" in stderr.getvalue()

    def test_non_source_edit_is_silent_noop(self, environ, fake_tsc):
        fake_tsc("x.ts(1,1): error TS1000: would fail\n", exit_code=2)
        stderr = io.StringIO()
        assert typecheck_gate_main(_payload("Edit", "README.md"), stderr, environ) == EXIT_PASS
        assert stderr.getvalue() == ""

    def test_malformed_payload_passes(self, environ):
        stderr = io.StringIO()
        assert typecheck_gate_main(io.StringIO("nope"), stderr, environ) == EXIT_PASS

    def test_malformed_payload_still_sweeps(self, environ, cache_root):
        old = cache_root / "stale-session"
        old.mkdir(parents=True)
        then = time.time() - 8 * 24 * 60 * 60
        os.utime(old, (then, then))

        assert typecheck_gate_main(io.StringIO("nope"), io.StringIO(), environ) == EXIT_PASS
        assert not old.exists()

    def test_unsaveable_failure_blocks(self, environ, fake_tsc, tmp_path):
        fake_tsc("src/a.ts(3,1): error TS2304: Cannot find name 'foo'.\n", exit_code=2)
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        env = {**environ, "EDIT_GUARD_CACHE_DIR": str(blocker / "cache")}
        stderr = io.StringIO()

        assert typecheck_gate_main(_payload("Edit", "src/a.ts"), stderr, env) == EXIT_FAIL
        assert "Gate error" in stderr.getvalue()
