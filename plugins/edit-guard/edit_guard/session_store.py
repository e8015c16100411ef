"""Per-session state on disk.

Each session gets a directory under the cache root:

    <cache_root>/<session_id>/
        edited-files.log    timestamp<TAB>tool<TAB>path, one line per edit
        tsc-cmd.cache       resolved type-check command
        last-errors.txt     output of the last failed type check
        last-command.txt    command of the last failed type check

Reads never raise: a missing or unreadable file means "no data yet".
Writes raise OSError and leave the policy to the caller.
"""
import re
import shutil
import time
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .config import CACHE_MAX_AGE_DAYS
from .events import ToolKind
from .logging_config import get_logger

logger = get_logger("session_store")

EDIT_LOG = "edited-files.log"
COMMAND_CACHE = "tsc-cmd.cache"
LAST_ERRORS = "last-errors.txt"
LAST_COMMAND = "last-command.txt"

_UNSAFE_ID = re.compile(r"[^A-Za-z0-9._-]")


class EditRecord(BaseModel):
    """A file touched by one tool call."""

    model_config = ConfigDict(frozen=True)

    timestamp: str
    tool: ToolKind
    path: str

    @classmethod
    def now(cls, tool: ToolKind, path: str) -> "EditRecord":
        return cls(timestamp=datetime.now(UTC).isoformat(), tool=tool, path=path)

    def to_line(self) -> str:
        path = self.path.replace("\t", " ").replace("\n", " ").replace("\r", " ")
        return f"{self.timestamp}\t{self.tool.value}\t{path}\n"

    @classmethod
    def from_line(cls, line: str) -> "EditRecord | None":
        parts = line.rstrip("\r\n").split("\t", 2)
        if len(parts) != 3 or not parts[2]:
            return None
        return cls(timestamp=parts[0], tool=ToolKind.from_name(parts[1]), path=parts[2])


class FailureRecord(BaseModel):
    """Output and command of the last failed type check."""

    command: str
    output: str


def _session_dir_name(session_id: str) -> str:
    name = _UNSAFE_ID.sub("_", session_id or "default")
    if name in ("", ".", ".."):
        return "default"
    return name


class SessionStore:
    """Session-scoped log and cache files rooted at cache_root."""

    def __init__(self, cache_root: Path):
        self.cache_root = Path(cache_root)

    def session_dir(self, session_id: str) -> Path:
        return self.cache_root / _session_dir_name(session_id)

    def _read_text(self, path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
            return None

    def _write_text(self, session_id: str, name: str, text: str) -> None:
        directory = self.session_dir(session_id)
        directory.mkdir(parents=True, exist_ok=True)
        (directory / name).write_text(text, encoding="utf-8")

    # --- edit log ---

    def append_edit(self, session_id: str, record: EditRecord) -> None:
        """Append one record to the session log.

        Append-only so concurrent hook processes never lose each other's lines.
        """
        directory = self.session_dir(session_id)
        directory.mkdir(parents=True, exist_ok=True)
        with open(directory / EDIT_LOG, "a", encoding="utf-8") as f:
            f.write(record.to_line())

    def has_log(self, session_id: str) -> bool:
        return (self.session_dir(session_id) / EDIT_LOG).is_file()

    def read_log(self, session_id: str) -> list[EditRecord]:
        """All records of the session in insertion order; [] if none."""
        text = self._read_text(self.session_dir(session_id) / EDIT_LOG)
        if not text:
            return []

        records = []
        for line in text.splitlines():
            record = EditRecord.from_line(line)
            if record is not None:
                records.append(record)
        return records

    # --- command cache ---

    def get_cached_command(self, session_id: str) -> str | None:
        text = self._read_text(self.session_dir(session_id) / COMMAND_CACHE)
        if text is None:
            return None
        return text.strip() or None

    def set_cached_command(self, session_id: str, command: str) -> None:
        self._write_text(session_id, COMMAND_CACHE, command)

    # --- last failure ---

    def write_failure(self, session_id: str, output: str, command: str) -> None:
        self._write_text(session_id, LAST_ERRORS, output)
        self._write_text(session_id, LAST_COMMAND, command)

    def read_failure(self, session_id: str) -> FailureRecord | None:
        directory = self.session_dir(session_id)
        output = self._read_text(directory / LAST_ERRORS)
        if output is None:
            return None
        command = self._read_text(directory / LAST_COMMAND) or ""
        return FailureRecord(command=command.strip(), output=output)

    # --- housekeeping ---

    def sweep_expired(
        self,
        max_age_days: int = CACHE_MAX_AGE_DAYS,
        now: float | None = None,
    ) -> int:
        """Remove session directories not modified within max_age_days.

        Returns:
            Number of directories removed
        """
        if now is None:
            now = time.time()
        cutoff = now - max_age_days * 24 * 60 * 60

        try:
            entries = list(self.cache_root.iterdir())
        except OSError:
            return 0

        removed = 0
        for entry in entries:
            try:
                if not entry.is_dir() or entry.stat().st_mtime >= cutoff:
                    continue
                shutil.rmtree(entry)
                removed += 1
            except OSError as e:
                logger.warning(f"Could not remove expired session dir {entry}: {e}")

        if removed:
            logger.info(f"Removed {removed} expired session dir(s) from {self.cache_root}")
        return removed
