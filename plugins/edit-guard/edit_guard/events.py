"""Hook payload parsing shared by the advisory and gate hooks."""
import json
from enum import Enum
from typing import IO, Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .errors import EventError


class ToolKind(str, Enum):
    """Tool names the hooks care about. Anything else is OTHER."""

    WRITE = "Write"
    EDIT = "Edit"
    MULTI_EDIT = "MultiEdit"
    OTHER = "other"

    @classmethod
    def from_name(cls, name: str | None) -> "ToolKind":
        for kind in cls:
            if kind is not cls.OTHER and kind.value == name:
                return kind
        return cls.OTHER

    @property
    def is_write_like(self) -> bool:
        return self is not ToolKind.OTHER


class HookEvent(BaseModel):
    """A single event delivered by the host on stdin."""

    model_config = ConfigDict(extra="ignore")

    session_id: str = "default"
    hook_event_name: str = ""
    tool_name: str = ""
    tool_input: dict[str, Any] = {}
    cwd: str | None = None
    stop_hook_active: bool = False

    @field_validator("session_id", mode="before")
    @classmethod
    def _default_session(cls, value: Any) -> Any:
        return value or "default"

    @field_validator("tool_input", mode="before")
    @classmethod
    def _tool_input_dict(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}

    @property
    def tool_kind(self) -> ToolKind:
        return ToolKind.from_name(self.tool_name)

    def touched_paths(self) -> list[str]:
        """File paths touched by this tool call, in payload order, without duplicates.

        Simple edits carry `file_path` (or `path`); batched edits carry a
        list of edit objects that may each name their own path.
        """
        candidates = [self.tool_input.get("file_path"), self.tool_input.get("path")]
        edits = self.tool_input.get("edits")
        if isinstance(edits, list):
            for edit in edits:
                if isinstance(edit, dict):
                    candidates.append(edit.get("file_path"))
                    candidates.append(edit.get("path"))

        paths: list[str] = []
        for candidate in candidates:
            if isinstance(candidate, str) and candidate and candidate not in paths:
                paths.append(candidate)
        return paths


def parse_event(raw: str) -> HookEvent:
    """Parse a JSON payload into a HookEvent."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise EventError(f"payload is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise EventError("payload is not a JSON object")
    try:
        return HookEvent.model_validate(data)
    except ValidationError as e:
        raise EventError(str(e)) from e


def read_event(stream: IO[str]) -> HookEvent:
    return parse_event(stream.read())
