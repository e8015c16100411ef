"""Environment-driven settings for the edit-guard hooks.

Hooks are spawned by the host with a minimal environment, so everything is
read from environment variables with defaults that work out of the box:

- CLAUDE_PROJECT_DIR: project root (falls back to the event cwd, then os.getcwd())
- EDIT_GUARD_CACHE_DIR: session cache root (default: ~/.claude/tsc-cache)
- EDIT_GUARD_LOG_DIR: log directory (default: ~/.claude/edit-guard/logs)
- EDIT_GUARD_LOG_LEVEL: log level name (default: INFO)
- EDIT_GUARD_FORCE_REDETECT: ignore the cached type-check command
- EDIT_GUARD_TYPECHECK_TIMEOUT: seconds before the check is abandoned
- TYPECHECK_DISABLE / TYPECHECK_WARN_ONLY: gate modes
- SKIP_ERROR_REMINDER: silence the Stop advisory
"""
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel

DEFAULT_CACHE_DIR = "~/.claude/tsc-cache"
DEFAULT_LOG_DIR = "~/.claude/edit-guard/logs"
CACHE_MAX_AGE_DAYS = 7

_TRUTHY = ("1", "true", "yes")


class Settings(BaseModel):
    """Resolved configuration for one hook invocation."""

    project_dir: Path
    cache_root: Path
    log_dir: Path
    log_level: str = "INFO"
    force_redetect: bool = False
    typecheck_timeout: float | None = None
    typecheck_disabled: bool = False
    typecheck_warn_only: bool = False
    skip_advisory: bool = False
    cache_max_age_days: int = CACHE_MAX_AGE_DAYS


def _flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() in _TRUTHY


def _timeout(raw: str) -> float | None:
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def load_settings(
    environ: Mapping[str, str] | None = None,
    cwd: str | None = None,
) -> Settings:
    """Build settings from the environment.

    Args:
        environ: Mapping to read from (default: os.environ)
        cwd: Working directory reported by the host event, used when
            CLAUDE_PROJECT_DIR is unset
    """
    if environ is None:
        environ = os.environ

    project_dir = environ.get("CLAUDE_PROJECT_DIR") or cwd or os.getcwd()
    cache_root = environ.get("EDIT_GUARD_CACHE_DIR") or DEFAULT_CACHE_DIR
    log_dir = environ.get("EDIT_GUARD_LOG_DIR") or DEFAULT_LOG_DIR

    return Settings(
        project_dir=Path(project_dir),
        cache_root=Path(os.path.expanduser(cache_root)),
        log_dir=Path(os.path.expanduser(log_dir)),
        log_level=environ.get("EDIT_GUARD_LOG_LEVEL", "INFO").upper() or "INFO",
        force_redetect=_flag(environ, "EDIT_GUARD_FORCE_REDETECT"),
        typecheck_timeout=_timeout(environ.get("EDIT_GUARD_TYPECHECK_TIMEOUT", "")),
        typecheck_disabled=_flag(environ, "TYPECHECK_DISABLE"),
        typecheck_warn_only=_flag(environ, "TYPECHECK_WARN_ONLY"),
        skip_advisory=_flag(environ, "SKIP_ERROR_REMINDER"),
    )
