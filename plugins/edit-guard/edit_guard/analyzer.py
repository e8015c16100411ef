"""Shallow risk indicators for edited source files.

This is pattern matching on raw text, not parsing. Each indicator is checked
independently, so one file can raise all five.
"""
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .logging_config import get_logger

logger = get_logger("analyzer")

SOURCE_EXTENSIONS = frozenset({".ts", ".tsx", ".js", ".jsx"})

EXCLUDED_MARKERS = (".test.", ".spec.", ".config.")
# NestJS e2e tests: app.e2e-spec.ts
EXCLUDED_STEM_SUFFIXES = ("-spec", "-test")
DECLARATION_SUFFIX = ".d.ts"
TYPES_DIR = "types"

ERROR_HANDLING_PATTERN = re.compile(r"try\s*\{|\.catch\(")
ASYNC_PATTERN = re.compile(r"\basync\s+|\bawait\s+")
DATA_ACCESS_PATTERN = re.compile(
    r"prisma\.|PrismaService|\$queryRaw|\$transaction"
    r"|\b(?:findMany|findUnique|findFirst)\b"
    r"|\b(?:create|update|delete|upsert)\("
)
REQUEST_HANDLER_PATTERN = re.compile(r"@Controller\(|export\s+class\s+\w+Controller\b")
DOMAIN_ERROR_PATTERN = re.compile(r"throw\s+new\s+\w*(?:Exception|Error)\b")


class ContentAnalysis(BaseModel):
    """Risk indicators found in one file."""

    model_config = ConfigDict(frozen=True)

    has_error_handling_block: bool = False
    has_async_operation: bool = False
    has_data_access_call: bool = False
    has_request_handler_marker: bool = False
    has_thrown_domain_error: bool = False

    @property
    def needs_attention(self) -> bool:
        return (
            self.has_error_handling_block
            or self.has_async_operation
            or self.has_data_access_call
            or self.has_request_handler_marker
            or self.has_thrown_domain_error
        )


def analyze_content(text: str) -> ContentAnalysis:
    return ContentAnalysis(
        has_error_handling_block=bool(ERROR_HANDLING_PATTERN.search(text)),
        has_async_operation=bool(ASYNC_PATTERN.search(text)),
        has_data_access_call=bool(DATA_ACCESS_PATTERN.search(text)),
        has_request_handler_marker=bool(REQUEST_HANDLER_PATTERN.search(text)),
        has_thrown_domain_error=bool(DOMAIN_ERROR_PATTERN.search(text)),
    )


def analyze_file(path: str | Path) -> ContentAnalysis:
    """Analyze the current on-disk content of path.

    Missing or unreadable files yield an all-false result.
    """
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return ContentAnalysis()
    except OSError as e:
        logger.debug(f"Skipping unreadable file {path}: {e}")
        return ContentAnalysis()
    return analyze_content(text)


def is_eligible_for_analysis(path: str) -> bool:
    """True for source files that are not tests, declarations, configs or type dirs."""
    normalized = path.replace("\\", "/")
    name = normalized.rsplit("/", 1)[-1]

    if Path(name).suffix.lower() not in SOURCE_EXTENSIONS:
        return False
    if name.endswith(DECLARATION_SUFFIX):
        return False
    if any(marker in name for marker in EXCLUDED_MARKERS):
        return False
    if Path(name).stem.endswith(EXCLUDED_STEM_SUFFIXES):
        return False
    if TYPES_DIR in normalized.split("/")[:-1]:
        return False
    return True
