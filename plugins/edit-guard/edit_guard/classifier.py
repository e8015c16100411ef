"""Coarse file categories derived from path conventions of NestJS/Prisma backends."""
from enum import Enum


class FileCategory(str, Enum):
    BACKEND = "backend"
    DATABASE = "database"
    OTHER = "other"


SOURCE_DIR_MARKER = "/src/"

# controller, service, module, guard, interceptor, pipe, exception filter
BACKEND_SUFFIXES = (
    ".controller.ts",
    ".service.ts",
    ".module.ts",
    ".guard.ts",
    ".interceptor.ts",
    ".pipe.ts",
    ".filter.ts",
)

DATABASE_DIR_MARKERS = ("/prisma/", "/migrations/")
DATABASE_SUFFIXES = (".entity.ts", ".repository.ts")


def _contains_segment(path: str, marker: str) -> bool:
    # "/src/" also matches a relative path that starts with "src/"
    return marker in path or path.startswith(marker.lstrip("/"))


def classify_path(path: str) -> FileCategory:
    """Map a file path to a FileCategory. First matching rule wins."""
    normalized = path.replace("\\", "/")

    if _contains_segment(normalized, SOURCE_DIR_MARKER) and normalized.endswith(BACKEND_SUFFIXES):
        return FileCategory.BACKEND

    if any(_contains_segment(normalized, m) for m in DATABASE_DIR_MARKERS):
        return FileCategory.DATABASE
    if normalized.endswith(DATABASE_SUFFIXES):
        return FileCategory.DATABASE

    return FileCategory.OTHER
