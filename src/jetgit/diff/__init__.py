"""Line diff hunks for file revisions and conflict regions."""

from jetgit.diff.engine import (
    build_diff_result,
    format_hunks,
    generate_hunks,
    hunks_from_conflicts,
)
from jetgit.diff.models import DiffHunk, DiffLine, DiffResult, LineType

__all__ = [
    "DiffHunk",
    "DiffLine",
    "DiffResult",
    "LineType",
    "build_diff_result",
    "format_hunks",
    "generate_hunks",
    "hunks_from_conflicts",
]
