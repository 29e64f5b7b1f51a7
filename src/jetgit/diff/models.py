"""Data models for line diffs."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from jetgit.conflict.models import ConflictRegion


class LineType(str, Enum):
    """Role of a line within a hunk."""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    CONFLICT = "conflict"  # only in hunks built from conflict regions


class DiffLine(BaseModel):
    """One line of a hunk.

    old_line_number is set for unchanged and removed lines,
    new_line_number for unchanged and added lines (both 1-based).
    """

    type: LineType
    content: str
    old_line_number: int | None = None
    new_line_number: int | None = None


class DiffHunk(BaseModel):
    """A contiguous run of differing lines.

    old_lines and new_lines count only removed and added lines.
    """

    old_start: int
    old_lines: int = 0
    new_start: int
    new_lines: int = 0
    lines: list[DiffLine] = Field(default_factory=list)


class DiffResult(BaseModel):
    """Diff of one file between two revisions."""

    file_path: str
    old_content: str
    new_content: str
    hunks: list[DiffHunk] = Field(default_factory=list)
    has_conflicts: bool = False
    conflicts: list[ConflictRegion] | None = None
