"""Line-based hunk generation.

This is a cursor walk, not an LCS diff: differing lines at the same
cursor positions are reported as a removal plus an addition, and the
first matching line closes the open hunk. Interleaved changes therefore
produce many small hunks rather than unified-diff style groups with
shared context.
"""

from __future__ import annotations

from jetgit.conflict.models import ConflictRegion
from jetgit.conflict.parser import SEPARATOR
from jetgit.diff.models import DiffHunk, DiffLine, DiffResult, LineType


def generate_hunks(old_content: str, new_content: str) -> list[DiffHunk]:
    """Compare two texts line by line.

    A hunk opens at the first differing line after the last flush. The
    matching line that ends a difference is appended to the hunk as an
    unchanged line, then the hunk is flushed. Identical inputs produce
    no hunks.

    Raises:
        TypeError: If either argument is not a string
    """
    for name, value in (("old_content", old_content),
                        ("new_content", new_content)):
        if not isinstance(value, str):
            raise TypeError(
                f"{name} must be str, not {type(value).__name__}"
            )

    old_lines = old_content.split("\n")
    new_lines = new_content.split("\n")
    hunks: list[DiffHunk] = []
    hunk: DiffHunk | None = None
    old_index = new_index = 0

    while old_index < len(old_lines) or new_index < len(new_lines):
        old_line = old_lines[old_index] if old_index < len(old_lines) else None
        new_line = new_lines[new_index] if new_index < len(new_lines) else None

        if old_line == new_line:
            if hunk is not None:
                hunk.lines.append(DiffLine(
                    type=LineType.UNCHANGED,
                    content=old_line,
                    old_line_number=old_index + 1,
                    new_line_number=new_index + 1,
                ))
                hunks.append(hunk)
                hunk = None
            old_index += 1
            new_index += 1
            continue

        if hunk is None:
            hunk = DiffHunk(old_start=old_index + 1, new_start=new_index + 1)

        if old_line is not None:
            hunk.lines.append(DiffLine(
                type=LineType.REMOVED,
                content=old_line,
                old_line_number=old_index + 1,
            ))
            hunk.old_lines += 1
            old_index += 1
        if new_line is not None:
            hunk.lines.append(DiffLine(
                type=LineType.ADDED,
                content=new_line,
                new_line_number=new_index + 1,
            ))
            hunk.new_lines += 1
            new_index += 1

    if hunk is not None:
        hunks.append(hunk)
    return hunks


def hunks_from_conflicts(
    content: str,
    regions: list[ConflictRegion],
    context_lines: int = 3,
) -> list[DiffHunk]:
    """One display hunk per conflict region.

    Each hunk holds up to context_lines unchanged lines on either side,
    and every source line of the region (markers, sides and any diff3
    base section) typed as a conflict line. Lines before the separator
    carry old line numbers, lines after it new line numbers; both are
    positions in content. Regions outside content are skipped.
    """
    lines = content.split("\n")
    hunks = []

    for region in regions:
        start, end = region.start_line, region.end_line
        if end >= len(lines):
            continue

        separator = next(
            (i for i in range(start + 1, end)
             if lines[i].startswith(SEPARATOR)),
            end,
        )
        span = end - start + 1
        hunk = DiffHunk(
            old_start=start + 1,
            old_lines=span,
            new_start=start + 1,
            new_lines=span,
        )

        for i in range(max(0, start - context_lines), start):
            hunk.lines.append(DiffLine(
                type=LineType.UNCHANGED,
                content=lines[i],
                old_line_number=i + 1,
                new_line_number=i + 1,
            ))

        for i in range(start, end + 1):
            hunk.lines.append(DiffLine(
                type=LineType.CONFLICT,
                content=lines[i],
                old_line_number=i + 1 if i < separator else None,
                new_line_number=(
                    i + 1 if i == start or i > separator else None
                ),
            ))

        for i in range(end + 1, min(len(lines), end + 1 + context_lines)):
            hunk.lines.append(DiffLine(
                type=LineType.UNCHANGED,
                content=lines[i],
                old_line_number=i + 1,
                new_line_number=i + 1,
            ))

        hunks.append(hunk)

    return hunks


def build_diff_result(
    file_path: str, old_content: str, new_content: str
) -> DiffResult:
    """DiffResult for two revisions of one file."""
    return DiffResult(
        file_path=file_path,
        old_content=old_content,
        new_content=new_content,
        hunks=generate_hunks(old_content, new_content),
    )


def format_hunks(hunks: list[DiffHunk]) -> str:
    """Render hunks in a unified-diff like layout."""
    prefixes = {
        LineType.UNCHANGED: " ",
        LineType.ADDED: "+",
        LineType.REMOVED: "-",
        LineType.CONFLICT: "!",
    }
    out = []
    for hunk in hunks:
        out.append(
            f"@@ -{hunk.old_start},{hunk.old_lines} "
            f"+{hunk.new_start},{hunk.new_lines} @@"
        )
        out.extend(prefixes[line.type] + line.content for line in hunk.lines)
    return "\n".join(out)
