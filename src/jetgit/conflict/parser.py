"""Parse git conflict markers into conflict regions."""

from jetgit.conflict.models import ConflictRegion
from jetgit.core.log import logger

START_MARKER = "<<<<<<<"
BASE_MARKER = "|||||||"
SEPARATOR = "======="
END_MARKER = ">>>>>>>"


def _find(lines: list[str], prefix: str, start: int) -> int | None:
    """Index of the first line at or after start beginning with prefix."""
    for j in range(start, len(lines)):
        if lines[j].startswith(prefix):
            return j
    return None


def parse_conflict_markers(
    content: str,
    diff3: bool = False
) -> list[ConflictRegion]:
    """Find every conflict block in content.

    Lines are split on "\\n" only. A block whose separator or closing
    marker is missing is skipped and scanning resumes on the line after
    its opening marker, so one damaged block never hides the others.

    Args:
        content: Full file text, possibly containing conflict markers
        diff3: Split a ||||||| section off the current side and keep it
            as base_content

    Returns:
        Regions in file order, non-overlapping

    Raises:
        TypeError: If content is not a string
    """
    if not isinstance(content, str):
        raise TypeError(
            f"content must be str, not {type(content).__name__}"
        )

    regions = []
    lines = content.split("\n")
    i = 0

    while i < len(lines):
        if not lines[i].startswith(START_MARKER):
            i += 1
            continue

        start = i
        separator = _find(lines, SEPARATOR, start + 1)
        if separator is None:
            logger.debug(
                "Skipping conflict without separator", line=start
            )
            i = start + 1
            continue

        end = _find(lines, END_MARKER, separator + 1)
        if end is None:
            logger.debug(
                "Skipping conflict without end marker", line=start
            )
            i = start + 1
            continue

        current_end = separator
        base_content = None
        if diff3:
            base = _find(lines[:separator], BASE_MARKER, start + 1)
            if base is not None:
                current_end = base
                base_content = "\n".join(lines[base + 1:separator])

        regions.append(ConflictRegion(
            start_line=start,
            end_line=end,
            current_content="\n".join(lines[start + 1:current_end]),
            incoming_content="\n".join(lines[separator + 1:end]),
            base_content=base_content,
            current_label=lines[start][len(START_MARKER):].strip(),
            incoming_label=lines[end][len(END_MARKER):].strip(),
        ))

        i = end + 1

    logger.trace("Parsed conflict markers", regions=len(regions))
    return regions
