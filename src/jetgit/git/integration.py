"""Glue between a Repository and the conflict and diff engines."""

from jetgit.conflict.models import ConflictRegion
from jetgit.conflict.resolver import ConflictResolver
from jetgit.core.log import logger
from jetgit.diff.engine import build_diff_result
from jetgit.diff.models import DiffResult
from jetgit.git.errors import GitError, GitErrorCodes
from jetgit.git.repository import Repository


def get_file_conflicts(
    repo: Repository,
    resolver: ConflictResolver,
    path: str,
) -> list[ConflictRegion]:
    """Read a conflicted file and auto-resolve what the rules allow.

    Args:
        repo: Repository holding the file
        resolver: Resolver with the rule chain to apply
        path: File path relative to the work tree

    Returns:
        Regions after the resolution pass

    Raises:
        GitError: If the file cannot be read
    """
    try:
        content = repo.read_file(path)
    except (OSError, UnicodeDecodeError) as e:
        raise GitError(
            f"Failed to get file conflicts for '{path}': {e}",
            code=GitErrorCodes.GET_FILE_CONFLICTS_FAILED,
        ) from e

    regions = resolver.detect_conflicts(content)
    resolved = resolver.resolve_non_conflicting_changes(regions)

    stats = resolver.get_conflict_stats(resolved)
    logger.info(
        f"Detected {stats.total} conflict(s) in {path}",
        path=path,
        auto_resolved=stats.auto_resolved,
        unresolved=stats.unresolved,
    )
    return resolved


def resolve_file(
    repo: Repository,
    resolver: ConflictResolver,
    path: str,
    regions: list[ConflictRegion],
    stage: bool = True,
) -> str:
    """Write the reassembled file and optionally stage it.

    The file is re-read immediately before reassembly; if its conflict
    layout no longer matches regions (edited in the meantime) nothing
    is written.

    Returns:
        The content written

    Raises:
        GitError: If reading, writing or staging fails, or the file
            changed since regions were detected
    """
    content = repo.read_file(path)

    current = resolver.detect_conflicts(content)
    if [(r.start_line, r.end_line) for r in current] != [
        (r.start_line, r.end_line)
        for r in sorted(regions, key=lambda r: r.start_line)
    ]:
        raise GitError(
            f"Conflicts in '{path}' changed since they were detected",
            code=GitErrorCodes.APPLY_RESOLUTION_FAILED,
        )

    resolved_content = resolver.apply_conflict_resolution(content, regions)
    try:
        repo.write_file(path, resolved_content)
    except OSError as e:
        raise GitError(
            f"Failed to apply conflict resolution to '{path}': {e}",
            code=GitErrorCodes.APPLY_RESOLUTION_FAILED,
        ) from e

    if stage and resolver.get_all_conflicts_resolved(regions):
        repo.stage([path])

    logger.info(f"Wrote resolution for {path}", path=path)
    return resolved_content


def _diff_failed(path: str, cause: GitError) -> GitError:
    return GitError(
        f"Failed to get file diff for '{path}': {cause.message}",
        code=GitErrorCodes.GET_FILE_DIFF_FAILED,
        git_output=cause.git_output,
    )


def get_file_diff(
    repo: Repository,
    path: str,
    from_ref: str = "HEAD",
    to_ref: str = "",
) -> DiffResult:
    """Diff path between two refs; an empty to_ref means the work tree.

    A side where the file does not exist diffs as empty text.

    Raises:
        GitError: GET_FILE_DIFF_FAILED if a side cannot be read
    """
    old_content = ""
    new_content = ""

    try:
        old_content = repo.show(from_ref, path)
    except GitError as e:
        if e.code != GitErrorCodes.FILE_NOT_FOUND:
            raise _diff_failed(path, e) from e
        logger.debug(f"{path} absent at {from_ref}", path=path)

    try:
        if to_ref:
            new_content = repo.show(to_ref, path)
        else:
            new_content = repo.read_file(path)
    except GitError as e:
        if e.code != GitErrorCodes.FILE_NOT_FOUND:
            raise _diff_failed(path, e) from e
        logger.debug(f"{path} absent at {to_ref or 'work tree'}", path=path)

    return build_diff_result(path, old_content, new_content)
