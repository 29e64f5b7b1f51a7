"""Repository capability used around the conflict engine."""

from __future__ import annotations

import shlex
from pathlib import Path
from typing import Protocol, runtime_checkable

from jetgit.core.log import logger
from jetgit.core.runner import Runner
from jetgit.git.errors import GitError, GitErrorCodes


@runtime_checkable
class Repository(Protocol):
    """What the resolve workflow needs from version control."""

    def conflicted_files(self) -> list[str]:
        """Paths with unmerged entries, relative to the work tree."""
        ...

    def read_file(self, path: str) -> str:
        """Working-tree content of path."""
        ...

    def write_file(self, path: str, content: str) -> None:
        """Replace the working-tree content of path."""
        ...

    def show(self, ref: str, path: str) -> str:
        """Content of path at ref."""
        ...

    def stage(self, paths: list[str]) -> None:
        """Add paths to the index, marking them resolved."""
        ...


class GitRepository:
    """Repository backed by the git command line."""

    def __init__(self, workdir: Path, runner: Runner | None = None):
        """Initialize repository.

        Args:
            workdir: Any directory inside the work tree

        Raises:
            GitError: If workdir is not inside a git work tree
        """
        self.runner = runner or Runner()
        self.workdir = Path(workdir)
        result = self.runner.execute(
            "git rev-parse --show-toplevel", cwd=self.workdir, check=False
        )
        if result.exited != 0:
            raise GitError(
                f"Not a git repository: {self.workdir}",
                code=GitErrorCodes.REPOSITORY_NOT_FOUND,
                recoverable=False,
                git_output=result.stderr,
            )
        self.root = Path(result.stdout.strip())

    def _git(self, args: str) -> str:
        # Untranslated messages; show() inspects stderr
        result = self.runner.execute(
            f"git {args}", cwd=self.root, check=False, env={"LC_ALL": "C"}
        )
        if result.exited != 0:
            raise GitError(
                f"git {args} failed: {result.stderr.strip()}",
                git_output=result.stderr,
            )
        return result.stdout

    def conflicted_files(self) -> list[str]:
        output = self._git("diff --name-only --diff-filter=U")
        files = [line for line in output.splitlines() if line.strip()]
        logger.debug("Found conflicted files", count=len(files))
        return files

    def read_file(self, path: str) -> str:
        file_path = self.root / path
        try:
            # newline="" so CRLF endings survive a read/write round trip
            with open(file_path, encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError as e:
            raise GitError(
                f"File not found: {path}",
                code=GitErrorCodes.FILE_NOT_FOUND,
            ) from e

    def write_file(self, path: str, content: str) -> None:
        file_path = self.root / path
        # newline="" keeps line endings exactly as given
        with open(file_path, "w", encoding="utf-8", newline="") as f:
            f.write(content)

    def show(self, ref: str, path: str) -> str:
        """Content of path at ref; ":1", ":2" and ":3" name index stages.

        Raises:
            GitError: FILE_NOT_FOUND if ref exists but lacks path,
                COMMAND_FAILED for an unknown ref or other failure
        """
        spec = f"{ref}:{path}"
        try:
            return self._git(f"show {shlex.quote(spec)}")
        except GitError as e:
            # git names the path in every "not at this ref" message
            if f"path '{path}'" not in e.git_output:
                raise
            raise GitError(
                f"File not found at {ref}: {path}",
                code=GitErrorCodes.FILE_NOT_FOUND,
                git_output=e.git_output,
            ) from e

    def stage(self, paths: list[str]) -> None:
        if not paths:
            return
        quoted = " ".join(shlex.quote(p) for p in paths)
        self._git(f"add -- {quoted}")
        logger.info("Staged resolved files", paths=paths)
