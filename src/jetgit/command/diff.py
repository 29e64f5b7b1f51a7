"""Diff command - print line hunks between two files."""

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import CliPositionalArg

from jetgit.core.log import logger
from jetgit.diff.engine import build_diff_result, format_hunks


class DiffCommand(BaseModel):
    """Show the hunks between two versions of a file."""

    old_file: CliPositionalArg[Path] = Field(description="Original version")
    new_file: CliPositionalArg[Path] = Field(description="Changed version")

    async def run_workflow(self, state: "State") -> int:  # noqa: ARG002
        """Print hunks for old_file -> new_file.

        Returns:
            Exit code (0=printed, 1=a file could not be read)
        """
        try:
            old_content = self.old_file.read_text(encoding="utf-8")
            new_content = self.new_file.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot read input: {e}")
            return 1

        result = build_diff_result(
            str(self.new_file), old_content, new_content
        )
        logger.debug(
            f"{len(result.hunks)} hunk(s)", file_path=result.file_path
        )

        if result.hunks:
            print(f"--- {self.old_file}")
            print(f"+++ {self.new_file}")
            print(format_hunks(result.hunks))
        return 0
