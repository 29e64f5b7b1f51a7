"""Resolve command - auto-resolve every conflicted file in a repository."""

from pathlib import Path

from pydantic import BaseModel, Field

from jetgit.core.log import logger


class ResolveCommand(BaseModel):
    """Detect conflicts in all unmerged files and resolve what is safe.

    Files whose conflicts are all resolved are written back without
    markers and staged. Files still holding conflicts are listed for
    manual work and left untouched unless write-partial is set.
    """

    workdir: Path | None = Field(
        default=None,
        description="Repository working tree (overrides config.git.workdir)",
    )
    write_partial: bool | None = Field(
        default=None,
        alias="write-partial",
        description=(
            "Write auto-resolved regions into files that still have "
            "unresolved conflicts"
        ),
    )
    stage: bool | None = Field(
        default=None,
        description="Stage fully resolved files (overrides config)",
    )

    async def run_workflow(self, state: "State") -> int:
        """Run the resolve workflow.

        Args:
            state: State instance

        Returns:
            Exit code (0=nothing left to resolve, 1=manual work remains)
        """
        git_config = state.config.git
        if self.workdir is not None:
            git_config.workdir = self.workdir
        if self.write_partial is not None:
            git_config.write_partial = self.write_partial
        if self.stage is not None:
            git_config.stage_resolved = self.stage

        from jetgit.workflow.graph import run_resolve

        summary = await run_resolve(state)

        for path in summary.resolved_files:
            print(f"resolved  {path}")
        for path in summary.pending_files:
            print(f"pending   {path}")
        for path, error in summary.failed_files.items():
            print(f"failed    {path}: {error}")

        if not summary.success:
            logger.warn(
                f"{len(summary.pending_files) + len(summary.failed_files)} "
                f"file(s) need attention"
            )
            return 1

        logger.info("All conflicts resolved")
        return 0
