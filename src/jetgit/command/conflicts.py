"""Conflicts command - report conflict regions in a file without writing."""

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import CliPositionalArg

from jetgit.conflict.resolver import ConflictResolver
from jetgit.core.log import logger
from jetgit.diff.engine import format_hunks, hunks_from_conflicts


class ConflictsCommand(BaseModel):
    """List the conflicts in a file and what auto-resolution would do.

    Nothing is written; use resolve to apply the result.
    """

    file: CliPositionalArg[Path] = Field(
        description="File containing conflict markers"
    )
    show_hunks: bool = Field(
        default=False,
        alias="show-hunks",
        description="Print each conflict with surrounding context",
    )

    async def run_workflow(self, state: "State") -> int:
        """Print regions, feedback and stats.

        Returns:
            Exit code (0=every conflict can be auto-resolved, 1 otherwise)
        """
        try:
            content = self.file.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot read {self.file}: {e}")
            return 1

        resolver = ConflictResolver(state.config.resolver)
        regions = resolver.resolve_non_conflicting_changes(
            resolver.detect_conflicts(content)
        )
        if not regions:
            print(f"{self.file}: no conflicts")
            return 0

        for region in regions:
            if region.is_resolved:
                outcome = (
                    f"{region.resolution.value}: {region.auto_resolve_reason}"
                )
            else:
                outcome = "manual resolution required"
            print(
                f"lines {region.start_line + 1}-{region.end_line + 1} "
                f"({region.current_label or 'current'} vs "
                f"{region.incoming_label or 'incoming'}): {outcome}"
            )

        if self.show_hunks:
            print(format_hunks(hunks_from_conflicts(
                content, regions, state.config.diff.context_lines
            )))

        feedback = resolver.generate_auto_resolution_feedback(regions)
        print(feedback.message)
        for detail in feedback.details:
            print(f"  {detail.feedback}")

        resolution = resolver.get_conflict_resolution_state(regions)
        print(resolution.resolution_summary)
        print(resolution.next_action)

        return 0 if resolution.can_complete_automatically else 1
