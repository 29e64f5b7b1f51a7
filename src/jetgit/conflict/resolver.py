"""Conflict detection, automatic resolution and reassembly."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jetgit.conflict.models import (
    AutoResolutionFeedback,
    ConflictRegion,
    ConflictStats,
    FeedbackDetail,
    MergeCompletion,
    Resolution,
    ResolutionState,
)
from jetgit.conflict.parser import parse_conflict_markers
from jetgit.conflict.rules import Rule, default_rules, first_decision
from jetgit.core.log import logger

if TYPE_CHECKING:
    from jetgit.core.config import ResolverSettings


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


class ConflictResolver:
    """Detects conflict regions, auto-resolves what it safely can and
    rebuilds file content from the outcome.

    Pure: no file or repository access. Callers read the conflicted
    text, pass it in, and persist what apply_conflict_resolution()
    returns.
    """

    def __init__(
        self,
        settings: ResolverSettings | None = None,
        rules: list[Rule] | None = None,
    ):
        """Initialize resolver.

        Args:
            settings: Rule thresholds and parser options; defaults
                when None
            rules: Explicit rule chain, replacing default_rules(settings)
        """
        if settings is None:
            from jetgit.core.config import ResolverSettings
            settings = ResolverSettings()
        self.settings = settings
        self.rules = rules if rules is not None else default_rules(settings)

    # --------------------------------------------------------
    # Detection
    # --------------------------------------------------------

    def parse_conflict_markers(self, content: str) -> list[ConflictRegion]:
        """Parse conflict markers; see parser.parse_conflict_markers."""
        return parse_conflict_markers(content, diff3=self.settings.diff3)

    def detect_conflicts(self, content: str) -> list[ConflictRegion]:
        """Parse conflict markers, reporting failures as no conflicts.

        Raises:
            TypeError: If content is not a string
        """
        if not isinstance(content, str):
            raise TypeError(
                f"content must be str, not {type(content).__name__}"
            )
        try:
            return self.parse_conflict_markers(content)
        except Exception as e:
            logger.error(
                "Failed to detect conflicts",
                exception_type=type(e).__name__,
                exception_message=str(e),
            )
            return []

    # --------------------------------------------------------
    # Resolution
    # --------------------------------------------------------

    def resolve_non_conflicting_changes(
        self, regions: list[ConflictRegion]
    ) -> list[ConflictRegion]:
        """Run the rule chain over every unresolved region.

        Returns new regions in the same order; resolved regions and
        regions no rule could decide come back unchanged.
        """
        result = []
        for region in regions:
            if region.is_resolved:
                result.append(region)
                continue

            outcome = first_decision(region, self.rules)
            if outcome is None:
                logger.debug(
                    "Conflict needs manual resolution",
                    start_line=region.start_line,
                    end_line=region.end_line,
                )
                result.append(region)
                continue

            rule, decision = outcome
            logger.debug(
                f"Auto-resolved conflict with rule '{rule.name}'",
                start_line=region.start_line,
                resolution=decision.resolution.value,
                reason=decision.reason,
            )
            result.append(region.model_copy(update={
                "is_resolved": True,
                "resolution": decision.resolution,
                "auto_resolved": True,
                "auto_resolve_reason": decision.reason,
            }))
        return result

    def resolve_conflict(
        self,
        region: ConflictRegion,
        resolution: Resolution | str,
        manual_content: str | None = None,
    ) -> ConflictRegion:
        """Record an explicit user choice for one region.

        Args:
            region: Region being resolved
            resolution: Chosen resolution
            manual_content: Replacement text; used with MANUAL

        Returns:
            New region marked resolved, not auto-resolved
        """
        resolution = Resolution(resolution)
        return region.model_copy(update={
            "is_resolved": True,
            "resolution": resolution,
            "auto_resolved": False,
            "auto_resolve_reason": None,
            "manual_content": (
                manual_content if resolution is Resolution.MANUAL
                else region.manual_content
            ),
        })

    def merge_conflict_regions(
        self,
        current: str,
        incoming: str,
        base: str | None = None,
    ) -> str:
        """Merge two standalone sides with the rule chain.

        Falls back to current when no rule decides.
        """
        region = ConflictRegion(
            start_line=0,
            end_line=1,
            current_content=current,
            incoming_content=incoming,
            base_content=base,
        )
        resolved = self.resolve_non_conflicting_changes([region])[0]
        if not self.is_conflict_resolved(resolved):
            return current
        return "\n".join(self._resolved_lines(resolved))

    # --------------------------------------------------------
    # State queries
    # --------------------------------------------------------

    def is_conflict_resolved(self, region: ConflictRegion) -> bool:
        return region.is_resolved and region.resolution is not None

    def get_all_conflicts_resolved(
        self, regions: list[ConflictRegion]
    ) -> bool:
        """True only for a non-empty list with every region resolved.

        An empty list is deliberately False; callers handle "no
        conflicts" separately.
        """
        return bool(regions) and all(
            self.is_conflict_resolved(region) for region in regions
        )

    def can_complete_merge(
        self, regions: list[ConflictRegion]
    ) -> MergeCompletion:
        unresolved = sum(1 for region in regions if not region.is_resolved)
        if unresolved == 0:
            return MergeCompletion(
                can_complete=True,
                reason="All conflicts have been resolved",
            )
        verb = "needs" if unresolved == 1 else "need"
        return MergeCompletion(
            can_complete=False,
            reason=(
                f"{_plural(unresolved, 'conflict')} still {verb} to be "
                f"resolved"
            ),
        )

    def get_conflict_stats(
        self, regions: list[ConflictRegion]
    ) -> ConflictStats:
        resolved = [r for r in regions if r.is_resolved]
        auto = sum(1 for r in resolved if r.auto_resolved is True)
        return ConflictStats(
            total=len(regions),
            resolved=len(resolved),
            auto_resolved=auto,
            manually_resolved=len(resolved) - auto,
            unresolved=len(regions) - len(resolved),
        )

    def get_conflict_resolution_state(
        self, regions: list[ConflictRegion]
    ) -> ResolutionState:
        """Summarize progress for display after a resolution pass."""
        stats = self.get_conflict_stats(regions)

        summary = []
        if stats.auto_resolved:
            summary.append(
                f"{_plural(stats.auto_resolved, 'conflict')} auto-resolved."
            )
        if stats.manually_resolved:
            summary.append(
                f"{_plural(stats.manually_resolved, 'conflict')} "
                f"manually resolved."
            )
        if stats.unresolved:
            verb = "requires" if stats.unresolved == 1 else "require"
            summary.append(
                f"{_plural(stats.unresolved, 'conflict')} {verb} manual "
                f"resolution."
            )

        if stats.unresolved == 0:
            next_action = "All conflicts resolved. Ready to complete merge."
        else:
            next_action = (
                f"Please resolve the remaining "
                f"{_plural(stats.unresolved, 'conflict')} manually."
            )

        return ResolutionState(
            can_complete_automatically=stats.unresolved == 0,
            requires_manual_intervention=stats.unresolved > 0,
            auto_resolved_conflicts=[
                r for r in regions if r.auto_resolved is True
            ],
            manual_conflicts=[r for r in regions if not r.is_resolved],
            resolution_summary=" ".join(summary),
            next_action=next_action,
        )

    def generate_auto_resolution_feedback(
        self, regions: list[ConflictRegion]
    ) -> AutoResolutionFeedback:
        """Describe each automatic resolution, one line per region."""
        auto = [r for r in regions if r.auto_resolved is True]
        if not auto:
            return AutoResolutionFeedback(
                message="No conflicts were automatically resolved."
            )

        return AutoResolutionFeedback(
            message=f"Automatically resolved {_plural(len(auto), 'conflict')}",
            details=[
                FeedbackDetail(
                    conflict=region,
                    feedback=(
                        f"Lines {region.start_line + 1}-"
                        f"{region.end_line + 1}: "
                        f"{region.auto_resolve_reason or 'Auto-resolved'} "
                        f"({region.resolution.value if region.resolution else 'none'})"
                    ),
                )
                for region in auto
            ],
        )

    # --------------------------------------------------------
    # Reassembly
    # --------------------------------------------------------

    @staticmethod
    def _side_lines(content: str) -> list[str]:
        """A side's lines; a blank side contributes nothing."""
        return content.split("\n") if content.strip() else []

    def _resolved_lines(self, region: ConflictRegion) -> list[str]:
        if region.resolution == Resolution.CURRENT:
            return self._side_lines(region.current_content)
        if region.resolution == Resolution.INCOMING:
            return self._side_lines(region.incoming_content)
        if region.resolution == Resolution.BOTH:
            return (self._side_lines(region.current_content)
                    + self._side_lines(region.incoming_content))
        # MANUAL: the collaborator's text, else current as placeholder
        if region.manual_content is not None:
            return region.manual_content.split("\n")
        return region.current_content.split("\n")

    def apply_conflict_resolution(
        self,
        content: str,
        regions: list[ConflictRegion],
    ) -> str:
        """Rebuild content with resolved regions replaced.

        Unresolved regions, and regions marked resolved without a
        resolution, keep their original marker lines. Regions outside
        the content or overlapping an earlier region are ignored.

        Args:
            content: The conflicted text the regions were parsed from
            regions: Regions in any order

        Returns:
            Text joined with "\\n"
        """
        if not isinstance(content, str):
            raise TypeError(
                f"content must be str, not {type(content).__name__}"
            )
        if not regions:
            return content

        lines = content.split("\n")
        result: list[str] = []
        position = 0

        for region in sorted(regions, key=lambda r: r.start_line):
            if region.start_line < position or region.end_line >= len(lines):
                logger.warn(
                    "Ignoring conflict region outside content",
                    start_line=region.start_line,
                    end_line=region.end_line,
                    line_count=len(lines),
                )
                continue

            result.extend(lines[position:region.start_line])
            if self.is_conflict_resolved(region):
                result.extend(self._resolved_lines(region))
            else:
                result.extend(lines[region.start_line:region.end_line + 1])
            position = region.end_line + 1

        result.extend(lines[position:])
        return "\n".join(result)
