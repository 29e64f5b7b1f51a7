"""Finalize node - write fully resolved files and report the rest."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from jetgit.conflict.resolver import ConflictResolver
from jetgit.core.config import State
from jetgit.core.log import logger
from jetgit.core.result import ResolveSummary
from jetgit.git.errors import GitError
from jetgit.git.integration import resolve_file


@dataclass
class Finalize(BaseNode[State, None, ResolveSummary]):
    """Persist resolutions and summarize what needs manual work."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> End[ResolveSummary]:
        resolve = ctx.state.runtime.resolve
        git_config = ctx.state.config.git
        resolver = ConflictResolver(ctx.state.config.resolver)
        summary = ResolveSummary(failed_files=dict(resolve.failed_files))

        for path, regions in resolve.regions.items():
            stats = resolver.get_conflict_stats(regions)
            summary.auto_resolved += stats.auto_resolved
            summary.unresolved += stats.unresolved

            complete = resolver.get_all_conflicts_resolved(regions)
            if not complete and not (
                git_config.write_partial and stats.resolved
            ):
                # No markers at all (e.g. delete/modify) also lands here
                completion = resolver.can_complete_merge(regions)
                logger.warn(
                    f"{path} needs manual resolution",
                    path=path,
                    reason=completion.reason if regions else "no markers",
                )
                summary.pending_files.append(path)
                continue

            try:
                resolve_file(
                    resolve.repository, resolver, path, regions,
                    stage=git_config.stage_resolved,
                )
            except GitError as e:
                logger.error(
                    f"Could not write resolution for {path}",
                    path=path,
                    code=e.code,
                    error=e.message,
                )
                summary.failed_files[path] = e.message
                continue

            if complete:
                summary.resolved_files.append(path)
            else:
                summary.pending_files.append(path)

        resolve.resolved_files = summary.resolved_files
        resolve.pending_files = summary.pending_files
        resolve.failed_files = summary.failed_files
        resolve.status = "complete" if summary.success else "blocked"

        logger.info(
            f"Resolve {resolve.status}: {len(summary.resolved_files)} "
            f"resolved, {len(summary.pending_files)} pending, "
            f"{len(summary.failed_files)} failed"
        )
        return End(summary)
