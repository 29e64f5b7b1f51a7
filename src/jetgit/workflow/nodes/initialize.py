"""Initialize node - open the repository and list conflicted files."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from jetgit.core.config import State
from jetgit.core.log import logger
from jetgit.git.repository import GitRepository
from jetgit.workflow.nodes.finalize import Finalize
from jetgit.workflow.nodes.resolve_conflicts import ResolveConflicts


@dataclass
class Initialize(BaseNode[State]):
    """Find the files git reports as unmerged."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> ResolveConflicts | Finalize:
        resolve = ctx.state.runtime.resolve
        resolve.status = "running"

        # A repository may already be injected (tests, embedding hosts)
        if resolve.repository is None:
            resolve.repository = GitRepository(ctx.state.config.git.workdir)

        resolve.conflicted_files = resolve.repository.conflicted_files()

        if not resolve.conflicted_files:
            logger.info("No conflicted files")
            return Finalize()

        logger.info(
            f"Found {len(resolve.conflicted_files)} conflicted file(s)",
            files=resolve.conflicted_files,
        )
        return ResolveConflicts()
