"""ResolveConflicts node - detect and auto-resolve every file."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from jetgit.conflict.resolver import ConflictResolver
from jetgit.core.config import State
from jetgit.core.log import logger
from jetgit.git.errors import GitError
from jetgit.git.integration import get_file_conflicts
from jetgit.workflow.nodes.finalize import Finalize


@dataclass
class ResolveConflicts(BaseNode[State]):
    """Run the rule chain over each conflicted file."""

    async def run(self, ctx: GraphRunContext[State]) -> Finalize:
        resolve = ctx.state.runtime.resolve
        resolver = ConflictResolver(ctx.state.config.resolver)

        for path in resolve.conflicted_files:
            with logger.span(f"Resolving {path}", path=path):
                try:
                    resolve.regions[path] = get_file_conflicts(
                        resolve.repository, resolver, path
                    )
                except GitError as e:
                    logger.error(
                        f"Could not read conflicts in {path}",
                        path=path,
                        code=e.code,
                        error=e.message,
                    )
                    resolve.failed_files[path] = e.message

        return Finalize()
