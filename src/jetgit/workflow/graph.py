"""Graph workflow definition."""

from pydantic_graph import Graph

from jetgit.core.config import State
from jetgit.core.log import logger
from jetgit.core.result import ResolveSummary


def create_workflow() -> Graph:
    """Create the resolve workflow graph.

    Initialize -> ResolveConflicts -> Finalize
    (Initialize goes straight to Finalize when nothing is conflicted.)
    """
    logger.debug("Building workflow graph")

    from jetgit.workflow.nodes import Finalize, Initialize, ResolveConflicts

    return Graph(
        nodes=(Initialize, ResolveConflicts, Finalize),
        state_type=State,
    )


async def run_resolve(state: State) -> ResolveSummary:
    """Run the resolve workflow to completion."""
    from jetgit.workflow.nodes import Initialize

    result = await create_workflow().run(Initialize(), state=state)
    return result.output
