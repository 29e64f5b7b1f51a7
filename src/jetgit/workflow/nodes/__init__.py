"""Workflow nodes for the resolve graph."""

from jetgit.workflow.nodes.finalize import Finalize
from jetgit.workflow.nodes.initialize import Initialize
from jetgit.workflow.nodes.resolve_conflicts import ResolveConflicts

__all__ = ["Initialize", "ResolveConflicts", "Finalize"]
