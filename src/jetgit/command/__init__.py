"""CLI command modules for jetgit."""

from jetgit.command.conflicts import ConflictsCommand
from jetgit.command.diff import DiffCommand
from jetgit.command.resolve import ResolveCommand

__all__ = ["ConflictsCommand", "DiffCommand", "ResolveCommand"]
