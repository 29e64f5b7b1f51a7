#!/usr/bin/env python3
"""jetgit CLI - rule-based git merge conflict resolution."""

import asyncio
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from jetgit.command.conflicts import ConflictsCommand
from jetgit.command.diff import DiffCommand
from jetgit.command.resolve import ResolveCommand
from jetgit.core.config import State
from jetgit.core.log import logger


class CliState(State):
    """Detect git conflict markers and resolve the safe ones.

    Rules handle one-sided changes, identical edits, whitespace-only
    differences, changes against a diff3 base, import blocks and
    comments. Anything else is left for manual resolution.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.resolver.tab_width 2)
    2. --include files, jetgit.yaml in the current directory,
       the user config file, then package defaults
    3. .env file
    4. Environment variables (JETGIT_CONFIG__GIT__WORKDIR=path)
    """

    resolve: CliSubCommand[ResolveCommand]
    diff: CliSubCommand[DiffCommand]
    conflicts: CliSubCommand[ConflictsCommand]

    def cli_cmd(self):
        """Dispatch to active subcommand, or show help if none
        provided."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Logger as context manager so file sinks are closed on exit
        with logger:
            try:
                exit_code = asyncio.run(subcommand.run_workflow(self))
            except Exception as e:
                logger.error(
                    f"{type(e).__name__}: {e}",
                    exception_type=type(e).__name__,
                )
                exit_code = 1
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
