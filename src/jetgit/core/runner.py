"""Command execution on top of invoke."""

import io
from pathlib import Path

from invoke import Context, Result
from invoke.exceptions import CommandTimedOut

from jetgit.core.log import logger


class Runner(Context):
    """invoke.Context with a single execute() entry point.

    Output is always captured, never echoed.
    """

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        timeout: int | None = None,
        stdin: str | None = None,
        check: bool = True,
        env: dict[str, str] | None = None,
    ) -> Result:
        """Run a command and return its result.

        Args:
            command: Shell command line
            cwd: Working directory
            timeout: Seconds before the command is killed; a timed out
                command returns exited == -1
            stdin: Text fed to the command's stdin
            check: Raise invoke.UnexpectedExit on non-zero exit
            env: Extra environment variables

        Returns:
            invoke.Result with stdout, stderr and exited
        """
        kwargs = {
            "hide": True,
            "warn": not check,
            "in_stream": False,
        }
        if timeout:
            kwargs["timeout"] = timeout
        if stdin:
            kwargs["in_stream"] = io.StringIO(stdin)
        if env:
            kwargs["env"] = env

        logger.spew("Running command", command=command, cwd=str(cwd or ""))

        try:
            if cwd:
                with self.cd(str(cwd)):
                    result = self.run(command, **kwargs)
            else:
                result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            result = e.result
            result.exited = -1

        logger.spew(
            "Command finished", command=command, exited=result.exited
        )
        return result
