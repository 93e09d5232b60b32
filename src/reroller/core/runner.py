"""Command execution using invoke."""

from pathlib import Path

from invoke import Context, Result
from invoke.exceptions import CommandTimedOut

from reroller.core.log import logger


class Runner(Context):
    """invoke.Context with a single execute() entry point.

    All git invocations go through execute() so that output capture,
    working directory, timeouts and logging behave the same everywhere.
    """

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        timeout: int | None = None,
        log_level: str | None = "spew",
        check: bool = True,
        env: dict[str, str] | None = None,
    ) -> Result:
        """Execute a command and return its captured result.

        Args:
            command: Shell command line
            cwd: Working directory for the command
            timeout: Maximum execution time in seconds
            log_level: Level used to log each output line, or None
            check: Raise invoke.UnexpectedExit on non-zero exit
            env: Extra environment variables (merged into os.environ)

        Returns:
            invoke.Result; a timeout is reported as exited == -1
        """
        kwargs = {
            "hide": True,
            "warn": not check,
            "in_stream": False,
        }
        if timeout:
            kwargs["timeout"] = timeout
        if env:
            kwargs["env"] = env

        logger.trace("Running command", command=command, cwd=str(cwd))
        try:
            if cwd:
                with self.cd(str(cwd)):
                    result = self.run(command, **kwargs)
            else:
                result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            result = e.result
            result.exited = -1

        if log_level:
            for line in result.stdout.splitlines():
                logger.log(log_level, line.rstrip())
            for line in result.stderr.splitlines():
                logger.log(log_level, line.rstrip())

        return result
