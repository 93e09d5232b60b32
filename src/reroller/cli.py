#!/usr/bin/env python3
"""Reroller CLI - rerolls stale patches onto a moving branch."""

import asyncio
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from reroller.command.reroll import RerollCommand
from reroller.command.resume import ResumeCommand
from reroller.core.config import State
from reroller.core.errors import EXIT_ERROR
from reroller.core.log import logger


class CliState(State):
    """Reroll patches that no longer apply to their target branch.

    Reroller finds the commit a patch was written against, applies it
    there, rebases it onto the target branch and writes the result as
    a new patch. Rebase conflicts suspend the reroll until you resolve
    them and run 'reroller resume'.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.git.target_ref value)
    2. Environment variables
       (REROLLER_CONFIG__GIT__TARGET_REF=value)
    3. .env file
    4. reroller.yaml in the current directory, then the one in
       the user configuration directory
    """

    reroll: CliSubCommand[RerollCommand]
    resume: CliSubCommand[ResumeCommand]

    def cli_cmd(self):
        """Dispatch to active subcommand, or show help if none
        provided."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(EXIT_ERROR)

        with logger:
            try:
                exit_code = asyncio.run(subcommand.run_workflow(self))
            except KeyboardInterrupt:
                from reroller.workflow.recovery import restore_after_interrupt

                logger.warning("Interrupted")
                restore_after_interrupt(self)
                exit_code = EXIT_ERROR
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
