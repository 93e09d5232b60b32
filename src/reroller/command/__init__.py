"""CLI command modules for reroller."""

from reroller.command.reroll import RerollCommand
from reroller.command.resume import ResumeCommand

__all__ = ["RerollCommand", "ResumeCommand"]
