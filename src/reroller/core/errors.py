"""Failure taxonomy for a reroll session.

Every error carries the process exit status it maps to and tells the
command layer how much cleanup it needs:

- keeps_session: the persisted session must survive (it is still
  resumable, or it belongs to someone else)
- rolls_back_branch: the ephemeral branch was created and must be
  deleted along with restoring the original reference

A rebase conflict is not an error. It is the CONFLICTS outcome of the
workflow, see reroller.core.result.
"""

from __future__ import annotations

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CONFLICTS = 2


class RerollError(Exception):
    """Base class for all reroll failures."""

    exit_code: int = EXIT_ERROR
    keeps_session: bool = False
    rolls_back_branch: bool = False

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.hint = hint


class InvalidInput(RerollError):
    """Bad arguments, missing patch file, unusable repository or state."""


class SessionMismatch(InvalidInput):
    """Saved session and command-line arguments disagree."""

    keeps_session = True


class NoRebaseInProgress(InvalidInput):
    """Resume requested but git has no rebase in progress."""

    keeps_session = True


class NotFound(RerollError):
    """No historical commit satisfies the patch."""


class NoCommitBeforeDate(NotFound):
    """The patch predates every commit in the history."""


class PatchNeverApplicable(NotFound):
    """The patch does not apply even at the oldest commit."""


class ApplyFailed(RerollError):
    """The patch was rejected at the located historical commit."""

    rolls_back_branch = True


class RebaseFailed(RerollError):
    """Rebase failed without leaving a rebase in progress."""

    rolls_back_branch = True


class ConflictsUnresolved(RerollError):
    """Resume attempted while conflicts are still unresolved."""

    keeps_session = True

    def __init__(self, paths: list[str], hint: str | None = None):
        listed = ", ".join(paths)
        super().__init__(f"Conflicts still present in: {listed}", hint)
        self.paths = paths


class Aborted(RerollError):
    """The operator declined a confirmation."""


class GitError(RerollError):
    """A git command failed unexpectedly."""

    rolls_back_branch = True

    def __init__(self, command: str, exited: int, stderr: str):
        super().__init__(
            f"git command failed (exit {exited}): {command}\n"
            f"{stderr.strip()}"
        )
        self.command = command
        self.exited = exited
        self.stderr = stderr


class VerificationFailed(RerollError):
    """The regenerated patch does not apply to the target.

    Only ever reported as a warning: the ephemeral branch still holds
    the rebased change for manual follow-up.
    """


__all__ = [
    "EXIT_OK",
    "EXIT_ERROR",
    "EXIT_CONFLICTS",
    "RerollError",
    "InvalidInput",
    "SessionMismatch",
    "NoRebaseInProgress",
    "NotFound",
    "NoCommitBeforeDate",
    "PatchNeverApplicable",
    "ApplyFailed",
    "RebaseFailed",
    "ConflictsUnresolved",
    "Aborted",
    "GitError",
    "VerificationFailed",
]
