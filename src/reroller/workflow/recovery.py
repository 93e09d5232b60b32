"""Cleanup after a reroll ends early.

Nothing here ever touches a working tree that is in the middle of a
rebase: checking out another reference then would corrupt the rebase
the operator is expected to finish.
"""

from __future__ import annotations

from reroller.core.errors import RerollError
from reroller.core.log import logger


def restore_original(repository, session) -> None:
    """Check out the reference the session started from, if we left it."""
    if session is None or not session.original_ref:
        return
    if repository.current_ref() == session.original_ref:
        return

    logger.info(f"Switching back to {session.original_ref}")
    if not repository.checkout(session.original_ref):
        logger.error(f"Could not check out {session.original_ref} again")


def recover(state, error: RerollError) -> int:
    """Report a failed reroll, undo what it created and return its exit
    code.

    How much is undone depends on the error class: errors that leave
    the session resumable touch nothing, the rest restore the original
    reference, delete the ephemeral branch when the error calls for it
    and forget the session.
    """
    rs = state.runtime.reroll
    rs.status = "failed"

    logger.error(str(error))
    if error.hint:
        logger.info(error.hint)

    repository = rs.repository
    if error.keeps_session or repository is None:
        return error.exit_code

    try:
        if repository.rebase_in_progress():
            logger.warning(
                "A rebase is in progress; leaving the working tree as it is"
            )
            return error.exit_code

        restore_original(repository, rs.session)

        branch = rs.session.branch if rs.session else None
        if (
            error.rolls_back_branch
            and rs.branch_created
            and repository.branch_exists(branch)
        ):
            logger.info(f"Cleaning up branch {branch}")
            repository.delete_branch(branch)
    except RerollError as cleanup_error:
        logger.error(f"Cleanup failed: {cleanup_error}")

    if rs.session is not None and rs.store is not None:
        rs.store.clear()

    return error.exit_code


def restore_after_interrupt(state) -> None:
    """Best-effort restoration when the process is interrupted."""
    rs = state.runtime.reroll
    if rs.repository is None or rs.session is None:
        return

    try:
        if rs.repository.rebase_in_progress():
            logger.warning(
                "Interrupted during a rebase. Resolve it and run "
                "'reroller resume', or abort it with 'git rebase --abort'"
            )
            return
        restore_original(rs.repository, rs.session)
    except RerollError as e:
        logger.error(f"Could not restore the working tree: {e}")
        return

    if rs.store is not None:
        rs.store.clear()
