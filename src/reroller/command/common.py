"""Plumbing shared by the reroll and resume commands."""

from __future__ import annotations

from reroller.core.errors import RerollError
from reroller.core.log import logger
from reroller.core.result import RerollResult, RerollStatus
from reroller.git.repository import GitRepository
from reroller.session.store import SessionStore
from reroller.workflow.recovery import recover


def attach(state: "State") -> None:
    """Bind the repository and session store to the runtime state.

    Raises:
        InvalidInput: If the configured working tree is not a git repository
    """
    repository = GitRepository.from_config(state.config)
    repository.ensure_repository()

    rs = state.runtime.reroll
    rs.repository = repository
    rs.store = SessionStore(
        state.state_path(), state.config.git.branch_prefix
    )


async def run_graph(start, state: "State") -> int:
    """Run the reroll graph from start and turn its outcome into an exit
    code."""
    from reroller.workflow.graph import run_workflow

    try:
        result = await run_workflow(start, state)
    except RerollError as e:
        return recover(state, e)

    report(result, state)
    return result.exit_code


def report(result: RerollResult, state: "State") -> None:
    """Tell the operator what happened and what to do next."""
    if result.status is RerollStatus.NOT_NEEDED:
        logger.info(f"Patch for issue {result.issue} already applies")
        return

    if result.status is RerollStatus.CONFLICTS:
        logger.warning(
            f"Rebase of {result.branch} stopped with conflicts",
            branch=result.branch,
            historical_commit=result.historical_commit,
        )
        logger.info("Next steps:")
        logger.info("  1. Resolve the conflicts in the files git lists")
        logger.info("  2. Stage the resolved files with 'git add <file>'")
        logger.info("  3. Run 'reroller resume'")
        logger.info("To give up instead, run 'git rebase --abort'")
        return

    logger.info(
        "Reroll complete",
        output=str(result.output_path),
        size=result.output_size,
        verified=result.verified,
    )
    logger.info(f"Rerolled patch saved to {result.output_path}")
    logger.info(
        f"The rebased change stays on branch '{result.branch}'; "
        f"delete it with 'git branch -D {result.branch}' when done"
    )
