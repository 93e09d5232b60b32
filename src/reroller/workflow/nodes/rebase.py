"""Rebase node - move the patch commit onto the target."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from reroller.core.config import State
from reroller.core.errors import RebaseFailed
from reroller.core.log import logger
from reroller.core.result import RerollResult, RerollStatus


def suspend(state: State) -> End[RerollResult]:
    """Stop at a rebase conflict, leaving session and tree for the
    operator."""
    rs = state.runtime.reroll
    rs.status = "conflicted"
    return End(RerollResult(
        status=RerollStatus.CONFLICTS,
        issue=rs.session.issue,
        branch=rs.session.branch,
        historical_commit=rs.historical_commit,
    ))


@dataclass
class Rebase(BaseNode[State, None, RerollResult]):
    """Rebase the ephemeral branch onto the target reference."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> GeneratePatch | End[RerollResult]:
        rs = ctx.state.runtime.reroll
        repository = rs.repository
        target = rs.session.target_ref

        logger.info(f"Rebasing onto {target}")
        rs.status = "rebasing"

        if repository.rebase(target):
            logger.info("Rebase successful! No conflicts.")
            from reroller.workflow.nodes.generate_patch import GeneratePatch
            return GeneratePatch()

        if repository.rebase_in_progress():
            logger.warning("Conflicts detected - manual resolution required")
            return suspend(ctx.state)

        raise RebaseFailed(f"git rebase {target} failed without conflicts")
