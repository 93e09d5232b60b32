"""CreateBranch node - start the ephemeral branch at the located commit."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from reroller.core.config import State
from reroller.core.errors import Aborted
from reroller.core.log import logger
from reroller.core.result import RerollResult


@dataclass
class CreateBranch(BaseNode[State, None, RerollResult]):
    """Create the ephemeral branch, replacing a leftover one if allowed."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> ApplyPatch:
        rs = ctx.state.runtime.reroll
        repository = rs.repository
        branch = rs.session.branch

        if repository.branch_exists(branch):
            logger.warning(f"Branch '{branch}' already exists")
            if not rs.session.force and not rs.confirm(
                f"Delete branch '{branch}' and continue?"
            ):
                raise Aborted(
                    f"Aborted. Branch '{branch}' was kept.",
                    hint="Rerun with --force to replace it without asking",
                )
            repository.delete_branch(branch)

        logger.info(
            f"Creating branch {branch} at {rs.historical_commit[:12]}"
        )
        repository.create_branch(branch, rs.historical_commit)
        rs.branch_created = True
        rs.status = "branch-created"

        from reroller.workflow.nodes.apply_patch import ApplyPatch
        return ApplyPatch()
