"""Locate node - find the commit the patch was written against."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from reroller.core.config import State
from reroller.core.result import RerollResult
from reroller.git.history import GitHistory
from reroller.locate.locator import Locator


@dataclass
class Locate(BaseNode[State, None, RerollResult]):
    """Run the Locator against the target's history."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> CreateBranch:
        rs = ctx.state.runtime.reroll
        target = rs.session.target_ref

        locator = Locator(ctx.state.config.reroll.locate_strategy)
        history = GitHistory(rs.repository, target)

        # Bisect probes check out candidate commits
        with rs.repository.restoring(target):
            rs.historical_commit = locator.locate(rs.patch, history)

        rs.status = "located"

        from reroller.workflow.nodes.create_branch import CreateBranch
        return CreateBranch()
