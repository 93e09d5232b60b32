"""Finish node - restore the operator's checkout and end the session."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from reroller.core.config import State
from reroller.core.result import RerollResult, RerollStatus
from reroller.workflow.recovery import restore_original


@dataclass
class Finish(BaseNode[State, None, RerollResult]):
    """Switch back to the original reference and clear the session."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> End[RerollResult]:
        rs = ctx.state.runtime.reroll

        restore_original(rs.repository, rs.session)
        rs.store.clear()
        rs.status = "complete"

        return End(RerollResult(
            status=RerollStatus.REROLLED,
            issue=rs.session.issue,
            branch=rs.session.branch,
            historical_commit=rs.historical_commit,
            output_path=rs.output_path,
            output_size=rs.output_path.stat().st_size,
            verified=rs.verified,
        ))
