"""CheckoutTarget node - switch to the target and try the fast path."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from reroller.core.config import State
from reroller.core.errors import InvalidInput
from reroller.core.log import logger
from reroller.core.result import RerollResult, RerollStatus
from reroller.workflow.recovery import restore_original


@dataclass
class CheckoutTarget(BaseNode[State, None, RerollResult]):
    """Check out the target and stop early if the patch already applies."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> Locate | End[RerollResult]:
        rs = ctx.state.runtime.reroll
        repository = rs.repository
        session = rs.session

        logger.info(f"Switching to {session.target_ref}")
        if not repository.checkout(session.target_ref):
            raise InvalidInput(
                f"Could not checkout branch '{session.target_ref}'",
                hint="Make sure the branch exists",
            )

        logger.info("Checking if patch applies cleanly")
        if repository.apply_check(rs.patch.path):
            logger.info("Patch applies cleanly! No reroll needed.")
            restore_original(repository, session)
            rs.store.clear()
            rs.status = "complete"
            return End(RerollResult(
                status=RerollStatus.NOT_NEEDED,
                issue=session.issue,
            ))

        logger.info("Patch doesn't apply. Proceeding with reroll")

        from reroller.workflow.nodes.locate import Locate
        return Locate()
