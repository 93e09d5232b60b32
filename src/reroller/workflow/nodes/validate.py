"""Validate node - read the patch and persist the session."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from reroller.core.config import State
from reroller.core.log import logger
from reroller.core.result import RerollResult
from reroller.patch.artifact import PatchArtifact


@dataclass
class Validate(BaseNode[State, None, RerollResult]):
    """Check the inputs of a fresh session and save it.

    The session is saved here, before the first checkout, so that a
    crash anywhere after this point leaves something to resume from.
    """

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> CheckoutTarget:
        rs = ctx.state.runtime.reroll
        repository = rs.repository

        rs.patch = PatchArtifact.read(
            rs.session.patch_file, repository.workdir
        )
        rs.session = rs.session.model_copy(
            update={"original_ref": repository.current_ref()}
        )
        rs.store.save(rs.session)
        rs.status = "validated"

        logger.info(
            "Rerolling patch",
            patch_file=str(rs.patch.path),
            issue=rs.session.issue,
            target_ref=rs.session.target_ref,
            patch_date=rs.patch.date,
        )

        from reroller.workflow.nodes.checkout_target import CheckoutTarget
        return CheckoutTarget()
