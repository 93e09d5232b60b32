"""ApplyPatch node - replay the patch on the historical code."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from reroller.core.config import State
from reroller.core.errors import ApplyFailed
from reroller.core.log import logger
from reroller.core.result import RerollResult


@dataclass
class ApplyPatch(BaseNode[State, None, RerollResult]):
    """Apply the patch and commit it as a single change."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> Rebase:
        rs = ctx.state.runtime.reroll
        repository = rs.repository
        patch_path = rs.patch.path

        logger.info("Applying patch to historical code")
        if not repository.apply(patch_path):
            logger.warning(
                "Strict apply failed, retrying with relaxed context"
            )
            if not repository.apply(patch_path, fuzzy=True):
                raise ApplyFailed(
                    "Patch doesn't even apply to historical code!",
                    hint=(
                        "The patch date may be incorrect, the patch may "
                        "be for a different branch, or the file may be "
                        "corrupted"
                    ),
                )

        message = ctx.state.config.reroll.commit_message.format(
            issue=rs.session.issue
        )
        repository.commit(message)
        rs.status = "patch-applied"
        logger.info("Patch applied and committed")

        from reroller.workflow.nodes.rebase import Rebase
        return Rebase()
