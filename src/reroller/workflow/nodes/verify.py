"""Verify node - check the rerolled patch applies to the target."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic_graph import BaseNode, GraphRunContext

from reroller.core.config import State
from reroller.core.errors import VerificationFailed
from reroller.core.log import logger
from reroller.core.result import RerollResult


@dataclass
class Verify(BaseNode[State, None, RerollResult]):
    """Dry-run the regenerated patch against the target.

    A failure is only a warning: the rebased change is still on the
    ephemeral branch for manual inspection.
    """

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> Finish:
        rs = ctx.state.runtime.reroll

        try:
            self._verify(rs.repository, rs.session.target_ref, rs.output_path)
            logger.info("Rerolled patch applies cleanly")
            rs.verified = True
        except VerificationFailed as warning:
            logger.warning(str(warning))
            rs.verified = False

        if rs.output_path.stat().st_size == 0:
            logger.warning(f"Patch file {rs.output_path.name} is empty!")

        rs.status = "verified"

        from reroller.workflow.nodes.finish import Finish
        return Finish()

    @staticmethod
    def _verify(repository, target: str, path: Path) -> None:
        if not repository.checkout(target):
            raise VerificationFailed(f"Could not check out {target} to verify")
        if not repository.apply_check(path):
            raise VerificationFailed(
                f"Rerolled patch {path.name} doesn't apply to {target}"
            )
