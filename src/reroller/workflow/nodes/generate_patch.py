"""GeneratePatch node - write the rerolled patch."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from reroller.core.config import State
from reroller.core.log import logger
from reroller.core.result import RerollResult
from reroller.patch.output import output_path


@dataclass
class GeneratePatch(BaseNode[State, None, RerollResult]):
    """Diff the target against the rebased branch into the output file."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> Verify:
        rs = ctx.state.runtime.reroll
        session = rs.session
        template = ctx.state.config.reroll.output_template

        path = output_path(
            rs.repository.workdir, session.issue, template, session.force
        )
        if path.name != template.format(issue=session.issue):
            logger.warning(
                f"{template.format(issue=session.issue)} already exists, "
                f"writing {path.name} instead"
            )

        logger.info(f"Generating rerolled patch: {path.name}")
        rs.repository.diff_to(session.target_ref, session.branch, path)
        rs.output_path = path
        rs.status = "patch-generated"

        from reroller.workflow.nodes.verify import Verify
        return Verify()
