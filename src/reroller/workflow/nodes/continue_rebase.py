"""ContinueRebase node - pick a suspended reroll back up."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from reroller.core.config import State
from reroller.core.errors import ConflictsUnresolved, RebaseFailed
from reroller.core.log import logger
from reroller.core.result import RerollResult
from reroller.git.markers import find_conflict_markers
from reroller.workflow.nodes.rebase import suspend

RESOLVE_HINT = (
    "Edit the conflicted files, stage them with 'git add', "
    "then run 'reroller resume'"
)


@dataclass
class ContinueRebase(BaseNode[State, None, RerollResult]):
    """Continue the interrupted rebase once every conflict is resolved.

    Entered only by a resumed session with a rebase in progress.
    """

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> GeneratePatch | End[RerollResult]:
        rs = ctx.state.runtime.reroll
        repository = rs.repository
        rs.branch_created = True

        logger.info(f"Resuming reroll for issue {rs.session.issue}")

        unmerged = repository.unmerged_paths()
        if unmerged:
            raise ConflictsUnresolved(unmerged, hint=RESOLVE_HINT)

        marked = find_conflict_markers(
            repository.workdir, repository.staged_paths()
        )
        if marked:
            raise ConflictsUnresolved(marked, hint=RESOLVE_HINT)

        if repository.has_staged_changes():
            logger.info("Changes staged, continuing rebase")
        else:
            logger.warning(
                "No staged changes found, attempting to continue anyway"
            )

        rs.status = "rebasing"
        if repository.rebase_continue():
            logger.info("Rebase completed successfully!")
            from reroller.workflow.nodes.generate_patch import GeneratePatch
            return GeneratePatch()

        if repository.rebase_in_progress():
            logger.warning("Rebase stopped again with conflicts")
            return suspend(ctx.state)

        raise RebaseFailed("git rebase --continue failed")
