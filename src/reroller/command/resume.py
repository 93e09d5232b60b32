"""Resume command - continues a reroll suspended on conflicts."""

from pydantic import BaseModel, Field

from reroller.core.errors import InvalidInput, NoRebaseInProgress, RerollError


class ResumeCommand(BaseModel):
    """Continue a reroll after resolving its rebase conflicts.

    Checks that no conflicts remain, continues the rebase and finishes
    the reroll exactly as an uninterrupted run would.
    """

    force: bool = Field(
        default=False,
        description="Overwrite an existing output file instead of numbering",
    )

    async def run_workflow(self, state: "State") -> int:
        """Run resume workflow.

        Args:
            state: State instance with config loaded

        Returns:
            Exit code (0=success, 1=failure, 2=conflicts)
        """
        from reroller.command.common import attach, run_graph
        from reroller.workflow.nodes.continue_rebase import ContinueRebase
        from reroller.workflow.recovery import recover

        rs = state.runtime.reroll
        try:
            attach(state)
            saved = rs.store.load()
            if saved is None:
                raise InvalidInput(
                    "No reroll in progress to resume",
                    hint="Start one with 'reroller reroll <patch> <issue>'",
                )
            if not rs.repository.rebase_in_progress():
                raise NoRebaseInProgress(
                    "No rebase in progress",
                    hint=(
                        f"Remove {rs.store.path} and start over with "
                        "'reroller reroll'"
                    ),
                )
            rs.session = saved.model_copy(
                update={"force": saved.force or self.force}
            )
        except RerollError as e:
            return recover(state, e)

        return await run_graph(ContinueRebase(), state)
