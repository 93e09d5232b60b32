"""Reroll command - rebases a stale patch onto the target branch."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import CliPositionalArg

from reroller.core.errors import InvalidInput, RerollError, SessionMismatch
from reroller.core.log import logger
from reroller.session.model import Session


class RerollCommand(BaseModel):
    """Reroll a patch that no longer applies to the target branch.

    Finds the commit the patch was written against (from its Date
    header, or by binary search over the history), applies it there on
    a throw-away branch, rebases that branch onto the target and writes
    the resulting diff as {issue}-rerolled.patch.

    If the rebase stops on conflicts, resolve them, stage the files and
    run 'reroller resume' (or this same command again).
    """

    patch_file: CliPositionalArg[Path] = Field(
        description="Patch file to reroll"
    )
    issue: CliPositionalArg[str] = Field(
        description="Issue number, used to name the branch and output"
    )
    target_ref: str | None = Field(
        default=None,
        alias="target-ref",
        description=(
            "Branch to reroll onto (defaults to config.git.target_ref)"
        ),
    )
    force: bool = Field(
        default=False,
        description=(
            "Replace an existing branch without asking and overwrite "
            "an existing output file"
        ),
    )

    model_config = ConfigDict(populate_by_name=True)

    async def run_workflow(self, state: "State") -> int:
        """Run reroll workflow.

        Args:
            state: State instance with config loaded

        Returns:
            Exit code (0=success, 1=failure, 2=conflicts)
        """
        from reroller.command.common import attach, run_graph
        from reroller.workflow.recovery import recover

        try:
            attach(state)
            fresh = Session.start(
                patch_file=Path(self.patch_file).expanduser().resolve(),
                issue=self.issue,
                target_ref=self.target_ref or state.config.git.target_ref,
                prefix=state.config.git.branch_prefix,
                force=self.force,
            )
            start = self._choose_start(state, fresh)
        except RerollError as e:
            return recover(state, e)
        except ValueError as e:
            # pydantic ValidationError on the issue or target
            return recover(state, InvalidInput(str(e)))

        return await run_graph(start, state)

    def _choose_start(self, state: "State", fresh: Session):
        """Start a fresh session or pick up the saved one."""
        from reroller.workflow.nodes.continue_rebase import ContinueRebase
        from reroller.workflow.nodes.validate import Validate

        rs = state.runtime.reroll
        repository = rs.repository
        saved = rs.store.load()
        rebasing = repository.rebase_in_progress()

        if saved is not None and rebasing:
            differ = saved.disagreements(fresh)
            if differ:
                raise SessionMismatch(
                    f"A reroll of issue {saved.issue} "
                    f"({saved.patch_file} onto {saved.target_ref}) is in "
                    f"progress; arguments differ in: {', '.join(differ)}",
                    hint=(
                        "Finish it with 'reroller resume', or abort it "
                        "with 'git rebase --abort' and remove "
                        f"{rs.store.path}"
                    ),
                )
            logger.info("Found in-progress rebase for this patch")
            rs.session = saved.model_copy(
                update={"force": saved.force or fresh.force}
            )
            return ContinueRebase()

        if rebasing:
            raise InvalidInput(
                "A rebase is already in progress in this repository",
                hint="Finish it or run 'git rebase --abort' first",
            )

        if saved is not None:
            logger.warning(
                f"Discarding saved session for issue {saved.issue}: "
                "no rebase is in progress"
            )
            rs.store.clear()

        rs.session = fresh
        return Validate()
