"""Git primitives used by the reroll workflow."""

from __future__ import annotations

import shlex
from contextlib import contextmanager
from pathlib import Path

from reroller.core.errors import GitError, InvalidInput
from reroller.core.log import logger
from reroller.core.runner import Runner

# Keeps `git rebase --continue` from opening an editor for the message
NON_INTERACTIVE_ENV = {"GIT_EDITOR": "true"}


class GitRepository:
    """Thin oracle over one git working tree.

    Every command line comes from the ``commands.git`` templates in
    configuration; values substituted into a template are shell quoted.
    Queries return plain values, mutations that git may legitimately
    refuse return a bool, and anything else that fails raises GitError.
    """

    def __init__(
        self,
        workdir: Path,
        commands: dict[str, str],
        timeout: int | None = None,
    ):
        """Initialize repository wrapper.

        Args:
            workdir: Root of the working tree
            commands: Command templates (config.commands["git"])
            timeout: Per-command timeout in seconds
        """
        self.workdir = Path(workdir)
        self.commands = commands
        self.timeout = timeout
        self.runner = Runner()

    @classmethod
    def from_config(cls, config) -> GitRepository:
        return cls(
            workdir=config.git.workdir,
            commands=config.commands.get("git", {}),
            timeout=config.reroll.command_timeout,
        )

    def _command(self, name: str, **values) -> str:
        try:
            template = self.commands[name]
        except KeyError as e:
            raise InvalidInput(
                f"No git command template named '{name}' is configured"
            ) from e
        quoted = {key: shlex.quote(str(value)) for key, value in values.items()}
        return template.format(**quoted)

    def _run(self, name: str, check: bool = True, env=None, **values):
        cmd = self._command(name, **values)
        result = self.runner.execute(
            cmd,
            cwd=self.workdir,
            timeout=self.timeout,
            check=False,
            env=env,
        )
        if check and result.exited != 0:
            raise GitError(cmd, result.exited, result.stderr)
        return result

    def _succeeds(self, name: str, env=None, **values) -> bool:
        return self._run(name, check=False, env=env, **values).exited == 0

    # Queries

    def ensure_repository(self) -> None:
        """Raise InvalidInput unless workdir is inside a git work tree."""
        if not self.workdir.is_dir():
            raise InvalidInput(f"Working tree '{self.workdir}' does not exist")
        if not self._succeeds("git_dir"):
            raise InvalidInput(
                f"Not in a git repository: {self.workdir}",
                hint="Run reroller from the root of your git project",
            )

    def git_dir(self) -> Path:
        path = Path(self._run("git_dir").stdout.strip())
        if not path.is_absolute():
            path = self.workdir / path
        return path

    def current_ref(self) -> str:
        """Current branch name, or the commit id when HEAD is detached."""
        result = self._run("current_branch", check=False)
        if result.exited == 0 and result.stdout.strip():
            return result.stdout.strip()
        return self._run("current_commit").stdout.strip()

    def branch_exists(self, branch: str) -> bool:
        return self._succeeds("branch_exists", branch=branch)

    def list_commits(self, ref: str) -> list[str]:
        """First-parent history of ref, newest first."""
        output = self._run("rev_list", ref=ref).stdout
        return [line.strip() for line in output.splitlines() if line.strip()]

    def commit_before(self, date: str, ref: str) -> str | None:
        """Newest commit on ref at or before date, or None."""
        output = self._run("commit_before", date=date, ref=ref).stdout.strip()
        return output or None

    def apply_check(self, patch: Path) -> bool:
        """Dry-run apply of a patch file against the working tree."""
        return self._succeeds("apply_check", patch=patch)

    def rebase_in_progress(self) -> bool:
        """True while git has an interrupted rebase recorded."""
        git_dir = self.git_dir()
        return (
            (git_dir / "rebase-merge").is_dir()
            or (git_dir / "rebase-apply").is_dir()
        )

    def unmerged_paths(self) -> list[str]:
        """Paths git still reports as unmerged."""
        output = self._run("diff_conflicted_files").stdout
        return [line for line in output.splitlines() if line.strip()]

    def staged_paths(self) -> list[str]:
        """Paths with staged changes, excluding deletions."""
        output = self._run("diff_cached_files").stdout
        return [line for line in output.splitlines() if line.strip()]

    def has_staged_changes(self) -> bool:
        return not self._succeeds("diff_cached_quiet")

    # Mutations

    def checkout(self, ref: str) -> bool:
        return self._succeeds("checkout", ref=ref)

    def checkout_detached(self, ref: str) -> None:
        self._run("checkout_detached", ref=ref)

    def create_branch(self, branch: str, ref: str) -> None:
        """Create branch at ref and check it out."""
        self._run("create_branch", branch=branch, ref=ref)

    def delete_branch(self, branch: str) -> None:
        self._run("delete_branch", branch=branch)

    def diff_to(self, base: str, head: str, path: Path) -> None:
        """Have git write the diff between two refs to path.

        The bytes never pass through text decoding, so content in any
        encoding survives unchanged.
        """
        self._run("diff_to_file", base=base, head=head, output=path)

    def apply(self, patch: Path, fuzzy: bool = False) -> bool:
        """Apply a patch to the working tree and index."""
        return self._succeeds(
            "apply_fuzzy" if fuzzy else "apply_strict", patch=patch
        )

    def commit(self, message: str) -> None:
        self._run("commit", message=message)

    def rebase(self, onto: str) -> bool:
        """Rebase the current branch onto another. False on conflict."""
        return self._succeeds("rebase", env=NON_INTERACTIVE_ENV, onto=onto)

    def rebase_continue(self) -> bool:
        return self._succeeds("rebase_continue", env=NON_INTERACTIVE_ENV)

    @contextmanager
    def restoring(self, ref: str):
        """Check out ref again when the block exits, however it exits."""
        try:
            yield self
        finally:
            logger.debug(f"Restoring working tree to {ref}")
            if not self.checkout(ref):
                logger.error(f"Could not check out {ref} again")
