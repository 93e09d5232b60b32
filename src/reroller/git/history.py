"""History oracle backed by a git repository."""

from __future__ import annotations

from reroller.core.log import logger
from reroller.git.repository import GitRepository
from reroller.patch.artifact import PatchArtifact


class GitHistory:
    """First-parent history of one reference, queried through git.

    applies_at() checks out the candidate commit, so callers wrap the
    search in GitRepository.restoring().
    """

    def __init__(self, repository: GitRepository, ref: str):
        self.repository = repository
        self.ref = ref
        self.probes = 0

    def commit_before(self, date: str) -> str | None:
        return self.repository.commit_before(date, self.ref)

    def list_commits(self) -> list[str]:
        return self.repository.list_commits(self.ref)

    def applies_at(self, commit: str, patch: PatchArtifact) -> bool:
        self.probes += 1
        self.repository.checkout_detached(commit)
        applies = self.repository.apply_check(patch.path)
        logger.debug(
            f"Patch {'applies' if applies else 'does not apply'} "
            f"at {commit[:12]}",
            probe=self.probes,
        )
        return applies
