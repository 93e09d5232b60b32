"""Bisect strategy - binary search for the last commit the patch fits."""

from reroller.core.errors import NotFound, PatchNeverApplicable
from reroller.core.log import logger
from reroller.locate.base import HistoryOracle
from reroller.patch.artifact import PatchArtifact


class BisectStrategy:
    """Binary search over the history for the newest applicable commit.

    Assumes applicability is monotonic: walking from the tip towards the
    root, the patch stops failing exactly once and keeps applying from
    there on. Code that later reappears with matching context breaks
    the assumption; the search then returns some applicable commit, not
    necessarily the newest one. In exchange it costs O(log N) probes,
    each of which checks out a commit.
    """

    @property
    def name(self) -> str:
        return "bisect"

    def find(self, patch: PatchArtifact, oracle: HistoryOracle) -> str:
        commits = oracle.list_commits()
        if not commits:
            raise NotFound("The target history has no commits")

        oldest = len(commits) - 1
        logger.info(
            f"Bisecting {len(commits)} commits for the newest one "
            f"the patch applies to"
        )

        # Without this the monotonic search has nothing to converge on
        if not oracle.applies_at(commits[oldest], patch):
            raise PatchNeverApplicable(
                "The patch does not apply even at the oldest commit "
                f"({commits[oldest][:12]})",
                hint="The patch may be for a different project or branch",
            )

        best = oldest
        left, right = 0, oldest - 1
        while left <= right:
            mid = (left + right) // 2
            if oracle.applies_at(commits[mid], patch):
                best = mid
                right = mid - 1
            else:
                left = mid + 1
            logger.debug(
                "Bisect step", left=left, right=right, best=best
            )

        return commits[best]
