"""Timestamp strategy - trust the patch's Date header."""

from reroller.core.errors import InvalidInput, NoCommitBeforeDate
from reroller.core.log import logger
from reroller.locate.base import HistoryOracle
from reroller.patch.artifact import PatchArtifact


class TimestampStrategy:
    """Pick the newest commit made at or before the patch date."""

    @property
    def name(self) -> str:
        return "timestamp"

    def find(self, patch: PatchArtifact, oracle: HistoryOracle) -> str:
        if not patch.date:
            raise InvalidInput(
                "Could not find a Date field in the patch file",
                hint="Use locate_strategy 'bisect' for patches without one",
            )

        logger.info(f"Looking for the last commit before {patch.date}")
        commit = oracle.commit_before(patch.date)
        if commit is None:
            raise NoCommitBeforeDate(
                f"Could not find a commit before the patch date "
                f"({patch.date})",
                hint="The patch might be older than your git history",
            )
        return commit
