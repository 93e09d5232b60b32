"""Strategy selection for the historical-commit locator."""

from __future__ import annotations

from reroller.core.errors import InvalidInput
from reroller.core.log import logger
from reroller.locate.base import HistoryOracle, LocateStrategy
from reroller.locate.bisect import BisectStrategy
from reroller.locate.timestamp import TimestampStrategy
from reroller.patch.artifact import PatchArtifact

STRATEGIES = ("auto", "timestamp", "bisect")


class Locator:
    """Find the newest commit a patch applies to.

    'auto' trusts the patch date when the patch has one and falls back
    to bisecting the history when it does not.
    """

    def __init__(self, strategy: str = "auto"):
        if strategy not in STRATEGIES:
            raise InvalidInput(
                f"Unknown locate strategy '{strategy}'. "
                f"Available: {', '.join(STRATEGIES)}"
            )
        self.strategy = strategy

    def choose(self, patch: PatchArtifact) -> LocateStrategy:
        if self.strategy == "bisect":
            return BisectStrategy()
        if self.strategy == "timestamp" or patch.date:
            return TimestampStrategy()
        return BisectStrategy()

    def locate(self, patch: PatchArtifact, oracle: HistoryOracle) -> str:
        strategy = self.choose(patch)
        with logger.span("Locating historical commit", strategy=strategy.name):
            commit = strategy.find(patch, oracle)
        logger.info(f"Found commit: {commit[:12]}")
        return commit


def locate(
    patch: PatchArtifact, oracle: HistoryOracle, strategy: str = "auto"
) -> str:
    """Shorthand for Locator(strategy).locate(patch, oracle)."""
    return Locator(strategy).locate(patch, oracle)
