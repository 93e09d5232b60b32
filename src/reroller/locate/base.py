"""Interfaces of the historical-commit locator."""

from abc import abstractmethod
from typing import Protocol

from reroller.patch.artifact import PatchArtifact


class HistoryOracle(Protocol):
    """Read access to one line of history.

    Commits are opaque ids. list_commits() orders them newest first,
    so index 0 is the tip.
    """

    def commit_before(self, date: str) -> str | None:
        """Newest commit at or before date, None if the history starts
        later."""
        ...

    def list_commits(self) -> list[str]:
        """Every commit of the line, newest first."""
        ...

    def applies_at(self, commit: str, patch: PatchArtifact) -> bool:
        """Whether patch applies cleanly at commit."""
        ...


class LocateStrategy(Protocol):
    """Protocol for ways of finding the commit a patch was made against."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name (timestamp, bisect)."""
        pass

    @abstractmethod
    def find(self, patch: PatchArtifact, oracle: HistoryOracle) -> str:
        """Return the commit to replay the patch on.

        Raises:
            NotFound: Or one of its subclasses, when no commit fits
        """
        pass
