"""Outcome of a reroll workflow run."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from reroller.core.errors import EXIT_CONFLICTS, EXIT_OK


class RerollStatus(str, Enum):
    NOT_NEEDED = "not-needed"
    REROLLED = "rerolled"
    CONFLICTS = "conflicts"


class RerollResult(BaseModel):
    """Terminal data of the reroll graph."""

    status: RerollStatus
    issue: str
    branch: str | None = None
    historical_commit: str | None = None
    output_path: Path | None = None
    output_size: int | None = None
    verified: bool | None = None

    @property
    def exit_code(self) -> int:
        if self.status is RerollStatus.CONFLICTS:
            return EXIT_CONFLICTS
        return EXIT_OK
