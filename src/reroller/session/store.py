"""Persistence of the session between invocations."""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from reroller.core.errors import InvalidInput
from reroller.core.log import logger
from reroller.session.model import Session, branch_name


class SessionStore:
    """JSON file holding at most one Session.

    Written before the first mutating git operation, read back on
    resume, and removed once the session can no longer be resumed.
    """

    def __init__(self, path: Path, branch_prefix: str = "test-"):
        self.path = Path(path)
        self.branch_prefix = branch_prefix

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(session.model_dump_json(indent=2) + "\n")
        logger.debug(f"Saved session to {self.path}")

    def load(self) -> Session | None:
        """Read the saved session, or None when there is none.

        Raises:
            InvalidInput: If the file exists but is not a valid session
        """
        if not self.exists():
            return None

        try:
            session = Session.model_validate_json(self.path.read_text())
        except (OSError, ValidationError) as e:
            raise InvalidInput(
                f"Saved session {self.path} is unreadable: {e}",
                hint=f"Delete {self.path} to start over",
            ) from e

        expected = branch_name(session.issue, self.branch_prefix)
        if session.branch != expected:
            raise InvalidInput(
                f"Saved session {self.path} names branch "
                f"'{session.branch}', expected '{expected}'",
                hint=f"Delete {self.path} to start over",
            )
        return session

    def clear(self) -> None:
        if self.exists():
            self.path.unlink()
            logger.debug(f"Removed session file {self.path}")
