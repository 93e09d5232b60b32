"""The patch being rerolled."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from reroller.core.errors import InvalidInput

DATE_HEADER = "Date:"


def extract_date(content: str) -> str | None:
    """Return the value of the first ``Date:`` header line.

    Only the header part of the patch is searched: scanning stops at the
    first ``diff --git`` line so that a changed line of the diff body
    can never be mistaken for the authorship date.
    """
    for line in content.splitlines():
        if line.startswith("diff --git"):
            break
        if line.startswith(DATE_HEADER):
            value = line[len(DATE_HEADER):].strip()
            return value or None
    return None


@dataclass(frozen=True)
class PatchArtifact:
    """An immutable patch file and its optional authorship date."""

    path: Path
    content: str
    date: str | None = None

    @classmethod
    def read(cls, path: Path, workdir: Path | None = None) -> PatchArtifact:
        """Read a patch file.

        Args:
            path: Patch file, relative paths resolve against workdir
            workdir: Base for relative paths (current directory if None)

        Raises:
            InvalidInput: If the file is missing or unreadable
        """
        path = Path(path).expanduser()
        if not path.is_absolute() and workdir is not None:
            path = Path(workdir) / path
        path = path.resolve()

        if not path.is_file():
            raise InvalidInput(f"Patch file '{path}' not found")
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise InvalidInput(f"Patch file '{path}' is not readable: {e}") from e

        return cls(path=path, content=content, date=extract_date(content))
