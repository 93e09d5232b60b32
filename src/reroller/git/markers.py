"""Detect git conflict markers left in resolved files."""

from dataclasses import dataclass
from pathlib import Path


@dataclass
class ConflictHunk:
    """One <<<<<<< ... >>>>>>> region of a file."""

    start_line: int
    end_line: int
    ours_ref: str
    theirs_ref: str


def parse(file_content: str) -> list[ConflictHunk]:
    """Find conflict hunks in file content.

    Handles both the standard and the diff3 (|||||||) layout. Line
    numbers are zero-based.

    Raises:
        ValueError: If a hunk is opened but never separated or closed
    """
    hunks = []
    lines = file_content.splitlines()
    i = 0

    while i < len(lines):
        if not lines[i].startswith("<<<<<<<"):
            i += 1
            continue

        ours_ref = lines[i][7:].strip()

        separator_idx = None
        for j in range(i + 1, len(lines)):
            if lines[j].startswith("======="):
                separator_idx = j
                break
        if separator_idx is None:
            raise ValueError(
                f"Malformed conflict at line {i}: no separator found"
            )

        end_idx = None
        for j in range(separator_idx + 1, len(lines)):
            if lines[j].startswith(">>>>>>>"):
                end_idx = j
                break
        if end_idx is None:
            raise ValueError(
                f"Malformed conflict at line {i}: no end marker found"
            )

        hunks.append(ConflictHunk(
            start_line=i,
            end_line=end_idx,
            ours_ref=ours_ref or "ours",
            theirs_ref=lines[end_idx][7:].strip() or "theirs",
        ))
        i = end_idx + 1

    return hunks


def has_conflict_markers(file_content: str) -> bool:
    """True if the content still holds a conflict, complete or not."""
    try:
        return bool(parse(file_content))
    except ValueError:
        return True


def find_conflict_markers(workdir: Path, paths: list[str]) -> list[str]:
    """Return the paths, relative to workdir, that still hold markers.

    Missing paths are skipped; undecodable bytes are replaced so that
    binary files never raise.
    """
    marked = []
    for path in paths:
        file_path = workdir / path
        if not file_path.is_file():
            continue
        content = file_path.read_text(encoding="utf-8", errors="replace")
        if has_conflict_markers(content):
            marked.append(path)
    return marked
