"""Naming of the regenerated patch file."""

from pathlib import Path


def output_path(
    directory: Path,
    issue: str,
    template: str = "{issue}-rerolled.patch",
    force: bool = False,
) -> Path:
    """Choose where the regenerated patch is written.

    The name comes from template. An existing file of that name is only
    reused when force is set; otherwise the first free numbered variant
    is returned (``123-rerolled-2.patch``, ``123-rerolled-3.patch``, ...).
    """
    candidate = Path(directory) / template.format(issue=issue)
    if force or not candidate.exists():
        return candidate

    stem, suffix = candidate.stem, candidate.suffix
    number = 2
    while True:
        numbered = candidate.with_name(f"{stem}-{number}{suffix}")
        if not numbered.exists():
            return numbered
        number += 1
