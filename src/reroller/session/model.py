"""The unit of work of one reroll attempt."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Characters that survive both a branch name and a file name
ISSUE_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"


def branch_name(issue: str, prefix: str = "test-") -> str:
    """Ephemeral branch for an issue: unique per issue and easy to find
    again on resume."""
    return f"{prefix}{issue}"


class Session(BaseModel):
    """Everything needed to carry a reroll across process invocations."""

    patch_file: Path = Field(description="Patch being rerolled")
    issue: str = Field(
        pattern=ISSUE_PATTERN,
        description="Issue the patch belongs to",
    )
    target_ref: str = Field(
        min_length=1,
        description="Reference the patch is rebased onto",
    )
    branch: str = Field(
        min_length=1,
        description="Ephemeral working branch",
    )
    original_ref: str | None = Field(
        default=None,
        description="Branch or commit to restore when done",
    )
    force: bool = Field(
        default=False,
        description="Skip confirmations and overwrite existing output",
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def start(
        cls,
        patch_file: Path,
        issue: str,
        target_ref: str,
        prefix: str = "test-",
        force: bool = False,
    ) -> Session:
        """Build a fresh session from command-line arguments."""
        return cls(
            patch_file=patch_file,
            issue=issue,
            target_ref=target_ref,
            branch=branch_name(issue, prefix),
            force=force,
        )

    def disagreements(self, other: Session) -> list[str]:
        """Names of the identifying fields on which two sessions differ."""
        fields = []
        if self.patch_file.resolve() != other.patch_file.resolve():
            fields.append("patch_file")
        if self.issue != other.issue:
            fields.append("issue")
        if self.target_ref != other.target_ref:
            fields.append("target_ref")
        return fields
