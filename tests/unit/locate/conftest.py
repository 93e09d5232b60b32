"""In-memory history oracles for locator tests."""

from pathlib import Path

import pytest

from reroller.patch.artifact import PatchArtifact


class FakeHistory:
    """History of count commits, newest first, where the patch applies
    at every index from boundary onwards (towards the root)."""

    def __init__(self, count: int, boundary: int, dates=None):
        self.commits = [f"commit-{i:04d}" for i in range(count)]
        self.boundary = boundary
        self.dates = dates or {}
        self.probed = []

    def list_commits(self):
        return list(self.commits)

    def commit_before(self, date):
        return self.dates.get(date)

    def applies_at(self, commit, patch):
        self.probed.append(commit)
        return self.commits.index(commit) >= self.boundary


@pytest.fixture
def history():
    return FakeHistory


@pytest.fixture
def dated_patch():
    return PatchArtifact(
        path=Path("/tmp/123.patch"),
        content="Date: Tue, 9 Jan 2018 10:00:00 +0000\n\ndiff --git a/x b/x\n",
        date="Tue, 9 Jan 2018 10:00:00 +0000",
    )


@pytest.fixture
def undated_patch():
    return PatchArtifact(
        path=Path("/tmp/123.patch"),
        content="diff --git a/x b/x\n",
    )
