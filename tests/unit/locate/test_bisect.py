"""Tests for the binary search over history."""

import math

import pytest

from reroller.core.errors import NotFound, PatchNeverApplicable
from reroller.locate.bisect import BisectStrategy


@pytest.mark.parametrize(
    ("count", "boundary"),
    [(1000, 537), (1000, 0), (1000, 999), (2, 1), (1, 0), (7, 3)],
)
def test_finds_newest_applicable_commit(history, undated_patch, count, boundary):
    """Monotonic history: the result is exactly the boundary commit."""
    oracle = history(count, boundary)

    commit = BisectStrategy().find(undated_patch, oracle)

    assert commit == oracle.commits[boundary]


def test_probe_count_is_logarithmic(history, undated_patch):
    """1000 commits take the oldest-commit probe plus about log2(N)."""
    oracle = history(1000, 537)

    BisectStrategy().find(undated_patch, oracle)

    assert len(oracle.probed) <= 1 + math.ceil(math.log2(1000)) + 1


def test_oldest_commit_probed_first(history, undated_patch):
    oracle = history(50, 20)

    BisectStrategy().find(undated_patch, oracle)

    assert oracle.probed[0] == oracle.commits[-1]


def test_never_applicable(history, undated_patch):
    """Rejected at the root: one probe, then PatchNeverApplicable."""
    oracle = history(100, 100)

    with pytest.raises(PatchNeverApplicable) as excinfo:
        BisectStrategy().find(undated_patch, oracle)

    assert oracle.probed == [oracle.commits[-1]]
    assert excinfo.value.hint


def test_never_applicable_is_not_found(history, undated_patch):
    with pytest.raises(NotFound):
        BisectStrategy().find(undated_patch, history(10, 10))


def test_empty_history(history, undated_patch):
    oracle = history(0, 0)

    with pytest.raises(NotFound):
        BisectStrategy().find(undated_patch, oracle)

    assert oracle.probed == []


def test_non_monotonic_history_returns_applicable_commit(undated_patch):
    """Reappearing context breaks monotonicity; the answer still applies."""
    commits = [f"c{i}" for i in range(16)]
    applicable = {"c3", "c4", "c9", "c10", "c11", "c12", "c13", "c14", "c15"}

    class Oracle:
        def list_commits(self):
            return commits

        def commit_before(self, date):
            return None

        def applies_at(self, commit, patch):
            return commit in applicable

    assert BisectStrategy().find(undated_patch, Oracle()) in applicable


def test_name():
    assert BisectStrategy().name == "bisect"
