"""Tests for the timestamp strategy and strategy selection."""

import pytest

from reroller.core.errors import InvalidInput, NoCommitBeforeDate, NotFound
from reroller.locate import BisectStrategy, Locator, TimestampStrategy, locate


def test_timestamp_uses_commit_before_date(history, dated_patch):
    oracle = history(10, 4, dates={dated_patch.date: "commit-0007"})

    assert TimestampStrategy().find(dated_patch, oracle) == "commit-0007"
    # Timestamp lookup never checks anything out
    assert oracle.probed == []


def test_timestamp_without_date(history, undated_patch):
    with pytest.raises(InvalidInput):
        TimestampStrategy().find(undated_patch, history(10, 4))


def test_timestamp_date_older_than_history(history, dated_patch):
    with pytest.raises(NoCommitBeforeDate) as excinfo:
        TimestampStrategy().find(dated_patch, history(10, 4))

    assert isinstance(excinfo.value, NotFound)
    assert "older" in excinfo.value.hint


def test_auto_prefers_date(dated_patch):
    assert isinstance(Locator("auto").choose(dated_patch), TimestampStrategy)


def test_auto_falls_back_to_bisect(undated_patch):
    assert isinstance(Locator("auto").choose(undated_patch), BisectStrategy)


def test_forced_strategies(dated_patch, undated_patch):
    assert isinstance(Locator("bisect").choose(dated_patch), BisectStrategy)
    assert isinstance(
        Locator("timestamp").choose(undated_patch), TimestampStrategy
    )


def test_unknown_strategy():
    with pytest.raises(InvalidInput, match="Unknown locate strategy"):
        Locator("guess")


def test_locate_without_date_bisects(history, undated_patch):
    oracle = history(64, 40)

    assert locate(undated_patch, oracle) == "commit-0040"
    assert oracle.probed


def test_locate_with_date_does_not_probe(history, dated_patch):
    oracle = history(64, 40, dates={dated_patch.date: "commit-0050"})

    assert locate(dated_patch, oracle) == "commit-0050"
    assert oracle.probed == []
