"""Tests for configuration loading, includes and template substitution."""

import sys
from pathlib import Path

import pytest

from reroller.core.config import State
from reroller.core.yaml_settings import YamlWithIncludesSettingsSource


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


def test_package_defaults_load(mock_argv, tmp_path, monkeypatch):
    """Defaults alone give a complete configuration."""
    monkeypatch.chdir(tmp_path)

    state = State()

    assert state.config.git.target_ref == "8.x-1.x"
    assert state.config.git.branch_prefix == "test-"
    assert state.config.reroll.locate_strategy == "auto"
    assert "rebase" in state.config.commands["git"]


def test_project_config_overrides_defaults(fixtures_dir):
    source = YamlWithIncludesSettingsSource(
        State, yaml_file=str(fixtures_dir / "minimal.yaml")
    )
    data = source()

    assert data["config"]["git"]["target_ref"] == "11.x"
    # Still merged over the package defaults
    assert data["config"]["git"]["branch_prefix"] == "test-"


def test_include_directive(fixtures_dir):
    source = YamlWithIncludesSettingsSource(
        State, yaml_file=str(fixtures_dir / "with_include.yaml")
    )
    data = source()

    git_commands = data["config"]["commands"]["git"]
    assert git_commands["rebase"] == "git rebase --rebase-merges {onto}"
    # Untouched defaults survive the deep merge
    assert git_commands["checkout"] == "git checkout --quiet {ref}"
    # The including file wins over what it includes
    assert data["config"]["reroll"]["locate_strategy"] == "bisect"


def test_cli_include(fixtures_dir, mock_argv):
    sys.argv = [
        "reroller", "--include", str(fixtures_dir / "extra_commands.yaml")
    ]

    source = YamlWithIncludesSettingsSource(
        State, yaml_file=str(fixtures_dir / "minimal.yaml")
    )
    data = source()

    assert data["config"]["git"]["target_ref"] == "11.x"
    assert data["config"]["reroll"]["locate_strategy"] == "timestamp"


def test_circular_include(fixtures_dir):
    source_file = fixtures_dir / "circular_a.yaml"

    with pytest.raises(ValueError, match="Circular include"):
        YamlWithIncludesSettingsSource(State, yaml_file=str(source_file))()


def test_config_templates_substituted(fixtures_dir, mock_argv):
    data = YamlWithIncludesSettingsSource(
        State, yaml_file=str(fixtures_dir / "with_include.yaml")
    )()
    assert "{config.git.target_ref}" in str(data)

    state = State(**data)

    assert state.config.reroll.output_template == "8.x-1.x-{issue}.patch"


def test_runtime_placeholders_preserved(mock_argv, tmp_path, monkeypatch):
    """{ref}, {issue} and friends are filled in by their users."""
    monkeypatch.chdir(tmp_path)

    state = State()

    assert state.config.commands["git"]["checkout"].endswith("{ref}")
    assert state.config.reroll.commit_message.endswith("{issue}")
    assert "{log_root}" in state.config.logger.file.path


def test_platformdirs_template(mock_argv, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    state = State()

    assert "{" not in str(state.config.log_root)
    assert "reroller" in str(state.config.log_root)


def test_environment_overrides(mock_argv, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("REROLLER_CONFIG__REROLL__LOCATE_STRATEGY", "bisect")

    assert State().config.reroll.locate_strategy == "bisect"


def test_state_path(make_state, tmp_path):
    state = make_state(tmp_path)
    assert state.state_path() == tmp_path / ".reroll-state"

    elsewhere = tmp_path / "state" / "reroll.json"
    state = make_state(tmp_path, state_file=str(elsewhere))
    assert state.state_path() == elsewhere
