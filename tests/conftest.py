"""Pytest configuration and fixtures for reroller tests."""

import shlex
import sys
import tempfile
from pathlib import Path

import pytest

from reroller.core.log import ConsoleSink, setup_logger
from reroller.core.runner import Runner


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Console-only logging at debug level, nothing sent to logfire.dev."""
    test_log_root = Path(tempfile.gettempdir()) / "reroller-tests"
    setup_logger(
        log_root=test_log_root,
        session_name="test",
        console=ConsoleSink(level="debug"),
    )


@pytest.fixture
def mock_argv():
    """Save and restore sys.argv."""
    original = sys.argv.copy()
    sys.argv = ["reroller"]
    yield
    sys.argv = original


@pytest.fixture
def make_state(mock_argv, monkeypatch, tmp_path):
    """Build a State for a working tree without CLI parsing conflicts.

    The current directory moves to an empty scratch directory so that no
    reroller.yaml or .env of the developer leaks into the tests.
    """
    from reroller.core.config import State

    scratch = tmp_path / "cwd"
    scratch.mkdir()
    monkeypatch.chdir(scratch)

    def _make(workdir: Path, **reroll):
        config = {"git": {"workdir": str(workdir)}}
        if reroll:
            config["reroll"] = reroll
        return State(config=config)

    return _make


class GitRepo:
    """Throw-away git repository driven through the same Runner."""

    def __init__(self, path: Path):
        self.path = path
        self.runner = Runner()

    def git(self, *args, env=None) -> str:
        result = self.runner.execute(
            shlex.join(["git", *args]),
            cwd=self.path,
            env=env,
            log_level=None,
        )
        return result.stdout.strip()

    def write(self, files: dict[str, str | bytes]) -> None:
        for name, content in files.items():
            target = self.path / name
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content)

    def commit(
        self, message: str, date: str, files: dict[str, str | bytes]
    ) -> str:
        """Commit files with both author and committer date set."""
        self.write(files)
        self.git("add", "--all", *files)
        self.git(
            "commit", "--quiet", "-m", message,
            env={"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date},
        )
        return self.git("rev-parse", "HEAD")

    def make_patch(
        self,
        base: str,
        date: str,
        files: dict[str, str | bytes],
        message: str,
        path: Path,
    ) -> Path:
        """Write a format-patch file to path for files changed at base.

        git writes the file itself, so non-UTF-8 content is kept as is.
        The branch checked out beforehand is checked out again.
        """
        start = self.current_branch()
        self.git("checkout", "--quiet", "-b", "patch-source", base)
        try:
            self.commit(message, date, files)
            written = self.git("format-patch", "-1", "-o", str(path.parent))
            Path(written).replace(path)
        finally:
            self.git("checkout", "--quiet", start)
            self.git("branch", "-D", "patch-source")
        return path

    def current_branch(self) -> str:
        return self.git("rev-parse", "--abbrev-ref", "HEAD")

    def branch_exists(self, branch: str) -> bool:
        return bool(self.git("branch", "--list", branch))

    def rebase_in_progress(self) -> bool:
        git_dir = self.path / ".git"
        return (
            (git_dir / "rebase-merge").is_dir()
            or (git_dir / "rebase-apply").is_dir()
        )


@pytest.fixture
def git_repo(tmp_path):
    """Empty repository on branch main with a local identity."""
    path = tmp_path / "repo"
    path.mkdir()
    repo = GitRepo(path)
    repo.git("init", "--quiet")
    repo.git("symbolic-ref", "HEAD", "refs/heads/main")
    repo.git("config", "user.name", "Reroll Tester")
    repo.git("config", "user.email", "tester@example.com")
    repo.git("config", "commit.gpgsign", "false")
    return repo
