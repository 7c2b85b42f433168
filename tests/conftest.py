"""
Shared fixtures: a throw-away git repository with deterministic commit dates.
"""
from __future__ import annotations

import os
import subprocess
from pathlib import Path

import pytest

from git_copyright.config.loader import ENV_CONFIG, ENV_HOLDER, load_defaults
from git_copyright.config.schema import EffectiveConfig


class GitFixture:
    """Tiny driver for a scratch repository used by the tests."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _env(self, date: str | None = None) -> dict[str, str]:
        env = {
            **os.environ,
            "GIT_AUTHOR_NAME": "Test Author",
            "GIT_AUTHOR_EMAIL": "author@example.com",
            "GIT_COMMITTER_NAME": "Test Committer",
            "GIT_COMMITTER_EMAIL": "committer@example.com",
            "GIT_CONFIG_GLOBAL": os.devnull,
            "GIT_CONFIG_NOSYSTEM": "1",
        }
        if date:
            env["GIT_AUTHOR_DATE"] = date
            env["GIT_COMMITTER_DATE"] = date
        return env

    def git(self, *args: str, date: str | None = None) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.root,
            env=self._env(date),
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    def write(self, rel: str, content: str | bytes) -> Path:
        path = self.root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
        return path

    def read(self, rel: str) -> bytes:
        return (self.root / rel).read_bytes()

    def commit(self, year: int, message: str = "change", month: int = 6) -> str:
        """Stage everything and commit with author/committer date in `year`."""
        date = f"{year}-{month:02d}-15 12:00:00 +0000"
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message, date=date)
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> GitFixture:
    """Initialise an empty repository under tmp_path."""
    root = tmp_path / "repo"
    root.mkdir()
    # Never let git discover an enclosing repository
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    repo = GitFixture(root)
    repo.git("init", "-q")
    return repo


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove git-copyright variables for the duration of a test (restored afterwards)."""
    for name in (ENV_HOLDER, ENV_CONFIG):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def make_config(clean_env):
    """Factory for an EffectiveConfig over the built-in defaults."""
    defaults = load_defaults()

    def _make(root: Path, **overrides) -> EffectiveConfig:
        values = {
            "repo_root": root,
            "holder": "Acme Ltd.",
            "comment_styles": dict(defaults.comment_styles),
            "ignore_patterns": tuple(defaults.ignore_files + defaults.ignore_dirs),
            "max_parallel": 4,
        }
        values.update(overrides)
        return EffectiveConfig(**values)

    return _make
