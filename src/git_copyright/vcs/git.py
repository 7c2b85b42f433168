# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/vcs/git.py
"""
Thin wrapper around the git binary.

Every query is a read-only subprocess call run from the worktree root. Output
is decoded as utf-8 with surrogateescape so unusual path bytes survive.
"""
from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from git_copyright.errors import ConfigurationError, GitCommandError

logger = logging.getLogger(__name__)

GIT_TIMEOUT_S = 120
_RECORD_SEP = "\x1e"


@dataclass(frozen=True)
class CommitRecord:
    """One commit touching a file, with the file's path at that commit."""

    sha: str
    timestamp: datetime
    path: str


def _run_git(args: list[str], cwd: Path, timeout_s: int = GIT_TIMEOUT_S) -> str:
    cmd = ["git", "-c", "core.quotepath=off", *args]
    # status/diff must not take index.lock; several workers query concurrently
    env = {**os.environ, "GIT_OPTIONAL_LOCKS": "0"}
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            env=env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
            timeout=timeout_s,
            check=True,
        )
    except subprocess.TimeoutExpired as e:
        raise GitCommandError(args, None, f"timed out after {timeout_s}s") from e
    except subprocess.CalledProcessError as e:
        raise GitCommandError(args, e.returncode, e.stderr or "") from e
    except OSError as e:
        raise GitCommandError(args, None, str(e)) from e
    return result.stdout


class GitRepo:
    def __init__(self, root: Path, timeout_s: int = GIT_TIMEOUT_S) -> None:
        self.root = Path(root)
        self.timeout_s = timeout_s

    @classmethod
    def open(cls, path: Path, timeout_s: int = GIT_TIMEOUT_S) -> GitRepo:
        """
        Locate the worktree containing `path`.

        Raises:
            ConfigurationError: `path` does not exist or is not inside a git worktree.
        """
        path = Path(path)
        if not path.is_dir():
            raise ConfigurationError(f"Repository root not found: {path}")
        try:
            top = _run_git(["rev-parse", "--show-toplevel"], cwd=path, timeout_s=timeout_s)
        except GitCommandError as e:
            raise ConfigurationError(f"Not a git repository: {path} ({e})") from e
        return cls(Path(top.strip()), timeout_s=timeout_s)

    def _run(self, args: list[str]) -> str:
        return _run_git(args, cwd=self.root, timeout_s=self.timeout_s)

    def tracked_files(self, ref: str = "HEAD") -> list[str]:
        """
        Regular files in the tree of `ref` that exist in the working tree.

        Submodules, symlinks and files deleted locally are dropped. The list is
        sorted and free of duplicates.
        """
        out = self._run(["ls-tree", "-r", "-z", "--name-only", ref])
        files = []
        for name in sorted({n for n in out.split("\0") if n}):
            path = self.root / name
            if path.is_symlink() or not path.is_file():
                logger.debug("Skipping %s (not a regular file in the working tree)", name)
                continue
            files.append(name)
        return files

    def log_follow(self, path: str) -> list[CommitRecord]:
        """
        Commits touching `path`, following renames, earliest first.

        Merge commits are included (``-m``) so changes that only landed through
        a merge still count.
        """
        out = self._run(
            [
                "log",
                "--follow",
                "-m",
                "--name-only",
                f"--format={_RECORD_SEP}%H %cI",
                "--",
                path,
            ]
        )
        records: list[CommitRecord] = []
        seen: set[str] = set()
        for chunk in out.split(_RECORD_SEP):
            chunk = chunk.strip("\n")
            if not chunk:
                continue
            header, _, names = chunk.partition("\n")
            sha, _, stamp = header.partition(" ")
            if sha in seen:
                continue
            seen.add(sha)
            path_at_commit = next((n for n in names.splitlines() if n.strip()), path)
            records.append(CommitRecord(sha, datetime.fromisoformat(stamp.strip()), path_at_commit))
        records.reverse()
        return records

    def shallow_boundaries(self) -> frozenset[str]:
        """Commit ids at which a shallow clone's history is cut (empty when complete)."""
        shallow_file = self.root / self._run(["rev-parse", "--git-path", "shallow"]).strip()
        if not shallow_file.exists():
            return frozenset()
        return frozenset(
            line.strip() for line in shallow_file.read_text(encoding="utf-8").splitlines() if line.strip()
        )

    def is_modified(self, path: str) -> bool:
        """True if `path` has staged or unstaged changes relative to HEAD."""
        out = self._run(["status", "--porcelain=v1", "-z", "--untracked-files=no", "--", path])
        return bool(out.strip("\0"))
