# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/errors.py
"""
Error types raised by the synchronization engine.

Per-file errors (everything except ConfigurationError) are caught by the run
coordinator and turned into a FileResult; they never abort a run.
"""
from __future__ import annotations


class CopyrightError(Exception):
    """Base class for all git-copyright errors."""


class ConfigurationError(CopyrightError):
    """Invalid holder name, config file or repository root. Fatal at startup."""


class GitCommandError(CopyrightError):
    """A git subcommand exited non-zero or could not be started."""

    def __init__(self, args: list[str], returncode: int | None, stderr: str = ""):
        self.cmd = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = self.stderr.splitlines()[0] if self.stderr else f"exit {returncode}"
        super().__init__(f"git {' '.join(self.cmd)} failed: {detail}")


class HistoryUnavailable(CopyrightError):
    """History for a path cannot be read (untracked, git failure, shallow clone)."""


class UncommittedChanges(CopyrightError):
    """The working tree copy of a file differs from its last commit."""


class UnsupportedFileType(CopyrightError):
    """No comment style is configured for the file."""


class BinaryContent(UnsupportedFileType):
    """File content looks binary; a notice cannot be embedded safely."""


class AmbiguousNotice(CopyrightError):
    """More than one copyright notice was found in the leading comment block."""


class WriteFailure(CopyrightError):
    """The atomic replace of a file failed."""
