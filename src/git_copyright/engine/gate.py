# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/engine/gate.py
from __future__ import annotations

import logging

from git_copyright.errors import UncommittedChanges

logger = logging.getLogger(__name__)


class ChangeSafetyGate:
    """
    Refuse to rewrite files that carry local (staged or unstaged) edits.

    A rewrite on top of unreviewed edits would mix the notice change into
    someone else's diff. `ignore_uncommitted` turns the gate off completely.
    """

    def __init__(self, repo, ignore_uncommitted: bool = False) -> None:
        self._repo = repo
        self.ignore_uncommitted = ignore_uncommitted

    def check(self, path: str) -> None:
        """
        Raises:
            UncommittedChanges: the working tree copy differs from HEAD.
            GitCommandError: git status could not be run.
        """
        if self.ignore_uncommitted:
            return
        if self._repo.is_modified(path):
            logger.debug("%s has uncommitted changes", path)
            raise UncommittedChanges("File has uncommitted changes; commit or stash them first")
