# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/vcs/history.py
"""
History query interface: derive a file's year range from git history.

History is the only source of dates. When it cannot be read completely the
query fails with HistoryUnavailable instead of guessing a year.
"""
from __future__ import annotations

import logging

from git_copyright.engine.models import YearRange
from git_copyright.errors import GitCommandError, HistoryUnavailable
from git_copyright.vcs.git import CommitRecord, GitRepo

logger = logging.getLogger(__name__)


class HistoryQuery:
    def __init__(self, repo: GitRepo) -> None:
        self._repo = repo
        try:
            self._shallow = repo.shallow_boundaries()
        except GitCommandError as e:
            logger.warning("Could not determine shallow clone state: %s", e)
            self._shallow = frozenset()
        if self._shallow:
            logger.info("Repository is a shallow clone (%d boundary commits)", len(self._shallow))

    def commits(self, path: str) -> list[CommitRecord]:
        """
        Commits touching `path` across renames, earliest first.

        Raises:
            HistoryUnavailable: git failed, the path has no commits, or the
                earliest commit is a shallow-clone boundary.
        """
        try:
            records = self._repo.log_follow(path)
        except GitCommandError as e:
            raise HistoryUnavailable(f"Could not read history: {e}") from e
        except ValueError as e:
            raise HistoryUnavailable(f"Could not parse history: {e}") from e

        if not records:
            raise HistoryUnavailable("No commits found for path (untracked?)")
        if records[0].sha in self._shallow:
            raise HistoryUnavailable(
                "History is truncated by a shallow clone; run 'git fetch --unshallow'"
            )

        if len(records) == 1:
            logger.debug("File %s was only committed once", path)
        else:
            logger.debug("File %s was modified %d times", path, len(records))
        if records[0].path != path:
            logger.debug("File %s was introduced as %s", path, records[0].path)
        return records

    def history_range(self, path: str) -> YearRange:
        years = [record.timestamp.year for record in self.commits(path)]
        return YearRange(min(years), max(years))

    def first_year(self, path: str) -> int:
        return self.history_range(path).start

    def last_year(self, path: str) -> int:
        return self.history_range(path).end
