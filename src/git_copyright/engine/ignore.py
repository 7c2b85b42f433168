# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/engine/ignore.py
"""
Ignore predicate compiled from glob patterns.

Patterns use fnmatch semantics on POSIX paths relative to the repository root,
case-sensitive, where ``*`` also crosses ``/``. Two conveniences:
  - ``dir/`` is shorthand for ``dir/**``;
  - ``**/name/**`` also matches ``name/**`` at the top level.
"""
from __future__ import annotations

import fnmatch
import logging
import re
from collections.abc import Iterable

logger = logging.getLogger(__name__)


def _expand(pattern: str) -> list[str]:
    if pattern.endswith("/"):
        pattern += "**"
    variants = [pattern]
    if pattern.startswith("**/"):
        variants.append(pattern[3:])
    return variants


class IgnoreMatcher:
    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns: tuple[str, ...] = tuple(p.strip() for p in patterns if p.strip())
        self._regexes: list[re.Pattern[str]] = []
        for pattern in self.patterns:
            for variant in _expand(pattern):
                self._regexes.append(re.compile(fnmatch.translate(variant)))
        if not self.patterns:
            logger.warning("No glob patterns to ignore found")

    def is_ignored(self, path: str) -> bool:
        if path.startswith("./"):
            path = path[2:]
        return any(rx.match(path) for rx in self._regexes)

    __call__ = is_ignored
