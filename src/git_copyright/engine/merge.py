# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/engine/merge.py
from __future__ import annotations

from git_copyright.engine.models import YearRange


def merge(history: YearRange, existing: YearRange | None) -> YearRange:
    """
    Combine the history-derived range with the range of an existing notice.

    The result never narrows what the notice already records: an earlier start
    carried over from another repository, or a shallow history, is kept.
    """
    if existing is None:
        return history
    return history.union(existing)
