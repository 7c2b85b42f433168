# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/engine/models.py
"""
Value types shared by the synchronization engine.

All types here are immutable and scoped to a single file of a single run.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, order=True)
class YearRange:
    """Inclusive span of calendar years, rendered as ``YYYY`` or ``YYYY-YYYY``."""

    start: int
    end: int

    def __post_init__(self) -> None:
        for year in (self.start, self.end):
            if not 1000 <= year <= 9999:
                raise ValueError(f"Year must have four digits, got {year}")
        if self.start > self.end:
            raise ValueError(f"Year range start {self.start} is after end {self.end}")

    @classmethod
    def single(cls, year: int) -> YearRange:
        return cls(year, year)

    def union(self, other: YearRange) -> YearRange:
        return YearRange(min(self.start, other.start), max(self.end, other.end))

    def render(self) -> str:
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}-{self.end}"

    def __str__(self) -> str:
        return self.render()


# -------------------------
# Comment descriptors (closed variant)
# -------------------------


@dataclass(frozen=True)
class LineStyle:
    """Comment introduced by a prefix and running to the end of the line (``#``, ``//``)."""

    prefix: str


@dataclass(frozen=True)
class BlockStyle:
    """Comment delimited by an open/close pair (``/*`` ``*/``, ``<!--`` ``-->``)."""

    open: str
    close: str


@dataclass(frozen=True)
class Unsupported:
    """No known comment syntax; files resolving to this are skipped."""


UNSUPPORTED = Unsupported()

CommentDescriptor = LineStyle | BlockStyle | Unsupported


# -------------------------
# Scanner output
# -------------------------


@dataclass(frozen=True)
class HeaderRegion:
    """
    Classified leading portion of a file.

    Attributes:
        preamble_end: Byte offset just past the preserved BOM/shebang/declaration.
        notice_span: (start, end) byte span of the existing notice. Empty
            (start == end == preamble_end) when no notice was found.
        existing_range: Year range parsed from the existing notice, or None when
            absent or malformed.
        notice_found: Whether a notice was recognised.
        inline: The notice lives inside a multi-line block comment; the span
            covers only the notice text, not the comment delimiters.
        newline: Line terminator style of the file.
    """

    preamble_end: int
    notice_span: tuple[int, int]
    existing_range: YearRange | None = None
    notice_found: bool = False
    inline: bool = False
    newline: bytes = b"\n"


# -------------------------
# Run results
# -------------------------


class Outcome(str, Enum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    WOULD_UPDATE = "would_update"
    SKIPPED_IGNORED = "skipped_ignored"
    SKIPPED_UNSUPPORTED = "skipped_unsupported"
    SKIPPED_UNCOMMITTED = "skipped_uncommitted"
    FAILED = "failed"


# Outcomes that make the process exit non-zero
FAILING_OUTCOMES = frozenset(
    {Outcome.FAILED, Outcome.SKIPPED_UNCOMMITTED, Outcome.WOULD_UPDATE}
)


@dataclass(frozen=True)
class FileResult:
    path: str
    outcome: Outcome
    reason: str = ""
    years: YearRange | None = None

    def as_record(self) -> dict[str, str]:
        """Flat dict used for JSON run logs."""
        return {
            "path": self.path,
            "outcome": self.outcome.value,
            "reason": self.reason,
            "years": self.years.render() if self.years else "",
        }


@dataclass(frozen=True)
class RunSummary:
    results: tuple[FileResult, ...] = field(default_factory=tuple)
    duration_s: float = 0.0

    def counts(self) -> dict[Outcome, int]:
        counter = Counter(r.outcome for r in self.results)
        return {outcome: counter.get(outcome, 0) for outcome in Outcome}

    def by_outcome(self, outcome: Outcome) -> list[FileResult]:
        return [r for r in self.results if r.outcome is outcome]

    @property
    def ok(self) -> bool:
        return not any(r.outcome in FAILING_OUTCOMES for r in self.results)

    def exit_code(self) -> int:
        return 0 if self.ok else 1
