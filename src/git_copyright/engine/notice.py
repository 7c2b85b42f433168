# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/engine/notice.py
"""
Canonical notice grammar.

The writer renders notices with `render_text` and the scanner recognises them
with `match_notice`; both live here so they cannot drift apart.

Rendered form:
    Copyright (c) <YYYY | YYYY-YYYY> <holder>

Recognised forms (any case, "(c)" and "©" interchangeable):
    [(c)] Copyright [(c)] <years>[,;.] [holder] [All rights reserved.]
    (c) Copyright <holder> <years> [All rights reserved.]

The second form is the one older git-copyright releases wrote. <years> is a
year, a year range, or a comma-separated list of those. A token that starts
with a digit but is not well formed (``2019-``, ``20192021``) still marks the
line as a notice, but yields no range. A trailing "All rights reserved." clause
is not part of the notice and survives a rewrite.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from git_copyright.engine.models import YearRange

NOTICE_TEMPLATE = "Copyright (c) {years} {holder}"

_MARK = r"(?:\(c\)|©)"
_YEARS = r"\d{4}(?:-\d{4})?(?:\s*,\s*\d{4}(?:-\d{4})?)*"
_TAIL = r"(?P<tail>(?:\s*[,;]\s*|\s+)all\s+rights\s+reserved\.?)?\s*$"

_NOTICE_RE = re.compile(
    rf"(?P<notice>(?:{_MARK}\s*)?copyright\b(?:\s*{_MARK})?\s*"
    rf"(?:(?P<years>{_YEARS})(?=[\s,;.]|$)|(?P<bad>\d\S*))"
    rf"[,;.]?(?:\s*(?P<holder>\S.*?))??){_TAIL}",
    re.IGNORECASE,
)
_LEGACY_RE = re.compile(
    rf"(?P<notice>{_MARK}\s*copyright\s+(?P<holder>\S.*?)\s+"
    rf"(?:(?P<years>{_YEARS})|(?P<bad>\d\S*?))[,;.]?){_TAIL}",
    re.IGNORECASE,
)
_RANGE_RE = re.compile(r"^(\d{4})(?:-(\d{4}))?$")


@dataclass(frozen=True)
class NoticeMatch:
    """A notice found in a piece of comment text."""

    start: int  # character offset of the notice within the searched text
    end: int  # character offset just past the notice (trailing blanks and clause excluded)
    years: YearRange | None
    holder: str
    tail: str = ""  # text kept after the notice, e.g. " All rights reserved."


def render_text(years: YearRange, holder: str) -> str:
    return NOTICE_TEMPLATE.format(years=years.render(), holder=holder)


def parse_years(token: str) -> YearRange | None:
    """
    Parse ``YYYY``, ``YYYY-YYYY`` or a comma-separated list of those.

    The list collapses to its overall span. Anything else, including a
    reversed range, is None.
    """
    result: YearRange | None = None
    for part in token.split(","):
        m = _RANGE_RE.match(part.strip())
        if not m:
            return None
        start = int(m.group(1))
        try:
            years = YearRange(start, int(m.group(2))) if m.group(2) else YearRange.single(start)
        except ValueError:
            return None
        result = years if result is None else result.union(years)
    return result


def match_notice(text: str) -> NoticeMatch | None:
    """
    Match a notice at the start of `text` (leading whitespace allowed).

    `text` is the content of one comment line with the comment markers removed.
    """
    stripped = text.lstrip()
    offset = len(text) - len(stripped)
    m = _NOTICE_RE.match(stripped) or _LEGACY_RE.match(stripped)
    if not m:
        return None
    return NoticeMatch(
        start=offset + m.start("notice"),
        end=offset + m.end("notice"),
        years=parse_years(m.group("years")) if m.group("years") else None,
        holder=(m.group("holder") or "").strip(),
        tail=(m.group("tail") or "").rstrip(),
    )
