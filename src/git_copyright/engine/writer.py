# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/engine/writer.py
"""
Header writer: build the new file content and commit it atomically.

Only the notice bytes change. Everything else (preamble, remaining header
comments, body, trailing whitespace, line endings) is carried over verbatim.
"""
from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from git_copyright.engine.models import CommentDescriptor, HeaderRegion, YearRange
from git_copyright.engine.notice import render_text
from git_copyright.engine.scanner import UTF8_BOM
from git_copyright.engine.styles import wrap
from git_copyright.errors import WriteFailure
from git_copyright.utils.io import write_bytes_atomic

logger = logging.getLogger(__name__)


class WriteOutcome(str, Enum):
    WRITTEN = "written"
    UNCHANGED = "unchanged"


def render_notice(
    years: YearRange, holder: str, style: CommentDescriptor, newline: bytes = b"\n"
) -> bytes:
    """Full notice line, comment-wrapped and terminated."""
    return wrap(render_text(years, holder), style).encode("utf-8") + newline


def _terminator(line: bytes) -> bytes:
    if line.endswith(b"\r\n"):
        return b"\r\n"
    if line.endswith(b"\n"):
        return b"\n"
    return b""


def _starts_with_blank_line(data: bytes) -> bool:
    nl = data.find(b"\n")
    first = data if nl == -1 else data[:nl]
    return not first.strip()


def build_content(
    content: bytes,
    region: HeaderRegion,
    years: YearRange,
    holder: str,
    style: CommentDescriptor,
) -> bytes:
    """
    Return `content` with its notice set to `years` / `holder`.

    - existing standalone notice line: the line is replaced, its terminator kept;
    - existing notice inside a multi-line block comment: only the notice text
      is replaced, the comment delimiters stay where they are;
    - no notice: a notice line is inserted right after the preamble, followed by
      one blank line unless the rest of the file is empty or already starts
      with a blank line.
    """
    start, end = region.notice_span

    if region.notice_found and region.inline:
        return content[:start] + render_text(years, holder).encode("utf-8") + content[end:]

    if region.notice_found:
        notice = render_notice(years, holder, style, newline=_terminator(content[start:end]))
        return content[:start] + notice + content[end:]

    head = content[: region.preamble_end]
    rest = content[region.preamble_end :]
    body_of_head = head[len(UTF8_BOM) :] if head.startswith(UTF8_BOM) else head
    if body_of_head and not head.endswith(b"\n"):
        # shebang/declaration on the last line without a terminator
        head += region.newline

    notice = render_notice(years, holder, style, newline=region.newline)
    if rest and not _starts_with_blank_line(rest):
        notice += region.newline
    return head + notice + rest


def apply(path: Path, original: bytes, new_content: bytes) -> WriteOutcome:
    """
    Write `new_content` to `path` unless it equals `original`.

    Raises:
        WriteFailure: the atomic replace failed; `path` is left untouched.
    """
    if new_content == original:
        return WriteOutcome.UNCHANGED
    try:
        write_bytes_atomic(path, new_content)
    except OSError as e:
        raise WriteFailure(f"Could not write {path}: {e}") from e
    logger.debug("Rewrote %s (%d -> %d bytes)", path, len(original), len(new_content))
    return WriteOutcome.WRITTEN
