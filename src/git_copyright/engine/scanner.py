# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/engine/scanner.py
"""
Header scanner: classify the leading bytes of a file.

The scanner works on raw bytes so that spans map exactly onto the original
content; only comment bodies are decoded (utf-8, surrogateescape) for matching.

Layout recognised, top to bottom:
  [UTF-8 BOM] [#! shebang line] [declaration line] [leading comment block] ...

The declaration line is either a coding pragma written as a comment of the
file's own style (``# -*- coding: utf-8 -*-``) or an XML/DOCTYPE/PHP opener.
A coding pragma on line 2 below a plain comment line also stays in place.
Only the leading comment block (comment lines and blank lines) is searched for
a notice; the walk ends at the first line of anything else.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass

from git_copyright.engine.models import (
    BlockStyle,
    CommentDescriptor,
    HeaderRegion,
    LineStyle,
    Unsupported,
)
from git_copyright.engine.notice import match_notice
from git_copyright.engine.styles import opener
from git_copyright.errors import AmbiguousNotice, BinaryContent, UnsupportedFileType

logger = logging.getLogger(__name__)

BINARY_SNIFF_BYTES = 8192
UTF8_BOM = b"\xef\xbb\xbf"

_CODING_RE = re.compile(rb"coding[:=][ \t]*[-\w.]+")
_DECLARATION_RE = re.compile(rb"^\s*(<\?xml\b|<!doctype\b|<\?php\b)", re.IGNORECASE)


@dataclass(frozen=True)
class _CommentLine:
    start: int  # first byte of the line
    next: int  # first byte of the following line (terminator included before it)
    body_start: int  # comment text, markers removed
    body_end: int
    standalone: bool  # the line holds nothing but this comment


def detect_newline(content: bytes) -> bytes:
    """Line terminator of the first line; LF when the file has none."""
    idx = content.find(b"\n")
    if idx > 0 and content[idx - 1 : idx] == b"\r":
        return b"\r\n"
    return b"\n"


def _line_bounds(content: bytes, pos: int) -> tuple[int, int]:
    """Return (end of line text without terminator, start of next line)."""
    nl = content.find(b"\n", pos)
    if nl == -1:
        end = nxt = len(content)
    else:
        end, nxt = nl, nl + 1
    if end > pos and content[end - 1 : end] == b"\r":
        end -= 1
    return end, nxt


def _is_comment(line: bytes, style: CommentDescriptor) -> bool:
    return line.lstrip().startswith(opener(style).encode("utf-8"))


def _is_coding_line(line: bytes, style: CommentDescriptor) -> bool:
    return _is_comment(line, style) and bool(_CODING_RE.search(line))


def _is_declaration(line: bytes, style: CommentDescriptor) -> bool:
    return bool(_DECLARATION_RE.match(line)) or _is_coding_line(line, style)


def _split_preamble(content: bytes, style: CommentDescriptor) -> tuple[int, int]:
    """
    Return (header_start, preamble_end).

    A coding pragma may also sit on line 2 below an ordinary comment (PEP 263).
    That comment then stays above the pragma: it is still searched for a
    notice, but a new notice goes below the pragma.
    """
    pos = len(UTF8_BOM) if content.startswith(UTF8_BOM) else 0
    if content.startswith(b"#!", pos):
        _, pos = _line_bounds(content, pos)
        shebang = True
    else:
        shebang = False
    if pos >= len(content):
        return pos, pos

    end, nxt = _line_bounds(content, pos)
    first = content[pos:end]
    if _is_declaration(first, style):
        return nxt, nxt
    if not shebang and nxt < len(content) and (not first.strip() or _is_comment(first, style)):
        end2, nxt2 = _line_bounds(content, nxt)
        if _is_coding_line(content[nxt:end2], style):
            return pos, nxt2
    return pos, pos


def find_preamble_end(content: bytes, style: CommentDescriptor) -> int:
    """Byte offset just past the BOM, shebang and declaration lines, if present."""
    return _split_preamble(content, style)[1]


def _skip_gutter(content: bytes, start: int, end: int, chars: bytes) -> int:
    """Advance `start` past leading blanks and any run of gutter characters."""
    while start < end and content[start : start + 1] in (b" ", b"\t"):
        start += 1
    gutter = {chars[i : i + 1] for i in range(len(chars))}
    while start < end and content[start : start + 1] in gutter:
        start += 1
    return start


def _leading_comment_lines(
    content: bytes, start: int, style: LineStyle | BlockStyle
) -> Iterator[_CommentLine]:
    """Yield comment lines of the leading comment block, blank lines skipped."""
    in_block = False
    pos = start
    while pos < len(content):
        end, nxt = _line_bounds(content, pos)
        line = content[pos:end]

        if in_block:
            close = style.close.encode("utf-8")
            close_idx = line.find(close)
            body_end = pos + close_idx if close_idx >= 0 else end
            body_start = _skip_gutter(content, pos, body_end, b"*")
            yield _CommentLine(pos, nxt, body_start, body_end, standalone=False)
            if close_idx >= 0:
                in_block = False
                if line[close_idx + len(close) :].strip():
                    return
            pos = nxt
            continue

        if not line.strip():
            pos = nxt
            continue

        lead = pos + len(line) - len(line.lstrip())
        if isinstance(style, LineStyle):
            prefix = style.prefix.encode("utf-8")
            if not content.startswith(prefix, lead, end):
                return
            body_start = _skip_gutter(content, lead + len(prefix), end, prefix)
            yield _CommentLine(pos, nxt, body_start, end, standalone=True)
        else:
            open_ = style.open.encode("utf-8")
            close = style.close.encode("utf-8")
            if not content.startswith(open_, lead, end):
                return
            after_open = lead + len(open_)
            close_idx = content.find(close, after_open, end)
            if close_idx >= 0:
                trailing = content[close_idx + len(close) : end].strip()
                body_start = _skip_gutter(content, after_open, close_idx, b"*")
                yield _CommentLine(pos, nxt, body_start, close_idx, standalone=not trailing)
                if trailing:
                    return
            else:
                in_block = True
                body_start = _skip_gutter(content, after_open, end, b"*")
                yield _CommentLine(pos, nxt, body_start, end, standalone=False)
        pos = nxt


def _char_to_byte(text: str, index: int) -> int:
    return len(text[:index].encode("utf-8", "surrogateescape"))


def scan(content: bytes, style: CommentDescriptor) -> HeaderRegion:
    """
    Classify the leading region of `content`.

    Raises:
        UnsupportedFileType: `style` is UNSUPPORTED.
        BinaryContent: a NUL byte appears in the first 8 KiB.
        AmbiguousNotice: more than one notice in the leading comment block.
    """
    if isinstance(style, Unsupported):
        raise UnsupportedFileType("No comment style configured")
    if not isinstance(style, (LineStyle, BlockStyle)):
        raise TypeError(f"Unknown comment descriptor: {style!r}")
    if b"\x00" in content[:BINARY_SNIFF_BYTES]:
        raise BinaryContent("File content looks binary")

    newline = detect_newline(content)
    header_start, preamble_end = _split_preamble(content, style)

    found: list[HeaderRegion] = []
    for line in _leading_comment_lines(content, header_start, style):
        body = content[line.body_start : line.body_end].decode("utf-8", "surrogateescape")
        match = match_notice(body)
        if match is None:
            continue
        if match.years is None:
            logger.debug("Notice found with unparseable years: %r", body.strip())
        # a trailing clause keeps the line; only the notice text is replaced
        standalone = line.standalone and not match.tail
        if standalone:
            span = (line.start, line.next)
        else:
            span = (
                line.body_start + _char_to_byte(body, match.start),
                line.body_start + _char_to_byte(body, match.end),
            )
        found.append(
            HeaderRegion(
                preamble_end=preamble_end,
                notice_span=span,
                existing_range=match.years,
                notice_found=True,
                inline=not standalone,
                newline=newline,
            )
        )

    if len(found) > 1:
        lines = ", ".join(str(content.count(b"\n", 0, r.notice_span[0]) + 1) for r in found)
        raise AmbiguousNotice(f"Multiple copyright notices in header (lines {lines})")
    if found:
        return found[0]
    return HeaderRegion(
        preamble_end=preamble_end,
        notice_span=(preamble_end, preamble_end),
        newline=newline,
    )
