# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/engine/styles.py
"""
Comment style resolution and wrapping.

A file's style is looked up by full file name first (``Makefile``,
``Dockerfile``), then by its case-sensitive extension. Anything else is
UNSUPPORTED and gets skipped by the coordinator.
"""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import PurePosixPath

from git_copyright.engine.models import (
    UNSUPPORTED,
    BlockStyle,
    CommentDescriptor,
    LineStyle,
    Unsupported,
)
from git_copyright.errors import UnsupportedFileType

CommentSign = str | tuple[str, str]


def descriptor_from_sign(sign: CommentSign) -> LineStyle | BlockStyle:
    """Build a descriptor from a config value: ``"#"`` or ``("/*", "*/")``."""
    if isinstance(sign, str):
        return LineStyle(sign)
    open_, close = sign
    return BlockStyle(open_, close)


class CommentStyleResolver:
    """Pure lookup from file path to CommentDescriptor."""

    def __init__(self, styles: Mapping[str, LineStyle | BlockStyle]) -> None:
        self._styles = dict(styles)

    @classmethod
    def from_signs(cls, signs: Mapping[str, CommentSign]) -> CommentStyleResolver:
        return cls({key: descriptor_from_sign(sign) for key, sign in signs.items()})

    def resolve(self, path: str) -> CommentDescriptor:
        name = PurePosixPath(path).name
        if name in self._styles:
            return self._styles[name]
        suffix = PurePosixPath(name).suffix
        if suffix:
            return self._styles.get(suffix[1:], UNSUPPORTED)
        return UNSUPPORTED


def wrap(text: str, style: CommentDescriptor) -> str:
    """Embed `text` in a single-line comment of the given style."""
    if isinstance(style, LineStyle):
        return f"{style.prefix} {text}"
    if isinstance(style, BlockStyle):
        return f"{style.open} {text} {style.close}"
    if isinstance(style, Unsupported):
        raise UnsupportedFileType("No comment style to wrap the notice in")
    raise TypeError(f"Unknown comment descriptor: {style!r}")


def opener(style: CommentDescriptor) -> str:
    """The token that starts a comment in this style."""
    if isinstance(style, LineStyle):
        return style.prefix
    if isinstance(style, BlockStyle):
        return style.open
    if isinstance(style, Unsupported):
        raise UnsupportedFileType("Unsupported style has no comment opener")
    raise TypeError(f"Unknown comment descriptor: {style!r}")
