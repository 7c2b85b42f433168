"""
Tests for comment style resolution/wrapping and the ignore predicate.
"""
from __future__ import annotations

import pytest

from git_copyright.config.loader import load_defaults
from git_copyright.engine.ignore import IgnoreMatcher
from git_copyright.engine.models import UNSUPPORTED, BlockStyle, LineStyle
from git_copyright.engine.styles import CommentStyleResolver, descriptor_from_sign, wrap
from git_copyright.errors import UnsupportedFileType


@pytest.fixture
def resolver() -> CommentStyleResolver:
    return CommentStyleResolver.from_signs(
        {
            "py": "#",
            "rs": "//",
            "css": ("/*", "*/"),
            "Makefile": "#",
            "in": "#",
            "Jenkinsfile": "//",
        }
    )


class TestCommentStyleResolver:
    def test_extension_lookup(self, resolver):
        assert resolver.resolve("src/pkg/module.py") == LineStyle("#")
        assert resolver.resolve("lib.rs") == LineStyle("//")
        assert resolver.resolve("static/site.css") == BlockStyle("/*", "*/")

    def test_full_file_name_lookup(self, resolver):
        assert resolver.resolve("Makefile") == LineStyle("#")
        assert resolver.resolve("ci/Jenkinsfile") == LineStyle("//")

    def test_extension_is_case_sensitive(self, resolver):
        assert resolver.resolve("module.PY") is UNSUPPORTED

    def test_unknown_types_are_unsupported(self, resolver):
        assert resolver.resolve("image.png") is UNSUPPORTED
        assert resolver.resolve("README") is UNSUPPORTED
        assert resolver.resolve(".gitignore") is UNSUPPORTED

    def test_last_suffix_decides(self, resolver):
        assert resolver.resolve("MANIFEST.in") == LineStyle("#")
        assert resolver.resolve("archive.tar.gz") is UNSUPPORTED

    def test_builtin_defaults(self):
        defaults = CommentStyleResolver.from_signs(load_defaults().comment_styles)
        assert defaults.resolve("file.rs") == LineStyle("//")
        assert defaults.resolve("file.py") == LineStyle("#")
        assert defaults.resolve("page.html") == BlockStyle("<!--", "-->")
        assert defaults.resolve("Dockerfile") == LineStyle("#")

    def test_descriptor_from_sign(self):
        assert descriptor_from_sign("--") == LineStyle("--")
        assert descriptor_from_sign(("(*", "*)")) == BlockStyle("(*", "*)")


class TestWrap:
    def test_line_style(self):
        assert wrap("Copyright (c) 2019 Acme", LineStyle("//")) == "// Copyright (c) 2019 Acme"

    def test_block_style(self):
        assert (
            wrap("Copyright (c) 2019 Acme", BlockStyle("/*", "*/"))
            == "/* Copyright (c) 2019 Acme */"
        )

    def test_unsupported_raises(self):
        with pytest.raises(UnsupportedFileType):
            wrap("text", UNSUPPORTED)

    def test_unknown_descriptor_raises(self):
        with pytest.raises(TypeError):
            wrap("text", "#")


class TestIgnoreMatcher:
    def test_default_patterns(self):
        defaults = load_defaults()
        matcher = IgnoreMatcher(defaults.ignore_files + defaults.ignore_dirs)

        kept = ["dev/myfile.rs", "general/myfile.py", "another_file.py", "dev/corner__pycache__case/myfile.py"]
        ignored = [
            "filter_me.txt",
            "./dev/I_want_out.txt",
            "dev/__pycache__/valid_file_in_ignored_folder.py",
            "__pycache__/top.py",
            "vendor/lib/thing.py",
            "LICENSE",
        ]
        for path in kept:
            assert not matcher.is_ignored(path), path
        for path in ignored:
            assert matcher.is_ignored(path), path

    def test_directory_shorthand(self):
        matcher = IgnoreMatcher(["build/"])
        assert matcher("build/out.py")
        assert matcher("build/deep/nested/out.py")
        assert not matcher("src/build.py")

    def test_case_sensitive(self):
        matcher = IgnoreMatcher(["*.md"])
        assert matcher("docs/guide.md")
        assert not matcher("docs/guide.MD")

    def test_empty_pattern_list_ignores_nothing(self):
        matcher = IgnoreMatcher([" ", ""])
        assert matcher.patterns == ()
        assert not matcher.is_ignored("anything.py")
