# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/__init__.py
"""
git-copyright: keep copyright notices in sync with git history.

This package exposes a Typer-based CLI and a small set of modules for:
- history queries (first/last commit year per file, following renames)
- comment style resolution per file type
- header scanning, year-range merging and atomic header rewriting
- a change-safety gate that leaves files with local edits alone
- a run coordinator that processes files on a thread pool

Versioning policy: semantic (MAJOR.MINOR.PATCH)
"""

__all__ = ["__version__"]

# Keep in sync with pyproject.toml [project].version
__version__ = "0.4.0"
