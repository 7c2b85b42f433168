# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/orchestrator/coordinator.py
"""
Run coordinator for `git-copyright`.

This module:
- Enumerates files tracked at the configured ref (HEAD by default)
- Filters them through the ignore predicate (ignored files are never opened)
- Processes each remaining file on a thread pool:
  style -> history range -> scan -> merge -> build -> gate -> atomic write
- Collects one FileResult per file in the main thread (as_completed fan-in)
- Optionally appends JSON run records to a log file
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from git_copyright.config.schema import EffectiveConfig
from git_copyright.engine import writer
from git_copyright.engine.gate import ChangeSafetyGate
from git_copyright.engine.ignore import IgnoreMatcher
from git_copyright.engine.merge import merge
from git_copyright.engine.models import FileResult, Outcome, RunSummary, Unsupported
from git_copyright.engine.scanner import scan
from git_copyright.engine.styles import CommentStyleResolver
from git_copyright.errors import (
    AmbiguousNotice,
    GitCommandError,
    HistoryUnavailable,
    UncommittedChanges,
    UnsupportedFileType,
    WriteFailure,
)
from git_copyright.utils.io import append_log_record, read_bytes
from git_copyright.vcs.git import GitRepo
from git_copyright.vcs.history import HistoryQuery

logger = logging.getLogger(__name__)


# -------------------------
# Per-file processing
# -------------------------


def process_file(
    path: str,
    config: EffectiveConfig,
    resolver: CommentStyleResolver,
    history: HistoryQuery,
    gate: ChangeSafetyGate,
) -> FileResult:
    """
    Bring the notice of a single file up to date.

    Per-file errors are turned into a FileResult; nothing raised here is
    expected to escape except programming errors.
    """
    style = resolver.resolve(path)
    if isinstance(style, Unsupported):
        return FileResult(path, Outcome.SKIPPED_UNSUPPORTED, "No comment style for this file type")

    abs_path = config.repo_root / path
    try:
        history_years = history.history_range(path)
        try:
            content = read_bytes(abs_path)
        except OSError as e:
            return FileResult(path, Outcome.FAILED, f"Could not read file: {e}")

        region = scan(content, style)
        years = merge(history_years, region.existing_range)
        new_content = writer.build_content(content, region, years, config.holder, style)

        if new_content == content:
            return FileResult(path, Outcome.UNCHANGED, "Notice already correct", years)

        if region.notice_found:
            old = region.existing_range.render() if region.existing_range else "unparseable years"
            change = f"Notice updated ({old} -> {years})"
        else:
            change = f"Notice added ({years})"

        if config.check:
            return FileResult(path, Outcome.WOULD_UPDATE, change, years)

        gate.check(path)
        writer.apply(abs_path, content, new_content)
        return FileResult(path, Outcome.UPDATED, change, years)

    except UnsupportedFileType as e:
        return FileResult(path, Outcome.SKIPPED_UNSUPPORTED, str(e))
    except UncommittedChanges as e:
        return FileResult(path, Outcome.SKIPPED_UNCOMMITTED, str(e))
    except (HistoryUnavailable, AmbiguousNotice, WriteFailure, GitCommandError) as e:
        return FileResult(path, Outcome.FAILED, str(e))


# -------------------------
# Main entry point
# -------------------------


def run_copyright_sync(
    config: EffectiveConfig,
    repo: GitRepo | None = None,
    log_path: Path | None = None,
) -> RunSummary:
    """
    Synchronize copyright notices for every tracked file of the repository.

    Args:
        config: Frozen run configuration
        repo: GitRepo to query (defaults to one rooted at config.repo_root)
        log_path: Optional JSONL run log (appended under a file lock)

    Returns:
        RunSummary with one FileResult per tracked file, sorted by path.

    Raises:
        GitCommandError: the tracked-file list could not be read (startup error).
    """
    start = time.perf_counter()
    repo = repo or GitRepo(config.repo_root)

    resolver = CommentStyleResolver.from_signs(config.comment_styles)
    ignore = IgnoreMatcher(config.ignore_patterns)
    history = HistoryQuery(repo)
    gate = ChangeSafetyGate(repo, ignore_uncommitted=config.ignore_uncommitted)

    candidates = repo.tracked_files(config.ref)

    results: list[FileResult] = []
    to_process: list[str] = []
    for path in candidates:
        if ignore.is_ignored(path):
            results.append(FileResult(path, Outcome.SKIPPED_IGNORED, "Matches an ignore pattern"))
        else:
            to_process.append(path)

    logger.info(
        "Checking %d files (%d ignored) with %d workers",
        len(to_process),
        len(results),
        config.max_parallel,
    )
    if log_path:
        append_log_record(
            log_path,
            {
                "event": "run_started",
                "repo_root": str(config.repo_root),
                "ref": config.ref,
                "holder": config.holder,
                "candidates": len(candidates),
                "to_process": len(to_process),
                "max_parallel": config.max_parallel,
                "ignore_uncommitted": config.ignore_uncommitted,
                "check": config.check,
            },
        )

    # Use thread pool for concurrency; results are gathered only in this thread
    with ThreadPoolExecutor(max_workers=config.max_parallel) as executor:
        futures = {
            executor.submit(process_file, path, config, resolver, history, gate): path
            for path in to_process
        }

        for future in as_completed(futures):
            path = futures[future]
            try:
                result = future.result()
            except Exception as e:
                logger.exception("Unexpected error processing %s", path)
                result = FileResult(path, Outcome.FAILED, f"Unexpected error: {e!r}")

            results.append(result)
            if result.outcome is Outcome.FAILED:
                logger.warning("%s: %s", path, result.reason)
            else:
                logger.debug("%s: %s (%s)", path, result.outcome.value, result.reason)

            if log_path and result.outcome is not Outcome.UNCHANGED:
                append_log_record(log_path, {"event": "file_result", **result.as_record()})

    summary = RunSummary(
        results=tuple(sorted(results, key=lambda r: r.path)),
        duration_s=time.perf_counter() - start,
    )

    if log_path:
        append_log_record(
            log_path,
            {
                "event": "run_summary",
                **{outcome.value: count for outcome, count in summary.counts().items()},
                "duration_s": round(summary.duration_s, 3),
                "exit_code": summary.exit_code(),
            },
        )
    return summary
