# Copyright (C) 2025 Francesca Falcone and Mattia Tagliente
# All Rights Reserved

# git_copyright/utils/io.py
from __future__ import annotations

import json
import os
import stat
import tempfile
from datetime import UTC, datetime
from pathlib import Path

from filelock import FileLock


def read_bytes(path: Path) -> bytes:
    return path.read_bytes()


# -------------------------
# Atomic I/O Utilities
# -------------------------


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """
    Replace `path` with `data` atomically using temp file + rename.

    Args:
        path: Existing target file
        data: Complete new content

    The temp file is created in the target's directory so os.replace() never
    crosses a filesystem boundary. Permission bits of the original file are
    copied onto the replacement. Readers see either the old or the new
    content, never a truncated file.
    """
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    tmp_path = Path(tmp_name)

    try:
        # Write to temp file with flush + fsync for durability
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        if path.exists():
            os.chmod(tmp_path, stat.S_IMODE(path.stat().st_mode))

        # Atomic rename (replaces existing file)
        os.replace(tmp_path, path)
    except Exception:
        # Clean up temp file on failure
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def append_log_record(path: Path, record: str | dict) -> None:
    """
    Append a log record to a file with ISO8601 timestamp prefix.
    Thread-safe via file locking.

    Args:
        path: Log file path
        record: String message or dict to serialize as JSON

    Each line is prefixed with UTC timestamp in ISO8601 format.
    Dict records are serialized as single-line JSON.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    lock_path = path.with_suffix(path.suffix + ".lock")

    if isinstance(record, dict):
        record_text = json.dumps(record, ensure_ascii=False)
    else:
        record_text = str(record)

    timestamp = datetime.now(UTC).isoformat()
    line = f"{timestamp} {record_text}\n"

    with FileLock(lock_path, timeout=10):
        with path.open("a", encoding="utf-8") as f:
            f.write(line)
