"""Filesystem helpers used by the session and machine-id files."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def is_file_writable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.W_OK)


def is_dir_writable(path: Path) -> bool:
    """True if ``path`` is a writable directory, or could be created as one.

    A missing directory is judged by its nearest existing ancestor.
    """
    candidate = path
    while not candidate.exists():
        parent = candidate.parent
        if parent == candidate:
            return False
        candidate = parent
    return candidate.is_dir() and os.access(candidate, os.W_OK | os.X_OK)


def read_json(path: Path) -> Any:
    """Parse a JSON file. Raises OSError or ValueError on failure."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_json_atomic(path: Path, payload: Any) -> None:
    """Replace ``path`` with ``payload`` serialised as JSON.

    The data goes to a temp file in the same directory first and is then
    moved over the target, so readers never see a half-written file.
    """
    ensure_directory(path.parent)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
