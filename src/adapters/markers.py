"""Filesystem inspection for the startup sequence.

Marker files, the database debug log and the auth-state file are the only
state the runner has. Everything here tolerates files that do not exist yet:
the database creates them on its own schedule.
"""

from __future__ import annotations

from pathlib import Path


def count_matching_lines(path: Path, phrase: str) -> int:
    """Number of lines in `path` containing `phrase`.

    An unreadable file (missing, permissions, ...) counts as 0 so the caller
    keeps polling.
    """

    try:
        with path.open("r", encoding="utf-8", errors="replace") as handle:
            return sum(1 for line in handle if phrase in line)
    except OSError:
        return 0


def touch_marker(path: Path) -> Path:
    """Create (or refresh) an empty marker file."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.touch()
    return path


def remove_marker(path: Path) -> bool:
    """Best-effort delete. Returns True if the file is gone afterwards."""

    try:
        path.unlink(missing_ok=True)
    except OSError:
        return False
    return True


def read_script(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")
