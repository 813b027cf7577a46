"""Locations for saved state and exported standby reports."""

from __future__ import annotations

import errno
import logging
import re
from pathlib import Path
from typing import Final

from standbydesk.settings import app_home

_LOGGER = logging.getLogger(__name__)

_UNSAFE_RE: Final[re.Pattern[str]] = re.compile(r"[^\w.\- ]+")
_RUNS_RE: Final[re.Pattern[str]] = re.compile(r"(\s)+|(\.){2,}")
_MAX_STEM_LEN: Final[int] = 100
REPORT_SUFFIX: Final[str] = "_standby.txt"
DEFAULT_REPORT_NAME: Final[str] = "standby.txt"


def exports_dir() -> Path:
    """Return ``<home>/Exports``, creating it on first use."""
    target = app_home() / "Exports"
    target.mkdir(parents=True, exist_ok=True)
    return target


def default_state_path() -> Path:
    return app_home() / "state.json"


def sanitize_filename(stem: str) -> str:
    """Return ``stem`` with characters unsafe in file names replaced by ``_``.

    Accented letters are kept, so ``órarend 2024/25`` becomes ``órarend 2024_25``.
    """
    cleaned = _UNSAFE_RE.sub("_", (stem or "").strip())
    cleaned = _RUNS_RE.sub(lambda match: match.group(1) or ".", cleaned)
    cleaned = cleaned.strip(" .")[:_MAX_STEM_LEN].rstrip(" .")
    return cleaned


def report_filename(source_basename: str = "") -> str:
    """Return the report file name derived from the timetable's file name."""
    stem = sanitize_filename(Path(source_basename).stem) if source_basename else ""
    if not stem.strip("_"):
        return DEFAULT_REPORT_NAME
    return f"{stem}{REPORT_SUFFIX}"


def safe_write_text(path: Path, text: str) -> Path:
    """Write ``text`` to ``path``; on EPERM/EACCES write into Exports instead."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        if exc.errno not in (errno.EPERM, errno.EACCES):
            raise
        redirected = exports_dir() / path.name
        _LOGGER.warning("Report %s not writable (errno=%s); wrote %s instead", path, exc.errno, redirected)
        redirected.write_text(text, encoding="utf-8")
        return redirected
    return path


__all__ = [
    "DEFAULT_REPORT_NAME",
    "default_state_path",
    "exports_dir",
    "report_filename",
    "safe_write_text",
    "sanitize_filename",
]
