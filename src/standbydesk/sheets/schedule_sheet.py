"""Weekly free-period matrices from a lesson-per-row timetable spreadsheet."""

from __future__ import annotations

import logging
import numbers
import re
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import pandas as pd

from standbydesk.errors import DocumentUnreadable
from standbydesk.model import WeeklyFreeMatrix
from standbydesk.settings import DEFAULT_SETTINGS, Settings

LOGGER = logging.getLogger(__name__)

DAY_COLUMN = 1
PERIOD_COLUMN = 2
PERSON_COLUMN = 6

SHEET_SUFFIXES = {".xlsx", ".xlsm", ".xls"}

_PERIOD_RE = re.compile(r"^\s*(\d+)\.?\s*$")


def parse_period(value: Any) -> Optional[int]:
    """Return the period number from a numeric cell or a ``"3."`` style label."""

    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
        if not number.is_integer():
            return None
        return int(number)
    match = _PERIOD_RE.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def schedules_from_frame(frame: pd.DataFrame, settings: Settings = DEFAULT_SETTINGS) -> List[WeeklyFreeMatrix]:
    """Build matrices from ``frame`` rows of (day, period, person) lessons."""

    if frame.shape[1] <= PERSON_COLUMN:
        raise DocumentUnreadable(
            f"Timetable sheet needs at least {PERSON_COLUMN + 1} columns, found {frame.shape[1]}"
        )

    weekdays = set(settings.weekdays)
    periods = set(settings.periods)
    taught: Dict[str, Dict[str, Set[int]]] = {}
    skipped = 0

    for row in frame.itertuples(index=False, name=None):
        day = row[DAY_COLUMN]
        person = row[PERSON_COLUMN]
        if not isinstance(day, str) or day.strip() not in weekdays:
            skipped += 1
            continue
        if person is None or (isinstance(person, float) and pd.isna(person)):
            skipped += 1
            continue
        name = str(person).strip()
        period = parse_period(row[PERIOD_COLUMN])
        if not name or period is None or period not in periods:
            skipped += 1
            continue
        per_day = taught.setdefault(name, {weekday: set() for weekday in settings.weekdays})
        per_day[day.strip()].add(period)

    if skipped:
        LOGGER.debug("Timetable sheet: %d rows ignored", skipped)

    schedules = [
        WeeklyFreeMatrix(
            person_name=name,
            free_periods={
                day: [period for period in settings.periods if period not in per_day[day]]
                for day in settings.weekdays
            },
        )
        for name, per_day in taught.items()
    ]
    schedules.sort(key=lambda schedule: schedule.person_name.casefold())
    return schedules


def load_schedule_sheet(path: str | Path, settings: Settings = DEFAULT_SETTINGS) -> List[WeeklyFreeMatrix]:
    """Read the first sheet of ``path`` (header row skipped) into matrices."""

    sheet_path = Path(path).expanduser()
    try:
        frame = pd.read_excel(sheet_path, sheet_name=0, header=0)
    except (OSError, ValueError, ImportError, zipfile.BadZipFile) as exc:
        raise DocumentUnreadable(f"Cannot read timetable sheet {sheet_path.name}: {exc}") from exc
    schedules = schedules_from_frame(frame, settings)
    LOGGER.info("Timetable sheet %s: %d people", sheet_path.name, len(schedules))
    return schedules


__all__ = [
    "SHEET_SUFFIXES",
    "load_schedule_sheet",
    "parse_period",
    "schedules_from_frame",
]
