"""Weekday column and period row detection for timetable pages."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from standbydesk.model import DayColumn, PeriodRow
from standbydesk.settings import DEFAULT_SETTINGS, PERIODS, WEEKDAYS, LayoutTolerances

from .spatial_index import FragmentIndex

_PERIOD_LABEL_RE = re.compile(r"(\d+)\.?")


@dataclass(slots=True)
class HeaderDetection:
    """Weekday header columns and period row labels found on one page."""

    columns: List[DayColumn]
    rows: List[PeriodRow]
    header_y: float

    def column_for(self, day_name: str) -> Optional[DayColumn]:
        for column in self.columns:
            if column.day_name == day_name:
                return column
        return None

    def row_for(self, period: int) -> Optional[PeriodRow]:
        for row in self.rows:
            if row.period == period:
                return row
        return None


def find_day_columns(index: FragmentIndex, weekdays: Sequence[str] = WEEKDAYS) -> List[DayColumn]:
    """Return every exact weekday-name fragment as a column, sorted by ``x``."""

    columns = [
        DayColumn(day_name=fragment.text, x=fragment.x, y=fragment.y)
        for fragment in index.exact(set(weekdays))
    ]
    columns.sort(key=lambda column: column.x)
    return columns


def find_period_rows(
    index: FragmentIndex,
    tolerances: LayoutTolerances = DEFAULT_SETTINGS.layout,
    periods: Sequence[int] = PERIODS,
) -> List[PeriodRow]:
    """Return period label rows from the left margin, sorted by period number.

    Labels are bare integers or integers followed by a dot. Numbers outside
    ``periods`` are dropped; the first label of a repeated number wins.
    """

    allowed = set(periods)
    rows: Dict[int, PeriodRow] = {}
    for fragment, match in index.matching(_PERIOD_LABEL_RE):
        if fragment.x >= tolerances.left_margin:
            continue
        period = int(match.group(1))
        if period not in allowed:
            continue
        rows.setdefault(period, PeriodRow(period=period, y=fragment.y))
    return [rows[period] for period in sorted(rows)]


def detect_header(
    index: FragmentIndex,
    tolerances: LayoutTolerances = DEFAULT_SETTINGS.layout,
    weekdays: Sequence[str] = WEEKDAYS,
    periods: Sequence[int] = PERIODS,
) -> Optional[HeaderDetection]:
    """Return the page's table header, or ``None`` when no weekday matched."""

    columns = find_day_columns(index, weekdays)
    if not columns:
        return None
    header_y = max(column.y for column in columns)
    rows = find_period_rows(index, tolerances, periods)
    return HeaderDetection(columns=columns, rows=rows, header_y=header_y)


__all__ = ["HeaderDetection", "detect_header", "find_day_columns", "find_period_rows"]
