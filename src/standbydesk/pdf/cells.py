"""Cell occupancy resolution over detected timetable columns and rows."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from standbydesk.model import DayColumn, PeriodRow
from standbydesk.settings import DEFAULT_SETTINGS, PERIODS, WEEKDAYS, LayoutTolerances

from .geometry import CellBox
from .grid_header import HeaderDetection
from .spatial_index import FragmentIndex


def column_span(
    columns: Sequence[DayColumn],
    position: int,
    tolerances: LayoutTolerances = DEFAULT_SETTINGS.layout,
) -> Tuple[float, float]:
    """Return the ``[x0, x1)`` span of the column at ``position`` (x-sorted)."""

    column = columns[position]
    x0 = column.x - tolerances.cell_x_buffer
    if position + 1 < len(columns):
        return x0, columns[position + 1].x - tolerances.cell_x_buffer
    if len(columns) > 1:
        width = columns[1].x - columns[0].x
    else:
        width = tolerances.default_column_width
    return x0, column.x + width


def row_span(
    rows: Sequence[PeriodRow],
    period: int,
    tolerances: LayoutTolerances = DEFAULT_SETTINGS.layout,
) -> Optional[Tuple[float, float]]:
    """Return the ``[y0, y1]`` span of ``period`` or ``None`` without a label.

    Rows run top to bottom with decreasing ``y``; the lower edge comes from
    the next period's label, else from the gap to the previous label.
    """

    by_period = {row.period: row for row in rows}
    row = by_period.get(period)
    if row is None:
        return None
    top = row.y + tolerances.row_y_buffer
    next_row = by_period.get(period + 1)
    prev_row = by_period.get(period - 1)
    if next_row is not None:
        bottom = next_row.y + tolerances.row_y_buffer
    elif prev_row is not None:
        bottom = row.y - (prev_row.y - row.y) + tolerances.row_y_buffer
    else:
        bottom = row.y - tolerances.default_row_depth
    return bottom, top


def cell_box(
    header: HeaderDetection,
    day_name: str,
    period: int,
    tolerances: LayoutTolerances = DEFAULT_SETTINGS.layout,
) -> Optional[CellBox]:
    column = header.column_for(day_name)
    if column is None:
        return None
    y_span = row_span(header.rows, period, tolerances)
    if y_span is None:
        return None
    x_span = column_span(header.columns, header.columns.index(column), tolerances)
    return CellBox.from_spans(day_name, period, x_span, y_span)


def is_occupied(
    index: FragmentIndex,
    box: CellBox,
    tolerances: LayoutTolerances = DEFAULT_SETTINGS.layout,
) -> bool:
    """Return ``True`` when content right of the label margin sits in ``box``."""

    for fragment in index.within(box.x0, box.x1, box.y0, box.y1):
        if fragment.x > tolerances.left_margin:
            return True
    return False


def resolve_free_periods(
    index: FragmentIndex,
    header: HeaderDetection,
    tolerances: LayoutTolerances = DEFAULT_SETTINGS.layout,
    weekdays: Sequence[str] = WEEKDAYS,
    periods: Sequence[int] = PERIODS,
) -> Dict[str, List[int]]:
    """Return free period numbers per weekday for one page.

    A period without a row label is free on every day. A weekday without a
    header column keeps an empty list.
    """

    free: Dict[str, List[int]] = {day: [] for day in weekdays}
    for day_name in weekdays:
        if header.column_for(day_name) is None:
            continue
        for period in periods:
            box = cell_box(header, day_name, period, tolerances)
            if box is None or not is_occupied(index, box, tolerances):
                free[day_name].append(period)
    return free


__all__ = ["cell_box", "column_span", "is_occupied", "resolve_free_periods", "row_span"]
