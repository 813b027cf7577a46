from __future__ import annotations

import pytest

from standbydesk.model import DayColumn, PeriodRow, TextFragment
from standbydesk.pdf.cells import cell_box, column_span, is_occupied, resolve_free_periods, row_span
from standbydesk.pdf.geometry import CellBox, normalize_rect
from standbydesk.pdf.grid_header import detect_header
from standbydesk.pdf.spatial_index import FragmentIndex
from standbydesk.settings import WEEKDAYS

from .fixtures.synth import COLUMN_X, row_y, timetable_fragments

COLUMNS = [DayColumn(day, COLUMN_X[day], 700.0) for day in WEEKDAYS]
ROWS = [PeriodRow(period, row_y(period)) for period in range(1, 9)]


def _header_for(fragments):
    index = FragmentIndex.build(fragments)
    header = detect_header(index)
    assert header is not None
    return index, header


def test_column_span_stops_before_next_column():
    assert column_span(COLUMNS, 0) == (110.0, 210.0)
    assert column_span(COLUMNS, 3) == (410.0, 510.0)


def test_last_column_uses_first_gap_as_width():
    assert column_span(COLUMNS, 4) == (510.0, 620.0)
    assert column_span(COLUMNS[:1], 0) == (110.0, 220.0)


def test_row_span_uses_next_row_then_previous_gap():
    # period 1 runs from just above row 2 to just above itself
    assert row_span(ROWS, 1) == (630.0, 670.0)
    # last row mirrors the gap to the previous row
    assert row_span(ROWS, 8) == (350.0, 390.0)
    assert row_span([PeriodRow(4, 500.0)], 4) == (480.0, 510.0)
    assert row_span(ROWS, 9) is None


def test_cell_box_bounds_are_inclusive_on_y_and_half_open_on_x():
    box = CellBox.from_spans("Kedd", 2, (210.0, 310.0), (590.0, 630.0))
    assert box.contains(210.0, 590.0)
    assert box.contains(309.9, 630.0)
    assert not box.contains(310.0, 600.0)
    assert not box.contains(250.0, 630.1)
    assert normalize_rect((5.0, 9.0, 1.0, 2.0)) == (1.0, 2.0, 5.0, 9.0)


def test_is_occupied_ignores_left_margin_labels():
    index = FragmentIndex.build([TextFragment("1.", 95.0, 660.0)])
    wide = CellBox("Hétfő", 1, 0.0, 200.0, 630.0, 670.0)
    assert not is_occupied(index, wide)
    index = FragmentIndex.build([TextFragment("Matek", 100.5, 660.0)])
    assert is_occupied(index, wide)


def test_resolve_free_periods_marks_taught_cells():
    index, header = _header_for(
        timetable_fragments("Nagy Pál", {"Szerda": [2, 3, 6], "Péntek": [8], "Hétfő": [1]})
    )
    free = resolve_free_periods(index, header)
    assert list(free) == list(WEEKDAYS)
    assert free["Szerda"] == [1, 4, 5, 7, 8]
    assert free["Péntek"] == [1, 2, 3, 4, 5, 6, 7]
    assert free["Hétfő"] == [2, 3, 4, 5, 6, 7, 8]
    assert free["Kedd"] == list(range(1, 9))


def test_unlabelled_periods_are_free_on_every_day():
    fragments = timetable_fragments(
        "Nagy Pál",
        {day: [6, 7, 8] for day in WEEKDAYS},
        labelled_periods=[1, 2, 3, 4, 5, 6],
    )
    index, header = _header_for(fragments)
    free = resolve_free_periods(index, header)
    for day in WEEKDAYS:
        assert free[day] == [1, 2, 3, 4, 5, 7, 8]


def test_missing_weekday_column_gets_empty_free_list():
    fragments = timetable_fragments("Nagy Pál", {"Kedd": [3]}, days=["Hétfő", "Kedd", "Szerda", "Péntek"])
    index, header = _header_for(fragments)
    free = resolve_free_periods(index, header)
    assert free["Csütörtök"] == []
    assert free["Kedd"] == [1, 2, 4, 5, 6, 7, 8]


@pytest.mark.parametrize("period", [1, 4, 8])
def test_cell_box_matches_row_and_column_spans(period):
    _, header = _header_for(timetable_fragments("Nagy Pál", {}))
    box = cell_box(header, "Csütörtök", period)
    assert box is not None
    assert (box.x0, box.x1) == column_span(header.columns, 3)
    assert (box.y0, box.y1) == row_span(header.rows, period)
