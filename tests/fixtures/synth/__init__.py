"""Synthetic timetable fixtures for extraction tests."""

from .pages import (
    COLUMN_X,
    HEADER_Y,
    NAME_Y,
    row_y,
    timetable_fragments,
    write_timetable_pdf,
)

__all__ = [
    "COLUMN_X",
    "HEADER_Y",
    "NAME_Y",
    "row_y",
    "timetable_fragments",
    "write_timetable_pdf",
]
