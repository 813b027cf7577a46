from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from standbydesk.errors import DocumentUnreadable
from standbydesk.sheets.schedule_sheet import load_schedule_sheet, parse_period, schedules_from_frame

COLUMNS = ["Sorszám", "Nap", "Óra", "Tantárgy", "Osztály", "Terem", "Tanár"]


def _frame(rows):
    return pd.DataFrame(rows, columns=COLUMNS)


@pytest.mark.parametrize(
    "value, expected",
    [(3, 3), (3.0, 3), ("4.", 4), (" 5 ", 5), (2.5, None), ("x", None), (None, None), (float("nan"), None), (True, None)],
)
def test_parse_period(value, expected):
    assert parse_period(value) == expected


def test_schedules_from_frame_complements_taught_periods():
    frame = _frame(
        [
            [1, "Kedd", 1, "Matek", "9.A", "12", "Nagy Pál"],
            [2, "Kedd", "3.", "Fizika", "9.B", "14", "Nagy Pál"],
            [3, "Hétfő", 8, "Ének", "10.A", "2", "Kovács Éva"],
            [4, "Szombat", 1, "Szakkör", "", "", "Kovács Éva"],
            [5, "Kedd", 9, "Matek", "9.A", "12", "Kovács Éva"],
            [6, "Kedd", 2, "Matek", "9.A", "12", None],
        ]
    )

    schedules = schedules_from_frame(frame)

    assert [schedule.person_name for schedule in schedules] == ["Kovács Éva", "Nagy Pál"]
    nagy = schedules[1]
    assert nagy.free_periods["Kedd"] == [2, 4, 5, 6, 7, 8]
    assert nagy.free_periods["Péntek"] == list(range(1, 9))
    assert schedules[0].free_periods["Hétfő"] == list(range(1, 8))


def test_schedules_from_frame_requires_person_column():
    with pytest.raises(DocumentUnreadable):
        schedules_from_frame(pd.DataFrame([["x", "Kedd", 1]]))


def test_load_schedule_sheet_reads_first_sheet(tmp_path: Path):
    path = tmp_path / "orarend.xlsx"
    _frame([[1, "Szerda", 2, "Matek", "9.A", "12", "Nagy Pál"]]).to_excel(path, index=False)

    schedules = load_schedule_sheet(path)

    assert len(schedules) == 1
    assert schedules[0].free_periods["Szerda"] == [1, 3, 4, 5, 6, 7, 8]


def test_load_schedule_sheet_unreadable(tmp_path: Path):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a zip archive")
    with pytest.raises(DocumentUnreadable):
        load_schedule_sheet(path)
