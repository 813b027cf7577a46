"""TXT writer tests."""

from __future__ import annotations

import unittest
from datetime import datetime
from pathlib import Path
from tempfile import TemporaryDirectory

from standbydesk.model import StandbyAssignment, WeeklyFreeMatrix
from standbydesk.report.txt_writer import render_report, write_report


class TxtWriterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.schedules = [
            WeeklyFreeMatrix("Nagy Pál", {"Szerda": [1, 4, 5, 7, 8]}),
            WeeklyFreeMatrix("Kovács Éva", {"Kedd": [3, 5]}),
        ]
        self.assignments = [
            StandbyAssignment("a1", "Nagy Pál", "Szerda", 4),
            StandbyAssignment("a2", "Nagy Pál", "Szerda", 5),
            StandbyAssignment("b1", "Kovács Éva", "Szerda", 4),
        ]

    def test_render_report_counts_and_grid(self) -> None:
        text = render_report(
            self.schedules,
            self.assignments,
            source_basename="orarend.pdf",
            generated_at=datetime(2024, 9, 2, 7, 30),
        )
        lines = text.splitlines()

        self.assertEqual(lines[0], "Standby duty · 2024-09-02 07:30 · Source: orarend.pdf")
        self.assertIn("People: 2 · Standby slots: 3", lines)
        counts_at = lines.index("Weekly counts —")
        self.assertEqual(lines[counts_at + 1 : counts_at + 3], ["Nagy Pál: 2/3", "Kovács Éva: 1/3"])

        period_four = lines.index("4.")
        self.assertEqual(lines[period_four + 3], "  Szerda: Kovács Éva, Nagy Pál")
        self.assertEqual(lines[period_four + 1], "  Hétfő: -")
        self.assertEqual(lines[lines.index("5.") + 3], "  Szerda: Nagy Pál")

    def test_write_report_creates_parent_directory(self) -> None:
        with TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "nested" / "standby.txt"
            written = write_report(self.schedules, self.assignments, target)
            self.assertEqual(written, target)
            self.assertIn("Grid —", target.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
