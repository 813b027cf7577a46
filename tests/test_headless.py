"""Headless CLI runs over generated timetables."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from standbydesk.app import main
from standbydesk.cli import create_headless_options, parse_arguments
from standbydesk.headless import HeadlessOptions, SlotRequest, execute_headless
from standbydesk.pdf.timetable import DuplicatePolicy

from .fixtures.synth import timetable_fragments, write_timetable_pdf


@pytest.fixture()
def home(tmp_path: Path, monkeypatch) -> Path:
    target = tmp_path / "home"
    monkeypatch.setenv("STANDBYDESK_HOME", str(target))
    return target


@pytest.fixture()
def timetable(tmp_path: Path) -> Path:
    return write_timetable_pdf(
        tmp_path / "orarend.pdf",
        [
            timetable_fragments("Nagy Pál", {"Szerda": [2, 3, 6]}),
            timetable_fragments("Kovács Éva", {"Kedd": [1, 2, 4]}),
        ],
    )


def test_create_headless_options_parses_slots():
    args, extras = parse_arguments(
        [
            "--input",
            "orarend.pdf",
            "--place",
            "Kovács Éva",
            "Kedd",
            "3.",
            "--toggle-exclusion",
            "Nagy Pál",
            "Szerda",
            "4",
            "--free",
            "Kedd",
            "5",
            "--duplicate-policy",
            "merge",
            "--unknown-flag",
        ]
    )
    options = create_headless_options(args)

    assert extras == ["--unknown-flag"]
    assert options.place == [SlotRequest("Kovács Éva", "Kedd", 3)]
    assert options.toggle_exclusions == [SlotRequest("Nagy Pál", "Szerda", 4)]
    assert options.free_slot == ("Kedd", 5)
    assert options.duplicate_policy is DuplicatePolicy.MERGE
    assert options.input_path is not None and options.input_path.name == "orarend.pdf"


def test_bad_period_is_invalid_argument():
    args, _ = parse_arguments(["--place", "Nagy Pál", "Szerda", "negyedik"])
    with pytest.raises(ValueError):
        create_headless_options(args)


def test_execute_headless_generates_and_reports(tmp_path: Path, home: Path, timetable: Path):
    state_path = tmp_path / "state.json"
    report_path = tmp_path / "out" / "standby.txt"
    options = HeadlessOptions(
        input_path=timetable,
        state_path=state_path,
        generate=True,
        place=[SlotRequest("Kovács Éva", "Kedd", 3)],
        free_slot=("Kedd", 5),
        absent=["Nagy Pál"],
        report_path=report_path,
        log_dir=tmp_path / "logs",
    )

    result = execute_headless(options)

    assert result.exit_code == 2
    assert result.pages_total == 2
    assert result.counts == {"Nagy Pál": 3, "Kovács Éva": 2}
    assert any("Kedd 3." in warning for warning in result.warnings)
    assert result.free == ["Kovács Éva"]
    assert result.report_path == report_path
    assert "Nagy Pál: 3/3" in report_path.read_text(encoding="utf-8")
    saved = json.loads(state_path.read_text(encoding="utf-8"))
    assert len(saved["assignments"]) == 5
    assert result.log_file.exists()


def test_execute_headless_reuses_saved_state(tmp_path: Path, home: Path, timetable: Path):
    state_path = tmp_path / "state.json"
    execute_headless(
        HeadlessOptions(
            input_path=timetable,
            state_path=state_path,
            select=["Kovács Éva"],
            toggle_exclusions=[SlotRequest("Kovács Éva", "Kedd", 5)],
            log_dir=tmp_path / "logs",
        )
    )

    second = execute_headless(
        HeadlessOptions(
            state_path=state_path,
            place=[SlotRequest("Kovács Éva", "Kedd", 5)],
            log_dir=tmp_path / "logs",
        )
    )

    assert second.exit_code == 2
    assert second.counts == {"Nagy Pál": 0, "Kovács Éva": 0}
    assert second.report_path is not None
    assert second.report_path.parent == home / "Exports"


def test_execute_headless_unreadable_input(tmp_path: Path, home: Path):
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"no pdf here")

    result = execute_headless(HeadlessOptions(input_path=broken, state_path=tmp_path / "s.json", log_dir=tmp_path))

    assert result.exit_code == 1
    assert result.report_path is None


def test_main_reports_missing_input(tmp_path: Path, home: Path, capsys):
    code = main(["--input", str(tmp_path / "nope.pdf"), "--log-dir", str(tmp_path / "logs")])

    assert code == 2
    assert "HEADLESS_MISS reason=input_missing" in capsys.readouterr().out


def test_main_prints_summary(tmp_path: Path, home: Path, timetable: Path, capsys):
    code = main(
        [
            "--input",
            str(timetable),
            "--state",
            str(tmp_path / "state.json"),
            "--generate",
            "--log-dir",
            str(tmp_path / "logs"),
        ]
    )

    out = capsys.readouterr().out
    assert code == 0
    assert "People:2" in out
    assert "COUNT Nagy Pál=3" in out
    assert (home / "logs" / "last_run.json").exists()


def test_absent_list_carries_over_between_runs(tmp_path: Path, home: Path, timetable: Path):
    state_path = tmp_path / "state.json"
    logs = tmp_path / "logs"
    execute_headless(
        HeadlessOptions(input_path=timetable, state_path=state_path, absent=["Nagy Pál"], log_dir=logs)
    )

    remembered = execute_headless(HeadlessOptions(state_path=state_path, free_slot=("Kedd", 5), log_dir=logs))
    cleared = execute_headless(
        HeadlessOptions(state_path=state_path, free_slot=("Kedd", 5), clear_absent=True, log_dir=logs)
    )

    assert remembered.free == ["Kovács Éva"]
    assert cleared.free == ["Kovács Éva", "Nagy Pál"]
