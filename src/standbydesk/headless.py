"""Headless runner used by the CLI: extraction, editing, generation and report."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Tuple

from standbydesk.engine.availability import free_people
from standbydesk.engine.board import StandbyBoard
from standbydesk.errors import DocumentUnreadable
from standbydesk.fs.exports import exports_dir, report_filename
from standbydesk.fs.state import StateStore
from standbydesk.logs.rotating import attach_run_file, log_path
from standbydesk.model import WeeklyFreeMatrix
from standbydesk.pdf.timetable import DuplicatePolicy, extract_schedules
from standbydesk.report.txt_writer import write_report
from standbydesk.settings import Settings, load_settings
from standbydesk.sheets.schedule_sheet import SHEET_SUFFIXES, load_schedule_sheet

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNREADABLE = 1
EXIT_REJECTED = 2


class SlotRequest(NamedTuple):
    """A (person or assignment id, day, period) triple from the command line."""

    key: str
    day: str
    period: int


@dataclass(slots=True)
class HeadlessOptions:
    """Configuration for a headless run."""

    input_path: Optional[Path] = None
    state_path: Optional[Path] = None
    config_path: Optional[Path] = None
    select: List[str] = field(default_factory=list)
    toggle_exclusions: List[SlotRequest] = field(default_factory=list)
    clear: bool = False
    generate: bool = False
    place: List[SlotRequest] = field(default_factory=list)
    move: List[SlotRequest] = field(default_factory=list)
    remove: List[str] = field(default_factory=list)
    free_slot: Optional[Tuple[str, int]] = None
    absent: List[str] = field(default_factory=list)
    clear_absent: bool = False
    report_path: Optional[Path] = None
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.KEEP
    honor_exclusions: bool = False
    log_dir: Path = field(default_factory=lambda: Path("debug"))
    log_file: Optional[Path] = None
    trace: bool = False


@dataclass(slots=True)
class HeadlessResult:
    """Outcome of a headless run."""

    exit_code: int
    report_path: Optional[Path]
    counts: Dict[str, int]
    warnings: List[str]
    summary_line: str
    log_file: Path
    free: List[str] = field(default_factory=list)
    pages_total: int = 0
    pages_skipped: int = 0
    unsaved: bool = False


def execute_headless(options: HeadlessOptions) -> HeadlessResult:
    """Run extraction and standby editing headlessly with ``options``."""

    log_dir = options.log_dir.expanduser().resolve()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = (options.log_file or (log_dir / _default_log_name())).expanduser().resolve()
    _configure_logging(log_file, trace=options.trace)
    LOGGER.info("Headless start input=%s state=%s", options.input_path, options.state_path)
    LOGGER.debug("Rotating log at %s", log_path())

    settings = _settings_for(options)
    board = StandbyBoard(StateStore(options.state_path), settings)
    warnings: List[str] = []
    pages_total = 0
    pages_skipped = 0
    exit_code = EXIT_OK

    if options.input_path is not None:
        if not options.input_path.exists():
            raise FileNotFoundError(options.input_path)
        try:
            schedules, pages_total, pages_skipped = load_schedules(
                options.input_path, options.duplicate_policy, settings
            )
        except DocumentUnreadable as exc:
            LOGGER.error("Timetable unreadable: %s", exc)
            return HeadlessResult(
                exit_code=EXIT_UNREADABLE,
                report_path=None,
                counts=board.counts(),
                warnings=[str(exc)],
                summary_line="ERROR timetable could not be read",
                log_file=log_file,
                unsaved=board.unsaved,
            )
        board.load_schedules(schedules)

    if options.select:
        board.select(options.select)

    for request in options.toggle_exclusions:
        active = board.toggle_exclusion(request.key, request.day, request.period)
        LOGGER.info(
            "Exclusion %s for %s %s %d.",
            "added" if active else "removed",
            request.key,
            request.day,
            request.period,
        )

    if options.absent or options.clear_absent:
        board.set_absent(options.absent)

    if options.clear:
        board.clear()

    if options.generate:
        created = board.generate()
        LOGGER.info("Generated %d standby slots", len(created))

    for request in options.place:
        outcome = board.place(request.key, request.day, request.period)
        if outcome.rejection is not None:
            warnings.append(outcome.rejection.message)
            exit_code = EXIT_REJECTED

    for request in options.move:
        outcome = board.move(request.key, request.day, request.period)
        if outcome.rejection is not None:
            warnings.append(outcome.rejection.message)
            exit_code = EXIT_REJECTED

    for assignment_id in options.remove:
        board.remove(assignment_id)

    free: List[str] = []
    if options.free_slot is not None:
        day, period = options.free_slot
        free = free_people(board.schedules, day, period, absent=set(board.absent))

    report_path = _write_report(board, options, settings)

    if board.unsaved:
        warnings.append("Standby data is live but could not be saved")

    summary_line = _build_summary_line(board, pages_total, pages_skipped)
    LOGGER.info("Headless run completed exit_code=%s report=%s", exit_code, report_path)

    return HeadlessResult(
        exit_code=exit_code,
        report_path=report_path,
        counts=board.counts(),
        warnings=warnings,
        summary_line=summary_line,
        log_file=log_file,
        free=free,
        pages_total=pages_total,
        pages_skipped=pages_skipped,
        unsaved=board.unsaved,
    )


def _settings_for(options: HeadlessOptions) -> Settings:
    settings = load_settings(options.config_path)
    if options.honor_exclusions:
        settings = replace(settings, limits=replace(settings.limits, honor_exclusions=True))
    return settings


def load_schedules(
    input_path: Path,
    duplicate_policy: DuplicatePolicy,
    settings: Settings,
) -> Tuple[List[WeeklyFreeMatrix], int, int]:
    """Return ``(schedules, pages_total, pages_skipped)`` for a PDF or spreadsheet."""

    if input_path.suffix.lower() in SHEET_SUFFIXES:
        return load_schedule_sheet(input_path, settings), 0, 0

    result = extract_schedules(input_path, settings, duplicate_policy=duplicate_policy)
    LOGGER.info(
        "Extracted %d schedules from %d pages (%d skipped)",
        len(result.schedules),
        result.pages_total,
        len(result.skipped),
    )
    return result.schedules, result.pages_total, len(result.skipped)


def _configure_logging(log_file: Path, *, trace: bool = False) -> logging.Logger:
    level = logging.DEBUG if trace else logging.INFO
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not any(isinstance(handler, logging.StreamHandler) for handler in root_logger.handlers):
        console = logging.StreamHandler()
        console.setLevel(level)
        root_logger.addHandler(console)
    return attach_run_file(log_file, level)


def _write_report(board: StandbyBoard, options: HeadlessOptions, settings: Settings) -> Path:
    source_basename = options.input_path.name if options.input_path else ""
    if options.report_path is not None:
        target = options.report_path
    else:
        target = exports_dir() / report_filename(source_basename)
    return write_report(
        board.schedules,
        board.assignments,
        target,
        settings,
        source_basename=source_basename,
    )


def _build_summary_line(board: StandbyBoard, pages_total: int, pages_skipped: int) -> str:
    return (
        f"People:{len(board.schedules)} Selected:{len(board.selected)} "
        f"Standby:{len(board.assignments)} Exclusions:{len(board.exclusions)} "
        f"Pages:{pages_total} Skipped:{pages_skipped}"
    )


def _default_log_name() -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"headless_{timestamp}.log"


__all__ = ["HeadlessOptions", "HeadlessResult", "SlotRequest", "execute_headless", "load_schedules"]
