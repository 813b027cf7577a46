"""Command-line parsing for the StandbyDesk tool."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from standbydesk.headless import HeadlessOptions, HeadlessResult, SlotRequest, execute_headless
from standbydesk.pdf.timetable import DuplicatePolicy

POLICY_CHOICES = tuple(policy.value for policy in DuplicatePolicy)


def parse_arguments(argv: Optional[List[str]] = None) -> Tuple[argparse.Namespace, List[str]]:
    """Parse known CLI arguments and return ``(args, extras)``."""

    parser = argparse.ArgumentParser(description="StandbyDesk timetable and standby duty planner")
    parser.add_argument(
        "--input",
        dest="input_path",
        help="Timetable PDF (one person per page) or lesson spreadsheet (.xlsx).",
    )
    parser.add_argument(
        "--state",
        dest="state_path",
        help="Saved state JSON file (default: <home>/state.json).",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        help="JSON file overriding layout tolerances and assignment limits.",
    )
    parser.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="NAME",
        help="Person to include in automatic generation (repeatable).",
    )
    parser.add_argument(
        "--toggle-exclusion",
        nargs=3,
        action="append",
        default=[],
        metavar=("NAME", "DAY", "PERIOD"),
        help="Add or remove a standby exclusion (repeatable).",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Remove every standby assignment before other edits.",
    )
    parser.add_argument(
        "--generate",
        action="store_true",
        help="Run automatic standby generation for the selected people.",
    )
    parser.add_argument(
        "--place",
        nargs=3,
        action="append",
        default=[],
        metavar=("NAME", "DAY", "PERIOD"),
        help="Manually place a standby slot (repeatable).",
    )
    parser.add_argument(
        "--move",
        nargs=3,
        action="append",
        default=[],
        metavar=("ID", "DAY", "PERIOD"),
        help="Move an existing standby assignment (repeatable).",
    )
    parser.add_argument(
        "--remove",
        action="append",
        default=[],
        metavar="ID",
        help="Delete a standby assignment by id (repeatable).",
    )
    parser.add_argument(
        "--free",
        nargs=2,
        metavar=("DAY", "PERIOD"),
        help="List people free in the given slot.",
    )
    parser.add_argument(
        "--absent",
        action="append",
        default=[],
        metavar="NAME",
        help="Person to leave out of --free results; saved with the state (repeatable).",
    )
    parser.add_argument(
        "--clear-absent",
        action="store_true",
        help="Forget the saved absent people (combine with --absent to replace them).",
    )
    parser.add_argument(
        "--report",
        dest="report_path",
        help="Path of the TXT report (default: Exports directory).",
    )
    parser.add_argument(
        "--duplicate-policy",
        choices=POLICY_CHOICES,
        default=DuplicatePolicy.KEEP.value,
        help="Handling of a person appearing on several PDF pages.",
    )
    parser.add_argument(
        "--honor-exclusions",
        action="store_true",
        help="Also respect exclusions during automatic generation.",
    )
    parser.add_argument(
        "--log-dir",
        dest="log_dir",
        default="debug",
        help="Directory for structured run logs (default: debug).",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        help="Optional explicit log file path.",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable verbose debug logging.",
    )

    args, extras = parser.parse_known_args(argv)
    return args, extras


def create_headless_options(args: argparse.Namespace) -> HeadlessOptions:
    """Return ``HeadlessOptions`` derived from parsed ``args``."""

    input_path = Path(args.input_path).expanduser().resolve() if args.input_path else None
    state_path = Path(args.state_path).expanduser() if args.state_path else None
    config_path = Path(args.config_path).expanduser() if args.config_path else None
    report_path = Path(args.report_path).expanduser() if args.report_path else None
    log_file = Path(args.log_file).expanduser() if args.log_file else None

    free_slot = None
    if args.free:
        day, period = args.free
        free_slot = (day, _parse_period(period, "--free"))

    return HeadlessOptions(
        input_path=input_path,
        state_path=state_path,
        config_path=config_path,
        select=list(args.select),
        toggle_exclusions=_slot_requests(args.toggle_exclusion, "--toggle-exclusion"),
        clear=bool(args.clear),
        generate=bool(args.generate),
        place=_slot_requests(args.place, "--place"),
        move=_slot_requests(args.move, "--move"),
        remove=list(args.remove),
        free_slot=free_slot,
        absent=list(args.absent),
        clear_absent=bool(args.clear_absent),
        report_path=report_path,
        duplicate_policy=DuplicatePolicy(args.duplicate_policy),
        honor_exclusions=bool(args.honor_exclusions),
        log_dir=Path(args.log_dir).expanduser(),
        log_file=log_file,
        trace=bool(args.trace),
    )


def run_headless_from_args(args: argparse.Namespace) -> HeadlessResult:
    """Execute the headless run using ``args`` and return the result."""

    options = create_headless_options(args)
    return execute_headless(options)


def _slot_requests(values: Sequence[Sequence[str]], flag: str) -> List[SlotRequest]:
    return [SlotRequest(key, day, _parse_period(period, flag)) for key, day, period in values]


def _parse_period(raw: str, flag: str) -> int:
    try:
        return int(str(raw).strip().rstrip("."))
    except ValueError as exc:
        raise ValueError(f"{flag} period must be a number, got {raw!r}") from exc


__all__ = [
    "POLICY_CHOICES",
    "create_headless_options",
    "parse_arguments",
    "run_headless_from_args",
]
