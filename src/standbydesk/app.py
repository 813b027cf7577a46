"""Command-line entry point for StandbyDesk."""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from standbydesk.cli import parse_arguments, run_headless_from_args
from standbydesk.headless import HeadlessResult
from standbydesk.settings import app_home


def _logs_dir() -> Path:
    """Return the application logs directory, ensuring it exists."""

    logs = app_home() / "logs"
    logs.mkdir(parents=True, exist_ok=True)
    return logs


def _write_last_run_cache(result: HeadlessResult) -> None:
    """Persist the latest counts so the previous run can be inspected."""

    payload = {
        "counts": result.counts,
        "pages": {"total": result.pages_total, "skipped": result.pages_skipped},
        "unsaved": result.unsaved,
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }
    target = _logs_dir() / "last_run.json"
    try:
        target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as exc:
        print(f"Warning: could not write {target}: {exc}", file=sys.stderr, flush=True)


def main(argv: Optional[List[str]] = None) -> int:
    """Parse ``argv`` and run one headless StandbyDesk session."""

    raw_argv = list(argv if argv is not None else sys.argv[1:])
    args, extras = parse_arguments(raw_argv)
    if extras:
        print(f"Ignoring unknown arguments: {' '.join(extras)}", file=sys.stderr, flush=True)

    try:
        result = run_headless_from_args(args)
    except (ValueError, FileNotFoundError) as exc:
        _emit_headless_miss(exc)
        return 2
    _print_headless_result(result)
    return result.exit_code


def _print_headless_result(result: HeadlessResult) -> None:
    print(result.summary_line, flush=True)
    for name, count in result.counts.items():
        print(f"COUNT {name}={count}", flush=True)
    if result.report_path:
        print(f"TXT: {result.report_path}", flush=True)
    else:
        print("TXT: <missing>", flush=True)
    if result.free:
        print("FREE: " + ", ".join(result.free), flush=True)
    _write_last_run_cache(result)
    for warning in result.warnings:
        print(f"Warning: {warning}", file=sys.stderr, flush=True)


def _emit_headless_miss(exc: Exception) -> None:
    if isinstance(exc, FileNotFoundError):
        reason = "input_missing"
    else:
        reason = "invalid_args"
    print(f"HEADLESS_MISS reason={reason}", flush=True)
    print(f"Headless error: {exc}", file=sys.stderr, flush=True)


if __name__ == "__main__":
    sys.exit(main())
