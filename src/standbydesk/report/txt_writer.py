"""Plain-text standby duty report."""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Sequence

from standbydesk.fs.exports import safe_write_text
from standbydesk.model import StandbyAssignment, WeeklyFreeMatrix
from standbydesk.settings import DEFAULT_SETTINGS, Settings

_EMPTY_CELL = "-"


def render_report(
    schedules: Sequence[WeeklyFreeMatrix],
    assignments: Sequence[StandbyAssignment],
    settings: Settings = DEFAULT_SETTINGS,
    *,
    source_basename: str = "",
    generated_at: datetime | None = None,
) -> str:
    """Return the report text: header, per-person counts and the standby grid."""

    stamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M")
    quota = settings.limits.weekly_quota
    header = f"Standby duty · {stamp}"
    if source_basename:
        header += f" · Source: {source_basename}"

    tally = Counter(item.person_name for item in assignments)
    lines: List[str] = [header, f"People: {len(schedules)} · Standby slots: {len(assignments)}", ""]

    lines.append("Weekly counts —")
    names = list(dict.fromkeys(schedule.person_name for schedule in schedules))
    for name in sorted(set(tally) - set(names)):
        names.append(name)
    for name in names:
        lines.append(f"{name}: {tally.get(name, 0)}/{quota}")

    grid: Dict[tuple[str, int], List[str]] = defaultdict(list)
    for item in assignments:
        grid[(item.day, item.period)].append(item.person_name)

    lines.append("")
    lines.append("Grid —")
    for period in settings.periods:
        lines.append(f"{period}.")
        for day in settings.weekdays:
            people = ", ".join(sorted(grid.get((day, period), []), key=str.casefold)) or _EMPTY_CELL
            lines.append(f"  {day}: {people}")
    lines.append("")
    return "\n".join(lines)


def write_report(
    schedules: Sequence[WeeklyFreeMatrix],
    assignments: Sequence[StandbyAssignment],
    out_path: Path,
    settings: Settings = DEFAULT_SETTINGS,
    *,
    source_basename: str = "",
) -> Path:
    """Write the standby report to ``out_path`` and return the written path."""
    text = render_report(schedules, assignments, settings, source_basename=source_basename)
    return safe_write_text(out_path, text)


__all__ = ["render_report", "write_report"]
