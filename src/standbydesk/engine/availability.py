"""Lookups of who is free in a given slot and selection restoring."""

from __future__ import annotations

from typing import Collection, List, Sequence

from standbydesk.model import WeeklyFreeMatrix


def free_people(
    matrices: Sequence[WeeklyFreeMatrix],
    day: str,
    period: int,
    *,
    absent: Collection[str] = (),
) -> List[str]:
    """Return names free on ``day`` in ``period``, skipping ``absent`` people."""

    names = {
        matrix.person_name
        for matrix in matrices
        if matrix.person_name not in absent and matrix.free_on(day, period)
    }
    return sorted(names, key=lambda name: (name.casefold(), name))


def restore_selection(saved: Sequence[str], matrices: Sequence[WeeklyFreeMatrix]) -> List[str]:
    """Keep saved names that still have a schedule; otherwise select everyone."""

    known = [matrix.person_name for matrix in matrices]
    known_set = set(known)
    kept: List[str] = []
    for name in saved:
        if name in known_set and name not in kept:
            kept.append(name)
    if kept:
        return kept
    return list(dict.fromkeys(known))


__all__ = ["free_people", "restore_selection"]
