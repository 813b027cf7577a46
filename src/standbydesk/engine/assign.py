"""Greedy weekly standby duty assignment over free-period matrices.

Each selected person receives up to ``weekly_quota`` slots. Candidate slots
are free periods flanked by that day's teaching: gaps strictly between the
first and last lesson rank ahead of the periods directly before the first or
after the last lesson. Days without lessons never get standby duty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import reduce
from typing import Callable, Iterable, List, Optional, Sequence, Tuple
from uuid import uuid4

from standbydesk.model import Exclusion, StandbyAssignment, WeeklyFreeMatrix, find_matrix
from standbydesk.settings import PERIODS, WEEKDAYS, AssignmentLimits

LOGGER = logging.getLogger(__name__)

GAP = "gap"
ADJACENT = "adjacent"
PRIORITY = {GAP: 2, ADJACENT: 1}

Ledger = Tuple[StandbyAssignment, ...]
IdFactory = Callable[[], str]


@dataclass(frozen=True, slots=True)
class CandidateSlot:
    day: str
    period: int
    kind: str

    @property
    def priority(self) -> int:
        return PRIORITY[self.kind]


def new_assignment_id() -> str:
    return uuid4().hex


def classify_period(period: int, teaching: Sequence[int]) -> Optional[str]:
    """Return ``"gap"``, ``"adjacent"`` or ``None`` for a free ``period``."""

    if not teaching:
        return None
    first, last = min(teaching), max(teaching)
    if first < period < last:
        return GAP
    if period == first - 1 or period == last + 1:
        return ADJACENT
    return None


def weekly_count(ledger: Iterable[StandbyAssignment], person_name: str) -> int:
    return sum(1 for item in ledger if item.person_name == person_name)


def daily_load(
    matrix: WeeklyFreeMatrix,
    ledger: Iterable[StandbyAssignment],
    day: str,
    periods: Sequence[int] = PERIODS,
) -> int:
    """Teaching periods plus standby slots already held by the person on ``day``."""

    standby = sum(1 for item in ledger if item.person_name == matrix.person_name and item.day == day)
    return len(matrix.teaching_periods(day, periods)) + standby


def candidate_slots(
    matrix: WeeklyFreeMatrix,
    ledger: Sequence[StandbyAssignment] = (),
    exclusions: Sequence[Exclusion] = (),
    limits: AssignmentLimits = AssignmentLimits(),
    weekdays: Sequence[str] = WEEKDAYS,
    periods: Sequence[int] = PERIODS,
) -> List[CandidateSlot]:
    """Return the person's candidate slots in weekday, then period order."""

    held = {(item.day, item.period) for item in ledger if item.person_name == matrix.person_name}
    blocked = set()
    if limits.honor_exclusions:
        blocked = {(item.day, item.period) for item in exclusions if item.person_name == matrix.person_name}

    slots: List[CandidateSlot] = []
    allowed = set(periods)
    for day in weekdays:
        teaching = matrix.teaching_periods(day, periods)
        if not teaching:
            continue
        free = sorted({period for period in matrix.free_periods.get(day, ()) if period in allowed})
        for period in free:
            if (day, period) in held or (day, period) in blocked:
                continue
            if daily_load(matrix, ledger, day, periods) >= limits.daily_load_limit:
                continue
            kind = classify_period(period, teaching)
            if kind is not None:
                slots.append(CandidateSlot(day=day, period=period, kind=kind))
    return slots


def assign(
    selected_people: Sequence[str],
    matrices: Sequence[WeeklyFreeMatrix],
    existing_assignments: Sequence[StandbyAssignment] = (),
    exclusions: Sequence[Exclusion] = (),
    limits: AssignmentLimits = AssignmentLimits(),
    *,
    weekdays: Sequence[str] = WEEKDAYS,
    periods: Sequence[int] = PERIODS,
    id_factory: IdFactory = new_assignment_id,
) -> List[StandbyAssignment]:
    """Return ``existing_assignments`` extended with new standby slots.

    The inputs are never modified; existing assignments form the prefix of the
    result. People are handled in ``selected_people`` order and never exceed
    the weekly quota or the daily load limit. Exclusions are only consulted
    when ``limits.honor_exclusions`` is set.
    """

    def step(ledger: Ledger, person_name: str) -> Ledger:
        return _assign_person(ledger, person_name, matrices, exclusions, limits, weekdays, periods, id_factory)

    ledger = reduce(step, selected_people, tuple(existing_assignments))
    added = len(ledger) - len(existing_assignments)
    LOGGER.info("Standby generation: %d people, %d new slots", len(selected_people), added)
    return list(ledger)


def _assign_person(
    ledger: Ledger,
    person_name: str,
    matrices: Sequence[WeeklyFreeMatrix],
    exclusions: Sequence[Exclusion],
    limits: AssignmentLimits,
    weekdays: Sequence[str],
    periods: Sequence[int],
    id_factory: IdFactory,
) -> Ledger:
    matrix = find_matrix(matrices, person_name)
    if matrix is None:
        LOGGER.debug("No schedule for %s; skipped", person_name)
        return ledger
    if weekly_count(ledger, person_name) >= limits.weekly_quota:
        return ledger

    ranked = sorted(
        candidate_slots(matrix, ledger, exclusions, limits, weekdays, periods),
        key=lambda slot: slot.priority,
        reverse=True,
    )
    for slot in ranked:
        if weekly_count(ledger, person_name) >= limits.weekly_quota:
            break
        if daily_load(matrix, ledger, slot.day, periods) >= limits.daily_load_limit:
            continue
        ledger = ledger + (
            StandbyAssignment(id=id_factory(), person_name=person_name, day=slot.day, period=slot.period),
        )
    return ledger


__all__ = [
    "ADJACENT",
    "CandidateSlot",
    "GAP",
    "assign",
    "candidate_slots",
    "classify_period",
    "daily_load",
    "new_assignment_id",
    "weekly_count",
]
