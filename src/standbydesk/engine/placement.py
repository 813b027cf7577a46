"""Validation for manual standby placement, moves and removals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from standbydesk.errors import AssignmentRejected, RejectionReason
from standbydesk.model import Exclusion, StandbyAssignment, WeeklyFreeMatrix, find_matrix
from standbydesk.settings import PERIODS, WEEKDAYS, AssignmentLimits

from .assign import IdFactory, daily_load, new_assignment_id, weekly_count

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class PlacementOutcome:
    """Assignments after an edit, plus the rejection when nothing changed."""

    assignments: List[StandbyAssignment]
    rejection: Optional[AssignmentRejected] = None
    assignment: Optional[StandbyAssignment] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None

    def unwrap(self) -> List[StandbyAssignment]:
        if self.rejection is not None:
            raise self.rejection
        return self.assignments


def place_assignment(
    assignments: List[StandbyAssignment],
    person_name: str,
    day: str,
    period: int,
    exclusions: Sequence[Exclusion] = (),
    limits: AssignmentLimits = AssignmentLimits(),
    *,
    matrices: Optional[Sequence[WeeklyFreeMatrix]] = None,
    weekdays: Sequence[str] = WEEKDAYS,
    periods: Sequence[int] = PERIODS,
    id_factory: IdFactory = new_assignment_id,
) -> PlacementOutcome:
    """Add a new standby slot for ``person_name`` when every rule allows it."""

    rejection = _check_slot(assignments, person_name, day, period, exclusions, None, weekdays, periods)
    if rejection is None and weekly_count(assignments, person_name) >= limits.weekly_quota:
        rejection = AssignmentRejected(
            RejectionReason.QUOTA_REACHED,
            f"{person_name} already holds {limits.weekly_quota} standby slots this week",
        )
    if rejection is None:
        rejection = _check_daily_load(assignments, person_name, day, None, matrices, limits, periods)
    if rejection is not None:
        return _rejected(assignments, rejection)

    created = StandbyAssignment(id=id_factory(), person_name=person_name, day=day, period=period)
    return PlacementOutcome(assignments=[*assignments, created], assignment=created)


def move_assignment(
    assignments: List[StandbyAssignment],
    assignment_id: str,
    day: str,
    period: int,
    exclusions: Sequence[Exclusion] = (),
    limits: AssignmentLimits = AssignmentLimits(),
    *,
    matrices: Optional[Sequence[WeeklyFreeMatrix]] = None,
    weekdays: Sequence[str] = WEEKDAYS,
    periods: Sequence[int] = PERIODS,
) -> PlacementOutcome:
    """Move an existing assignment to ``(day, period)`` keeping its id."""

    current = next((item for item in assignments if item.id == assignment_id), None)
    if current is None:
        return _rejected(
            assignments,
            AssignmentRejected(RejectionReason.UNKNOWN_ASSIGNMENT, f"No standby assignment {assignment_id}"),
        )
    if current.day == day and current.period == period:
        return PlacementOutcome(assignments=assignments, assignment=current)

    person_name = current.person_name
    rejection = _check_slot(assignments, person_name, day, period, exclusions, assignment_id, weekdays, periods)
    if rejection is None and current.day != day:
        rejection = _check_daily_load(assignments, person_name, day, assignment_id, matrices, limits, periods)
    if rejection is not None:
        return _rejected(assignments, rejection)

    moved = StandbyAssignment(id=current.id, person_name=person_name, day=day, period=period)
    updated = [moved if item.id == assignment_id else item for item in assignments]
    return PlacementOutcome(assignments=updated, assignment=moved)


def remove_assignment(assignments: Sequence[StandbyAssignment], assignment_id: str) -> List[StandbyAssignment]:
    """Drop the assignment with ``assignment_id``; unknown ids change nothing."""

    return [item for item in assignments if item.id != assignment_id]


def toggle_exclusion(exclusions: Sequence[Exclusion], person_name: str, day: str, period: int) -> List[Exclusion]:
    """Add the exclusion when absent, otherwise remove it."""

    if any(item.matches(person_name, day, period) for item in exclusions):
        return [item for item in exclusions if not item.matches(person_name, day, period)]
    return [*exclusions, Exclusion(person_name=person_name, day=day, period=period)]


def _check_slot(
    assignments: Sequence[StandbyAssignment],
    person_name: str,
    day: str,
    period: int,
    exclusions: Sequence[Exclusion],
    moving_id: Optional[str],
    weekdays: Sequence[str],
    periods: Sequence[int],
) -> Optional[AssignmentRejected]:
    if day not in weekdays or period not in periods:
        return AssignmentRejected(RejectionReason.INVALID_SLOT, f"{day} {period}. is not a timetable slot")
    if any(item.matches(person_name, day, period) for item in exclusions):
        return AssignmentRejected(
            RejectionReason.EXCLUDED,
            f"{person_name} is excluded from standby on {day} {period}.",
        )
    for item in assignments:
        if item.slot == (person_name, day, period) and item.id != moving_id:
            return AssignmentRejected(
                RejectionReason.DUPLICATE_SLOT,
                f"{person_name} already has standby on {day} {period}.",
            )
    return None


def _check_daily_load(
    assignments: Sequence[StandbyAssignment],
    person_name: str,
    day: str,
    moving_id: Optional[str],
    matrices: Optional[Sequence[WeeklyFreeMatrix]],
    limits: AssignmentLimits,
    periods: Sequence[int],
) -> Optional[AssignmentRejected]:
    if matrices is None:
        return None
    matrix = find_matrix(matrices, person_name)
    if matrix is None:
        return None
    others = [item for item in assignments if item.id != moving_id]
    if daily_load(matrix, others, day, periods) >= limits.daily_load_limit:
        return AssignmentRejected(
            RejectionReason.DAILY_LOAD,
            f"{person_name} already has {limits.daily_load_limit} periods on {day}",
        )
    return None


def _rejected(assignments: List[StandbyAssignment], rejection: AssignmentRejected) -> PlacementOutcome:
    LOGGER.warning("Standby placement rejected (%s): %s", rejection.reason.value, rejection.message)
    return PlacementOutcome(assignments=assignments, rejection=rejection)


__all__ = [
    "PlacementOutcome",
    "move_assignment",
    "place_assignment",
    "remove_assignment",
    "toggle_exclusion",
]
