"""Single-user standby editing session backed by a state store."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence

from standbydesk.errors import PersistenceFailure
from standbydesk.fs.state import BoardState, StateStore
from standbydesk.model import Exclusion, StandbyAssignment, WeeklyFreeMatrix
from standbydesk.settings import DEFAULT_SETTINGS, Settings

from .assign import IdFactory, assign, new_assignment_id
from .availability import restore_selection
from .placement import (
    PlacementOutcome,
    move_assignment,
    place_assignment,
    remove_assignment,
    toggle_exclusion,
)

logger = logging.getLogger(__name__)


class StandbyBoard:
    """
    Holds schedules, exclusions, selection and assignments for one session.

    Every mutation goes through the pure assignment/placement functions and is
    saved afterwards. A failed save keeps the in-memory result and marks the
    board as ``unsaved`` instead of rolling back.
    """

    def __init__(
        self,
        store: Optional[StateStore] = None,
        settings: Settings = DEFAULT_SETTINGS,
        *,
        id_factory: IdFactory = new_assignment_id,
    ) -> None:
        self.store = store
        self.settings = settings
        self._id_factory = id_factory
        self.state = store.load() if store is not None else BoardState()
        self.unsaved = False

    @property
    def schedules(self) -> List[WeeklyFreeMatrix]:
        return self.state.schedules

    @property
    def assignments(self) -> List[StandbyAssignment]:
        return self.state.assignments

    @property
    def exclusions(self) -> List[Exclusion]:
        return self.state.exclusions

    @property
    def selected(self) -> List[str]:
        return self.state.selected

    @property
    def absent(self) -> List[str]:
        return self.state.absent

    def load_schedules(self, schedules: Sequence[WeeklyFreeMatrix]) -> None:
        self.state.schedules = list(schedules)
        self.state.selected = restore_selection(self.state.selected, self.state.schedules)
        self._persist()

    def select(self, names: Sequence[str]) -> None:
        known = {schedule.person_name for schedule in self.state.schedules}
        unknown = [name for name in names if name not in known]
        if unknown:
            logger.warning("Ignoring unknown people in selection: %s", ", ".join(unknown))
        self.state.selected = [name for name in dict.fromkeys(names) if name in known]
        self._persist()

    def set_absent(self, names: Sequence[str]) -> None:
        """Replace the saved list of people left out of free-person lookups."""

        self.state.absent = list(dict.fromkeys(names))
        self._persist()

    def toggle_selection(self, name: str) -> None:
        if name in self.state.selected:
            self.state.selected = [item for item in self.state.selected if item != name]
        else:
            self.state.selected = [*self.state.selected, name]
        self._persist()

    def generate(self) -> List[StandbyAssignment]:
        """Extend the current assignments for the selected people."""

        before = len(self.state.assignments)
        self.state.assignments = assign(
            self.state.selected,
            self.state.schedules,
            self.state.assignments,
            self.state.exclusions,
            self.settings.limits,
            weekdays=self.settings.weekdays,
            periods=self.settings.periods,
            id_factory=self._id_factory,
        )
        self._persist()
        return self.state.assignments[before:]

    def clear(self) -> None:
        self.state.assignments = []
        self._persist()

    def place(self, person_name: str, day: str, period: int) -> PlacementOutcome:
        outcome = place_assignment(
            self.state.assignments,
            person_name,
            day,
            period,
            self.state.exclusions,
            self.settings.limits,
            matrices=self.state.schedules,
            weekdays=self.settings.weekdays,
            periods=self.settings.periods,
            id_factory=self._id_factory,
        )
        return self._commit(outcome)

    def move(self, assignment_id: str, day: str, period: int) -> PlacementOutcome:
        outcome = move_assignment(
            self.state.assignments,
            assignment_id,
            day,
            period,
            self.state.exclusions,
            self.settings.limits,
            matrices=self.state.schedules,
            weekdays=self.settings.weekdays,
            periods=self.settings.periods,
        )
        return self._commit(outcome)

    def remove(self, assignment_id: str) -> None:
        self.state.assignments = remove_assignment(self.state.assignments, assignment_id)
        self._persist()

    def toggle_exclusion(self, person_name: str, day: str, period: int) -> bool:
        """Flip the exclusion and return ``True`` when it is now in force."""

        self.state.exclusions = toggle_exclusion(self.state.exclusions, person_name, day, period)
        self._persist()
        return any(item.matches(person_name, day, period) for item in self.state.exclusions)

    def counts(self) -> Dict[str, int]:
        """Return standby counts for every scheduled person (zero included)."""

        tally = Counter(item.person_name for item in self.state.assignments)
        return {schedule.person_name: tally.get(schedule.person_name, 0) for schedule in self.state.schedules}

    def _commit(self, outcome: PlacementOutcome) -> PlacementOutcome:
        if outcome.accepted:
            self.state.assignments = outcome.assignments
            self._persist()
        return outcome

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(self.state)
        except PersistenceFailure:
            self.unsaved = True
            logger.warning("Standby state is live but unsaved")
        else:
            self.unsaved = False


__all__ = ["StandbyBoard"]
