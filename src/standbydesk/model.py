"""Timetable and standby duty data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .settings import PERIODS, WEEKDAYS


@dataclass(frozen=True, slots=True)
class TextFragment:
    """A trimmed text run with page coordinates (``y`` grows upward)."""

    text: str
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class DayColumn:
    day_name: str
    x: float
    y: float = 0.0


@dataclass(frozen=True, slots=True)
class PeriodRow:
    period: int
    y: float


@dataclass(slots=True)
class WeeklyFreeMatrix:
    """Free periods per weekday for one person.

    Periods missing from ``free_periods[day]`` are teaching periods.
    """

    person_name: str
    free_periods: Dict[str, List[int]] = field(default_factory=dict)

    def free_on(self, day: str, period: int) -> bool:
        return period in self.free_periods.get(day, ())

    def teaching_periods(self, day: str, periods: Sequence[int] = PERIODS) -> List[int]:
        free = set(self.free_periods.get(day, ()))
        return [period for period in periods if period not in free]

    def to_record(self) -> Dict[str, Any]:
        return {
            "name": self.person_name,
            "freePeriods": {day: list(values) for day, values in self.free_periods.items()},
        }

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        *,
        weekdays: Sequence[str] = WEEKDAYS,
        periods: Sequence[int] = PERIODS,
    ) -> "WeeklyFreeMatrix":
        if not isinstance(record, Mapping):
            raise TypeError(f"Schedule record must be an object, got {type(record).__name__}")
        raw = record.get("freePeriods") or {}
        if not isinstance(raw, Mapping):
            raise TypeError(f"freePeriods must map weekdays to periods, got {type(raw).__name__}")
        free: Dict[str, List[int]] = {}
        for day, values in raw.items():
            if day not in weekdays:
                continue
            free[day] = normalize_periods(values, periods)
        return cls(person_name=str(record.get("name", "")), free_periods=free)


@dataclass(frozen=True, slots=True)
class Exclusion:
    """A (person, day, period) slot that must never hold standby duty."""

    person_name: str
    day: str
    period: int

    def matches(self, person_name: str, day: str, period: int) -> bool:
        return self.person_name == person_name and self.day == day and self.period == period

    def to_record(self) -> Dict[str, Any]:
        return {"teacherName": self.person_name, "day": self.day, "period": self.period}

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Exclusion":
        return cls(
            person_name=str(record["teacherName"]),
            day=str(record["day"]),
            period=int(record["period"]),
        )


@dataclass(frozen=True, slots=True)
class StandbyAssignment:
    id: str
    person_name: str
    day: str
    period: int

    @property
    def slot(self) -> tuple[str, str, int]:
        return self.person_name, self.day, self.period

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "teacherName": self.person_name,
            "day": self.day,
            "period": self.period,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "StandbyAssignment":
        return cls(
            id=str(record["id"]),
            person_name=str(record["teacherName"]),
            day=str(record["day"]),
            period=int(record["period"]),
        )


def normalize_periods(values: Iterable[Any], periods: Sequence[int] = PERIODS) -> List[int]:
    """Return sorted, unique period numbers from ``values`` restricted to ``periods``."""

    allowed = set(periods)
    result: set[int] = set()
    for value in values:
        try:
            number = int(value)
        except (TypeError, ValueError):
            continue
        if number in allowed:
            result.add(number)
    return sorted(result)


def find_matrix(matrices: Iterable[WeeklyFreeMatrix], person_name: str) -> WeeklyFreeMatrix | None:
    """Return the first matrix for ``person_name``."""

    for matrix in matrices:
        if matrix.person_name == person_name:
            return matrix
    return None


__all__ = [
    "DayColumn",
    "Exclusion",
    "PeriodRow",
    "StandbyAssignment",
    "TextFragment",
    "WeeklyFreeMatrix",
    "find_matrix",
    "normalize_periods",
]
