"""Geometry helpers for timetable cell boxes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Rect = Tuple[float, float, float, float]


def normalize_rect(rect: Rect) -> Rect:
    """Return ``rect`` with coordinates sorted so that x1 >= x0 and y1 >= y0."""

    x0, y0, x1, y1 = rect
    if x1 < x0:
        x0, x1 = x1, x0
    if y1 < y0:
        y0, y1 = y1, y0
    return float(x0), float(y0), float(x1), float(y1)


@dataclass(frozen=True, slots=True)
class CellBox:
    """Search box of one (day, period) cell; ``x`` half-open, ``y`` closed."""

    day: str
    period: int
    x0: float
    x1: float
    y0: float
    y1: float

    @classmethod
    def from_spans(cls, day: str, period: int, x_span: Tuple[float, float], y_span: Tuple[float, float]) -> "CellBox":
        x0, y0, x1, y1 = normalize_rect((x_span[0], y_span[0], x_span[1], y_span[1]))
        return cls(day=day, period=period, x0=x0, x1=x1, y0=y0, y1=y1)

    def contains(self, x: float, y: float) -> bool:
        return self.x0 <= x < self.x1 and self.y0 <= y <= self.y1


__all__ = ["CellBox", "Rect", "normalize_rect"]
