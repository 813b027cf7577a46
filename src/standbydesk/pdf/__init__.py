"""Timetable PDF layout helpers for StandbyDesk."""

from __future__ import annotations

__all__ = [
    "cells",
    "fragments",
    "geometry",
    "grid_header",
    "person_label",
    "spatial_index",
    "timetable",
]
