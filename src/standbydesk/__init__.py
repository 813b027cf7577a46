"""StandbyDesk: timetable free-period extraction and standby duty planning."""

from __future__ import annotations

__version__ = "0.1.0"
