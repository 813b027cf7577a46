"""Error hierarchy for timetable extraction and standby editing."""

from __future__ import annotations

from enum import Enum


class StandbyDeskError(Exception):
    """Base exception for all StandbyDesk errors."""


class DocumentUnreadable(StandbyDeskError):
    """The timetable document could not be opened or parsed at all.

    Fatal for the whole extraction; individual unusable pages are reported as
    skipped pages instead.
    """


class RejectionReason(str, Enum):
    EXCLUDED = "excluded"
    DUPLICATE_SLOT = "duplicate_slot"
    QUOTA_REACHED = "quota_reached"
    DAILY_LOAD = "daily_load"
    UNKNOWN_ASSIGNMENT = "unknown_assignment"
    INVALID_SLOT = "invalid_slot"


class AssignmentRejected(StandbyDeskError):
    """A manual placement or move broke an exclusion, duplicate or quota rule."""

    def __init__(self, reason: RejectionReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class PersistenceFailure(StandbyDeskError):
    """Saving state failed; the in-memory result is still live."""


__all__ = [
    "AssignmentRejected",
    "DocumentUnreadable",
    "PersistenceFailure",
    "RejectionReason",
    "StandbyDeskError",
]
