"""JSON persistence for schedules, exclusions, selection and assignments."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from standbydesk.errors import PersistenceFailure
from standbydesk.model import Exclusion, StandbyAssignment, WeeklyFreeMatrix

from .exports import default_state_path

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BoardState:
    schedules: List[WeeklyFreeMatrix] = field(default_factory=list)
    exclusions: List[Exclusion] = field(default_factory=list)
    selected: List[str] = field(default_factory=list)
    assignments: List[StandbyAssignment] = field(default_factory=list)
    absent: List[str] = field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        return {
            "schedules": [item.to_record() for item in self.schedules],
            "exclusions": [item.to_record() for item in self.exclusions],
            "selected": list(self.selected),
            "assignments": [item.to_record() for item in self.assignments],
            "absent": list(self.absent),
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "BoardState":
        return cls(
            schedules=[WeeklyFreeMatrix.from_record(item) for item in data.get("schedules") or []],
            exclusions=[Exclusion.from_record(item) for item in data.get("exclusions") or []],
            selected=[str(name) for name in data.get("selected") or []],
            assignments=[StandbyAssignment.from_record(item) for item in data.get("assignments") or []],
            absent=[str(name) for name in data.get("absent") or []],
        )


class StateStore:
    """Loads and atomically saves a ``BoardState`` JSON document."""

    def __init__(self, path: Optional[str | os.PathLike[str]] = None):
        self.path = Path(path).expanduser() if path else default_state_path()

    def load(self) -> BoardState:
        if not self.path.exists():
            return BoardState()
        try:
            with open(self.path, encoding="utf-8") as handle:
                data = json.load(handle)
            if isinstance(data, dict):
                return BoardState.from_record(data)
            logger.warning("Ignoring saved state %s: not a JSON object", self.path)
        except (OSError, json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError):
            logger.warning("Failed to load saved state %s", self.path, exc_info=True)
        return BoardState()

    def save(self, state: BoardState) -> None:
        directory = self.path.parent
        tmp_path = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                delete=False,
                dir=directory,
                suffix=".tmp",
            ) as tmp_handle:
                tmp_path = tmp_handle.name
                json.dump(state.to_record(), tmp_handle, indent=2, ensure_ascii=False)
                tmp_handle.flush()
                os.fsync(tmp_handle.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.exception("Failed to save standby state")
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.debug("Could not remove temporary state file %s", tmp_path)
            raise PersistenceFailure(f"Could not save state to {self.path}: {exc}") from exc


__all__ = ["BoardState", "StateStore"]
