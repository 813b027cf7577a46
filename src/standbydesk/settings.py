"""Domain constants and tunable layout/assignment tolerances."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

LOGGER = logging.getLogger(__name__)

WEEKDAYS: Tuple[str, ...] = ("Hétfő", "Kedd", "Szerda", "Csütörtök", "Péntek")
PERIODS: Tuple[int, ...] = tuple(range(1, 9))

HOME_ENV = "STANDBYDESK_HOME"


@dataclass(frozen=True, slots=True)
class LayoutTolerances:
    """Coordinate buffers used by the timetable layout heuristics."""

    left_margin: float = 100.0
    header_buffer: float = 20.0
    cell_x_buffer: float = 10.0
    row_y_buffer: float = 10.0
    default_column_width: float = 100.0
    default_row_depth: float = 20.0
    word_join_gap: float = 0.5
    stop_tokens: FrozenSet[str] = frozenset({"KRÉTA"})
    stop_substrings: FrozenSet[str] = frozenset({"hét"})


@dataclass(frozen=True, slots=True)
class AssignmentLimits:
    """Weekly quota and daily load ceiling for standby duty."""

    weekly_quota: int = 3
    daily_load_limit: int = 7
    honor_exclusions: bool = False


@dataclass(frozen=True, slots=True)
class Settings:
    weekdays: Tuple[str, ...] = WEEKDAYS
    periods: Tuple[int, ...] = PERIODS
    layout: LayoutTolerances = field(default_factory=LayoutTolerances)
    limits: AssignmentLimits = field(default_factory=AssignmentLimits)


DEFAULT_SETTINGS = Settings()


def app_home() -> Path:
    """Return the application data directory, honouring ``STANDBYDESK_HOME``."""

    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".standbydesk"


def load_settings(path: Optional[str | Path] = None) -> Settings:
    """Return settings with overrides from the JSON file at ``path``.

    The file may carry ``layout`` and ``limits`` objects whose keys mirror the
    dataclass fields. Unknown keys are ignored and a missing file yields the
    defaults.
    """

    if path is None:
        return DEFAULT_SETTINGS
    config_path = Path(path).expanduser()
    if not config_path.exists():
        LOGGER.info("Settings file %s not found; using defaults", config_path)
        return DEFAULT_SETTINGS

    payload = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"Settings file must contain a JSON object: {config_path}")

    layout = _apply_overrides(DEFAULT_SETTINGS.layout, payload.get("layout") or {})
    limits = _apply_overrides(DEFAULT_SETTINGS.limits, payload.get("limits") or {})
    return replace(DEFAULT_SETTINGS, layout=layout, limits=limits)


def _apply_overrides(base: Any, overrides: Mapping[str, Any]) -> Any:
    known = {item.name: item for item in fields(base)}
    changes: Dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            LOGGER.warning("Ignoring unknown setting %s", key)
            continue
        current = getattr(base, key)
        if isinstance(current, frozenset):
            changes[key] = frozenset(str(item) for item in value)
        elif isinstance(current, bool):
            changes[key] = _parse_flag(key, value)
        elif isinstance(current, int):
            changes[key] = int(value)
        else:
            changes[key] = float(value)
    return replace(base, **changes)


def _parse_flag(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValueError(f"Setting {key} must be true or false, got {value!r}")


__all__ = [
    "AssignmentLimits",
    "DEFAULT_SETTINGS",
    "LayoutTolerances",
    "PERIODS",
    "Settings",
    "WEEKDAYS",
    "app_home",
    "load_settings",
]
