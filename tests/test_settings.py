from __future__ import annotations

import json
from pathlib import Path

import pytest

from standbydesk.settings import DEFAULT_SETTINGS, HOME_ENV, app_home, load_settings


def test_defaults():
    assert DEFAULT_SETTINGS.limits.weekly_quota == 3
    assert DEFAULT_SETTINGS.limits.daily_load_limit == 7
    assert DEFAULT_SETTINGS.limits.honor_exclusions is False
    assert DEFAULT_SETTINGS.layout.left_margin == 100.0
    assert DEFAULT_SETTINGS.weekdays[0] == "Hétfő"
    assert DEFAULT_SETTINGS.periods == tuple(range(1, 9))


def test_load_settings_overrides_and_ignores_unknown(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "layout": {"header_buffer": 25, "stop_tokens": ["KRÉTA", "Iskola"], "bogus": 1},
                "limits": {"weekly_quota": 4, "honor_exclusions": True},
            }
        ),
        encoding="utf-8",
    )

    settings = load_settings(path)

    assert settings.layout.header_buffer == 25.0
    assert settings.layout.stop_tokens == frozenset({"KRÉTA", "Iskola"})
    assert settings.layout.cell_x_buffer == 10.0
    assert settings.limits.weekly_quota == 4
    assert settings.limits.daily_load_limit == 7
    assert settings.limits.honor_exclusions is True


def test_missing_settings_file_uses_defaults(tmp_path: Path):
    assert load_settings(tmp_path / "missing.json") is DEFAULT_SETTINGS
    assert load_settings(None) is DEFAULT_SETTINGS


def test_app_home_env_override(tmp_path: Path, monkeypatch):
    monkeypatch.setenv(HOME_ENV, str(tmp_path))
    assert app_home() == tmp_path
    monkeypatch.delenv(HOME_ENV)
    assert app_home() == Path.home() / ".standbydesk"


@pytest.mark.parametrize(
    "raw, expected",
    [(True, True), (False, False), ("false", False), ("True", True)],
)
def test_flag_overrides_parse_strictly(tmp_path: Path, raw, expected):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"limits": {"honor_exclusions": raw}}), encoding="utf-8")

    assert load_settings(path).limits.honor_exclusions is expected


@pytest.mark.parametrize("raw", ["no", 1, None])
def test_flag_override_rejects_non_booleans(tmp_path: Path, raw):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"limits": {"honor_exclusions": raw}}), encoding="utf-8")

    with pytest.raises(ValueError):
        load_settings(path)
