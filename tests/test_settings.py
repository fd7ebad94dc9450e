"""Tests for the JSON settings store and the typed menu config."""

import json
from pathlib import Path

import pytest

from overlay_menu.config import settings
from overlay_menu.config.menu_config import MenuConfig
from overlay_menu.menu.exceptions import UnknownZoneError
from overlay_menu.menu.model import ZoneType


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr(settings, "SETTINGS_PATH", path)
    original = settings.settings_store.values
    yield path
    settings.settings_store.values = original


class TestSettingsStore:
    """Loading and merging settings."""

    def test_defaults_without_file(self, settings_path):
        settings.load_settings()

        values = settings.settings_store.values
        assert values["fps"] == 60
        assert values["enabled_zones"] == settings.DEFAULT_ENABLED_ZONES
        assert values["commands"]["usb_mount"] == "share start"

    def test_file_overrides_defaults(self, settings_path):
        settings_path.write_text(
            json.dumps({"fps": 30, "commands": {"powerdown": "poweroff"}}),
            encoding="utf-8",
        )

        settings.load_settings()

        values = settings.settings_store.values
        assert values["fps"] == 30
        assert values["commands"]["powerdown"] == "poweroff"
        assert values["commands"]["rw"] == "rw"

    def test_corrupt_file_keeps_defaults(self, settings_path):
        settings_path.write_text("{not json", encoding="utf-8")

        settings.load_settings()

        assert settings.settings_store.values["scroll_speed_px"] == 30

    def test_non_object_file_ignored(self, settings_path):
        settings_path.write_text("[1, 2, 3]", encoding="utf-8")

        settings.load_settings()

        assert settings.settings_store.values["fps"] == 60

    def test_defaults_not_mutated(self, settings_path):
        settings.load_settings()

        settings.settings_store.values["commands"]["ro"] = "changed"

        assert settings.DEFAULT_SETTINGS["commands"]["ro"] == "ro"

    def test_loaded_values_reach_menu_config(self, settings_path):
        settings_path.write_text(
            json.dumps({"fps": 30, "commands": {"powerdown": "poweroff"}}),
            encoding="utf-8",
        )
        settings.load_settings()

        config = MenuConfig.from_settings()

        assert config.fps == 30
        assert config.command("powerdown") == "poweroff"
        assert config.command("dance") == ""


class TestMenuConfig:
    """Typed configuration derived from settings values."""

    def test_defaults(self):
        config = MenuConfig()

        assert config.zone_width == 240
        assert config.enabled_zones == frozenset(ZoneType)
        assert config.frame_budget == pytest.approx(1 / 60)

    def test_from_settings_defaults(self):
        config = MenuConfig.from_settings(dict(settings.DEFAULT_SETTINGS))

        assert config == MenuConfig(resource_dir=Path(settings.DEFAULT_RESOURCE_DIR))

    def test_from_settings_values(self):
        config = MenuConfig.from_settings(
            {
                "enabled_zones": ["exit", "Volume"],
                "fps": "30",
                "scroll_speed_px": 40,
                "command_timeout_seconds": None,
                "commands": {"volume_set": "amixer set"},
            }
        )

        assert config.enabled_zones == frozenset({ZoneType.EXIT, ZoneType.VOLUME})
        assert config.fps == 30
        assert config.scroll_speed_px == 40
        assert config.command_timeout_seconds is None
        assert config.command("volume_set") == "amixer set"
        assert config.command("volume_get") == "volume get"

    def test_unknown_zone_rejected(self):
        with pytest.raises(UnknownZoneError):
            MenuConfig.from_settings({"enabled_zones": ["volume", "cheats"]})

    def test_empty_zone_list_kept(self):
        config = MenuConfig.from_settings({"enabled_zones": []})

        assert config.enabled_zones == frozenset()

    def test_frame_budget_guards_zero_fps(self):
        assert MenuConfig(fps=0).frame_budget == 1.0
