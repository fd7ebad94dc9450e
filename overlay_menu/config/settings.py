"""Settings storage for menu configuration."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


SETTINGS_PATH = Path(
    os.environ.get(
        "OVERLAY_MENU_SETTINGS_PATH",
        Path.home() / ".config" / "overlay-menu" / "settings.json",
    )
)

# Default values - use these constants instead of hardcoding values elsewhere
DEFAULT_RESOURCE_DIR = os.environ.get(
    "OVERLAY_MENU_RESOURCE_DIR", "/usr/games/menu_resources/"
)
DEFAULT_FPS = 60
DEFAULT_SCROLL_SPEED_PX = 30
DEFAULT_ZONE_SIZE = 240
DEFAULT_VOLUME_STEP = 10
DEFAULT_BRIGHTNESS_STEP = 10
DEFAULT_MAX_SAVE_SLOTS = 9
DEFAULT_THEME_MAX_CHARS = 15
DEFAULT_COMMAND_TIMEOUT = 10.0
DEFAULT_KEY_REPEAT_DELAY = 0.5
DEFAULT_KEY_REPEAT_INTERVAL = 0.03

DEFAULT_ENABLED_ZONES = [
    "volume",
    "brightness",
    "save",
    "load",
    "aspect_ratio",
    "read_only_read_write",
    "exit",
    "usb",
    "theme",
    "launcher",
    "powerdown",
]

DEFAULT_COMMANDS: dict[str, str] = {
    "volume_get": "volume get",
    "volume_set": "volume set",
    "brightness_get": "brightness get",
    "brightness_set": "brightness set",
    "usb_data_connected": "share is_usb_data_connected",
    "usb_check_is_sharing": "share is_sharing",
    "usb_mount": "share start",
    "usb_unmount": "share stop",
    "ro": "ro",
    "rw": "rw",
    "set_launcher": "set_launcher gmenu2x",
    "powerdown": "powerdown now",
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "resource_dir": DEFAULT_RESOURCE_DIR,
    "enabled_zones": list(DEFAULT_ENABLED_ZONES),
    "fps": DEFAULT_FPS,
    "scroll_speed_px": DEFAULT_SCROLL_SPEED_PX,
    "zone_width": DEFAULT_ZONE_SIZE,
    "zone_height": DEFAULT_ZONE_SIZE,
    "volume_step": DEFAULT_VOLUME_STEP,
    "brightness_step": DEFAULT_BRIGHTNESS_STEP,
    "max_save_slots": DEFAULT_MAX_SAVE_SLOTS,
    "theme_max_chars": DEFAULT_THEME_MAX_CHARS,
    "layout_file_name": "layout.conf",
    "command_timeout_seconds": DEFAULT_COMMAND_TIMEOUT,
    "key_repeat_delay": DEFAULT_KEY_REPEAT_DELAY,
    "key_repeat_interval": DEFAULT_KEY_REPEAT_INTERVAL,
    "commands": dict(DEFAULT_COMMANDS),
}


@dataclass
class SettingsStore:
    values: dict[str, Any] = field(default_factory=dict)


settings_store = SettingsStore()


def load_settings() -> None:
    settings_store.values = json.loads(json.dumps(DEFAULT_SETTINGS))
    if not SETTINGS_PATH.exists():
        return
    try:
        data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return
    if isinstance(data, dict):
        commands = data.pop("commands", None)
        settings_store.values.update(data)
        if isinstance(commands, dict):
            settings_store.values["commands"].update(commands)


load_settings()
