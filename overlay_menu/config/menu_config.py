"""Typed menu configuration built from the settings store."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional

from overlay_menu.config import settings
from overlay_menu.menu.model import ZONE_PRIORITY, ZoneType


@dataclass(frozen=True)
class MenuConfig:
    resource_dir: Path = Path(settings.DEFAULT_RESOURCE_DIR)
    enabled_zones: FrozenSet[ZoneType] = frozenset(ZONE_PRIORITY)
    fps: int = settings.DEFAULT_FPS
    scroll_speed_px: int = settings.DEFAULT_SCROLL_SPEED_PX
    zone_width: int = settings.DEFAULT_ZONE_SIZE
    zone_height: int = settings.DEFAULT_ZONE_SIZE
    volume_step: int = settings.DEFAULT_VOLUME_STEP
    brightness_step: int = settings.DEFAULT_BRIGHTNESS_STEP
    max_save_slots: int = settings.DEFAULT_MAX_SAVE_SLOTS
    theme_max_chars: int = settings.DEFAULT_THEME_MAX_CHARS
    layout_file_name: str = "layout.conf"
    command_timeout_seconds: Optional[float] = settings.DEFAULT_COMMAND_TIMEOUT
    key_repeat_delay: float = settings.DEFAULT_KEY_REPEAT_DELAY
    key_repeat_interval: float = settings.DEFAULT_KEY_REPEAT_INTERVAL
    commands: Mapping[str, str] = field(
        default_factory=lambda: dict(settings.DEFAULT_COMMANDS)
    )

    @property
    def frame_budget(self) -> float:
        """Seconds allotted to one frame."""
        return 1.0 / max(1, self.fps)

    def command(self, name: str) -> str:
        return self.commands.get(name, settings.DEFAULT_COMMANDS.get(name, ""))

    @classmethod
    def from_settings(cls, values: Optional[Dict[str, Any]] = None) -> MenuConfig:
        """Build a config from a settings dict (the live store by default).

        Raises:
            UnknownZoneError: If ``enabled_zones`` names an unknown zone.
        """
        if values is None:
            values = settings.settings_store.values
        defaults = settings.DEFAULT_SETTINGS

        def get(key: str) -> Any:
            value = values.get(key)
            return defaults[key] if value is None else value

        commands = dict(settings.DEFAULT_COMMANDS)
        commands.update(values.get("commands") or {})
        timeout = values.get("command_timeout_seconds", defaults["command_timeout_seconds"])
        return cls(
            resource_dir=Path(get("resource_dir")),
            enabled_zones=frozenset(
                ZoneType.from_name(name) for name in get("enabled_zones")
            ),
            fps=int(get("fps")),
            scroll_speed_px=int(get("scroll_speed_px")),
            zone_width=int(get("zone_width")),
            zone_height=int(get("zone_height")),
            volume_step=int(get("volume_step")),
            brightness_step=int(get("brightness_step")),
            max_save_slots=int(get("max_save_slots")),
            theme_max_chars=int(get("theme_max_chars")),
            layout_file_name=str(get("layout_file_name")),
            command_timeout_seconds=None if timeout is None else float(timeout),
            key_repeat_delay=float(get("key_repeat_delay")),
            key_repeat_interval=float(get("key_repeat_interval")),
            commands=commands,
        )
