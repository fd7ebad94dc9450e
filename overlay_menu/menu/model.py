from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from overlay_menu.menu.exceptions import UnknownZoneError


class ZoneType(Enum):
    VOLUME = "volume"
    BRIGHTNESS = "brightness"
    SAVE = "save"
    LOAD = "load"
    ASPECT_RATIO = "aspect_ratio"
    USB = "usb"
    THEME = "theme"
    LAUNCHER = "launcher"
    READ_ONLY_READ_WRITE = "read_only_read_write"
    EXIT = "exit"
    POWERDOWN = "powerdown"

    @classmethod
    def from_name(cls, name: str) -> ZoneType:
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise UnknownZoneError(name) from None


# Registry order when every zone is enabled.
ZONE_PRIORITY = (
    ZoneType.VOLUME,
    ZoneType.BRIGHTNESS,
    ZoneType.SAVE,
    ZoneType.LOAD,
    ZoneType.ASPECT_RATIO,
    ZoneType.READ_ONLY_READ_WRITE,
    ZoneType.EXIT,
    ZoneType.USB,
    ZoneType.THEME,
    ZoneType.LAUNCHER,
    ZoneType.POWERDOWN,
)


class ReturnCode(Enum):
    OK = 0
    QUIT = 1
    EXIT = 2
    ERROR = -1


class NavigationPhase(Enum):
    IDLE = "idle"
    SCROLLING = "scrolling"
    CONFIRM_PENDING = "confirm_pending"
    ACTION_COMMITTED = "action_committed"


ASPECT_RATIO_NAMES = ("STRETCHED", "MANUAL ZOOM", "CROPPED", "SCALED")
DEFAULT_ASPECT_RATIO = 0
DEFAULT_PERCENTAGE = 50


@dataclass
class MenuValues:
    """Per-zone values that outlive a single menu session.

    One instance lives as long as the host process; every session reads and
    writes it. Volume, brightness and the USB flags are refreshed from the
    system when a session starts running.
    """

    volume_percentage: int = 0
    brightness_percentage: int = 0
    savestate_slot: int = 0
    aspect_ratio: int = DEFAULT_ASPECT_RATIO
    theme_index: int = 0
    usb_data_connected: bool = False
    usb_sharing: bool = False
    read_write: bool = False
    menu_item: int = 0

    @property
    def aspect_ratio_name(self) -> str:
        return ASPECT_RATIO_NAMES[self.aspect_ratio % len(ASPECT_RATIO_NAMES)]


@dataclass
class MenuState:
    zones: List[ZoneType]
    current_index: int = 0
    previous_index: int = 0
    scroll_offset: int = 0
    scroll_direction: int = 0
    confirmation_pending: bool = False
    action_in_progress: bool = False
    needs_redraw: bool = True
    stopped: bool = False
    return_code: ReturnCode = ReturnCode.OK
    committed: Optional[ZoneType] = None

    @property
    def current_zone(self) -> ZoneType:
        return self.zones[self.current_index]

    @property
    def previous_zone(self) -> ZoneType:
        return self.zones[self.previous_index]

    @property
    def is_scrolling(self) -> bool:
        return self.scroll_offset != 0 or self.scroll_direction != 0

    @property
    def phase(self) -> NavigationPhase:
        if self.is_scrolling:
            return NavigationPhase.SCROLLING
        if self.action_in_progress:
            return NavigationPhase.ACTION_COMMITTED
        if self.confirmation_pending:
            return NavigationPhase.CONFIRM_PENDING
        return NavigationPhase.IDLE

    def index_of(self, zone: ZoneType) -> Optional[int]:
        try:
            return self.zones.index(zone)
        except ValueError:
            return None

