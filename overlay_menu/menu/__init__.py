from overlay_menu.menu.model import (
    MenuState,
    MenuValues,
    NavigationPhase,
    ReturnCode,
    ZONE_PRIORITY,
    ZoneType,
)
from overlay_menu.menu.navigator import MenuNavigator
from overlay_menu.menu.registry import ZoneRegistry, build_zones

__all__ = [
    "MenuNavigator",
    "MenuState",
    "MenuValues",
    "NavigationPhase",
    "ReturnCode",
    "ZONE_PRIORITY",
    "ZoneRegistry",
    "ZoneType",
    "build_zones",
]
