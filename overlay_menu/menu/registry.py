"""Zone registry: which zones a session shows, in which order."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List

from overlay_menu.logging import LoggerFactory
from overlay_menu.menu.exceptions import EmptyZoneRegistryError
from overlay_menu.menu.model import ZONE_PRIORITY, ZoneType
from overlay_menu.ui.display import Surface
from overlay_menu.ui.renderer import MenuResources, render_static

if TYPE_CHECKING:
    from overlay_menu.config.menu_config import MenuConfig


log = LoggerFactory.for_menu()


def build_zones(enabled: Iterable[ZoneType]) -> List[ZoneType]:
    """Order the enabled zones by the fixed priority table.

    Raises:
        EmptyZoneRegistryError: If no zone is enabled.
    """
    enabled_set = set(enabled)
    zones = [zone for zone in ZONE_PRIORITY if zone in enabled_set]
    if not zones:
        raise EmptyZoneRegistryError(len(enabled_set))
    return zones


class ZoneRegistry:
    """Ordered zones of one session plus their cached static panels."""

    def __init__(self, zones: List[ZoneType], surfaces: List[Surface]) -> None:
        if len(zones) != len(surfaces):
            raise ValueError("Each zone needs exactly one panel surface.")
        self.zones = zones
        self.surfaces = surfaces

    @classmethod
    def build(
        cls,
        enabled: Iterable[ZoneType],
        resources: MenuResources,
        config: MenuConfig,
    ) -> ZoneRegistry:
        zones = build_zones(enabled)
        surfaces = [render_static(zone, resources, config) for zone in zones]
        log.debug(
            f"Zone registry built: {', '.join(zone.value for zone in zones)}",
            zones=len(zones),
        )
        return cls(zones, surfaces)

    def __len__(self) -> int:
        return len(self.zones)

    def surface_for(self, index: int) -> Surface:
        return self.surfaces[index]

    def release(self) -> None:
        self.surfaces = []
