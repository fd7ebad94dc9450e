"""
Pytest configuration and shared fixtures for overlay-menu tests.

This module provides common fixtures and utilities used across all test modules.
"""

import sys
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import MagicMock, Mock

import pytest
from PIL import Image, ImageFont


# Mock hardware dependencies before other imports
# This allows tests to run on non-Raspberry Pi systems
sys.modules["RPi"] = MagicMock()
sys.modules["RPi.GPIO"] = MagicMock()


from overlay_menu.config.menu_config import MenuConfig  # noqa: E402
from overlay_menu.hardware.keys import InputEvent, Key  # noqa: E402
from overlay_menu.hardware.virtual_input import VirtualInput  # noqa: E402
from overlay_menu.menu.model import MenuValues, ZoneType  # noqa: E402
from overlay_menu.ui.display import DisplayContext  # noqa: E402
from overlay_menu.ui.renderer import MenuResources  # noqa: E402


HOST_COLOR = (10, 20, 30)


class FakeDispatcher:
    """Records every dispatched side effect instead of running it."""

    def __init__(
        self,
        results: Optional[Dict[ZoneType, bool]] = None,
        theme_names: Optional[List[str]] = None,
        system: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.results = results or {}
        self.calls: List[Tuple[ZoneType, Any]] = []
        self._theme_names = list(theme_names or [])
        self.system = system or {}
        self.layout_store = None
        self.force_read_only_calls = 0
        self.refresh_calls = 0

    def dispatch(self, zone: ZoneType, value: Any = None) -> bool:
        self.calls.append((zone, value))
        return self.results.get(zone, True)

    def calls_for(self, zone: ZoneType) -> List[Any]:
        return [value for called_zone, value in self.calls if called_zone is zone]

    def theme_names(self) -> List[str]:
        return list(self._theme_names)

    def has_themes(self) -> bool:
        return bool(self._theme_names)

    def refresh_system_values(self, values: MenuValues, zones) -> None:
        self.refresh_calls += 1
        for name, value in self.system.items():
            setattr(values, name, value)

    def force_read_only(self) -> bool:
        self.force_read_only_calls += 1
        return True


def key_events(*names: str) -> List[InputEvent]:
    return [InputEvent.key_down(Key.from_name(name)) for name in names]


@pytest.fixture
def menu_config(tmp_path) -> MenuConfig:
    """Default configuration pointing at an empty resource directory."""
    return MenuConfig(resource_dir=tmp_path / "resources", command_timeout_seconds=1.0)


@pytest.fixture
def fake_dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest.fixture
def virtual_input() -> VirtualInput:
    return VirtualInput()


@pytest.fixture
def menu_values() -> MenuValues:
    return MenuValues()


@pytest.fixture
def display_context() -> DisplayContext:
    """Pillow-backed display context with a Mock luma device."""
    image = Image.new("RGB", (240, 240), HOST_COLOR)
    return DisplayContext(disp=Mock(), image=image, width=240, height=240)


@pytest.fixture
def menu_resources() -> MenuResources:
    """Resources using Pillow's built-in font and no images."""
    font = ImageFont.load_default()
    return MenuResources(fonts={"title": font, "info": font, "small": font})


@pytest.fixture
def make_dispatcher():
    """Factory for ``FakeDispatcher`` instances with custom results."""
    return FakeDispatcher


@pytest.fixture
def make_events():
    """Factory turning key names into key-down events."""
    return key_events
