"""Tests for the host stub entry point."""

from unittest.mock import Mock

import pytest

from overlay_menu import main as main_module
from overlay_menu.config.menu_config import MenuConfig
from overlay_menu.menu.exceptions import UnknownZoneError


@pytest.fixture
def device():
    return Mock(width=240, height=240, mode="RGB")


@pytest.fixture
def host(mocker, device, tmp_path):
    mocker.patch("overlay_menu.main.setup_logging")
    mocker.patch("overlay_menu.main.dummy", return_value=device)
    mocker.patch(
        "overlay_menu.actions.system_utils.subprocess.run",
        side_effect=FileNotFoundError("missing"),
    )
    config = MenuConfig(resource_dir=tmp_path / "resources", command_timeout_seconds=1.0)
    from_settings = mocker.patch.object(MenuConfig, "from_settings", return_value=config)
    return from_settings


class TestMain:
    """Exit codes of scripted host runs."""

    def test_escape_returns_ok(self, host, device):
        assert main_module.main(["--keys", "q"]) == 0
        assert device.display.called

    def test_no_keys_quits(self, host):
        assert main_module.main([]) == 1

    def test_exit_zone(self, host):
        keys = ["down"] * 6 + ["a", "a"]

        assert main_module.main(["--keys", *keys]) == 2

    def test_empty_zone_set_is_fatal(self, host):
        host.return_value = MenuConfig(enabled_zones=frozenset())

        assert main_module.main(["--keys", "q"]) == main_module.EXIT_FATAL

    def test_invalid_config_is_fatal(self, host):
        host.side_effect = UnknownZoneError("cheats")

        assert main_module.main([]) == main_module.EXIT_FATAL

    def test_screenshot_written(self, host, tmp_path):
        shots = tmp_path / "shots"

        main_module.main(["--keys", "q", "--screenshot", str(shots)])

        assert list(shots.glob("*.png"))

    def test_layouts_dir(self, host, tmp_path):
        (tmp_path / "layouts" / "classic").mkdir(parents=True)

        assert main_module.main(["--keys", "q", "--layouts-dir", str(tmp_path / "layouts")]) == 0

    def test_unknown_key_name(self, host):
        with pytest.raises(ValueError):
            main_module.main(["--keys", "start"])
