"""Side-effect dispatcher: runs the external action bound to each zone.

Every action reports plain success or failure. Nothing here raises into the
menu loop; failures are logged and returned as ``False`` so the navigator
can leave persistent flags untouched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Protocol

from overlay_menu.actions import system_utils
from overlay_menu.actions.layouts import LayoutStore
from overlay_menu.logging import LoggerFactory, operation_context
from overlay_menu.menu.model import MenuValues, ZoneType
from overlay_menu.menu.zones import behavior_for

if TYPE_CHECKING:
    from overlay_menu.config.menu_config import MenuConfig


log = LoggerFactory.for_system()

HostHook = Callable[..., Optional[bool]]


class CommandRunner(Protocol):
    def execute(self, command: str, *args: object) -> bool:
        """Run a command for its side effect."""

    def spawn(self, command: str, *args: object) -> bool:
        """Start a command without waiting for it."""

    def check(self, command: str) -> bool:
        """Run a yes/no query command."""

    def query_percentage(self, command: str) -> int:
        """Run a command printing a percentage."""


class ShellCommandRunner:
    """Runs commands through ``subprocess`` with an optional timeout."""

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout

    def execute(self, command: str, *args: object) -> bool:
        return system_utils.execute(command, *args, timeout=self.timeout)

    def spawn(self, command: str, *args: object) -> bool:
        return system_utils.spawn(command, *args)

    def check(self, command: str) -> bool:
        return system_utils.check(command, timeout=self.timeout)

    def query_percentage(self, command: str) -> int:
        return system_utils.query_percentage(command, timeout=self.timeout)


class SideEffectDispatcher:
    def __init__(
        self,
        config: MenuConfig,
        layout_store: Optional[LayoutStore] = None,
        *,
        runner: Optional[CommandRunner] = None,
        on_save: Optional[HostHook] = None,
        on_load: Optional[HostHook] = None,
        on_aspect_ratio: Optional[HostHook] = None,
        on_exit: Optional[HostHook] = None,
    ) -> None:
        self.config = config
        self.layout_store = layout_store
        self.runner = runner or ShellCommandRunner(config.command_timeout_seconds)
        self.on_save = on_save
        self.on_load = on_load
        self.on_aspect_ratio = on_aspect_ratio
        self.on_exit = on_exit
        self._handlers: Dict[ZoneType, Callable[[Any], bool]] = {
            ZoneType.VOLUME: self._set_volume,
            ZoneType.BRIGHTNESS: self._set_brightness,
            ZoneType.SAVE: self._save,
            ZoneType.LOAD: self._load,
            ZoneType.ASPECT_RATIO: self._set_aspect_ratio,
            ZoneType.USB: self._toggle_usb,
            ZoneType.THEME: self._set_theme,
            ZoneType.LAUNCHER: self._set_launcher,
            ZoneType.READ_ONLY_READ_WRITE: self._toggle_read_write,
            ZoneType.EXIT: self._exit,
            ZoneType.POWERDOWN: self._powerdown,
        }

    def dispatch(self, zone: ZoneType, value: Any = None) -> bool:
        handler = self._handlers[zone]
        if not behavior_for(zone).confirm_action:
            return handler(value)
        with operation_context(zone.value, value=value) as op_log:
            success = handler(value)
            if not success:
                op_log.warning(f"{zone.value} action reported failure")
        return success

    def theme_names(self) -> List[str]:
        if self.layout_store is None:
            return []
        return self.layout_store.display_names()

    def has_themes(self) -> bool:
        return bool(self.layout_store is not None and len(self.layout_store))

    def refresh_system_values(self, values: MenuValues, zones: Iterable[ZoneType]) -> None:
        """Re-read volume, brightness and USB state for the enabled zones."""
        enabled = set(zones)
        if ZoneType.VOLUME in enabled:
            values.volume_percentage = self.runner.query_percentage(
                self.config.command("volume_get")
            )
            log.debug(f"System volume = {values.volume_percentage}%")
        if ZoneType.BRIGHTNESS in enabled:
            values.brightness_percentage = self.runner.query_percentage(
                self.config.command("brightness_get")
            )
            log.debug(f"System brightness = {values.brightness_percentage}%")
        if ZoneType.USB in enabled:
            values.usb_data_connected = self.runner.check(
                self.config.command("usb_data_connected")
            )
            values.usb_sharing = values.usb_data_connected and self.runner.check(
                self.config.command("usb_check_is_sharing")
            )
            log.debug(
                f"USB connected={values.usb_data_connected} sharing={values.usb_sharing}"
            )

    def force_read_only(self) -> bool:
        return self.runner.execute(self.config.command("ro"))

    def _call_hook(self, name: str, hook: Optional[HostHook], *args: Any) -> bool:
        if hook is None:
            return True
        try:
            result = hook(*args)
        except Exception as error:
            log.error(f"Host {name} hook failed: {error}")
            return False
        return result is not False

    def _set_volume(self, value: int) -> bool:
        return self.runner.execute(self.config.command("volume_set"), value)

    def _set_brightness(self, value: int) -> bool:
        return self.runner.execute(self.config.command("brightness_set"), value)

    def _save(self, slot: int) -> bool:
        log.info(f"Saving in slot {slot}")
        return self._call_hook("save", self.on_save, slot)

    def _load(self, slot: int) -> bool:
        log.info(f"Loading from slot {slot}")
        return self._call_hook("load", self.on_load, slot)

    def _set_aspect_ratio(self, index: int) -> bool:
        return self._call_hook("aspect ratio", self.on_aspect_ratio, index)

    def _toggle_usb(self, sharing: bool) -> bool:
        command = self.config.command("usb_unmount" if sharing else "usb_mount")
        return self.runner.execute(command)

    def _set_theme(self, index: int) -> bool:
        store = self.layout_store
        if store is None or not len(store):
            log.error("No layouts available, theme unchanged")
            return False
        index %= len(store)
        path = store.absolute_path / self.config.layout_file_name
        if not store.export_current_layout(path, store.display_name(index)):
            return False
        store.current_index = index
        return True

    def _set_launcher(self, _value: Any) -> bool:
        return self.runner.execute(self.config.command("set_launcher"))

    def _toggle_read_write(self, read_write: bool) -> bool:
        return self.runner.execute(self.config.command("ro" if read_write else "rw"))

    def _exit(self, _value: Any) -> bool:
        return self._call_hook("exit", self.on_exit)

    def _powerdown(self, _value: Any) -> bool:
        return self.runner.spawn(self.config.command("powerdown"))
