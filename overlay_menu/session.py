"""Menu session: open, run and close the overlay.

A ``MenuSession`` owns everything that lives for one menu opening (the zone
registry, loaded fonts and images, the navigation state) and borrows the
things that outlive it (the ``MenuValues`` record, the input source, the
dispatcher). ``run`` is the frame driver: a single-threaded fixed-rate loop
that polls input, advances the slide animation, sleeps out the frame budget
and redraws when something changed.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from overlay_menu.actions.dispatcher import SideEffectDispatcher
from overlay_menu.actions.layouts import LayoutStore
from overlay_menu.config.menu_config import MenuConfig
from overlay_menu.hardware.keys import InputSource
from overlay_menu.logging import LoggerFactory, ThrottledLogger
from overlay_menu.menu.exceptions import SessionStateError
from overlay_menu.menu.model import MenuState, MenuValues, ReturnCode, ZoneType
from overlay_menu.menu.navigator import MenuNavigator
from overlay_menu.menu.registry import ZoneRegistry
from overlay_menu.menu.zones import ZoneContext
from overlay_menu.ui.display import DisplayContext, ResourceLoader, Surface
from overlay_menu.ui.renderer import MenuResources, render_frame


log = LoggerFactory.for_menu()


class MenuSession:
    def __init__(
        self,
        config: Optional[MenuConfig] = None,
        *,
        input_source: InputSource,
        dispatcher: Optional[SideEffectDispatcher] = None,
        values: Optional[MenuValues] = None,
        loader: Optional[ResourceLoader] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config or MenuConfig()
        self.input_source = input_source
        self.dispatcher = dispatcher or SideEffectDispatcher(self.config)
        self.values = values or MenuValues()
        self.loader = loader or ResourceLoader(self.config.resource_dir)
        self._clock = clock
        self._sleep = sleep
        self._stop_event = threading.Event()
        self._overrun_log = ThrottledLogger(log, interval_seconds=5.0)
        self.registry: Optional[ZoneRegistry] = None
        self.resources: Optional[MenuResources] = None
        self.state: Optional[MenuState] = None
        self.last_committed: Optional[ZoneType] = None

    @property
    def is_open(self) -> bool:
        return self.registry is not None

    def open(self, layout_store: Optional[LayoutStore] = None) -> None:
        """Build the zone registry and load the session's resources.

        Raises:
            SessionStateError: If the session is already open.
            EmptyZoneRegistryError: If no zone is enabled.
        """
        if self.is_open:
            raise SessionStateError("open", "session is already open")
        if layout_store is not None:
            self.dispatcher.layout_store = layout_store
        enabled = set(self.config.enabled_zones)
        if ZoneType.THEME in enabled and not self.dispatcher.has_themes():
            log.warning("No layouts available, theme zone disabled")
            enabled.discard(ZoneType.THEME)

        resources = MenuResources.load(self.loader)
        try:
            registry = ZoneRegistry.build(enabled, resources, self.config)
        except Exception:
            resources.release()
            raise
        self.resources = resources
        self.registry = registry
        self.state = MenuState(zones=list(registry.zones))
        self._stop_event.clear()
        self._enforce_read_only()
        log.info(f"Menu opened with {len(registry)} zones")

    def close(self) -> None:
        """Release session resources and put the root filesystem back to read-only."""
        if not self.is_open:
            raise SessionStateError("close", "session is not open")
        self._enforce_read_only()
        self.registry.release()
        self.resources.release()
        self.registry = None
        self.resources = None
        self.state = None
        log.info("Menu closed")

    def request_stop(self) -> None:
        """Ask a running session to end at the start of its next frame.

        Safe to call from any thread.
        """
        self._stop_event.set()

    def _enforce_read_only(self) -> None:
        if ZoneType.READ_ONLY_READ_WRITE not in self.registry.zones:
            return
        if self.dispatcher.force_read_only():
            self.values.read_write = False

    def _prepare_state(self) -> MenuState:
        zones = list(self.registry.zones)
        values = self.values
        self.dispatcher.refresh_system_values(values, zones)
        state = MenuState(zones=zones, current_index=values.menu_item % len(zones))
        if not values.usb_data_connected:
            values.usb_sharing = False
            if state.current_zone is ZoneType.USB:
                state.current_index = 0
        if values.usb_sharing:
            usb_index = state.index_of(ZoneType.USB)
            if usb_index is not None:
                log.info(f"USB mounted, setting menu item to {usb_index}")
                state.current_index = usb_index
        state.previous_index = state.current_index
        values.savestate_slot %= max(1, self.config.max_save_slots)
        store = self.dispatcher.layout_store
        if store is not None:
            values.theme_index = store.current_index
        return state

    def _render(
        self,
        context: DisplayContext,
        background: Surface,
        state: MenuState,
        zone_context: ZoneContext,
    ) -> None:
        render_frame(
            context.image,
            background,
            self.registry.surfaces,
            state,
            self.values,
            self.resources,
            zone_context,
        )
        context.present()
        log.trace("Frame rendered")

    def run(self, context: Optional[DisplayContext]) -> ReturnCode:
        """Run the menu on ``context`` until it closes.

        Returns:
            OK on a normal close, QUIT on a quit event, EXIT when a committed
            action asks the host to shut down or relaunch, ERROR when there
            is no host frame to draw over.
        """
        if not self.is_open:
            raise SessionStateError("run", "session is not open")
        if context is None or context.image is None:
            log.error("No host frame to draw the menu over")
            return ReturnCode.ERROR

        # A stop request only applies to the run it interrupted.
        self._stop_event.clear()
        background = context.image.copy()
        state = self._prepare_state()
        self.state = state
        self.last_committed = None
        zone_context = ZoneContext(self.config, tuple(self.dispatcher.theme_names()))
        navigator = MenuNavigator(state, self.values, self.dispatcher, zone_context)
        budget = self.config.frame_budget

        saved_repeat = self.input_source.get_key_repeat()
        self.input_source.set_key_repeat(
            self.config.key_repeat_delay, self.config.key_repeat_interval
        )
        try:
            while not state.stopped:
                frame_start = self._clock()
                if self._stop_event.is_set():
                    navigator.stop(ReturnCode.OK)
                    break

                was_scrolling = state.is_scrolling
                while not state.stopped and not state.is_scrolling:
                    event = self.input_source.poll()
                    if event is None:
                        break
                    zone = navigator.handle_event(event)
                    if zone is not None:
                        self._render(context, background, state, zone_context)
                        navigator.commit(zone)
                if state.stopped:
                    break

                if was_scrolling:
                    navigator.step_scroll()

                elapsed = self._clock() - frame_start
                if elapsed < budget:
                    self._sleep(budget - elapsed)
                else:
                    self._overrun_log.debug(
                        "overrun",
                        f"Frame took {elapsed * 1000:.1f}ms, budget {budget * 1000:.1f}ms",
                    )

                if navigator.consume_redraw():
                    self._render(context, background, state, zone_context)
        finally:
            self.input_source.set_key_repeat(*saved_repeat)
            self.values.menu_item = state.current_index
            context.image.paste(background)
            context.present()

        self.last_committed = state.committed
        log.info(f"Menu loop ended with {state.return_code.name}")
        return state.return_code
