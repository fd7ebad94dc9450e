"""Navigation state machine for the overlay menu.

The navigator turns one input event at a time into changes of the session's
``MenuState`` and ``MenuValues``. It never draws; it raises
``state.needs_redraw`` and lets the frame driver decide when to render.

Confirmed actions are split in two calls so that the frame driver can show
the "in progress" frame before the blocking side effect runs::

    zone = navigator.handle_event(event)
    if zone is not None:
        render(...)               # action_in_progress is True here
        navigator.commit(zone)
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from overlay_menu.hardware.keys import EventType, InputEvent, Key
from overlay_menu.logging import LoggerFactory
from overlay_menu.menu.model import MenuState, MenuValues, ReturnCode, ZoneType
from overlay_menu.menu.zones import ZoneBehavior, ZoneContext, behavior_for


log = LoggerFactory.for_menu()


class Dispatcher(Protocol):
    def dispatch(self, zone: ZoneType, value: Any) -> bool:
        """Run the external action bound to ``zone``; report success."""


class MenuNavigator:
    def __init__(
        self,
        state: MenuState,
        values: MenuValues,
        dispatcher: Dispatcher,
        context: ZoneContext,
    ) -> None:
        self.state = state
        self.values = values
        self.dispatcher = dispatcher
        self.context = context

    @property
    def zone_height(self) -> int:
        return self.context.config.zone_height

    @property
    def scroll_speed(self) -> int:
        return max(1, self.context.config.scroll_speed_px)

    def current_behavior(self) -> ZoneBehavior:
        return behavior_for(self.state.current_zone)

    def is_locked(self) -> bool:
        """True while the current zone runs an operation that must not be left."""
        return self.current_behavior().locks_navigation(self.values)

    def stop(self, return_code: ReturnCode) -> None:
        self.state.stopped = True
        self.state.return_code = return_code
        log.debug(f"Menu stop requested with {return_code.name}")

    def consume_redraw(self) -> bool:
        needs_redraw = self.state.needs_redraw
        self.state.needs_redraw = False
        return needs_redraw

    def handle_event(self, event: InputEvent) -> Optional[ZoneType]:
        """Apply one input event.

        Returns:
            The zone whose confirmed action must now be committed, or None.
        """
        if self.state.stopped or self.state.is_scrolling:
            return None
        if event.type is EventType.QUIT:
            self.stop(ReturnCode.QUIT)
            return None
        key = event.key
        if key is None:
            return None
        log.trace(f"Menu key {key.value}", tags=["input"])
        if key is Key.DOWN:
            self.move(1)
        elif key is Key.UP:
            self.move(-1)
        elif key is Key.RIGHT:
            self.adjust(1)
        elif key is Key.LEFT:
            self.adjust(-1)
        elif key is Key.BACK:
            self.back()
        elif key is Key.ESCAPE:
            self.escape()
        elif key is Key.CONFIRM:
            return self.confirm()
        return None

    def back(self) -> None:
        # Back only cancels a pending confirmation, it never closes the menu.
        if self.state.confirmation_pending:
            self.state.confirmation_pending = False
            self.state.needs_redraw = True
            log.debug(f"Confirmation cancelled on {self.state.current_zone.value}")

    def escape(self) -> None:
        if self.is_locked():
            log.debug("Escape ignored while USB is shared")
            return
        self.stop(ReturnCode.OK)

    def _next_index(self, index: int, direction: int) -> int:
        count = len(self.state.zones)
        index = (index + direction) % count
        if behavior_for(self.state.zones[index]).skipped(self.values):
            index = (index + direction) % count
        return index

    def move(self, direction: int) -> None:
        if self.is_locked():
            log.debug("Navigation ignored while USB is shared")
            return
        state = self.state
        state.previous_index = state.current_index
        state.current_index = self._next_index(state.current_index, direction)
        state.confirmation_pending = False
        state.scroll_direction = 1 if direction > 0 else -1
        state.scroll_offset = state.scroll_direction * min(self.scroll_speed, self.zone_height)
        state.needs_redraw = True
        self.values.menu_item = state.current_index
        log.debug(
            f"Scrolling from {state.previous_zone.value} to {state.current_zone.value}"
        )

    def step_scroll(self) -> bool:
        """Advance the slide animation by one frame.

        Returns:
            True if the offset changed (a redraw is due).
        """
        state = self.state
        if not state.is_scrolling:
            return False
        magnitude = abs(state.scroll_offset)
        if magnitude < self.zone_height:
            magnitude += min(self.scroll_speed, self.zone_height - magnitude)
            state.scroll_offset = state.scroll_direction * magnitude
        if magnitude >= self.zone_height:
            state.previous_index = state.current_index
            state.scroll_offset = 0
            state.scroll_direction = 0
        state.needs_redraw = True
        return True

    def adjust(self, direction: int) -> None:
        behavior = self.current_behavior()
        if behavior.adjust is None:
            return
        zone = self.state.current_zone
        if not behavior.adjust(self.values, direction, self.context):
            return
        self.state.needs_redraw = True
        if behavior.dispatch_on_adjust and behavior.value_of is not None:
            value = behavior.value_of(self.values)
            log.debug(f"{zone.value} set to {value}")
            self.dispatcher.dispatch(zone, value)

    def confirm(self) -> Optional[ZoneType]:
        behavior = self.current_behavior()
        if not behavior.confirm_action:
            return None
        zone = self.state.current_zone
        if not self.state.confirmation_pending:
            self.state.confirmation_pending = True
            self.state.needs_redraw = True
            log.debug(f"{zone.value} - asking confirmation")
            return None
        self.state.action_in_progress = True
        self.state.needs_redraw = True
        log.debug(f"{zone.value} - confirmed")
        return zone

    def commit(self, zone: ZoneType) -> bool:
        """Run the confirmed action of ``zone`` and settle the state.

        Persistent flags only change when the dispatcher reports success.
        Terminal zones end the session whatever the result; any other failed
        action leaves the menu open with the confirmation cleared.
        """
        behavior = behavior_for(zone)
        value = behavior.value_of(self.values) if behavior.value_of else None
        success = self.dispatcher.dispatch(zone, value)
        self.state.action_in_progress = False
        self.state.confirmation_pending = False
        self.state.needs_redraw = True
        if success and behavior.on_success is not None:
            behavior.on_success(self.values)
        if behavior.terminal:
            self.state.committed = zone
            self.stop(behavior.return_code)
        if not success:
            if behavior.terminal:
                log.warning(f"{zone.value} action failed, closing menu")
            else:
                log.warning(f"{zone.value} action failed, menu stays open")
            return False
        log.info(f"{zone.value} action committed")
        return True
