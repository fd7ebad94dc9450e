import time
from collections import deque
from typing import Callable, Deque, Dict, Optional, Tuple

import RPi.GPIO as GPIO

from overlay_menu.hardware.keys import InputEvent, Key
from overlay_menu.logging import LoggerFactory

log = LoggerFactory.for_input()

PIN_A = 5
PIN_B = 6
PIN_L = 27
PIN_R = 23
PIN_U = 17
PIN_D = 22
PIN_C = 4

PINS = (PIN_A, PIN_B, PIN_L, PIN_R, PIN_U, PIN_D, PIN_C)

PIN_KEYS: Dict[int, Key] = {
    PIN_U: Key.UP,
    PIN_D: Key.DOWN,
    PIN_L: Key.LEFT,
    PIN_R: Key.RIGHT,
    PIN_A: Key.CONFIRM,
    PIN_B: Key.BACK,
    PIN_C: Key.ESCAPE,
}

# Only directional keys auto-repeat while held.
REPEATING_KEYS = frozenset({Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT})


def setup_gpio():
    GPIO.setmode(GPIO.BCM)
    GPIO.setwarnings(False)
    for pin in PINS:
        GPIO.setup(pin, GPIO.IN, pull_up_down=GPIO.PUD_UP)


def read_button(pin):
    return GPIO.input(pin)


def is_pressed(pin):
    """Buttons are wired active-low: a pressed button reads LOW."""
    return read_button(pin) == GPIO.LOW


def cleanup():
    GPIO.cleanup()


class GpioInput:
    """Button input source with falling-edge detection and key repeat.

    Each call to ``poll`` samples every pin once (when nothing is already
    pending) and returns at most one event, so presses that arrive while the
    menu is busy scrolling stay queued until it is ready for them.
    """

    def __init__(
        self,
        pin_keys: Optional[Dict[int, Key]] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        setup: bool = True,
    ) -> None:
        self._pin_keys = dict(pin_keys or PIN_KEYS)
        self._clock = clock
        self._pending: Deque[InputEvent] = deque()
        self._repeat_delay = 0.0
        self._repeat_interval = 0.0
        self._next_repeat: Dict[int, Optional[float]] = {
            pin: None for pin in self._pin_keys
        }
        if setup:
            setup_gpio()
        self._prev_pressed = {pin: is_pressed(pin) for pin in self._pin_keys}

    def get_key_repeat(self) -> Tuple[float, float]:
        return self._repeat_delay, self._repeat_interval

    def set_key_repeat(self, delay: float, interval: float) -> None:
        self._repeat_delay = max(0.0, delay)
        self._repeat_interval = max(0.0, interval)
        for pin in self._next_repeat:
            self._next_repeat[pin] = None

    def _sample(self) -> None:
        now = self._clock()
        for pin, key in self._pin_keys.items():
            pressed = is_pressed(pin)
            was_pressed = self._prev_pressed[pin]
            self._prev_pressed[pin] = pressed
            if pressed and not was_pressed:
                log.trace(f"Button {key.value} pressed")
                self._pending.append(InputEvent.key_down(key))
                if key in REPEATING_KEYS and self._repeat_delay > 0:
                    self._next_repeat[pin] = now + self._repeat_delay
                continue
            if not pressed:
                self._next_repeat[pin] = None
                continue
            next_repeat = self._next_repeat[pin]
            if next_repeat is not None and now >= next_repeat:
                log.trace(f"Button {key.value} repeat")
                self._pending.append(InputEvent.key_down(key))
                self._next_repeat[pin] = now + max(self._repeat_interval, 0.001)

    def poll(self) -> Optional[InputEvent]:
        if not self._pending:
            self._sample()
        if self._pending:
            return self._pending.popleft()
        return None

    def close(self) -> None:
        cleanup()
