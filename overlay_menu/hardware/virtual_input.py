"""Virtual key press source.

Events injected from any thread (tests, scripted host runs, a remote
control) are queued and handed to the menu loop one at a time, in the
order they were injected.
"""
from __future__ import annotations

import queue
import threading
from typing import Iterable, Optional, Tuple

from overlay_menu.hardware.keys import InputEvent, Key
from overlay_menu.logging import LoggerFactory

log = LoggerFactory.for_input()


class VirtualInput:
    def __init__(self, events: Iterable[InputEvent] = ()) -> None:
        self._queue: queue.Queue[InputEvent] = queue.Queue()
        self._repeat_lock = threading.Lock()
        self._repeat: Tuple[float, float] = (0.0, 0.0)
        for event in events:
            self._queue.put(event)

    def inject(self, event: InputEvent) -> None:
        self._queue.put(event)

    def inject_key(self, key: Key) -> None:
        """Inject a virtual key press.

        Args:
            key: Key to press
        """
        log.trace(f"Virtual key press injected: {key.value}")
        self._queue.put(InputEvent.key_down(key))

    def inject_keys(self, keys: Iterable[Key]) -> None:
        for key in keys:
            self.inject_key(key)

    def inject_quit(self) -> None:
        self._queue.put(InputEvent.quit())

    def poll(self) -> Optional[InputEvent]:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def pending(self) -> int:
        return self._queue.qsize()

    def clear(self) -> None:
        """Drop every queued event."""
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break

    def get_key_repeat(self) -> Tuple[float, float]:
        with self._repeat_lock:
            return self._repeat

    def set_key_repeat(self, delay: float, interval: float) -> None:
        with self._repeat_lock:
            self._repeat = (delay, interval)
