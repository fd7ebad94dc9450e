"""Input events consumed by the menu.

Every input source (GPIO buttons, injected virtual presses) produces the
same ``InputEvent`` records, so the navigation state machine never knows
where a press came from.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Tuple


class Key(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    CONFIRM = "confirm"  # A / Return
    BACK = "back"  # B
    ESCAPE = "escape"  # Q / Escape / menu button

    @classmethod
    def from_name(cls, name: str) -> Key:
        normalized = name.strip().lower()
        aliases = {
            "u": cls.UP,
            "d": cls.DOWN,
            "l": cls.LEFT,
            "r": cls.RIGHT,
            "a": cls.CONFIRM,
            "return": cls.CONFIRM,
            "enter": cls.CONFIRM,
            "b": cls.BACK,
            "q": cls.ESCAPE,
            "esc": cls.ESCAPE,
            "menu": cls.ESCAPE,
        }
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


class EventType(Enum):
    KEY_DOWN = "key_down"
    QUIT = "quit"


@dataclass(frozen=True)
class InputEvent:
    type: EventType
    key: Optional[Key] = None

    @classmethod
    def key_down(cls, key: Key) -> InputEvent:
        return cls(EventType.KEY_DOWN, key)

    @classmethod
    def quit(cls) -> InputEvent:
        return cls(EventType.QUIT)


class InputSource(Protocol):
    def poll(self) -> Optional[InputEvent]:
        """Return the next pending event, or None when nothing is queued."""

    def get_key_repeat(self) -> Tuple[float, float]:
        """Return the current (delay, interval) key repeat in seconds."""

    def set_key_repeat(self, delay: float, interval: float) -> None:
        """Configure key repeat; a zero delay disables repeat."""
