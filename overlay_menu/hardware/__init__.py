"""Input sources for the overlay menu.

``gpio`` is not imported here: it needs RPi.GPIO, which only loads on a
Raspberry Pi class board.
"""

from overlay_menu.hardware.keys import EventType, InputEvent, InputSource, Key
from overlay_menu.hardware.virtual_input import VirtualInput

__all__ = ["EventType", "InputEvent", "InputSource", "Key", "VirtualInput"]
