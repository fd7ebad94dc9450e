"""In-game pause/settings overlay for handheld consoles."""

from overlay_menu.__version__ import __version__

__all__ = ["__version__"]
