"""Settings store and typed menu configuration."""

from overlay_menu.config.menu_config import MenuConfig

__all__ = ["MenuConfig"]
