"""Per-zone behaviour table.

Each ``ZoneType`` maps to one ``ZoneBehavior`` record describing how the
zone looks (static titles, value line, captions), how Left/Right change its
value, and what a confirmed press does. The navigator and the renderer look
the record up instead of branching on the zone type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Sequence, Tuple

from overlay_menu.menu.model import ASPECT_RATIO_NAMES, MenuValues, ReturnCode, ZoneType

if TYPE_CHECKING:
    from overlay_menu.config.menu_config import MenuConfig


# Vertical text slot offsets, in multiples of the line padding below centre.
TITLE_OFFSET = -1
TITLE_OFFSET_HIGH = -2
CAPTION_OFFSET = 2

CONFIRM_CAPTION = "Are you sure?"


@dataclass(frozen=True)
class ZoneContext:
    """Read-only inputs a zone needs besides its values."""

    config: MenuConfig
    theme_names: Sequence[str] = ()


@dataclass(frozen=True)
class TextLine:
    text: str
    offset: int = 0
    font: str = "title"


@dataclass(frozen=True)
class ZoneBehavior:
    titles: Tuple[TextLine, ...] = ()
    progress_bar: Optional[Callable[[MenuValues], int]] = None
    value_line: Optional[Callable[[MenuValues, ZoneContext], TextLine]] = None
    adjust: Optional[Callable[[MenuValues, int, ZoneContext], bool]] = None
    dispatch_on_adjust: bool = False
    value_of: Optional[Callable[[MenuValues], Any]] = None
    confirm_action: bool = False
    in_progress_caption: str = ""
    confirm_caption: str = CONFIRM_CAPTION
    terminal: bool = False
    return_code: ReturnCode = ReturnCode.OK
    on_success: Optional[Callable[[MenuValues], None]] = None
    skipped: Callable[[MenuValues], bool] = lambda values: False
    locks_navigation: Callable[[MenuValues], bool] = lambda values: False

    @property
    def adjustable(self) -> bool:
        return self.adjust is not None


def _saturate(value: int, delta: int) -> int:
    return max(0, min(100, value + delta))


def _adjust_volume(values: MenuValues, direction: int, context: ZoneContext) -> bool:
    values.volume_percentage = _saturate(
        values.volume_percentage, direction * context.config.volume_step
    )
    return True


def _adjust_brightness(values: MenuValues, direction: int, context: ZoneContext) -> bool:
    values.brightness_percentage = _saturate(
        values.brightness_percentage, direction * context.config.brightness_step
    )
    return True


def _adjust_slot(values: MenuValues, direction: int, context: ZoneContext) -> bool:
    slots = max(1, context.config.max_save_slots)
    values.savestate_slot = (values.savestate_slot + direction) % slots
    return True


def _adjust_aspect_ratio(values: MenuValues, direction: int, context: ZoneContext) -> bool:
    values.aspect_ratio = (values.aspect_ratio + direction) % len(ASPECT_RATIO_NAMES)
    return True


def _adjust_theme(values: MenuValues, direction: int, context: ZoneContext) -> bool:
    count = len(context.theme_names)
    if count == 0:
        return False
    values.theme_index = (values.theme_index + direction) % count
    return True


def truncate_theme_name(name: str, max_chars: int) -> str:
    """Shorten a theme name to fit the zone, marking the cut with ``...``."""
    if len(name) > max_chars:
        return name[: max(0, max_chars - 2)] + "..."
    return name


def _theme_line(values: MenuValues, context: ZoneContext) -> TextLine:
    if not context.theme_names:
        return TextLine("< - >", 0, "info")
    name = context.theme_names[values.theme_index % len(context.theme_names)]
    name = truncate_theme_name(name, context.config.theme_max_chars)
    return TextLine(f"< {name} >", 0, "info")


def _toggle_usb(values: MenuValues) -> None:
    values.usb_sharing = not values.usb_sharing


def _toggle_read_write(values: MenuValues) -> None:
    values.read_write = not values.read_write


ZONE_BEHAVIORS: Dict[ZoneType, ZoneBehavior] = {
    ZoneType.VOLUME: ZoneBehavior(
        titles=(TextLine("VOLUME", TITLE_OFFSET),),
        progress_bar=lambda values: values.volume_percentage,
        adjust=_adjust_volume,
        dispatch_on_adjust=True,
        value_of=lambda values: values.volume_percentage,
    ),
    ZoneType.BRIGHTNESS: ZoneBehavior(
        titles=(TextLine("BRIGHTNESS", TITLE_OFFSET),),
        progress_bar=lambda values: values.brightness_percentage,
        adjust=_adjust_brightness,
        dispatch_on_adjust=True,
        value_of=lambda values: values.brightness_percentage,
    ),
    ZoneType.SAVE: ZoneBehavior(
        titles=(TextLine("SAVE", TITLE_OFFSET_HIGH),),
        value_line=lambda values, context: TextLine(
            f"IN SLOT   < {values.savestate_slot + 1} >", 0, "info"
        ),
        adjust=_adjust_slot,
        value_of=lambda values: values.savestate_slot,
        confirm_action=True,
        in_progress_caption="Saving...",
        terminal=True,
        return_code=ReturnCode.OK,
    ),
    ZoneType.LOAD: ZoneBehavior(
        titles=(TextLine("LOAD", TITLE_OFFSET_HIGH),),
        value_line=lambda values, context: TextLine(
            f"FROM SLOT   < {values.savestate_slot + 1} >", 0, "info"
        ),
        adjust=_adjust_slot,
        value_of=lambda values: values.savestate_slot,
        confirm_action=True,
        in_progress_caption="Loading...",
        terminal=True,
        return_code=ReturnCode.OK,
    ),
    ZoneType.ASPECT_RATIO: ZoneBehavior(
        titles=(TextLine("ASPECT RATIO", TITLE_OFFSET),),
        value_line=lambda values, context: TextLine(
            f"<   {values.aspect_ratio_name}   >", 1, "info"
        ),
        adjust=_adjust_aspect_ratio,
        dispatch_on_adjust=True,
        value_of=lambda values: values.aspect_ratio,
    ),
    ZoneType.USB: ZoneBehavior(
        titles=(TextLine("USB", TITLE_OFFSET_HIGH),),
        value_line=lambda values, context: TextLine(
            "EJECT USB" if values.usb_sharing else "MOUNT USB", 0, "title"
        ),
        value_of=lambda values: values.usb_sharing,
        confirm_action=True,
        in_progress_caption="in progress ...",
        on_success=_toggle_usb,
        skipped=lambda values: not values.usb_data_connected,
        locks_navigation=lambda values: values.usb_sharing,
    ),
    ZoneType.THEME: ZoneBehavior(
        titles=(TextLine("SET THEME", TITLE_OFFSET_HIGH),),
        value_line=_theme_line,
        adjust=_adjust_theme,
        value_of=lambda values: values.theme_index,
        confirm_action=True,
        in_progress_caption="In progress...",
        terminal=True,
        return_code=ReturnCode.EXIT,
    ),
    ZoneType.LAUNCHER: ZoneBehavior(
        titles=(
            TextLine("SET LAUNCHER", TITLE_OFFSET_HIGH),
            TextLine("GMENU2X", 0),
        ),
        confirm_action=True,
        in_progress_caption="In progress...",
        terminal=True,
        return_code=ReturnCode.EXIT,
    ),
    ZoneType.READ_ONLY_READ_WRITE: ZoneBehavior(
        titles=(TextLine("SET SYSTEM:", TITLE_OFFSET_HIGH),),
        # Shows the mode a confirm would switch to.
        value_line=lambda values, context: TextLine(
            "READ-ONLY" if values.read_write else "READ-WRITE", 0, "info"
        ),
        value_of=lambda values: values.read_write,
        confirm_action=True,
        in_progress_caption="in progress ...",
        on_success=_toggle_read_write,
    ),
    ZoneType.EXIT: ZoneBehavior(
        titles=(TextLine("EXIT APP", 0),),
        confirm_action=True,
        in_progress_caption="Shutting down...",
        terminal=True,
        return_code=ReturnCode.EXIT,
    ),
    ZoneType.POWERDOWN: ZoneBehavior(
        titles=(TextLine("POWERDOWN", 0),),
        confirm_action=True,
        in_progress_caption="Shutting down...",
        terminal=True,
        return_code=ReturnCode.EXIT,
    ),
}


def behavior_for(zone: ZoneType) -> ZoneBehavior:
    return ZONE_BEHAVIORS[zone]
