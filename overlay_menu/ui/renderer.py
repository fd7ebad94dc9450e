"""Zone renderer.

Draws the static part of each zone once per session (titles, empty
progress bar on the zone background) and, every redraw, the frame the
player sees: host background, sliding zone panels while scrolling, and the
dynamic content of the settled zone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from overlay_menu.logging import LoggerFactory
from overlay_menu.menu.model import MenuState, MenuValues, ZoneType
from overlay_menu.menu.zones import (
    CAPTION_OFFSET,
    TextLine,
    ZoneContext,
    behavior_for,
)
from overlay_menu.ui import display
from overlay_menu.ui.display import Color, Font, Rect, ResourceLoader, Surface

if TYPE_CHECKING:
    from overlay_menu.config.menu_config import MenuConfig


log = LoggerFactory.for_menu()

GRAY_MAIN: Color = (85, 85, 85)
WHITE_MAIN: Color = (236, 236, 236)
TEXT_COLOR = GRAY_MAIN

MENU_BG_SQUARE_WIDTH = 180
MENU_BG_SQUARE_HEIGHT = 140
PADDING_Y_FROM_CENTER = 18
PROGRESS_BAR_WIDTH = 100
PROGRESS_BAR_HEIGHT = 20

FONT_TITLE = "OpenSans-Bold.ttf"
FONT_INFO = "OpenSans-Bold.ttf"
FONT_SMALL = "OpenSans-Semibold.ttf"
FONT_SIZE_TITLE = 22
FONT_SIZE_INFO = 16
FONT_SIZE_SMALL = 13

ZONE_BACKGROUND = "zone_bg.png"
ARROW_TOP = "arrow_top.png"
ARROW_BOTTOM = "arrow_bottom.png"

BAR_LINE_WIDTH = 1
BAR_PADDING_RATIO = 3


@dataclass
class MenuResources:
    """Fonts and images shared by every zone of a session."""

    fonts: Dict[str, Optional[Font]] = field(default_factory=dict)
    zone_background: Optional[Surface] = None
    arrow_top: Optional[Surface] = None
    arrow_bottom: Optional[Surface] = None

    @classmethod
    def load(cls, loader: ResourceLoader) -> MenuResources:
        fonts = {
            "title": loader.load_font(FONT_TITLE, FONT_SIZE_TITLE),
            "info": loader.load_font(FONT_INFO, FONT_SIZE_INFO),
            "small": loader.load_font(FONT_SMALL, FONT_SIZE_SMALL),
        }
        return cls(
            fonts=fonts,
            zone_background=loader.load_image(ZONE_BACKGROUND),
            arrow_top=loader.load_image(ARROW_TOP),
            arrow_bottom=loader.load_image(ARROW_BOTTOM),
        )

    def font(self, name: str) -> Optional[Font]:
        return self.fonts.get(name)

    def release(self) -> None:
        self.fonts.clear()
        self.zone_background = None
        self.arrow_top = None
        self.arrow_bottom = None


@dataclass(frozen=True)
class ProgressBarLayout:
    x: int
    y: int
    height: int
    bar_count: int
    bar_width: int
    bar_padding: int
    filled: int

    def bar_rects(self) -> List[Tuple[Rect, bool]]:
        """Return ``((x, y, w, h), filled)`` for each bar, left to right."""
        stride = self.bar_width + self.bar_padding
        return [
            ((self.x + index * stride, self.y, self.bar_width, self.height), index < self.filled)
            for index in range(self.bar_count)
        ]


def compute_progress_bar_layout(
    surface_size: Tuple[int, int],
    x: int,
    y: int,
    width: int,
    height: int,
    percentage: int,
    bar_count: int,
) -> Optional[ProgressBarLayout]:
    """Fit ``bar_count`` bars of a 3:1 bar/gap ratio into ``width`` pixels.

    The requested bar count is capped to what fits. Returns None when no bar
    fits at all.
    """
    surface_width, surface_height = surface_size
    minimum = BAR_LINE_WIDTH * 2 + 1
    percentage = max(0, min(100, percentage))
    x = max(0, min(x, surface_width - 1))
    y = max(0, min(y, surface_height - 1))
    width = min(max(width, minimum), surface_width - x - 1)
    height = min(max(height, minimum), surface_height - y - 1)
    if width <= 0 or height <= 0:
        return None
    max_bars = (width * BAR_PADDING_RATIO // minimum + 1) // (BAR_PADDING_RATIO + 1)
    bar_count = min(bar_count, max_bars)
    if bar_count <= 0:
        return None
    bar_width = (width // bar_count) * BAR_PADDING_RATIO // (BAR_PADDING_RATIO + 1) + 1
    return ProgressBarLayout(
        x=x,
        y=y,
        height=height,
        bar_count=bar_count,
        bar_width=bar_width,
        bar_padding=bar_width // BAR_PADDING_RATIO,
        filled=bar_count * percentage // 100,
    )


def draw_progress_bar(
    surface: Optional[Surface],
    x: int,
    y: int,
    width: int,
    height: int,
    percentage: int,
    bar_count: int,
) -> None:
    if surface is None:
        return
    layout = compute_progress_bar_layout(
        surface.size, x, y, width, height, percentage, bar_count
    )
    if layout is None:
        return
    for rect, filled in layout.bar_rects():
        display.fill_rect(surface, rect, GRAY_MAIN)
        if not filled:
            bx, by, bw, bh = rect
            display.fill_rect(
                surface,
                (
                    bx + BAR_LINE_WIDTH,
                    by + BAR_LINE_WIDTH,
                    bw - BAR_LINE_WIDTH * 2,
                    bh - BAR_LINE_WIDTH * 2,
                ),
                WHITE_MAIN,
            )


def progress_bar_origin(surface_size: Tuple[int, int], config: MenuConfig) -> Tuple[int, int]:
    surface_width, surface_height = surface_size
    x = (surface_width - config.zone_width) // 2 + (config.zone_width - PROGRESS_BAR_WIDTH) // 2
    y = (
        surface_height
        - config.zone_height // 2
        - PROGRESS_BAR_HEIGHT // 2
        + PADDING_Y_FROM_CENTER
    )
    return x, y


def print_centered(
    font: Optional[Font],
    text: str,
    color: Color,
    offset: int,
    dest: Optional[Surface],
    config: MenuConfig,
) -> None:
    """Draw ``text`` centred in the zone, ``offset`` line paddings below centre."""
    if dest is None:
        return
    text_surface = display.render_text(font, text, color)
    if text_surface is None:
        return
    dest_width, dest_height = dest.size
    text_width, text_height = text_surface.size
    x = (dest_width - config.zone_width) // 2 + (config.zone_width - text_width) // 2
    y = (
        dest_height
        - config.zone_height // 2
        - text_height // 2
        + PADDING_Y_FROM_CENTER * offset
    )
    display.blit(text_surface, dest, (x, y))


def _draw_line(line: TextLine, resources: MenuResources, dest: Surface, config: MenuConfig) -> None:
    print_centered(resources.font(line.font), line.text, TEXT_COLOR, line.offset, dest, config)


def _bar_count(zone: ZoneType, config: MenuConfig) -> int:
    step = config.volume_step if zone is ZoneType.VOLUME else config.brightness_step
    return 100 // max(1, step)


def _blank_panel(config: MenuConfig) -> Surface:
    panel = display.new_surface((config.zone_width, config.zone_height))
    left = (config.zone_width - MENU_BG_SQUARE_WIDTH) // 2
    top = (config.zone_height - MENU_BG_SQUARE_HEIGHT) // 2
    display.fill_rect(panel, (left, top, MENU_BG_SQUARE_WIDTH, MENU_BG_SQUARE_HEIGHT), WHITE_MAIN)
    return panel


def render_static(zone: ZoneType, resources: MenuResources, config: MenuConfig) -> Surface:
    """Build a zone's cached panel: background, titles and empty bar."""
    if resources.zone_background is not None:
        surface = resources.zone_background.copy()
    else:
        surface = _blank_panel(config)
    behavior = behavior_for(zone)
    for line in behavior.titles:
        _draw_line(line, resources, surface, config)
    if behavior.progress_bar is not None:
        x, y = progress_bar_origin(surface.size, config)
        draw_progress_bar(
            surface, x, y, PROGRESS_BAR_WIDTH, PROGRESS_BAR_HEIGHT, 0, _bar_count(zone, config)
        )
    log.debug(f"Static content rendered for zone {zone.value}")
    return surface


def render_dynamic(
    zone: ZoneType,
    state: MenuState,
    values: MenuValues,
    resources: MenuResources,
    context: ZoneContext,
    dest: Surface,
) -> None:
    """Draw the per-frame content of a settled zone onto ``dest``."""
    behavior = behavior_for(zone)
    config = context.config
    if behavior.progress_bar is not None:
        x, y = progress_bar_origin(dest.size, config)
        draw_progress_bar(
            dest,
            x,
            y,
            PROGRESS_BAR_WIDTH,
            PROGRESS_BAR_HEIGHT,
            behavior.progress_bar(values),
            _bar_count(zone, config),
        )
    if behavior.value_line is not None:
        _draw_line(behavior.value_line(values, context), resources, dest, config)
    if not behavior.confirm_action:
        return
    caption = None
    if state.action_in_progress:
        caption = behavior.in_progress_caption
    elif state.confirmation_pending:
        caption = behavior.confirm_caption
    if caption:
        _draw_line(TextLine(caption, CAPTION_OFFSET, "info"), resources, dest, config)


def _draw_arrows(resources: MenuResources, dest: Surface) -> None:
    width, height = dest.size
    margin = (height - MENU_BG_SQUARE_HEIGHT) // 4
    top = resources.arrow_top
    if top is not None:
        display.blit(top, dest, ((width - top.width) // 2, margin - top.height // 2))
    bottom = resources.arrow_bottom
    if bottom is not None:
        display.blit(
            bottom,
            dest,
            ((width - bottom.width) // 2, height - margin - bottom.height // 2),
        )


def render_frame(
    dest: Surface,
    background: Optional[Surface],
    zone_surfaces: List[Surface],
    state: MenuState,
    values: MenuValues,
    resources: MenuResources,
    context: ZoneContext,
) -> None:
    """Compose one full menu frame onto ``dest``.

    While scrolling, the outgoing panel slides out by ``state.scroll_offset``
    pixels and the incoming one fills the uncovered part. Once settled, the
    current zone's dynamic content is drawn and the arrows are shown unless
    USB sharing locks navigation.
    """
    width, height = dest.size
    if background is not None:
        display.blit(background, dest, (0, 0))
    else:
        display.fill_rect(dest, (0, 0, width, height), (0, 0, 0))

    scroll = state.scroll_offset
    previous = zone_surfaces[state.previous_index]
    current = zone_surfaces[state.current_index]
    if scroll > 0:
        display.blit(previous, dest, (0, 0), (0, scroll, width, height - scroll))
        display.blit(current, dest, (0, height - scroll), (0, 0, width, scroll))
    elif scroll < 0:
        display.blit(previous, dest, (0, -scroll), (0, 0, width, height + scroll))
        display.blit(current, dest, (0, 0), (0, height + scroll, width, -scroll))
    else:
        display.blit(current, dest, (0, 0))
        render_dynamic(state.current_zone, state, values, resources, context, dest)

    if scroll == 0 and not values.usb_sharing:
        _draw_arrows(resources, dest)
