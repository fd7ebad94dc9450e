"""Drawing backend for the overlay menu.

This module is the only place that touches Pillow and the output device:

- Resource loading (PNG images, TrueType fonts) relative to a resource dir
- Text rendering into standalone RGBA surfaces
- Compositing one surface onto another, optionally clipped
- Solid rectangle fills (used by the progress bars)
- Presenting the composed frame on a luma device

Surfaces are plain ``PIL.Image.Image`` objects. A resource that failed to
load is represented by ``None``; every helper here treats a ``None`` source
or destination as a no-op, so a missing file costs visual fidelity only.

Display Context:
    ``DisplayContext`` wraps the luma device and the frame buffer the menu
    draws into. The frame buffer uses the device's own mode and size so it
    can be handed to ``device.display()`` unchanged.

Example:
    >>> from luma.core.device import dummy
    >>> context = create_display_context(dummy(width=240, height=240, mode="RGB"))
    >>> loader = ResourceLoader("/usr/games/menu_resources/")
    >>> font = loader.load_font("OpenSans-Bold.ttf", 22)
    >>> blit(render_text(font, "VOLUME", (85, 85, 85)), context.image, (80, 90))
    >>> context.present()
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from overlay_menu.logging import LoggerFactory


log = LoggerFactory.for_display()


Font = Union[ImageFont.ImageFont, ImageFont.FreeTypeFont]
Surface = Image.Image
Color = Tuple[int, int, int]
Rect = Tuple[int, int, int, int]


@dataclass
class DisplayContext:
    disp: Any
    image: Surface
    width: int
    height: int

    def present(self) -> None:
        self.disp.display(self.image)


def create_display_context(device: Any) -> DisplayContext:
    width, height = device.width, device.height
    image = Image.new(device.mode, (width, height))
    return DisplayContext(disp=device, image=image, width=width, height=height)


class ResourceLoader:
    def __init__(self, resource_dir: Union[str, Path]) -> None:
        self.resource_dir = Path(resource_dir)

    def resource_path(self, relative_path: str) -> Path:
        return self.resource_dir / relative_path

    def load_image(self, relative_path: str) -> Optional[Surface]:
        path = self.resource_path(relative_path)
        try:
            with Image.open(path) as image:
                return image.convert("RGBA")
        except (OSError, ValueError) as error:
            log.error(f"Could not load image {path}: {error}")
            return None

    def load_font(self, relative_path: str, size: int) -> Optional[Font]:
        path = self.resource_path(relative_path)
        try:
            return ImageFont.truetype(str(path), size)
        except (OSError, ValueError) as error:
            log.error(f"Could not open menu font {path}: {error}")
            return None


def _get_line_height(font, min_height=1):
    line_height = min_height
    if hasattr(font, "getmetrics"):
        ascent, descent = font.getmetrics()
        return max(ascent + descent, line_height)
    try:
        bbox = font.getbbox("Ag")
        line_height = max(bbox[3], line_height)
    except AttributeError:
        pass
    return line_height


def _measure_text_width(font, text: str) -> int:
    if hasattr(font, "getlength"):
        return int(font.getlength(text))
    try:
        bbox = font.getbbox(text)
        return int(bbox[2] - bbox[0])
    except AttributeError:
        return 0


def new_surface(size: Tuple[int, int], color: Tuple[int, ...] = (0, 0, 0, 0)) -> Surface:
    return Image.new("RGBA", size, color)


def render_text(font: Optional[Font], text: str, color: Color) -> Optional[Surface]:
    """Render ``text`` into a transparent surface sized to fit it."""
    if font is None:
        return None
    width = max(1, _measure_text_width(font, text))
    height = max(1, _get_line_height(font))
    surface = new_surface((width, height))
    ImageDraw.Draw(surface).text((0, 0), text, font=font, fill=tuple(color) + (255,))
    return surface


def blit(
    source: Optional[Surface],
    dest: Optional[Surface],
    position: Tuple[int, int] = (0, 0),
    area: Optional[Rect] = None,
) -> None:
    """Composite ``source`` onto ``dest`` at ``position``.

    Args:
        source: Surface to draw; skipped when None.
        dest: Surface drawn onto; skipped when None.
        position: Top-left corner in ``dest``.
        area: Optional (x, y, width, height) clip rectangle in ``source``.
    """
    if source is None or dest is None:
        return
    if area is not None:
        x, y, width, height = area
        if width <= 0 or height <= 0:
            return
        source = source.crop((x, y, x + width, y + height))
    mask = source if source.mode == "RGBA" else None
    dest.paste(source, (int(position[0]), int(position[1])), mask)


def fill_rect(surface: Optional[Surface], rect: Rect, color: Color) -> None:
    if surface is None:
        return
    x, y, width, height = rect
    if width <= 0 or height <= 0:
        return
    ImageDraw.Draw(surface).rectangle(
        (x, y, x + width - 1, y + height - 1), fill=tuple(color)
    )


def capture_screenshot(context: DisplayContext, directory: Union[str, Path]) -> Optional[Path]:
    """Save the current frame buffer as a PNG.

    Returns:
        Path to the saved screenshot file, or None if capture failed.
    """
    try:
        target_dir = Path(directory).expanduser()
        target_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        screenshot_path = target_dir / f"screenshot_{timestamp}.png"
        context.image.copy().save(screenshot_path)
        log.debug(f"Screenshot saved: {screenshot_path}")
        return screenshot_path
    except OSError as error:
        log.debug(f"Screenshot failed: {error}")
        return None
