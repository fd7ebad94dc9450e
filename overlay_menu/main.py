"""Host stub: opens the overlay menu over a placeholder frame.

Runs headless on a luma ``dummy`` device, reading buttons from GPIO or from
a scripted list of key names.
"""

import argparse
import random
from dataclasses import replace
from pathlib import Path

from luma.core.device import dummy

from overlay_menu.actions.dispatcher import SideEffectDispatcher
from overlay_menu.actions.layouts import LayoutStore
from overlay_menu.config.menu_config import MenuConfig
from overlay_menu.hardware.keys import InputEvent, Key
from overlay_menu.hardware.virtual_input import VirtualInput
from overlay_menu.logging import LoggerFactory, setup_logging
from overlay_menu.menu.exceptions import MenuError
from overlay_menu.menu.model import MenuValues, ReturnCode, ZoneType
from overlay_menu.session import MenuSession
from overlay_menu.ui.display import capture_screenshot, create_display_context


EXIT_FATAL = 3


def _build_input(args):
    if args.input == "gpio":
        from overlay_menu.hardware.gpio import GpioInput

        return GpioInput()
    events = [InputEvent.key_down(Key.from_name(name)) for name in args.keys]
    # Scripted runs always end, even if the keys never close the menu.
    events.append(InputEvent.quit())
    return VirtualInput(events)


def _paint_host_frame(context) -> None:
    color = tuple(random.randint(0, 255) for _ in range(3))
    context.image.paste(color, (0, 0, context.width, context.height))
    context.present()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Handheld overlay menu host stub")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable verbose debug output")
    parser.add_argument("--trace", action="store_true", help="Enable trace output (key presses, frames)")
    parser.add_argument(
        "--input",
        choices=("gpio", "virtual"),
        default="virtual",
        help="Where button presses come from",
    )
    parser.add_argument(
        "--keys",
        nargs="*",
        default=[],
        help="Key names fed to the virtual input (up, down, left, right, a, b, q)",
    )
    parser.add_argument("--screenshot", type=Path, help="Directory for a PNG of the last frame")
    parser.add_argument("--layouts-dir", type=Path, help="Directory holding one sub-directory per theme")
    parser.add_argument("--no-theme", action="store_true", help="Hide the theme zone")
    args = parser.parse_args(argv)

    setup_logging(debug=args.debug, trace=args.trace)
    log = LoggerFactory.for_menu()

    try:
        config = MenuConfig.from_settings()
    except MenuError as error:
        log.error(f"Invalid menu configuration: {error}")
        return EXIT_FATAL
    if args.no_theme:
        config = replace(config, enabled_zones=config.enabled_zones - {ZoneType.THEME})

    layout_store = None
    if args.layouts_dir is not None and not args.no_theme:
        layout_store = LayoutStore.from_directory(args.layouts_dir)

    device = dummy(width=config.zone_width, height=config.zone_height, mode="RGB")
    context = create_display_context(device)
    _paint_host_frame(context)

    values = MenuValues()
    input_source = _build_input(args)
    session = MenuSession(
        config,
        input_source=input_source,
        dispatcher=SideEffectDispatcher(config, layout_store),
        values=values,
    )
    try:
        session.open(layout_store)
    except MenuError as error:
        log.error(f"Menu cannot open: {error}")
        return EXIT_FATAL

    try:
        return_code = session.run(context)
    except KeyboardInterrupt:
        return_code = ReturnCode.QUIT
    finally:
        session.close()
        if hasattr(input_source, "close"):
            input_source.close()

    if args.screenshot is not None:
        capture_screenshot(context, args.screenshot)
    committed = session.last_committed.value if session.last_committed else "none"
    log.info(
        f"Menu returned {return_code.name}: committed={committed} "
        f"slot={values.savestate_slot + 1} aspect={values.aspect_ratio_name}"
    )
    return return_code.value


if __name__ == "__main__":
    raise SystemExit(main())
