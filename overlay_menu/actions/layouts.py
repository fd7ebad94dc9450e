"""Selectable host themes (layouts)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from overlay_menu.logging import LoggerFactory


log = LoggerFactory.for_system()


@dataclass
class LayoutStore:
    """Ordered layout identifiers the host can switch between.

    ``layouts`` holds layout paths or names; the menu shows the last path
    component. ``absolute_path`` is the host's configuration directory, where
    the chosen layout file is exported.
    """

    layouts: List[str] = field(default_factory=list)
    current_index: int = 0
    absolute_path: Path = Path(".")

    def __len__(self) -> int:
        return len(self.layouts)

    def display_name(self, index: int) -> str:
        return Path(self.layouts[index]).name

    def display_names(self) -> List[str]:
        return [self.display_name(index) for index in range(len(self.layouts))]

    @classmethod
    def from_directory(cls, layouts_dir: Union[str, Path], current: str = "") -> LayoutStore:
        """Collect every sub-directory of ``layouts_dir`` as a layout."""
        root = Path(layouts_dir)
        try:
            layouts = sorted(str(path) for path in root.iterdir() if path.is_dir())
        except OSError as error:
            log.error(f"Could not list layouts in {root}: {error}")
            layouts = []
        current_index = 0
        for index, layout in enumerate(layouts):
            if Path(layout).name == current:
                current_index = index
                break
        return cls(layouts=layouts, current_index=current_index, absolute_path=root.parent)

    def export_current_layout(self, path: Union[str, Path], layout_name: str) -> bool:
        """Write ``layout_name`` as the selected layout to ``path``.

        The host is expected to restart and pick up the new layout.
        """
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(f"{layout_name}\n", encoding="utf-8")
        except OSError as error:
            log.error(f"Could not export layout to {target}: {error}")
            return False
        log.info(f"Layout {layout_name} exported to {target}")
        return True
