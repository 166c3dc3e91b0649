from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from tankan.core.layouts import KeyboardLayout
from tankan.core.resolver import LayoutIndex, build_index

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT_ID = "remington-gail"


class LayoutRegistry:
    """Available keyboard layouts and the one currently selected.

    The host owns a single registry and hands it to sessions; nothing
    else mutates the selection. The flattened lookup index is cached and
    rebuilt lazily after the selection changes.
    """

    def __init__(
        self,
        layouts: Iterable[KeyboardLayout],
        selected: Optional[str] = None,
        default: str = DEFAULT_LAYOUT_ID,
    ) -> None:
        self._layouts: Dict[str, KeyboardLayout] = {layout.id: layout for layout in layouts}
        if not self._layouts:
            raise ValueError("LayoutRegistry needs at least one layout")
        if default not in self._layouts:
            raise ValueError(f"Default layout {default!r} is not among {sorted(self._layouts)}")
        self._default = default
        if selected is not None and selected not in self._layouts:
            logger.warning("Unknown layout %r, falling back to %r", selected, default)
            selected = None
        self._selected = selected or default
        self._index: Optional[LayoutIndex] = None

    @property
    def default_id(self) -> str:
        return self._default

    @property
    def current_id(self) -> str:
        return self._selected

    def layout_ids(self) -> List[str]:
        return list(self._layouts)

    def layouts(self) -> List[KeyboardLayout]:
        return list(self._layouts.values())

    def get(self, layout_id: str) -> Optional[KeyboardLayout]:
        return self._layouts.get(layout_id)

    def current_layout(self) -> KeyboardLayout:
        return self._layouts[self._selected]

    def current_index(self) -> LayoutIndex:
        if self._index is None:
            self._index = build_index(self.current_layout())
        return self._index

    def select_layout(self, layout_id: str) -> bool:
        """Switch to ``layout_id``. Unknown ids leave the selection untouched."""
        if layout_id not in self._layouts:
            logger.debug("Ignoring unknown layout id %r", layout_id)
            return False
        if layout_id != self._selected:
            self._selected = layout_id
            self._index = None
            logger.info("Selected keyboard layout %s", layout_id)
        return True
