from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import yaml

from tankan.core.keys import is_known_key

logger = logging.getLogger(__name__)

DEFAULT_LAYOUTS_DIR = Path(__file__).resolve().parent.parent / "data" / "layouts"


class ModifierState(Enum):
    NORMAL = "normal"
    SHIFT = "shift"
    ALTGR = "altgr"
    ALTGR_SHIFT = "altgr-shift"


class Hand(Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class KeyMapping:
    """Characters one physical key produces under each modifier state."""

    key: str
    normal: str
    shift: str
    altgr: str
    altgr_shift: str
    finger: int
    hand: Hand
    label: str

    def character(self, state: ModifierState) -> str:
        if state is ModifierState.SHIFT:
            return self.shift
        if state is ModifierState.ALTGR:
            return self.altgr
        if state is ModifierState.ALTGR_SHIFT:
            return self.altgr_shift
        return self.normal

    def slots(self) -> List[Tuple[ModifierState, str]]:
        """(state, character) pairs in normal/shift/altgr/altgr-shift order."""
        return [(state, self.character(state)) for state in ModifierState]


@dataclass(frozen=True)
class KeyboardLayout:
    id: str
    name: str
    description: str
    shift_keys: Tuple[str, ...]
    altgr_keys: Tuple[str, ...]
    rows: Tuple[Tuple[KeyMapping, ...], ...]

    def keys(self) -> Iterator[KeyMapping]:
        """All key mappings, row by row, in declared order."""
        for row in self.rows:
            yield from row

    @property
    def modifier_keys(self) -> frozenset:
        return frozenset(self.shift_keys) | frozenset(self.altgr_keys)


_SLOT_FIELDS = ("normal", "shift", "altgr", "altgr_shift")


def _parse_key(source: str, raw: object) -> KeyMapping:
    if not isinstance(raw, dict):
        raise ValueError(f"{source}: key entry must be a mapping, got {raw!r}")
    key = raw.get("key")
    if not key or not isinstance(key, str):
        raise ValueError(f"{source}: key entry without 'key': {raw!r}")
    if not is_known_key(key):
        raise ValueError(f"{source}: unknown physical key {key!r}")

    slots = {}
    for field in _SLOT_FIELDS:
        value = raw.get(field, "")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ValueError(f"{source}: {key}.{field} must be a string")
        slots[field] = value

    finger = raw.get("finger")
    if not isinstance(finger, int) or isinstance(finger, bool) or not 0 <= finger <= 9:
        raise ValueError(f"{source}: {key}.finger must be an integer 0-9")
    try:
        hand = Hand(raw.get("hand"))
    except ValueError:
        raise ValueError(f"{source}: {key}.hand must be 'left' or 'right'") from None

    label = raw.get("label")
    return KeyMapping(
        key=key,
        finger=finger,
        hand=hand,
        label=str(label) if label is not None else key,
        **slots,
    )


def _parse_modifier_group(source: str, modifiers: dict, role: str) -> Tuple[str, ...]:
    group = modifiers.get(role) or []
    if not isinstance(group, list):
        raise ValueError(f"{source}: modifiers.{role} must be a list")
    for key in group:
        if not isinstance(key, str) or not is_known_key(key):
            raise ValueError(f"{source}: unknown {role} modifier key {key!r}")
    return tuple(group)


def parse_layout(raw: object, source: str = "<layout>") -> KeyboardLayout:
    """Build a KeyboardLayout from decoded YAML, rejecting malformed data."""
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{source}: expected YAML with 'id', 'name' and 'rows'")
    layout_id = raw.get("id")
    name = raw.get("name")
    if not layout_id or not isinstance(layout_id, str):
        raise ValueError(f"{source}: missing or invalid 'id'")
    if not name or not isinstance(name, str):
        raise ValueError(f"{source}: missing or invalid 'name'")

    modifiers = raw.get("modifiers") or {}
    if not isinstance(modifiers, dict):
        raise ValueError(f"{source}: 'modifiers' must be a mapping")
    shift_keys = _parse_modifier_group(source, modifiers, "shift")
    altgr_keys = _parse_modifier_group(source, modifiers, "altgr")

    raw_rows = raw.get("rows")
    if not raw_rows or not isinstance(raw_rows, list):
        raise ValueError(f"{source}: missing 'rows'")

    seen = set()
    rows = []
    for raw_row in raw_rows:
        if not isinstance(raw_row, list):
            raise ValueError(f"{source}: each row must be a list of keys")
        row = []
        for raw_key in raw_row:
            mapping = _parse_key(source, raw_key)
            if mapping.key in seen:
                raise ValueError(f"{source}: key {mapping.key!r} appears more than once")
            seen.add(mapping.key)
            row.append(mapping)
        rows.append(tuple(row))

    return KeyboardLayout(
        id=layout_id.strip(),
        name=name.strip(),
        description=str(raw.get("description") or "").strip(),
        shift_keys=shift_keys,
        altgr_keys=altgr_keys,
        rows=tuple(rows),
    )


class LayoutRepository:
    """Keyboard layouts loaded from ``data/layouts/*.yaml``."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else DEFAULT_LAYOUTS_DIR
        self._layouts = self._load_layouts()

    def all(self) -> List[KeyboardLayout]:
        return list(self._layouts.values())

    def ids(self) -> List[str]:
        return list(self._layouts)

    def get(self, layout_id: str) -> KeyboardLayout:
        return self._layouts[layout_id]

    def _load_layouts(self) -> Dict[str, KeyboardLayout]:
        if not self._base_dir.exists():
            raise FileNotFoundError(f"Layouts directory not found: {self._base_dir}")

        layouts: Dict[str, KeyboardLayout] = {}
        for path in sorted(self._base_dir.glob("*.yaml")):
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
            layout = parse_layout(raw, source=path.name)
            if layout.id in layouts:
                raise ValueError(f"{path.name}: duplicate layout id {layout.id!r}")
            layouts[layout.id] = layout
            logger.debug("Loaded layout %s (%d keys)", layout.id, sum(len(r) for r in layout.rows))

        if not layouts:
            raise ValueError(f"No layout files (*.yaml) found in {self._base_dir}")
        return layouts
