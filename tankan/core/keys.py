"""Physical key identifiers and the fixed key sets the resolver relies on.

Key ids follow the browser ``KeyboardEvent.code`` naming (``KeyA``,
``Digit1``, ``ShiftLeft`` ...), which names the physical position of a
key independently of the active OS keyboard layout.
"""

from __future__ import annotations

from typing import FrozenSet

_LETTERS = [f"Key{c}" for c in "ABCDEFGHIJKLMNOPQRSTUVWXYZ"]
_DIGITS = [f"Digit{d}" for d in range(10)]

KNOWN_KEYS: FrozenSet[str] = frozenset(
    _LETTERS
    + _DIGITS
    + [
        "Backquote", "Minus", "Equal", "Backspace",
        "Tab", "BracketLeft", "BracketRight", "Backslash",
        "CapsLock", "Semicolon", "Quote", "Enter",
        "ShiftLeft", "ShiftRight", "Comma", "Period", "Slash", "IntlBackslash",
        "ControlLeft", "ControlRight", "AltLeft", "AltRight",
        "MetaLeft", "MetaRight", "ContextMenu", "Space", "Escape",
    ]
)

# Keys that never produce practice input, whatever the layout says.
CONTROL_KEYS: FrozenSet[str] = frozenset({"Backspace", "Enter", "Tab", "Escape"})

# OS-level modifiers. Layouts declare their own shift/altgr roles on top.
SYSTEM_MODIFIER_KEYS: FrozenSet[str] = frozenset(
    {
        "ShiftLeft", "ShiftRight", "AltRight",
        "ControlLeft", "ControlRight", "AltLeft",
        "MetaLeft", "MetaRight",
    }
)

FINGER_NAMES = (
    "Left Pinky",
    "Left Ring",
    "Left Middle",
    "Left Index",
    "Right Index",
    "Right Middle",
    "Right Ring",
    "Right Pinky",
    "Left Thumb",
    "Right Thumb",
)


def is_known_key(key: str) -> bool:
    return key in KNOWN_KEYS


def finger_name(finger: int) -> str:
    """Human-readable name for a finger number (0-9), or 'Unknown'."""
    if 0 <= finger < len(FINGER_NAMES):
        return FINGER_NAMES[finger]
    return "Unknown"
