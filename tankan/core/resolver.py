"""Key to character resolution over a keyboard layout.

Everything here is a pure function of a :class:`LayoutIndex`, the
flattened lookup tables derived from one :class:`KeyboardLayout`.
Absence is never an error: unknown keys resolve to ``""`` and unknown
characters have no candidates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from tankan.core.keys import CONTROL_KEYS, SYSTEM_MODIFIER_KEYS
from tankan.core.layouts import KeyboardLayout, KeyMapping, ModifierState
from tankan.core.normalizer import normalize


@dataclass(frozen=True)
class Candidate:
    """One way of producing a character: a key pressed under a modifier state."""

    key: str
    modifier_state: ModifierState
    mapping: KeyMapping = field(compare=False, repr=False)


@dataclass(frozen=True)
class LayoutIndex:
    layout: KeyboardLayout
    by_key: Dict[str, KeyMapping]
    by_character: Dict[str, Tuple[Candidate, ...]]
    row_of: Dict[str, int]
    longest_output: int


def build_index(layout: KeyboardLayout) -> LayoutIndex:
    """Flatten a layout into key and character lookup tables."""
    by_key: Dict[str, KeyMapping] = {}
    row_of: Dict[str, int] = {}
    by_character: Dict[str, List[Candidate]] = {}
    longest = 0
    for row_number, row in enumerate(layout.rows):
        for mapping in row:
            by_key[mapping.key] = mapping
            row_of[mapping.key] = row_number
            for state, character in mapping.slots():
                if not character:
                    continue
                canonical = normalize(character)
                longest = max(longest, len(canonical))
                by_character.setdefault(canonical, []).append(
                    Candidate(key=mapping.key, modifier_state=state, mapping=mapping)
                )
    return LayoutIndex(
        layout=layout,
        by_key=by_key,
        by_character={char: tuple(c) for char, c in by_character.items()},
        row_of=row_of,
        longest_output=longest,
    )


def character_for(
    index: LayoutIndex, key: str, modifier_state: ModifierState = ModifierState.NORMAL
) -> str:
    mapping = index.by_key.get(key)
    if mapping is None:
        return ""
    return mapping.character(modifier_state)


def find_key_mapping(index: LayoutIndex, key: str) -> Optional[KeyMapping]:
    return index.by_key.get(key)


def modifier_state_for(index: LayoutIndex, pressed_keys: Iterable[str]) -> ModifierState:
    """Modifier state implied by the set of keys currently held down.

    Shift and AltGr together win over either alone; the result only
    depends on which role groups are represented, not on ordering.
    """
    pressed = frozenset(pressed_keys)
    layout = index.layout
    has_shift = not pressed.isdisjoint(layout.shift_keys)
    has_altgr = not pressed.isdisjoint(layout.altgr_keys)
    if has_shift and has_altgr:
        return ModifierState.ALTGR_SHIFT
    if has_altgr:
        return ModifierState.ALTGR
    if has_shift:
        return ModifierState.SHIFT
    return ModifierState.NORMAL


def is_modifier_key(index: LayoutIndex, key: str) -> bool:
    return key in SYSTEM_MODIFIER_KEYS or key in index.layout.modifier_keys


def is_typeable(index: LayoutIndex, key: str) -> bool:
    """True for keys of the layout that are neither modifiers nor control keys."""
    if is_modifier_key(index, key) or key in CONTROL_KEYS:
        return False
    return key in index.by_key


def characters_for_key(index: LayoutIndex, key: str) -> List[str]:
    """Non-empty outputs of ``key`` in normal/shift/altgr/altgr-shift order."""
    mapping = index.by_key.get(key)
    if mapping is None:
        return []
    return [character for _, character in mapping.slots() if character]


def is_valid_combination(index: LayoutIndex, key: str, modifier_state: ModifierState) -> bool:
    return character_for(index, key, modifier_state) != ""


def candidates_for(index: LayoutIndex, character: str) -> List[Candidate]:
    """Every (key, modifier state) producing ``character``, in layout order."""
    if not character:
        return []
    return list(index.by_character.get(normalize(character), ()))


def preferred_candidate(
    index: LayoutIndex,
    character: str,
    modifier_state: Optional[ModifierState] = None,
) -> Optional[Candidate]:
    """Single key to suggest for ``character``.

    A candidate reachable under the modifier state already held is
    preferred; otherwise the first one in layout order.
    """
    candidates = candidates_for(index, character)
    if not candidates:
        return None
    if modifier_state is not None:
        for candidate in candidates:
            if candidate.modifier_state is modifier_state:
                return candidate
    return candidates[0]


def guide_for(
    index: LayoutIndex,
    text: str,
    modifier_state: Optional[ModifierState] = None,
) -> Optional[Candidate]:
    """Suggest the key whose output covers the longest prefix of ``text``.

    Conjunct keys produce several code points at once, so the upcoming
    text is matched greedily against the layout's outputs.
    """
    text = normalize(text)
    for length in range(min(index.longest_output, len(text)), 0, -1):
        candidate = preferred_candidate(index, text[:length], modifier_state)
        if candidate is not None:
            return candidate
    return None


def untypeable_characters(index: LayoutIndex, text: str) -> List[str]:
    """Code points of ``text`` that no key on the layout produces, in first-seen order."""
    text = normalize(text)
    missing: List[str] = []
    position = 0
    while position < len(text):
        candidate = guide_for(index, text[position:])
        if candidate is None:
            if text[position] not in missing:
                missing.append(text[position])
            position += 1
        else:
            position += len(normalize(candidate.mapping.character(candidate.modifier_state)))
    return missing


def key_row(index: LayoutIndex, key: str) -> int:
    return index.row_of.get(key, -1)


def keys_in_row(index: LayoutIndex, row: int) -> Tuple[KeyMapping, ...]:
    rows = index.layout.rows
    if row < 0 or row >= len(rows):
        return ()
    return rows[row]
