"""Canonical form for Devanagari text compared during practice.

Typists reach the same text through different key sequences. Unicode
normalization (NFC) reorders combining marks and unifies the sequences
Unicode itself treats as equal. The layouts also treat a few sequences as
interchangeable that NFC spells differently: on Remington GAIL there is
no key for ``आ``, it is typed as ``अ`` followed by the ``ा`` sign, while
INSCRIPT has a key for it. Likewise ``ऩ`` is a single INSCRIPT key but
``न`` plus nukta on Remington, and NFC would compose only the latter
once the whole text is in hand. Those pairs are listed in
``EQUIVALENCES`` and rewritten to the assembled (multi-key) spelling, so
every way of typing compares equal one keystroke at a time.
"""

from __future__ import annotations

import unicodedata
from typing import Tuple

ZWJ = "\u200d"
NUKTA = "\u093c"

# (variant, canonical). Canonical forms must not contain any variant.
EQUIVALENCES: Tuple[Tuple[str, str], ...] = (
    ("आ", "अा"),
    ("ओ", "अो"),
    ("औ", "अौ"),
    ("ऑ", "अॉ"),
    ("ऍ", "अॅ"),
    ("ऐ", "एे"),
    ("\u0929", "न" + NUKTA),
    ("\u0931", "र" + NUKTA),
    ("\u0934", "ळ" + NUKTA),
    ("र्" + ZWJ, "र्"),
)


def _rewrite(text: str) -> str:
    result = unicodedata.normalize("NFC", text)
    for variant, canonical in EQUIVALENCES:
        if variant in result:
            result = result.replace(variant, canonical)
    return result


def normalize(text: str) -> str:
    """Return the canonical spelling of ``text``. Idempotent.

    Dropping a joiner can bring combining marks together that NFC has to
    reorder, so the rewrite repeats until the text is stable.
    """
    if not text:
        return text
    result = _rewrite(text)
    while True:
        again = _rewrite(result)
        if again == result:
            return result
        result = again


def equivalent(a: str, b: str) -> bool:
    return normalize(a) == normalize(b)
