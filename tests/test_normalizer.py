"""Tests for tankan.core.normalizer – canonical Devanagari spelling."""

from __future__ import annotations

import pytest

from tankan.core.normalizer import EQUIVALENCES, equivalent, normalize

AA = "\u0906"
A = "\u0905"
AA_SIGN = "\u093e"
NUKTA = "\u093c"
HALANT = "\u094d"
RA = "\u0930"
ZWJ = "\u200d"
ZWNJ = "\u200c"


class TestUnicodeNormalization:
    def test_empty(self):
        assert normalize("") == ""

    def test_ascii_untouched(self):
        assert normalize("abc 123") == "abc 123"

    def test_nukta_letter_decomposed(self):
        # U+095B (za) is a composition exclusion: NFC keeps ja + nukta
        assert normalize("ज़") == "ज" + NUKTA
        assert equivalent("ज़", "ज" + NUKTA)

    def test_composable_nukta_letter_kept_apart(self):
        # U+0929 (nnna) is typed as na + nukta on Remington GAIL
        assert normalize("\u0929") == "न" + NUKTA
        assert normalize("न" + NUKTA) == "न" + NUKTA
        assert equivalent("\u0931", RA + NUKTA)
        assert equivalent("\u0934", "ळ" + NUKTA)


class TestEquivalences:
    @pytest.mark.parametrize("variant, canonical", EQUIVALENCES)
    def test_pairs_share_canonical_form(self, variant, canonical):
        assert normalize(variant) == normalize(canonical) == canonical

    def test_independent_vowel_in_word(self):
        assert normalize(AA + "ज") == A + AA_SIGN + "ज"
        assert equivalent(AA + "म", A + AA_SIGN + "म")

    def test_vowel_sign_after_consonant_untouched(self):
        assert normalize("राम") == "राम"

    def test_eyelash_ra(self):
        assert normalize(RA + HALANT + ZWJ + "य") == RA + HALANT + "य"

    def test_other_joiners_kept(self):
        text = "क" + HALANT + ZWNJ + "ष"
        assert normalize(text) == text

    def test_not_equivalent(self):
        # anusvara vs chandrabindu
        assert not equivalent("ं", "ँ")


class TestIdempotence:
    @pytest.mark.parametrize(
        "text",
        [
            "यह एक परीक्षण है",
            "आओ औरत ऐनक ऑफिस ऍ",
            "ज़फ़क़ फ़िल्म",
            RA + HALANT + ZWJ + "य",
            A + AA_SIGN,
        ],
    )
    def test_idempotent(self, text):
        once = normalize(text)
        assert normalize(once) == once

    def test_canonical_forms_contain_no_variants(self):
        for _, canonical in EQUIVALENCES:
            for variant, _ in EQUIVALENCES:
                assert variant not in canonical

    def test_joiner_removal_reorders_marks(self):
        once = normalize(RA + HALANT + ZWJ + NUKTA)
        assert once == RA + NUKTA + HALANT
        assert normalize(once) == once

    @pytest.mark.parametrize("variant, canonical", EQUIVALENCES)
    @pytest.mark.parametrize("mark", [NUKTA, HALANT, "ँ", "ं", AA_SIGN])
    def test_stable_with_trailing_marks(self, variant, canonical, mark):
        once = normalize(variant + mark)
        assert normalize(once) == once
        assert once == normalize(canonical + mark)
