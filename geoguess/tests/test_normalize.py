"""
Tests for term normalization.
"""

from __future__ import annotations

from geoguess.normalize import normalize_term, strip_diacritics


class TestNormalizeTerm:
    def test_accents_and_punctuation(self):
        assert normalize_term("  Côte d'Ivoire  ") == "cote d ivoire"

    def test_variants_collapse_to_same_key(self):
        variants = ["Côte d'Ivoire", "COTE D'IVOIRE", "cote-d-ivoire", "Cote   d Ivoire"]
        assert {normalize_term(v) for v in variants} == {"cote d ivoire"}

    def test_ampersand_becomes_and(self):
        assert normalize_term("Trinidad & Tobago") == "trinidad and tobago"
        assert normalize_term("Bosnia&Herzegovina") == "bosnia and herzegovina"

    def test_dotted_abbreviation(self):
        assert normalize_term("U.S.") == "u s"
        assert normalize_term("U.K.") == "u k"

    def test_digits_survive(self):
        assert normalize_term("Area 51!") == "area 51"

    def test_empty_and_blank(self):
        assert normalize_term("") == ""
        assert normalize_term("   ") == ""
        assert normalize_term("'-.,") == ""

    def test_output_is_ascii_lowercase(self):
        out = normalize_term("São Tomé and Príncipe")
        assert out == "sao tome and principe"
        assert out.isascii()


class TestStripDiacritics:
    def test_spacing_modifier_letters_dropped(self):
        assert normalize_term("Malo Saʻoloto Tutoʻatasi Sāmoa") == "malo saoloto tutoatasi samoa"
        assert normalize_term("Hawaiʻi") == normalize_term("Hawaii")

    def test_keeps_base_letters(self):
        assert strip_diacritics("Curaçao") == "Curacao"
        assert strip_diacritics("Åland") == "Aland"
