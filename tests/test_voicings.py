"""
Tests for the Voicing Library and its Fallback Chain

Run with: pytest tests/test_voicings.py -v
"""

import pytest

from fretsensei.data.loader import load_voicing_table
from fretsensei.errors import NotFound
from fretsensei.theory.catalog import default_catalog, lookup_chord
from fretsensei.theory.pitch import STANDARD_TUNING
from fretsensei.theory.voicings import (
    REFERENCE_VOICING,
    DifficultyTier,
    Resolution,
    Voicing,
    VoicingLibrary,
    default_library,
    enharmonic_respelling,
    get_voicing,
    strip_accidental,
)


@pytest.fixture
def library():
    return default_library()


class TestDifficultyTier:
    @pytest.mark.parametrize("value,expected", [
        ("easy", DifficultyTier.EASY),
        ("HARD", DifficultyTier.HARD),
        ("beginner", DifficultyTier.EASY),
        ("advanced", DifficultyTier.HARD),
        ("하", DifficultyTier.EASY),
        ("중", DifficultyTier.MEDIUM),
        ("상", DifficultyTier.HARD),
        (DifficultyTier.HARD, DifficultyTier.HARD),
    ])
    def test_parse(self, value, expected):
        assert DifficultyTier.parse(value) is expected

    def test_unknown_falls_back_to_medium(self):
        assert DifficultyTier.parse("expert") is DifficultyTier.MEDIUM


class TestVoicingData:
    """The bundled shapes are musically correct."""

    def test_every_voicing_sounds_only_chord_tones(self):
        for symbol, tiers in load_voicing_table().items():
            chord = lookup_chord(symbol)
            for tier, spec in tiers.items():
                voicing = Voicing.from_spec(spec)
                sounding = set(voicing.pitch_classes(STANDARD_TUNING))
                assert sounding <= chord.pitch_classes(), f"{symbol} ({tier})"
                assert chord.root in sounding, f"{symbol} ({tier}) has no root"

    def test_easy_c_is_three_notes_on_top_strings(self):
        voicing = get_voicing("C", "easy")
        assert voicing.note_count == 3
        assert voicing.string_numbers(STANDARD_TUNING) == [1, 2, 3]
        assert not voicing.is_barre

    def test_hard_c_is_six_string_barre(self):
        voicing = get_voicing("C", "hard")
        assert voicing.note_count == 6
        assert voicing.string_numbers(STANDARD_TUNING) == [1, 2, 3, 4, 5, 6]
        assert voicing.is_barre
        assert voicing.barres


class TestFallbackChain:
    """Each step of the chain is tagged in the result."""

    def test_exact(self, library):
        match = library.resolve("C", "medium")
        assert match.resolution is Resolution.EXACT
        assert match.is_exact
        assert match.voicing.frets == (-1, 3, 2, 0, 1, 0)

    def test_medium_tier(self, library):
        match = library.resolve("B", "easy")
        assert match.resolution is Resolution.MEDIUM_TIER
        assert match.tier is DifficultyTier.MEDIUM

    def test_any_tier_only_hard_exists(self, library):
        match = library.resolve("Cm", "easy")
        assert match.resolution is Resolution.ANY_TIER
        assert match.tier is DifficultyTier.HARD

    def test_any_tier_prefers_easier_on_tie(self, library):
        """D has easy and hard but no medium; both are one step away."""
        match = library.resolve("D", "medium")
        assert match.resolution is Resolution.ANY_TIER
        assert match.tier is DifficultyTier.EASY

    def test_enharmonic(self, library):
        match = library.resolve("Dbm", "medium")
        assert match.resolution is Resolution.ENHARMONIC
        assert match.symbol == "C#m"
        assert match.requested_symbol == "Dbm"

    def test_accidental_stripped(self, library):
        match = library.resolve("F#", "hard")
        assert match.resolution is Resolution.ACCIDENTAL_STRIPPED
        assert match.symbol == "F"

    def test_default(self, library):
        match = library.resolve("Xyz", "easy")
        assert match.resolution is Resolution.DEFAULT
        assert match.is_fallback
        assert match.symbol == "E"
        assert match.voicing.frets == (0, 2, 2, 1, 0, 0)

    def test_aliases_resolve_exactly(self, library):
        assert library.resolve("Amin", "easy").resolution is Resolution.EXACT

    def test_every_catalog_symbol_gets_a_voicing(self, library):
        symbols = default_catalog().chord_symbols() + ["Xyz", "", "H#m"]
        for symbol in symbols:
            voicing = library.get_voicing(symbol, "hard")
            assert len(voicing.frets) == 6
            assert voicing.sounding_strings()

    def test_lookup_is_exact_only(self, library):
        assert library.lookup("C", DifficultyTier.HARD).barres == (8,)
        with pytest.raises(NotFound):
            library.lookup("B", DifficultyTier.EASY)

    def test_tiers_for(self, library):
        assert library.tiers_for("G") == [DifficultyTier.EASY, DifficultyTier.MEDIUM, DifficultyTier.HARD]
        assert library.tiers_for("Xyz") == []


class TestCustomLibrary:
    def test_reference_shape_without_e_in_table(self):
        only_c = Voicing(frets=(-1, 3, 2, 0, 1, 0), fingers=(0, 3, 2, 0, 1, 0))
        library = VoicingLibrary({"C": {DifficultyTier.MEDIUM: only_c}})
        match = library.resolve("G7", "easy")
        assert match.resolution is Resolution.DEFAULT
        assert match.voicing == REFERENCE_VOICING
        assert match.tier is DifficultyTier.EASY

    def test_default_reports_the_stored_tier(self):
        e_barre = Voicing(frets=(0, 2, 2, 1, 0, 0), fingers=(0, 3, 4, 2, 0, 0))
        library = VoicingLibrary({"E": {DifficultyTier.HARD: e_barre}})
        match = library.resolve("Xyz", "easy")
        assert match.resolution is Resolution.DEFAULT
        assert match.tier is DifficultyTier.HARD
        assert match.voicing == e_barre
        assert library.lookup(match.symbol, match.tier) == e_barre


class TestRespelling:
    def test_enharmonic_respelling(self):
        assert enharmonic_respelling("Db") == "C#"
        assert enharmonic_respelling("A#m7") == "Bbm7"
        assert enharmonic_respelling("C") is None
        assert enharmonic_respelling("E#") is None

    def test_strip_accidental(self):
        assert strip_accidental("C#m") == "Cm"
        assert strip_accidental("Bb7") == "B7"
        assert strip_accidental("G") is None
        assert strip_accidental("Xyz") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
