"""
Tests for Pitch Classes and Tunings

Run with: pytest tests/test_pitch.py -v
"""

import pytest

from fretsensei.errors import UnknownNote
from fretsensei.theory.pitch import (
    STANDARD_TUNING,
    Tuning,
    interval_between,
    note_to_pitch_class,
    pitch_class_at,
    pitch_class_name,
    split_note,
    transpose,
)


class TestNoteNames:
    """Note name grammar and enharmonic spellings."""

    @pytest.mark.parametrize("name,expected", [
        ("C", 0), ("C#", 1), ("Db", 1), ("E", 4), ("F", 5),
        ("G#", 8), ("Ab", 8), ("B", 11), ("Bb", 10),
        ("E#", 5), ("Cb", 11), ("F♯", 6), ("B♭", 10), ("a", 9),
    ])
    def test_note_to_pitch_class(self, name, expected):
        assert note_to_pitch_class(name) == expected

    @pytest.mark.parametrize("name", ["H", "", "C##", "Cx", "Do", "12", "  "])
    def test_unknown_notes_raise(self, name):
        with pytest.raises(UnknownNote):
            note_to_pitch_class(name)

    def test_unknown_note_is_value_error(self):
        """Callers catching ValueError also catch UnknownNote."""
        with pytest.raises(ValueError):
            note_to_pitch_class("Z")

    def test_split_note_normalizes_accidentals(self):
        assert split_note("f♯") == ("F", "#")
        assert split_note("E♭") == ("E", "b")
        assert split_note("G") == ("G", "")

    def test_pitch_class_name(self):
        assert pitch_class_name(1) == "C#"
        assert pitch_class_name(1, prefer_flats=True) == "Db"
        assert pitch_class_name(13) == "C#"


class TestArithmetic:
    """All arithmetic is mod 12."""

    def test_transpose_wraps(self):
        assert transpose(11, 1) == 0
        assert transpose(0, -1) == 11
        assert transpose(4, 24) == 4

    def test_interval_between(self):
        assert interval_between(4, 8) == 4
        assert interval_between(9, 0) == 3
        assert interval_between(0, 0) == 0


class TestTuning:
    """Tunings and the pitch class at (string, fret)."""

    def test_standard_tuning(self):
        assert STANDARD_TUNING.open_pitch_classes == (4, 9, 2, 7, 11, 4)
        assert STANDARD_TUNING.note_names() == ("E", "A", "D", "G", "B", "E")

    def test_pitch_class_at(self):
        assert pitch_class_at(STANDARD_TUNING, 1, 3) == 0    # A string, 3rd fret = C
        assert pitch_class_at(STANDARD_TUNING, 0, 0) == 4
        assert STANDARD_TUNING.pitch_class_at(5, 5) == 9

    def test_pitch_class_at_is_periodic(self):
        """Twelve frets up is the same pitch class on every string."""
        for string_index in range(6):
            for fret in range(13):
                assert (
                    pitch_class_at(STANDARD_TUNING, string_index, fret)
                    == pitch_class_at(STANDARD_TUNING, string_index, fret + 12)
                )

    def test_string_numbers(self):
        assert STANDARD_TUNING.string_number(0) == 6
        assert STANDARD_TUNING.string_number(5) == 1

    def test_from_names(self):
        drop_d = Tuning.from_names("drop_d", ["D", "A", "D", "G", "B", "E"])
        assert drop_d.open_pitch_classes == (2, 9, 2, 7, 11, 4)

    def test_wrong_string_count(self):
        with pytest.raises(ValueError):
            Tuning("five", (4, 9, 2, 7, 11))

    def test_out_of_range_pitch_class(self):
        with pytest.raises(ValueError):
            Tuning("bad", (4, 9, 2, 7, 11, 12))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
