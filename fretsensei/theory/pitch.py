"""
Pitch Module - Note Names, Pitch Classes and Tunings

Everything on the fretboard is reduced to a pitch class: an integer 0-11
where C = 0, C# = 1, ... B = 11. Octaves are ignored, so all arithmetic
here is done mod 12.

It can:
    1. Convert a note name ("G#", "Ab", "e") to its pitch class
    2. Spell a pitch class back as a note name (sharps or flats)
    3. Compute the pitch class sounding at (string, fret) for a tuning

String indices run from 0 (lowest string) to 5 (highest string).
Guitarists number strings the other way around (1 = high E), so
Tuning.string_number() converts between the two.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

from fretsensei.errors import UnknownNote


# =============================================================================
# CONSTANTS
# =============================================================================

# The 12 pitch classes, spelled with sharps
CHROMATIC_SCALE = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# The same 12 pitch classes spelled with flats
CHROMATIC_SCALE_FLATS = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

NATURAL_PITCH_CLASSES = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

# Accidental -> semitone shift. Unicode signs are accepted as well.
ACCIDENTALS = {
    "#": 1,
    "♯": 1,
    "b": -1,
    "♭": -1,
}

NUM_STRINGS = 6


# =============================================================================
# NOTE NAMES
# =============================================================================

def split_note(name: str) -> Tuple[str, str]:
    """
    Split a note name into (letter, accidental).

    The accidental is "" for naturals and is always returned as ASCII
    ("#" or "b").

    Raises:
        UnknownNote: if the name is not a letter A-G with at most one accidental
    """
    if not isinstance(name, str):
        raise UnknownNote(repr(name))

    cleaned = name.strip()
    if not 1 <= len(cleaned) <= 2:
        raise UnknownNote(name)

    letter = cleaned[0].upper()
    if letter not in NATURAL_PITCH_CLASSES:
        raise UnknownNote(name)

    if len(cleaned) == 1:
        return letter, ""

    accidental = cleaned[1]
    if accidental not in ACCIDENTALS:
        raise UnknownNote(name)

    return letter, "#" if ACCIDENTALS[accidental] > 0 else "b"


def note_to_pitch_class(name: str) -> int:
    """
    Convert a note name to its pitch class (0-11).

    Enharmonic spellings map to the same value: "G#" and "Ab" are both 8,
    "E#" is 5 and "Cb" is 11.

    Examples:
        >>> note_to_pitch_class("C")
        0
        >>> note_to_pitch_class("Ab")
        8
    """
    letter, accidental = split_note(name)
    shift = ACCIDENTALS[accidental] if accidental else 0
    return (NATURAL_PITCH_CLASSES[letter] + shift) % 12


def pitch_class_name(pitch_class: int, prefer_flats: bool = False) -> str:
    """Spell a pitch class as a note name."""
    table = CHROMATIC_SCALE_FLATS if prefer_flats else CHROMATIC_SCALE
    return table[pitch_class % 12]


def transpose(pitch_class: int, semitones: int) -> int:
    """Move a pitch class up (or down) by a number of semitones."""
    return (pitch_class + semitones) % 12


def interval_between(root: int, pitch_class: int) -> int:
    """Semitones from root up to pitch_class, always in 0-11."""
    return (pitch_class - root) % 12


# =============================================================================
# TUNINGS
# =============================================================================

@dataclass(frozen=True)
class Tuning:
    """
    Open-string pitch classes of a six-string instrument, lowest string first.

    Tunings are fixed at construction and never change.

    Example:
        >>> STANDARD_TUNING.open_pitch_classes
        (4, 9, 2, 7, 11, 4)
        >>> STANDARD_TUNING.pitch_class_at(1, 3)   # A string, 3rd fret = C
        0
    """
    name: str
    open_pitch_classes: Tuple[int, ...]

    def __post_init__(self):
        pcs = tuple(int(pc) for pc in self.open_pitch_classes)
        if len(pcs) != NUM_STRINGS:
            raise ValueError(
                f"Tuning '{self.name}' must have {NUM_STRINGS} strings. Got: {len(pcs)}"
            )
        if any(not 0 <= pc <= 11 for pc in pcs):
            raise ValueError(f"Tuning '{self.name}' has pitch classes outside 0-11: {pcs}")
        object.__setattr__(self, "open_pitch_classes", pcs)

    @classmethod
    def from_names(cls, name: str, notes: Iterable[str]) -> "Tuning":
        """Build a tuning from note names, lowest string first."""
        return cls(name, tuple(note_to_pitch_class(n) for n in notes))

    @property
    def num_strings(self) -> int:
        return len(self.open_pitch_classes)

    def pitch_class_at(self, string_index: int, fret: int) -> int:
        return pitch_class_at(self, string_index, fret)

    def string_number(self, string_index: int) -> int:
        """Guitarist's string number for an index (index 0 = low string = number 6)."""
        return self.num_strings - string_index

    def note_names(self, prefer_flats: bool = False) -> Tuple[str, ...]:
        return tuple(pitch_class_name(pc, prefer_flats) for pc in self.open_pitch_classes)

    def __str__(self) -> str:
        return f"{self.name} ({' '.join(self.note_names())})"


def pitch_class_at(tuning: Tuning, string_index: int, fret: int) -> int:
    """Pitch class sounding on a string at a fret: (open + fret) mod 12."""
    return (tuning.open_pitch_classes[string_index] + fret) % 12


# E A D G B E
STANDARD_TUNING = Tuning("standard", (4, 9, 2, 7, 11, 4))
