"""
Catalog Module - Chord and Scale Definitions

A chord or a scale is a root pitch class plus a set of semitone offsets
from that root. Membership is therefore a single test:

    (pitch_class - root) mod 12 in intervals

The chord qualities ("", "m", "7", "maj7", ...) and scale types
("major", "mixolydian", ...) come from chords.yaml and scales.yaml.
The tables are loaded once and never modified.

Symbols:
    Chords: root + quality suffix      "E7", "Am", "F#m7b5", "Bbmaj7"
    Scales: root + " " + scale type    "E Mixolydian", "A Minor Pentatonic"
            optional "scale"/"mode"    "C# Dorian Mode"
            "/" joins several scales   "G Blues / G Major Pentatonic"
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

from fretsensei.data.loader import load_chord_qualities, load_scale_types
from fretsensei.data.schema import ChordQualitySpec, ScaleTypeSpec
from fretsensei.errors import NotFound, UnknownNote
from fretsensei.theory.pitch import (
    CHROMATIC_SCALE,
    interval_between,
    note_to_pitch_class,
    pitch_class_name,
    split_note,
    transpose,
)

logger = logging.getLogger(__name__)

SCALE_SUFFIX_WORDS = ("scale", "mode")

UNICODE_ACCIDENTALS = {"♯": "#", "♭": "b"}


# =============================================================================
# DATA TYPES
# =============================================================================

@dataclass(frozen=True)
class PitchSet:
    """
    A root plus interval offsets. Base of Chord and Scale.

    Attributes:
        symbol: Canonical symbol, e.g. "E7" or "E mixolydian"
        root_name: Root as spelled in the symbol ("Bb", "C#")
        root: Root pitch class (0-11)
        intervals: Semitone offsets from the root, always including 0
        name: Human readable label
    """
    symbol: str
    root_name: str
    root: int
    intervals: FrozenSet[int]
    name: str

    def contains(self, pitch_class: int) -> bool:
        return interval_between(self.root, pitch_class) in self.intervals

    def pitch_classes(self) -> FrozenSet[int]:
        return frozenset(transpose(self.root, i) for i in self.intervals)

    def note_names(self) -> List[str]:
        """Member notes in interval order, spelled with flats when the root is."""
        prefer_flats = self.root_name.endswith("b")
        return [pitch_class_name(transpose(self.root, i), prefer_flats) for i in sorted(self.intervals)]

    def __str__(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class Chord(PitchSet):
    quality: str = ""


@dataclass(frozen=True)
class Scale(PitchSet):
    scale_types: Tuple[str, ...] = field(default=())


def is_member(pitch_set: PitchSet, pitch_class: int) -> bool:
    """True if pitch_class belongs to the chord or scale."""
    return pitch_set.contains(pitch_class)


def normalize_symbol(symbol: str) -> str:
    """Trim whitespace and replace unicode sharp/flat signs with # and b."""
    cleaned = symbol.strip()
    for sign, ascii_sign in UNICODE_ACCIDENTALS.items():
        cleaned = cleaned.replace(sign, ascii_sign)
    return cleaned


def split_root(symbol: str) -> Tuple[str, str]:
    """
    Split a symbol into (root, rest).

    "F#m7" -> ("F#", "m7"), "Bb" -> ("Bb", ""), "E Mixolydian" -> ("E", " Mixolydian")

    Raises:
        UnknownNote: if the symbol does not start with a note name
    """
    cleaned = normalize_symbol(symbol)
    if len(cleaned) >= 2 and cleaned[1] in "#b":
        letter, accidental = split_note(cleaned[:2])
        return letter + accidental, cleaned[2:]
    letter, _ = split_note(cleaned[:1])
    return letter, cleaned[1:]


# =============================================================================
# CATALOG
# =============================================================================

class Catalog:
    """
    Read-only chord and scale lookup.

    Example:
        >>> catalog = default_catalog()
        >>> sorted(catalog.lookup_chord("E7").pitch_classes())
        [2, 4, 8, 11]
        >>> catalog.lookup_scale("A Minor Pentatonic").contains(0)
        True
    """

    def __init__(
        self,
        chord_qualities: Mapping[str, ChordQualitySpec],
        scale_types: Mapping[str, ScaleTypeSpec],
    ):
        self._qualities = MappingProxyType(dict(chord_qualities))
        self._scale_types = MappingProxyType({k.lower(): v for k, v in scale_types.items()})

        suffixes: Dict[str, str] = {}
        for suffix, spec in self._qualities.items():
            suffixes[suffix] = suffix
            for alias in spec.aliases:
                suffixes[alias] = suffix
        self._suffixes = MappingProxyType(suffixes)

        scale_names: Dict[str, str] = {}
        for name, spec in self._scale_types.items():
            scale_names[name] = name
            for alias in spec.aliases:
                scale_names[alias.lower()] = name
        self._scale_names = MappingProxyType(scale_names)

    # -------------------------------------------------------------------------
    # Chords
    # -------------------------------------------------------------------------

    def lookup_chord(self, symbol: str) -> Chord:
        """
        Resolve a chord symbol.

        Raises:
            NotFound: if the root or the quality suffix is not recognised
        """
        try:
            root_name, suffix = split_root(symbol)
        except UnknownNote:
            raise NotFound("chord", symbol)

        # Quality aliases are case-sensitive: "M7" is major 7th, "m7" is minor 7th
        quality = self._suffixes.get(suffix.strip())
        if quality is None:
            raise NotFound("chord", symbol)

        spec = self._qualities[quality]
        root = note_to_pitch_class(root_name)
        return Chord(
            symbol=root_name + quality,
            root_name=root_name,
            root=root,
            intervals=frozenset(spec.intervals),
            name=f"{root_name} {spec.name}",
            quality=quality,
        )

    def find_chord(self, symbol: str) -> Optional[Chord]:
        """Like lookup_chord, but returns None for unknown symbols."""
        try:
            return self.lookup_chord(symbol)
        except NotFound:
            return None

    def canonical_chord_symbol(self, symbol: str) -> str:
        """Canonical spelling of a chord symbol ("Amin" -> "Am"); unknown symbols are only trimmed."""
        chord = self.find_chord(symbol)
        return chord.symbol if chord else normalize_symbol(symbol)

    def chord_qualities(self) -> List[str]:
        return list(self._qualities)

    def chord_symbols(self) -> List[str]:
        """Every root (sharp spelling) combined with every quality."""
        return [root + quality for root in CHROMATIC_SCALE for quality in self._qualities]

    # -------------------------------------------------------------------------
    # Scales
    # -------------------------------------------------------------------------

    def _lookup_single_scale(self, symbol: str) -> Tuple[str, int, str]:
        try:
            root_name, rest = split_root(symbol)
        except UnknownNote:
            raise NotFound("scale", symbol)

        words = rest.lower().split()
        while words and words[-1] in SCALE_SUFFIX_WORDS:
            words.pop()
        type_name = self._scale_names.get(" ".join(words))
        if type_name is None:
            raise NotFound("scale", symbol)

        return root_name, note_to_pitch_class(root_name), type_name

    def lookup_scale(self, symbol: str) -> Scale:
        """
        Resolve a scale symbol. Compound symbols ("G Blues / G Major") give
        the union of their members, rooted at the first component.

        Raises:
            NotFound: if any component is not recognised
        """
        parts = [p for p in normalize_symbol(symbol).split("/") if p.strip()]
        if not parts:
            raise NotFound("scale", symbol)

        components = [self._lookup_single_scale(p) for p in parts]
        root_name, root, _ = components[0]

        pitch_classes = set()
        for _, component_root, type_name in components:
            for interval in self._scale_types[type_name].intervals:
                pitch_classes.add(transpose(component_root, interval))

        labels = [f"{name} {type_name}" for name, _, type_name in components]
        return Scale(
            symbol=" / ".join(labels),
            root_name=root_name,
            root=root,
            intervals=frozenset(interval_between(root, pc) for pc in pitch_classes),
            name=" / ".join(labels),
            scale_types=tuple(type_name for _, _, type_name in components),
        )

    def find_scale(self, symbol: str) -> Optional[Scale]:
        try:
            return self.lookup_scale(symbol)
        except NotFound:
            return None

    def scale_types(self) -> List[str]:
        return list(self._scale_types)

    def lookup(self, symbol: str) -> Union[Chord, Scale]:
        """Try the symbol as a chord first, then as a scale."""
        chord = self.find_chord(symbol)
        if chord is not None:
            return chord
        return self.lookup_scale(symbol)


@lru_cache(maxsize=None)
def default_catalog() -> Catalog:
    """The catalog built from the bundled chords.yaml and scales.yaml."""
    return Catalog(load_chord_qualities(), load_scale_types())


def lookup_chord(symbol: str) -> Chord:
    return default_catalog().lookup_chord(symbol)


def lookup_scale(symbol: str) -> Scale:
    return default_catalog().lookup_scale(symbol)
