"""
Fretboard Module - Annotating Positions with Chord and Scale Roles

For every (string, fret) pair up to max_fret, the annotator works out the
sounding pitch class and gives it one role, checked in this order:

    1. ROOT        - the chord's root
    2. CHORD_TONE  - any other chord member (even if it is also in the scale)
    3. SCALE_TONE  - in the scale but not in the chord
    (anything else is left out of the result)

Chord tones always win over scale tones, so a learner sees which notes are
"safe" targets and which ones only add colour.

OPEN and MUTED describe a concrete voicing, not a chord or scale; they are
only produced by voicing_positions().

Usage:
    from fretsensei.theory.fretboard import annotate

    positions = annotate("E7", "E Mixolydian", max_fret=12)
    roots = [p for p in positions if p.role is Role.ROOT]
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from fretsensei.data.schema import MAX_FRET, MUTED
from fretsensei.theory.catalog import Catalog, Chord, Scale, default_catalog
from fretsensei.theory.pitch import STANDARD_TUNING, Tuning, pitch_class_at, pitch_class_name

if TYPE_CHECKING:
    from fretsensei.theory.voicings import Voicing

logger = logging.getLogger(__name__)

DEFAULT_MAX_FRET = 15


class Role(Enum):
    ROOT = "root"
    CHORD_TONE = "chordTone"
    SCALE_TONE = "scaleTone"
    OPEN = "open"
    MUTED = "muted"


@dataclass(frozen=True, order=True)
class FretPosition:
    """
    One annotated spot on the neck.

    Ordering is by (string, fret), which is the order annotate() returns.
    pitch_class is None only for muted strings.
    """
    string: int
    fret: int
    pitch_class: Optional[int]
    role: Role

    @property
    def note_name(self) -> Optional[str]:
        if self.pitch_class is None:
            return None
        return pitch_class_name(self.pitch_class)

    def __str__(self):
        return f"S{self.string}:F{self.fret}:{self.role.value}"


def classify(pitch_class: int, chord: Optional[Chord], scale: Optional[Scale]) -> Optional[Role]:
    """Role of a pitch class; None if it belongs to neither chord nor scale."""
    if chord is not None:
        if pitch_class == chord.root:
            return Role.ROOT
        if chord.contains(pitch_class):
            return Role.CHORD_TONE
    if scale is not None and scale.contains(pitch_class):
        return Role.SCALE_TONE
    return None


class FretboardAnnotator:
    """Maps chord/scale symbols onto fretboard positions. Stateless apart from the catalog."""

    def __init__(self, catalog: Optional[Catalog] = None):
        self.catalog = catalog or default_catalog()

    def annotate(
        self,
        chord_symbol: Optional[str],
        scale_symbol: Optional[str] = None,
        tuning: Tuning = STANDARD_TUNING,
        max_fret: int = DEFAULT_MAX_FRET,
    ) -> List[FretPosition]:
        """
        Annotate every position from fret 0 to max_fret on every string.

        Unknown chord or scale symbols contribute no roles; they never raise.

        Args:
            chord_symbol: e.g. "E7" (None for a scale-only view)
            scale_symbol: e.g. "E Mixolydian" (optional)
            tuning: open-string pitch classes
            max_fret: highest fret to include (clamped to 24)

        Returns:
            Positions sorted by (string, fret)
        """
        chord = None
        if chord_symbol:
            chord = self.catalog.find_chord(chord_symbol)
            if chord is None:
                logger.warning(f"Unknown chord '{chord_symbol}'; no chord tones will be marked.")

        scale = None
        if scale_symbol:
            scale = self.catalog.find_scale(scale_symbol)
            if scale is None:
                logger.warning(f"Unknown scale '{scale_symbol}'; no scale tones will be marked.")

        return self.annotate_sets(chord, scale, tuning, max_fret)

    def annotate_sets(
        self,
        chord: Optional[Chord],
        scale: Optional[Scale],
        tuning: Tuning = STANDARD_TUNING,
        max_fret: int = DEFAULT_MAX_FRET,
    ) -> List[FretPosition]:
        """Same as annotate(), for already resolved Chord / Scale objects."""
        if max_fret > MAX_FRET:
            logger.debug(f"max_fret {max_fret} clamped to {MAX_FRET}")
            max_fret = MAX_FRET

        positions = []
        for string_index in range(tuning.num_strings):
            for fret in range(max_fret + 1):
                pc = pitch_class_at(tuning, string_index, fret)
                role = classify(pc, chord, scale)
                if role is not None:
                    positions.append(FretPosition(string_index, fret, pc, role))
        return positions

    def voicing_positions(
        self,
        voicing: "Voicing",
        tuning: Tuning = STANDARD_TUNING,
        chord_symbol: Optional[str] = None,
    ) -> List[FretPosition]:
        """
        One position per string for a concrete voicing.

        Muted strings get MUTED (and no pitch class), open strings OPEN, and
        fretted strings ROOT or CHORD_TONE relative to chord_symbol.
        """
        chord = self.catalog.find_chord(chord_symbol) if chord_symbol else None

        positions = []
        for string_index, fret in enumerate(voicing.frets):
            if fret == MUTED:
                positions.append(FretPosition(string_index, fret, None, Role.MUTED))
                continue

            pc = pitch_class_at(tuning, string_index, fret)
            if fret == 0:
                role = Role.OPEN
            elif chord is not None and pc == chord.root:
                role = Role.ROOT
            else:
                role = Role.CHORD_TONE
            positions.append(FretPosition(string_index, fret, pc, role))
        return positions


def annotate(
    chord_symbol: Optional[str],
    scale_symbol: Optional[str] = None,
    tuning: Tuning = STANDARD_TUNING,
    max_fret: int = DEFAULT_MAX_FRET,
) -> List[FretPosition]:
    """annotate() with the bundled catalog."""
    return FretboardAnnotator().annotate(chord_symbol, scale_symbol, tuning, max_fret)
