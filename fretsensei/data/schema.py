"""
Schema definitions for the Fret Sensei static tables.

This module defines the Pydantic models that validate and structure the
YAML tables shipped with the package (tunings, chord qualities, scale types,
voicings, recordings, commentary and engine settings). Every table is
validated once when it is loaded and is treated as read-only afterwards.

The timeline ordering check (validate_segments) also lives here, because
both the recording loader and PlaybackTimeline need it.
"""

from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fretsensei.errors import MalformedTimeline
from fretsensei.theory.pitch import NUM_STRINGS, note_to_pitch_class


# =============================================================================
# VALID OPTIONS
# =============================================================================

VALID_TIERS = ["easy", "medium", "hard"]

TierName = Literal["easy", "medium", "hard"]

MAX_FRET = 24

MUTED = -1


def _check_intervals(v: List[int]) -> Tuple[int, ...]:
    """Intervals must be unique semitone offsets 0-11 and include the root (0)."""
    if any(not 0 <= i <= 11 for i in v):
        raise ValueError(f"Intervals must be between 0 and 11. Got: {v}")
    if len(set(v)) != len(v):
        raise ValueError(f"Intervals must be unique. Got: {v}")
    if 0 not in v:
        raise ValueError(f"Intervals must include the root (0). Got: {v}")
    return tuple(sorted(v))


# =============================================================================
# TUNINGS
# =============================================================================

class TuningTable(BaseModel):
    """
    Tuning name -> note names, lowest string first.

    Example (YAML):
        tunings:
          standard: [E, A, D, G, B, E]
          drop_d:   [D, A, D, G, B, E]
    """
    model_config = ConfigDict(frozen=True)

    tunings: Dict[str, List[str]] = Field(..., min_length=1)

    @field_validator('tunings')
    @classmethod
    def validate_tunings(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        """Each tuning has six valid note names"""
        for name, notes in v.items():
            if len(notes) != NUM_STRINGS:
                raise ValueError(
                    f"Tuning '{name}' must list {NUM_STRINGS} notes. Got: {len(notes)}"
                )
            for note in notes:
                note_to_pitch_class(note)
        return v


# =============================================================================
# CHORDS AND SCALES
# =============================================================================

class ChordQualitySpec(BaseModel):
    """One chord quality: the suffix after the root (e.g. "m7") and its intervals."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Human readable quality name",
        examples=["major", "dominant seventh"]
    )

    intervals: Tuple[int, ...] = Field(
        ...,
        min_length=1,
        description="Semitone offsets from the root",
        examples=[[0, 4, 7], [0, 4, 7, 10]]
    )

    aliases: Tuple[str, ...] = Field(default=())

    @field_validator('intervals')
    @classmethod
    def validate_intervals(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        return _check_intervals(list(v))


class ChordTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    qualities: Dict[str, ChordQualitySpec] = Field(..., min_length=1)

    @model_validator(mode='after')
    def validate_aliases(self) -> 'ChordTable':
        """An alias may not shadow another suffix or alias"""
        seen = set(self.qualities)
        for suffix, spec in self.qualities.items():
            for alias in spec.aliases:
                if alias in seen:
                    raise ValueError(f"Chord alias '{alias}' (of '{suffix}') is defined twice")
                seen.add(alias)
        return self


class ScaleTypeSpec(BaseModel):
    """One scale type (e.g. "mixolydian") and its intervals."""
    model_config = ConfigDict(frozen=True)

    intervals: Tuple[int, ...] = Field(..., min_length=1)
    aliases: Tuple[str, ...] = Field(default=())

    @field_validator('intervals')
    @classmethod
    def validate_intervals(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        return _check_intervals(list(v))

    @field_validator('aliases')
    @classmethod
    def lowercase_aliases(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(a.lower() for a in v)


class ScaleTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    scales: Dict[str, ScaleTypeSpec] = Field(..., min_length=1)

    @field_validator('scales')
    @classmethod
    def lowercase_names(cls, v: Dict[str, ScaleTypeSpec]) -> Dict[str, ScaleTypeSpec]:
        return {name.lower(): spec for name, spec in v.items()}


# =============================================================================
# VOICINGS
# =============================================================================

class VoicingSpec(BaseModel):
    """
    A concrete chord shape.

    Frets are absolute and listed lowest string first:
        -1 = muted, 0 = open, >0 = fretted

    Example (open C major):
        frets:   [-1, 3, 2, 0, 1, 0]
        fingers: [ 0, 3, 2, 0, 1, 0]
    """
    model_config = ConfigDict(frozen=True)

    frets: Tuple[int, ...] = Field(..., min_length=NUM_STRINGS, max_length=NUM_STRINGS)
    fingers: Tuple[int, ...] = Field(..., min_length=NUM_STRINGS, max_length=NUM_STRINGS)
    base_fret: int = Field(default=1, ge=1, le=MAX_FRET)
    barres: Tuple[int, ...] = Field(default=())

    @field_validator('frets')
    @classmethod
    def validate_frets(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if any(not MUTED <= f <= MAX_FRET for f in v):
            raise ValueError(f"Frets must be between {MUTED} and {MAX_FRET}. Got: {v}")
        if all(f == MUTED for f in v):
            raise ValueError("A voicing needs at least one sounding string")
        return v

    @field_validator('fingers')
    @classmethod
    def validate_finger_range(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if any(not 0 <= f <= 4 for f in v):
            raise ValueError(f"Fingers must be between 0 and 4. Got: {v}")
        return v

    @model_validator(mode='after')
    def validate_shape(self) -> 'VoicingSpec':
        """Fretted strings need a finger, open and muted strings must not have one"""
        for string_index, (fret, finger) in enumerate(zip(self.frets, self.fingers)):
            if fret > 0 and finger == 0:
                raise ValueError(f"String {string_index} is fretted at {fret} but has no finger")
            if fret <= 0 and finger != 0:
                raise ValueError(f"String {string_index} is open or muted but has finger {finger}")

        for barre in self.barres:
            covered = sum(1 for f in self.frets if f == barre)
            if covered < 2:
                raise ValueError(f"Barre at fret {barre} must cover at least two strings")
        return self


class VoicingTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    voicings: Dict[str, Dict[TierName, VoicingSpec]] = Field(..., min_length=1)

    @field_validator('voicings')
    @classmethod
    def validate_not_empty(cls, v: Dict[str, Dict[str, VoicingSpec]]) -> Dict[str, Dict[str, VoicingSpec]]:
        empty = [symbol for symbol, tiers in v.items() if not tiers]
        if empty:
            raise ValueError(f"Chords without any voicing: {empty}")
        return v


# =============================================================================
# RECORDINGS AND SEGMENTS
# =============================================================================

class Segment(BaseModel):
    """
    A contiguous time range [start, end) of a recording.

    Attributes:
        id: Unique identifier within the recording
        start: Start time in seconds (inclusive)
        end: End time in seconds (exclusive)
        section: Section label shown to the user ("Verse Solo", "Bridge", ...)
        chords: Chord progression cycled while the segment is active
        per_chord_duration: Seconds each chord of the progression lasts
        scale: Recommended scale symbol for the segment
        key: Key of the segment
        commentary_pool: Name of the commentary pool; derived from the
                         section label when omitted
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    start: float = Field(..., ge=0)
    end: float = Field(..., ge=0)
    section: str = Field(..., min_length=1, examples=["Introduction", "Verse Solo"])
    chords: Tuple[str, ...] = Field(..., min_length=1, examples=[["G", "C", "D7"]])
    per_chord_duration: float = Field(..., gt=0, examples=[10.0, 7.5])
    scale: Optional[str] = Field(default=None, examples=["G Major Pentatonic"])
    key: Optional[str] = Field(default=None)
    commentary_pool: Optional[str] = Field(default=None)

    @property
    def length(self) -> float:
        return self.end - self.start

    def contains(self, time: float) -> bool:
        return self.start <= time < self.end


class Recording(BaseModel):
    """A recording and its ordered analysis segments."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    artist: Optional[str] = None
    duration: float = Field(..., gt=0)
    segments: Tuple[Segment, ...] = Field(default=())


class RecordingTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    recordings: List[Recording] = Field(..., min_length=1)

    @field_validator('recordings')
    @classmethod
    def validate_unique_ids(cls, v: List[Recording]) -> List[Recording]:
        ids = [r.id for r in v]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate recording ids: {duplicates}")
        return v


def validate_segments(segments: Tuple[Segment, ...], duration: float) -> None:
    """
    Check that segments are ordered, non-overlapping and inside [0, duration].

    Raises:
        MalformedTimeline: describing the first violation found
    """
    previous = None
    for segment in segments:
        if segment.end <= segment.start:
            raise MalformedTimeline(
                f"Segment '{segment.id}' has an empty range [{segment.start}, {segment.end})"
            )
        if segment.end > duration:
            raise MalformedTimeline(
                f"Segment '{segment.id}' ends at {segment.end}, after the recording ({duration})"
            )
        if previous is not None:
            if segment.start < previous.start:
                raise MalformedTimeline(
                    f"Segment '{segment.id}' starts before '{previous.id}'; segments must be sorted"
                )
            if segment.start < previous.end:
                raise MalformedTimeline(
                    f"Segment '{segment.id}' overlaps '{previous.id}' "
                    f"([{segment.start}, {segment.end}) vs [{previous.start}, {previous.end}))"
                )
        previous = segment

    ids = [s.id for s in segments]
    if len(set(ids)) != len(ids):
        raise MalformedTimeline(f"Duplicate segment ids: {ids}")


# =============================================================================
# COMMENTARY
# =============================================================================

class CommentaryTable(BaseModel):
    """
    Rotating coaching content.

    sections: section type -> commentary lines
    techniques: technique suggestions, independent of the section
    tips: practice tips, independent of the section
    """
    model_config = ConfigDict(frozen=True)

    sections: Dict[str, Tuple[str, ...]] = Field(..., min_length=1)
    techniques: Tuple[str, ...] = Field(..., min_length=1)
    tips: Tuple[str, ...] = Field(..., min_length=1)

    @field_validator('sections')
    @classmethod
    def validate_pools(cls, v: Dict[str, Tuple[str, ...]]) -> Dict[str, Tuple[str, ...]]:
        empty = [name for name, lines in v.items() if not lines]
        if empty:
            raise ValueError(f"Commentary pools must not be empty: {empty}")
        return {name.lower(): lines for name, lines in v.items()}


# =============================================================================
# ENGINE SETTINGS
# =============================================================================

class EngineSettings(BaseModel):
    """Engine defaults. A user YAML file may override any of them."""
    model_config = ConfigDict(frozen=True)

    max_fret: int = Field(default=15, ge=0, le=MAX_FRET)
    default_tuning: str = Field(default="standard")
    default_tier: TierName = Field(default="medium")
    tick_interval: float = Field(default=1.0, gt=0)
    rotation_quantum: float = Field(default=5.0, gt=0)
    default_section: str = Field(default="solo")
    default_voicing_symbol: str = Field(default="E")

    @field_validator('default_tier', mode='before')
    @classmethod
    def lowercase_tier(cls, v):
        return v.lower() if isinstance(v, str) else v
