"""
Coach Module - One Display Frame per Tick

Coach connects the playback timeline to the theory engine: for the chord
that is currently playing it looks up a voicing at the learner's tier and
annotates the fretboard against the segment's recommended scale.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from fretsensei.playback.timeline import PlaybackState, PlaybackTimeline
from fretsensei.theory.fretboard import DEFAULT_MAX_FRET, FretboardAnnotator, FretPosition
from fretsensei.theory.pitch import STANDARD_TUNING, Tuning
from fretsensei.theory.voicings import DifficultyTier, VoicingLibrary, VoicingMatch, default_library

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoachingFrame:
    """
    Everything the UI shows for one moment of playback.

    voicing, positions and voicing_positions are empty/None while no
    segment is active.
    """
    state: PlaybackState
    voicing: Optional[VoicingMatch]
    positions: List[FretPosition]
    voicing_positions: List[FretPosition]

    @property
    def chord(self) -> Optional[str]:
        return self.state.chord

    @property
    def scale(self) -> Optional[str]:
        return self.state.scale


class Coach:
    def __init__(
        self,
        timeline: PlaybackTimeline,
        annotator: Optional[FretboardAnnotator] = None,
        voicings: Optional[VoicingLibrary] = None,
        tier=DifficultyTier.MEDIUM,
        tuning: Tuning = STANDARD_TUNING,
        max_fret: int = DEFAULT_MAX_FRET,
    ):
        self.timeline = timeline
        self.annotator = annotator or FretboardAnnotator()
        self.voicings = voicings or default_library()
        self.tier = DifficultyTier.parse(tier)
        self.tuning = tuning
        self.max_fret = max_fret

    def frame(self) -> CoachingFrame:
        """Frame for the timeline's current state."""
        return self.frame_for(self.timeline.snapshot())

    def frame_for(self, state: PlaybackState) -> CoachingFrame:
        if state.chord is None:
            return CoachingFrame(state, None, [], [])

        match = self.voicings.resolve(state.chord, self.tier)
        positions = self.annotator.annotate(state.chord, state.scale, self.tuning, self.max_fret)
        voicing_positions = self.annotator.voicing_positions(match.voicing, self.tuning, state.chord)
        return CoachingFrame(state, match, positions, voicing_positions)

    def start(self) -> CoachingFrame:
        return self.frame_for(self.timeline.start())

    def stop(self) -> CoachingFrame:
        return self.frame_for(self.timeline.stop())

    def tick(self, delta: float) -> CoachingFrame:
        return self.frame_for(self.timeline.tick(delta))
