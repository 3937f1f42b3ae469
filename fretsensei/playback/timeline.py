"""
Timeline Module - Playback State Machine

PlaybackTimeline is driven by an external tick source. It owns its state
and hands out frozen PlaybackState snapshots.

    STOPPED --start()--> PLAYING
    PLAYING --stop()---> STOPPED
    PLAYING --tick(d)--> PLAYING   (STOPPED once current_time reaches duration)

On every change of current_time:
    1. The active segment is the one whose [start, end) holds current_time.
       If none does, the previous segment stays active.
    2. On a segment change all rotation counters go back to zero.
    3. chord_index = floor((t - segment.start) / per_chord_duration) mod len(chords)
    4. Every rotation_quantum seconds each content counter (commentary,
       technique, tip) moves one step, modulo its own pool size.

seek(), next_segment() and previous_segment() only act while PLAYING; a
stopped timeline keeps the state it stopped with.

Usage:
    timeline = PlaybackTimeline.from_recording(get_recording("gravity"))
    timeline.start()
    state = timeline.tick(1.0)
    print(state.chord, state.commentary)
"""

import bisect
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from fretsensei.data.schema import Recording, Segment, validate_segments
from fretsensei.errors import MalformedTimeline
from fretsensei.playback.commentary import CommentaryPools, default_pools

logger = logging.getLogger(__name__)

DEFAULT_ROTATION_QUANTUM = 5.0

# Skip buttons land this far into the target segment
SKIP_OFFSET = 1.0

COMMENTARY = "commentary"
TECHNIQUE = "technique"
TIP = "tip"
ROTATING_POOLS = (COMMENTARY, TECHNIQUE, TIP)


class TimelineStatus(Enum):
    STOPPED = "stopped"
    PLAYING = "playing"


@dataclass(frozen=True)
class PlaybackState:
    """
    Read-only view of a timeline at one moment.

    segment, chord and the content texts are None while no segment has
    been reached yet (e.g. before the first analysed segment).
    """
    status: TimelineStatus
    current_time: float
    duration: float
    segment: Optional[Segment]
    segment_index: Optional[int]
    chord_index: int
    chord: Optional[str]
    previous_chord: Optional[str]
    next_chord: Optional[str]
    section_type: Optional[str]
    commentary_index: int
    commentary: Optional[str]
    technique_index: int
    technique: Optional[str]
    tip_index: int
    tip: Optional[str]

    @property
    def is_playing(self) -> bool:
        return self.status is TimelineStatus.PLAYING

    @property
    def progress(self) -> float:
        """Fraction of the recording played, 0.0 - 1.0."""
        return min(1.0, self.current_time / self.duration)

    @property
    def section(self) -> Optional[str]:
        return self.segment.section if self.segment else None

    @property
    def scale(self) -> Optional[str]:
        return self.segment.scale if self.segment else None


class PlaybackTimeline:
    """
    Maps elapsed time to segment, chord and rotating coaching content.

    Args:
        segments: Segments ordered by start time, not overlapping
        duration: Total length in seconds
        pools: Commentary pools (bundled commentary.yaml if omitted)
        rotation_quantum: Seconds between content rotations
        title: Optional display name

    Raises:
        MalformedTimeline: if the segments are unsorted, overlap, or fall
                           outside [0, duration]
    """

    def __init__(
        self,
        segments: Sequence[Segment],
        duration: float,
        pools: Optional[CommentaryPools] = None,
        rotation_quantum: float = DEFAULT_ROTATION_QUANTUM,
        title: Optional[str] = None,
    ):
        if duration <= 0:
            raise MalformedTimeline(f"Timeline duration must be positive. Got: {duration}")
        if rotation_quantum <= 0:
            raise ValueError(f"rotation_quantum must be positive. Got: {rotation_quantum}")

        self.segments: Tuple[Segment, ...] = tuple(segments)
        validate_segments(self.segments, duration)

        self.duration = float(duration)
        self.pools = pools or default_pools()
        self.rotation_quantum = float(rotation_quantum)
        self.title = title
        self._starts = [segment.start for segment in self.segments]

        self.status = TimelineStatus.STOPPED
        self._reset(0.0)

    @classmethod
    def from_recording(
        cls,
        recording: Recording,
        pools: Optional[CommentaryPools] = None,
        rotation_quantum: float = DEFAULT_ROTATION_QUANTUM,
    ) -> "PlaybackTimeline":
        return cls(
            recording.segments,
            recording.duration,
            pools=pools,
            rotation_quantum=rotation_quantum,
            title=recording.title,
        )

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def start(self) -> PlaybackState:
        """STOPPED -> PLAYING from the beginning. Ignored while already playing."""
        if self.status is TimelineStatus.PLAYING:
            logger.debug("start() ignored: timeline is already playing")
            return self.snapshot()
        self._reset(0.0)
        self.status = TimelineStatus.PLAYING
        logger.debug(f"Timeline started ({self.title or 'untitled'}, {self.duration:.1f}s)")
        return self.snapshot()

    def stop(self) -> PlaybackState:
        """PLAYING -> STOPPED. The state is kept as it was."""
        if self.status is TimelineStatus.PLAYING:
            self.status = TimelineStatus.STOPPED
            logger.debug(f"Timeline stopped at {self.current_time:.1f}s")
        return self.snapshot()

    def tick(self, delta: float) -> PlaybackState:
        """
        Advance current_time by delta seconds and recompute the derived state.

        A tick while stopped, or with a negative delta, changes nothing.
        """
        if self.status is not TimelineStatus.PLAYING:
            logger.debug("tick() ignored: timeline is stopped")
            return self.snapshot()
        if delta < 0:
            logger.warning(f"Negative tick delta {delta} ignored")
            return self.snapshot()

        self._move_to(min(self.current_time + delta, self.duration))
        self._stop_at_end()
        return self.snapshot()

    def seek(self, time: float) -> PlaybackState:
        """Jump to a time (clamped to [0, duration]). Ignored while stopped."""
        if self.status is not TimelineStatus.PLAYING:
            logger.debug("seek() ignored: timeline is stopped")
            return self.snapshot()
        self._move_to(min(max(time, 0.0), self.duration))
        self._stop_at_end()
        return self.snapshot()

    def next_segment(self) -> PlaybackState:
        """Jump just past the start of the following segment, if there is one."""
        if self.status is not TimelineStatus.PLAYING:
            logger.debug("next_segment() ignored: timeline is stopped")
            return self.snapshot()
        if self._segment_index is None:
            target = bisect.bisect_right(self._starts, self.current_time)
        else:
            target = self._segment_index + 1

        if target >= len(self.segments):
            logger.debug("next_segment(): already at the last segment")
            return self.snapshot()
        return self._jump_to_segment(target)

    def previous_segment(self) -> PlaybackState:
        """Jump just past the start of the preceding segment (or restart the first one)."""
        if self.status is not TimelineStatus.PLAYING:
            logger.debug("previous_segment() ignored: timeline is stopped")
            return self.snapshot()
        if not self.segments:
            return self.snapshot()
        if self._segment_index is None:
            target = bisect.bisect_right(self._starts, self.current_time) - 1
        else:
            target = self._segment_index - 1
        return self._jump_to_segment(max(target, 0))

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    def _reset(self, time: float) -> None:
        self.current_time = time
        self._segment_index: Optional[int] = None
        self._counters: Dict[str, int] = {name: 0 for name in ROTATING_POOLS}
        self._last_rotation_time = time
        self._update_segment()

    def _reset_rotation(self) -> None:
        self._counters = {name: 0 for name in ROTATING_POOLS}
        self._last_rotation_time = self.current_time

    def _stop_at_end(self) -> None:
        if self.current_time >= self.duration:
            self.status = TimelineStatus.STOPPED
            logger.debug("Timeline reached the end and stopped")

    def _jump_to_segment(self, index: int) -> PlaybackState:
        segment = self.segments[index]
        target = segment.start + SKIP_OFFSET
        if target >= segment.end:
            target = segment.start
        self._move_to(target)
        self._reset_rotation()
        return self.snapshot()

    def _move_to(self, time: float) -> None:
        self.current_time = time
        if not self._update_segment():
            self._rotate()

    def _find_segment(self, time: float) -> Optional[int]:
        """Index of the segment whose [start, end) holds time, or None."""
        index = bisect.bisect_right(self._starts, time) - 1
        if index >= 0 and self.segments[index].contains(time):
            return index
        return None

    def _update_segment(self) -> bool:
        """Recompute the active segment. Returns True if it changed."""
        index = self._find_segment(self.current_time)
        if index is None or index == self._segment_index:
            return False

        self._segment_index = index
        self._reset_rotation()
        segment = self.segments[index]
        logger.debug(f"Segment -> '{segment.id}' ({segment.section}) at {self.current_time:.1f}s")
        return True

    def _pool_sizes(self) -> Dict[str, int]:
        section_type = self.pools.section_type(self.segment)
        return {
            COMMENTARY: len(self.pools.commentary_for(section_type)),
            TECHNIQUE: len(self.pools.techniques),
            TIP: len(self.pools.tips),
        }

    def _rotate(self) -> None:
        """Advance every counter once per whole quantum elapsed since the last rotation."""
        if self._segment_index is None:
            return

        elapsed = self.current_time - self._last_rotation_time
        if elapsed < 0:
            # Seeked backwards inside the segment
            self._last_rotation_time = self.current_time
            return

        steps = math.floor(elapsed / self.rotation_quantum)
        if steps <= 0:
            return

        sizes = self._pool_sizes()
        for name in ROTATING_POOLS:
            self._counters[name] = (self._counters[name] + steps) % sizes[name]
        self._last_rotation_time += steps * self.rotation_quantum

    @property
    def segment(self) -> Optional[Segment]:
        if self._segment_index is None:
            return None
        return self.segments[self._segment_index]

    @property
    def chord_index(self) -> int:
        segment = self.segment
        if segment is None:
            return 0
        offset = max(0.0, self.current_time - segment.start)
        return math.floor(offset / segment.per_chord_duration) % len(segment.chords)

    @property
    def is_playing(self) -> bool:
        return self.status is TimelineStatus.PLAYING

    def snapshot(self) -> PlaybackState:
        segment = self.segment
        counters = dict(self._counters)

        if segment is None:
            return PlaybackState(
                status=self.status,
                current_time=self.current_time,
                duration=self.duration,
                segment=None,
                segment_index=None,
                chord_index=0,
                chord=None,
                previous_chord=None,
                next_chord=None,
                section_type=None,
                commentary_index=counters[COMMENTARY],
                commentary=None,
                technique_index=counters[TECHNIQUE],
                technique=None,
                tip_index=counters[TIP],
                tip=None,
            )

        chords = segment.chords
        index = self.chord_index
        section_type = self.pools.section_type(segment)
        commentary = self.pools.commentary_for(section_type)

        return PlaybackState(
            status=self.status,
            current_time=self.current_time,
            duration=self.duration,
            segment=segment,
            segment_index=self._segment_index,
            chord_index=index,
            chord=chords[index],
            previous_chord=chords[(index - 1) % len(chords)],
            next_chord=chords[(index + 1) % len(chords)],
            section_type=section_type,
            commentary_index=counters[COMMENTARY],
            commentary=commentary[counters[COMMENTARY] % len(commentary)],
            technique_index=counters[TECHNIQUE],
            technique=self.pools.techniques[counters[TECHNIQUE]],
            tip_index=counters[TIP],
            tip=self.pools.tips[counters[TIP]],
        )
