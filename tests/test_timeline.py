"""
Tests for the Playback Timeline State Machine

Run with: pytest tests/test_timeline.py -v
"""

import pytest

from fretsensei.data.loader import get_recording
from fretsensei.data.schema import Segment
from fretsensei.errors import MalformedTimeline
from fretsensei.playback.commentary import CommentaryPools
from fretsensei.playback.timeline import PlaybackTimeline, TimelineStatus


def make_segment(id, start, end, chords=("A", "B", "C"), per_chord_duration=10, section="Verse", **kwargs):
    return Segment(
        id=id,
        start=start,
        end=end,
        section=section,
        chords=chords,
        per_chord_duration=per_chord_duration,
        **kwargs,
    )


@pytest.fixture
def pools():
    return CommentaryPools(
        sections={
            "verse": ("v0", "v1", "v2"),
            "chorus": ("c0", "c1"),
            "solo": ("s0", "s1", "s2", "s3"),
        },
        techniques=("t0", "t1", "t2", "t3", "t4"),
        tips=("p0", "p1"),
    )


@pytest.fixture
def timeline(pools):
    segments = [
        make_segment("one", 10, 60),
        make_segment("two", 60, 90, chords=("D", "E"), per_chord_duration=5, section="Chorus"),
    ]
    return PlaybackTimeline(segments, duration=100, pools=pools, rotation_quantum=5)


class TestConstruction:
    """Malformed timelines fail fast."""

    def test_overlapping_segments(self):
        segments = [make_segment("a", 0, 30), make_segment("b", 20, 40)]
        with pytest.raises(MalformedTimeline):
            PlaybackTimeline(segments, duration=60)

    def test_unsorted_segments(self):
        segments = [make_segment("b", 30, 40), make_segment("a", 0, 30)]
        with pytest.raises(MalformedTimeline):
            PlaybackTimeline(segments, duration=60)

    def test_empty_range(self):
        with pytest.raises(MalformedTimeline):
            PlaybackTimeline([make_segment("a", 10, 10)], duration=60)

    def test_segment_past_duration(self):
        with pytest.raises(MalformedTimeline):
            PlaybackTimeline([make_segment("a", 0, 70)], duration=60)

    def test_duplicate_ids(self):
        with pytest.raises(MalformedTimeline):
            PlaybackTimeline([make_segment("a", 0, 10), make_segment("a", 10, 20)], duration=60)

    def test_non_positive_duration(self):
        with pytest.raises(MalformedTimeline):
            PlaybackTimeline([], duration=0)

    def test_adjacent_segments_are_fine(self, pools):
        timeline = PlaybackTimeline(
            [make_segment("a", 0, 30), make_segment("b", 30, 60)], duration=60, pools=pools
        )
        assert timeline.status is TimelineStatus.STOPPED

    def test_from_recording(self):
        timeline = PlaybackTimeline.from_recording(get_recording("gravity"))
        assert timeline.title == "Gravity"
        assert len(timeline.segments) == 6


class TestTransitions:
    """STOPPED <-> PLAYING and ticking."""

    def test_starts_stopped(self, timeline):
        state = timeline.snapshot()
        assert state.status is TimelineStatus.STOPPED
        assert state.current_time == 0

    def test_start_resets(self, timeline):
        timeline.start()
        timeline.tick(30)
        timeline.stop()
        state = timeline.start()
        assert state.is_playing
        assert state.current_time == 0
        assert state.chord_index == 0

    def test_tick_while_stopped_is_ignored(self, timeline):
        state = timeline.tick(5)
        assert state.current_time == 0

    def test_stop_freezes_state(self, timeline):
        timeline.start()
        timeline.tick(25)
        frozen = timeline.stop()
        after = timeline.tick(10)
        assert after == frozen
        assert after.status is TimelineStatus.STOPPED

    def test_negative_delta_is_ignored(self, timeline):
        timeline.start()
        timeline.tick(12)
        assert timeline.tick(-5).current_time == 12

    def test_auto_stop_at_duration(self, timeline):
        timeline.start()
        state = timeline.tick(150)
        assert state.current_time == 100
        assert state.status is TimelineStatus.STOPPED
        assert state.progress == 1.0

    def test_progress(self, timeline):
        timeline.start()
        assert timeline.tick(25).progress == pytest.approx(0.25)


class TestSegmentsAndChords:
    """Segment lookup and chord cycling."""

    def test_before_first_segment(self, timeline):
        state = timeline.start()
        assert state.segment is None
        assert state.chord is None
        assert state.commentary is None

    def test_chord_index_example(self, timeline):
        """Chords [A, B, C], 10s each, segment starting at 10: t = 10 + 25 gives C."""
        timeline.start()
        state = timeline.tick(35)
        assert state.segment.id == "one"
        assert state.chord_index == 2
        assert state.chord == "C"
        assert state.previous_chord == "B"
        assert state.next_chord == "A"

    def test_progression_wraps(self, timeline):
        timeline.start()
        assert timeline.tick(10 + 31).chord == "A"

    def test_per_segment_chord_duration(self, timeline):
        timeline.start()
        state = timeline.tick(67)
        assert state.segment.id == "two"
        assert state.chord == "E"

    def test_gap_keeps_previous_segment(self, timeline):
        timeline.start()
        timeline.tick(70)
        state = timeline.tick(25)
        assert state.segment.id == "two"
        assert state.segment_index == 1

    def test_segment_start_is_inclusive(self, timeline):
        timeline.start()
        assert timeline.tick(60).segment.id == "two"

    def test_section_type(self, timeline):
        timeline.start()
        assert timeline.tick(15).section_type == "verse"
        assert timeline.tick(50).section_type == "chorus"


class TestRotation:
    """Content counters advance once per quantum."""

    def test_one_step_per_quantum(self, timeline):
        timeline.start()
        state = timeline.tick(10)
        assert state.commentary_index == 0
        state = timeline.tick(4.5)
        assert state.commentary_index == 0
        state = timeline.tick(0.5)
        assert (state.commentary_index, state.technique_index, state.tip_index) == (1, 1, 1)

    def test_each_pool_wraps_at_its_own_size(self, timeline):
        timeline.start()
        timeline.tick(10)
        state = timeline.tick(10)
        assert state.commentary_index == 2
        assert state.technique_index == 2
        assert state.tip_index == 0
        assert state.tip == "p0"

    def test_full_cycle_before_repeating(self, timeline):
        timeline.start()
        timeline.tick(10)
        seen = []
        for _ in range(15):
            state = timeline.tick(1)
            seen.append(state.commentary)
        assert set(seen) == {"v0", "v1", "v2"}

    def test_large_tick_advances_several_steps(self, timeline):
        timeline.start()
        timeline.tick(10)
        state = timeline.tick(12)
        assert state.technique_index == 2

    def test_segment_change_resets_counters(self, timeline):
        timeline.start()
        timeline.tick(10)
        timeline.tick(47)
        state = timeline.tick(4)
        assert state.segment.id == "two"
        assert (state.commentary_index, state.technique_index, state.tip_index) == (0, 0, 0)
        assert state.commentary == "c0"


class TestNavigation:
    """seek and segment skipping."""

    def test_seek_keeps_playing(self, timeline):
        timeline.start()
        state = timeline.seek(35)
        assert state.status is TimelineStatus.PLAYING
        assert state.chord == "C"

    def test_seek_is_clamped(self, timeline):
        timeline.start()
        assert timeline.seek(-5).current_time == 0
        state = timeline.seek(500)
        assert state.current_time == 100
        assert state.status is TimelineStatus.STOPPED

    def test_stopped_timeline_is_frozen(self, timeline):
        timeline.start()
        timeline.tick(20)
        frozen = timeline.stop()
        assert timeline.seek(5) == frozen
        assert timeline.next_segment() == frozen
        assert timeline.previous_segment() == frozen
        assert timeline.current_time == 20

    def test_navigation_before_start_is_ignored(self, timeline):
        assert timeline.seek(35).current_time == 0
        assert timeline.next_segment().segment is None

    def test_next_segment(self, timeline):
        timeline.start()
        state = timeline.next_segment()
        assert state.segment.id == "one"
        assert state.current_time == 11
        state = timeline.next_segment()
        assert state.segment.id == "two"
        assert state.current_time == 61

    def test_next_segment_at_end_stays(self, timeline):
        timeline.start()
        timeline.seek(70)
        assert timeline.next_segment().current_time == 70

    def test_previous_segment(self, timeline):
        timeline.start()
        timeline.seek(70)
        state = timeline.previous_segment()
        assert state.segment.id == "one"
        assert state.current_time == 11

    def test_skip_resets_rotation(self, timeline):
        timeline.start()
        timeline.tick(10)
        timeline.tick(20)
        assert timeline.snapshot().commentary_index != 0
        state = timeline.previous_segment()
        assert state.segment.id == "one"
        assert state.commentary_index == 0


class TestBundledRecordings:
    def test_gravity_intro(self):
        timeline = PlaybackTimeline.from_recording(get_recording("gravity"))
        timeline.start()
        state = timeline.tick(25)
        assert state.chord == "D7"
        assert state.section_type == "intro"

    def test_unknown_label_uses_solo_pool(self):
        timeline = PlaybackTimeline.from_recording(get_recording("out-of-my-mind"))
        timeline.start()
        state = timeline.seek(95)
        assert state.section == "Interlude"
        assert state.section_type == "solo"
        assert state.commentary


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
