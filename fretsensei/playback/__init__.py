"""
Playback Subpackage

    - timeline.py: PlaybackTimeline state machine and PlaybackState snapshots
    - commentary.py: Section types and the rotating content pools
    - coach.py: Combines a timeline snapshot with voicing and annotation
"""

from fretsensei.playback.commentary import CommentaryPools, SectionType, section_type_for
from fretsensei.playback.timeline import PlaybackState, PlaybackTimeline, TimelineStatus
from fretsensei.playback.coach import Coach, CoachingFrame
