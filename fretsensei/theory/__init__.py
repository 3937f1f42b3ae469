"""
Theory Subpackage

This package contains the music-theory engine:
    - pitch.py: Pitch classes, note names and tunings
    - catalog.py: Chord and scale definitions and symbol lookup
    - fretboard.py: Role annotation of fretboard positions
    - voicings.py: Chord shapes by difficulty tier, with fallback

The tables behind the catalog and the voicings live in fretsensei.data,
whose schema needs pitch.py, so nothing is re-exported here.

Usage:
    from fretsensei.theory.fretboard import annotate
    from fretsensei.theory.voicings import get_voicing

    positions = annotate("Am", "A Minor Pentatonic")
    voicing = get_voicing("F", "easy")
"""
