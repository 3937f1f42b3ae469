"""
Fret Sensei - Package

A music-theory engine for guitar practice: pitch-class arithmetic, chord
and scale membership, fretboard annotation, difficulty-tiered voicings and
a coaching playback timeline that walks through analysed recordings.

Subpackages:
    - fretsensei.theory: Pitch classes, tunings, chord/scale catalog,
                         fretboard annotation and voicings
    - fretsensei.playback: Playback timeline, commentary pools and the coach
    - fretsensei.data: Schemas and loaders for the bundled YAML tables
    - fretsensei.app: Text rendering and the command line interface

Example usage:
    from fretsensei.theory.fretboard import annotate
    from fretsensei.theory.voicings import get_voicing

    positions = annotate("E7", "E Mixolydian", max_fret=12)
    voicing = get_voicing("C", "easy")
    print(voicing.frets)   # (-1, -1, -1, 0, 1, 0)
"""

__version__ = "0.1.0"
