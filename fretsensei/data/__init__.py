"""
Data Subpackage

    - schema.py: Pydantic models for every bundled table
    - loader.py: YAML loading, validation and settings merge
    - *.yaml: tunings, chords, scales, voicings, recordings, commentary, settings
"""
