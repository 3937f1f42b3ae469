"""
App Subpackage

    - render.py: Plain-text fretboard, chord diagrams and playback lines
    - cli.py: The `fretsensei` command line
"""
