"""
Test Package

Contains unit tests for all modules.
Run with: pytest tests/ -v

Test files follow the pattern:
    test_<module_name>.py

Example:
    tests/test_pitch.py       - Tests for fretsensei/theory/pitch.py
    tests/test_timeline.py    - Tests for fretsensei/playback/timeline.py
"""
