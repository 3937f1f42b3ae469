"""
Test Suite - Basic Sanity Tests

These tests verify that the package structure is correct,
that basic imports work and that the bundled tables load.

Run with: pytest tests/test_sanity.py -v
"""

import pytest


class TestPackageStructure:
    """Test that all packages can be imported."""

    def test_import_fretsensei(self):
        """Test that the main package can be imported."""
        import fretsensei
        assert hasattr(fretsensei, "__version__")
        assert fretsensei.__version__ == "0.1.0"

    def test_import_theory_package(self):
        from fretsensei.theory import catalog, fretboard, pitch, voicings
        assert hasattr(fretboard, "annotate")
        assert hasattr(voicings, "get_voicing")

    def test_import_playback_package(self):
        import fretsensei.playback
        assert hasattr(fretsensei.playback, "PlaybackTimeline")

    def test_import_data_package(self):
        import fretsensei.data

    def test_import_app_package(self):
        import fretsensei.app.cli


class TestBundledTables:
    """Every bundled YAML table loads and validates."""

    def test_tables_load(self):
        from fretsensei.data import loader

        assert "standard" in loader.load_tunings()
        assert "" in loader.load_chord_qualities()
        assert "mixolydian" in loader.load_scale_types()
        assert "C" in loader.load_voicing_table()
        assert "gravity" in loader.load_recordings()
        assert loader.load_commentary().techniques

    def test_data_files_exist(self):
        from fretsensei.data.loader import DATA_DIR

        for name in ["tunings", "chords", "scales", "voicings", "recordings", "commentary", "settings"]:
            assert (DATA_DIR / f"{name}.yaml").exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
