"""
Tests for the Command Line Interface and text rendering

Run with: pytest tests/test_cli.py -v
"""

import pytest

from fretsensei.app.cli import main
from fretsensei.app.render import format_time, render_chord_diagram, render_fretboard
from fretsensei.theory.fretboard import annotate
from fretsensei.theory.voicings import get_voicing


class TestRender:
    @pytest.mark.parametrize("seconds,expected", [
        (0, "00:00"), (59.9, "00:59"), (75.4, "01:15"), (249, "04:09"), (-3, "00:00"),
    ])
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected

    def test_fretboard_has_one_row_per_string(self):
        text = render_fretboard(annotate("E7", "E Mixolydian", max_fret=5), max_fret=5)
        lines = text.splitlines()
        assert len(lines) == 8
        assert lines[1].startswith("E ")
        assert lines[6].startswith("E ")
        assert " R" in lines[6]

    def test_fretboard_is_clamped_to_the_neck(self):
        text = render_fretboard(annotate("C", max_fret=30), max_fret=30)
        header = text.splitlines()[0].split()
        assert header[-1] == "24"
        assert len(header) == 25

    def test_chord_diagram_marks_barre(self):
        text = render_chord_diagram(get_voicing("C", "hard"), title="C (hard)")
        assert text.splitlines()[0] == "C (hard)"
        assert "(barre)" in text
        assert "  8  " in text

    def test_chord_diagram_open_and_muted(self):
        text = render_chord_diagram(get_voicing("C", "easy"))
        assert text.splitlines()[0].strip() == "x x x o   o"


class TestCommands:
    def test_annotate(self, capsys):
        assert main(["annotate", "E7", "--scale", "E Mixolydian", "--max-fret", "12"]) == 0
        out = capsys.readouterr().out
        assert "E DOMINANT SEVENTH" in out
        assert "E G# B D" in out

    def test_annotate_unknown_chord(self, capsys):
        assert main(["annotate", "H7"]) == 2
        assert "Unknown chord" in capsys.readouterr().out

    def test_annotate_unknown_tuning(self, capsys):
        assert main(["annotate", "C", "--tuning", "nashville"]) == 2

    def test_voicing_exact(self, capsys):
        assert main(["voicing", "C", "--tier", "easy"]) == 0
        assert "✅ C (easy)" in capsys.readouterr().out

    def test_voicing_fallback(self, capsys):
        assert main(["voicing", "Xyz", "--tier", "easy"]) == 0
        out = capsys.readouterr().out
        assert "default" in out
        assert "E (easy)" in out

    def test_voicing_bad_tier(self, capsys):
        assert main(["voicing", "C", "--tier", "expert"]) == 2

    def test_play_with_limit(self, capsys):
        assert main(["play", "gravity", "--limit", "3", "--step", "1"]) == 0
        out = capsys.readouterr().out
        assert "Gravity" in out
        assert "Introduction" in out
        assert "Stopped at 00:20" in out

    def test_play_unknown_recording(self, capsys):
        assert main(["play", "stairway"]) == 2
        assert "Unknown recording" in capsys.readouterr().out

    def test_play_bad_step(self, capsys):
        assert main(["play", "gravity", "--step", "0"]) == 2

    def test_recordings(self, capsys):
        assert main(["recordings"]) == 0
        out = capsys.readouterr().out
        assert "gravity" in out
        assert "out-of-my-mind" in out

    def test_config_override(self, tmp_path, capsys):
        path = tmp_path / "settings.yaml"
        path.write_text("default_tier: hard\n", encoding="utf-8")
        assert main(["--config", str(path), "voicing", "C"]) == 0
        assert "C (hard)" in capsys.readouterr().out

    def test_bad_config(self, tmp_path, capsys):
        path = tmp_path / "settings.yaml"
        path.write_text("max_fret: -4\n", encoding="utf-8")
        assert main(["--config", str(path), "recordings"]) == 2

    def test_no_command(self, capsys):
        assert main([]) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
