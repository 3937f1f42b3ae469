"""
Render Module - Plain-text views of engine output

Turns annotated positions, voicings and playback snapshots into strings
for the terminal. Nothing here changes engine state.
"""

from typing import Dict, List, Optional

from fretsensei.data.schema import MAX_FRET, MUTED
from fretsensei.playback.timeline import PlaybackState
from fretsensei.theory.fretboard import FretPosition, Role
from fretsensei.theory.pitch import STANDARD_TUNING, Tuning, pitch_class_name
from fretsensei.theory.voicings import Voicing, VoicingMatch


ROLE_MARKS = {
    Role.ROOT: "R",
    Role.CHORD_TONE: "o",
    Role.SCALE_TONE: "·",
    Role.OPEN: "o",
    Role.MUTED: "x",
}

EMPTY_MARK = "-"
DIAGRAM_ROWS = 4
WIDTH = 73


def format_time(seconds: float) -> str:
    """
    Format seconds as MM:SS.

    >>> format_time(75.4)
    '01:15'
    """
    total = max(0, int(seconds))
    return f"{total // 60:02d}:{total % 60:02d}"


def render_fretboard(
    positions: List[FretPosition],
    tuning: Tuning = STANDARD_TUNING,
    max_fret: int = 15,
) -> str:
    """
    Draw the neck with the highest string on top, one column per fret.

        R = root, o = chord tone, · = scale tone
    """
    marks: Dict[tuple, str] = {(p.string, p.fret): ROLE_MARKS[p.role] for p in positions}
    max_fret = min(max(0, max_fret), MAX_FRET)

    lines = ["    " + " ".join(f"{fret:>2}" for fret in range(max_fret + 1))]
    for string_index in reversed(range(tuning.num_strings)):
        name = pitch_class_name(tuning.open_pitch_classes[string_index])
        cells = [f"{marks.get((string_index, fret), EMPTY_MARK):>2}" for fret in range(max_fret + 1)]
        lines.append(f"{name:<2} |" + " ".join(cells))
    lines.append("Legend: R = root, o = chord tone, · = scale tone")
    return "\n".join(lines)


def render_chord_diagram(voicing: Voicing, title: Optional[str] = None) -> str:
    """
    Draw a chord box, lowest string on the left.

         x o o o   o       <- muted / open markers
      1  | | | | ● |
      2  | | | ● | |
      ...
    """
    fretted = [f for f in voicing.frets if f > 0]
    top = min(fretted) if fretted and max(fretted) > DIAGRAM_ROWS else 1
    rows = max(DIAGRAM_ROWS, (max(fretted) - top + 1) if fretted else 0)

    lines = []
    if title:
        lines.append(title)

    def marker(fret: int) -> str:
        if fret == MUTED:
            return "x"
        if fret == 0:
            return "o"
        return " "

    lines.append("     " + " ".join(marker(f) for f in voicing.frets))
    for fret in range(top, top + rows):
        cells = ["●" if f == fret else "|" for f in voicing.frets]
        row = f"{fret:>3}  " + " ".join(cells)
        if fret in voicing.barres:
            row += "  (barre)"
        lines.append(row)
    lines.append("     " + " ".join(str(f) if f else " " for f in voicing.fingers))
    return "\n".join(lines)


def describe_match(match: VoicingMatch) -> str:
    """One line saying which voicing was used and why."""
    if match.is_exact:
        return f"✅ {match.symbol} ({match.tier.value})"
    return (
        f"⚠️  No {match.requested_tier.value} voicing for '{match.requested_symbol}'. "
        f"Showing {match.symbol} ({match.tier.value}) via {match.resolution.value}"
    )


def format_state_line(state: PlaybackState) -> str:
    """One line per chord change for the play command."""
    if state.segment is None:
        return f"[{format_time(state.current_time)}] (waiting for the first segment)"
    return (
        f"[{format_time(state.current_time)}] {state.section:<14} "
        f"{state.previous_chord:>5} → {state.chord:<5} → {state.next_chord:<5} "
        f"| {state.scale or '-'}"
    )


def box(title: str, body: List[str]) -> str:
    """Wrap lines in a titled box."""
    lines = ["┌" + "─" * WIDTH + "┐", "│" + f" {title} ".center(WIDTH) + "│", "├" + "─" * WIDTH + "┤"]
    for line in body:
        lines.append("│  " + line.ljust(WIDTH - 2) + "│")
    lines.append("└" + "─" * WIDTH + "┘")
    return "\n".join(lines)
