"""
Command Line Interface for Fret Sensei
======================================

Look at chords and scales on the neck, pull up a voicing for your level,
or let a practice recording play through its analysed segments.

Usage Examples:
    # Chord tones of E7 against E Mixolydian, up to fret 12
    fretsensei annotate E7 --scale "E Mixolydian" --max-fret 12

    # An easy C chord (falls back to another tier if needed)
    fretsensei voicing C --tier easy

    # Walk through a recording, one line per chord change
    fretsensei play gravity --tier hard --step 0.5

    # What recordings are bundled?
    fretsensei recordings

    # Verbose mode - see engine debug logs
    fretsensei --verbose play slow-dancing
"""

import argparse
import logging
import sys
from typing import List, Optional

from fretsensei.app.render import (
    box,
    describe_match,
    format_state_line,
    format_time,
    render_chord_diagram,
    render_fretboard,
)
from fretsensei.data.loader import get_recording, get_tuning, load_recordings, load_settings
from fretsensei.data.schema import EngineSettings
from fretsensei.errors import ConfigError, MalformedTimeline, NotFound
from fretsensei.playback.coach import Coach
from fretsensei.playback.commentary import default_pools
from fretsensei.playback.timeline import PlaybackTimeline
from fretsensei.theory.catalog import default_catalog
from fretsensei.theory.fretboard import FretboardAnnotator
from fretsensei.theory.voicings import TIER_ALIASES, default_library
from fretsensei.utils.logger import setup_logger

EXIT_OK = 0
EXIT_BAD_INPUT = 2

logger = logging.getLogger(__name__)


# =============================================================================
# PART 1: ARGUMENT PARSER SETUP
# =============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser object
    """
    parser = argparse.ArgumentParser(
        prog="fretsensei",
        description="""
🎸 Fret Sensei - chord and scale maps for the guitar neck, voicings by
difficulty, and a coaching playback of analysed recordings.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # ─────────────────────────────────────────────────────────────────────────
    # Global options
    # ─────────────────────────────────────────────────────────────────────────
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show engine debug logs"
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file overriding the engine settings"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # ─────────────────────────────────────────────────────────────────────────
    # annotate
    # ─────────────────────────────────────────────────────────────────────────
    annotate = subparsers.add_parser("annotate", help="Show chord and scale tones on the neck")
    annotate.add_argument("chord", help='Chord symbol, e.g. "E7" or "F#m"')
    annotate.add_argument("--scale", default=None, help='Scale, e.g. "E Mixolydian"')
    annotate.add_argument("--tuning", default=None, help="Tuning name (default from settings)")
    annotate.add_argument("--max-fret", type=int, default=None, help="Highest fret to show")

    # ─────────────────────────────────────────────────────────────────────────
    # voicing
    # ─────────────────────────────────────────────────────────────────────────
    voicing = subparsers.add_parser("voicing", help="Show a chord shape for a difficulty tier")
    voicing.add_argument("chord", help='Chord symbol, e.g. "C" or "Bm"')
    voicing.add_argument("--tier", default=None, help="easy, medium or hard")

    # ─────────────────────────────────────────────────────────────────────────
    # play
    # ─────────────────────────────────────────────────────────────────────────
    play = subparsers.add_parser("play", help="Play through a recording's segments")
    play.add_argument("recording", help="Recording id (see `fretsensei recordings`)")
    play.add_argument("--tier", default=None, help="easy, medium or hard")
    play.add_argument("--step", type=float, default=None, help="Seconds per simulated tick")
    play.add_argument("--limit", type=int, default=None, help="Stop after this many chord changes")

    subparsers.add_parser("recordings", help="List the bundled recordings")

    return parser


# =============================================================================
# PART 2: COMMANDS
# =============================================================================

def check_tier(value: Optional[str]) -> bool:
    if value is None or value.strip().lower() in TIER_ALIASES:
        return True
    print(f"❌ Unknown tier '{value}'. Use easy, medium or hard.")
    return False


def run_annotate(args: argparse.Namespace, settings: EngineSettings) -> int:
    catalog = default_catalog()
    tuning = get_tuning(args.tuning or settings.default_tuning)
    max_fret = settings.max_fret if args.max_fret is None else args.max_fret

    chord = catalog.lookup_chord(args.chord)
    scale = catalog.lookup_scale(args.scale) if args.scale else None

    annotator = FretboardAnnotator(catalog)
    positions = annotator.annotate_sets(chord, scale, tuning, max_fret)

    title = chord.name + (f" over {scale.name}" if scale else "")
    body = [
        f"🎹 Chord tones: {' '.join(chord.note_names())}",
        f"🎵 Scale tones: {' '.join(scale.note_names()) if scale else '-'}",
        f"🎸 Tuning:      {tuning}",
    ]
    print(box(title.upper(), body))
    print()
    print(render_fretboard(positions, tuning, max_fret))
    return EXIT_OK


def run_voicing(args: argparse.Namespace, settings: EngineSettings) -> int:
    if not check_tier(args.tier):
        return EXIT_BAD_INPUT

    match = default_library().resolve(args.chord, args.tier or settings.default_tier)
    print(render_chord_diagram(match.voicing, title=f"{match.symbol} ({match.tier.value})"))
    print()
    print(describe_match(match))
    return EXIT_OK


def run_play(args: argparse.Namespace, settings: EngineSettings) -> int:
    if not check_tier(args.tier):
        return EXIT_BAD_INPUT
    step = settings.tick_interval if args.step is None else args.step
    if step <= 0:
        print(f"❌ --step must be positive (got {step})")
        return EXIT_BAD_INPUT

    recording = get_recording(args.recording)
    timeline = PlaybackTimeline.from_recording(
        recording,
        pools=default_pools(settings.default_section),
        rotation_quantum=settings.rotation_quantum,
    )
    coach = Coach(
        timeline,
        tier=args.tier or settings.default_tier,
        tuning=get_tuning(settings.default_tuning),
        max_fret=settings.max_fret,
    )

    artist = f" - {recording.artist}" if recording.artist else ""
    print(f"▶️  {recording.title}{artist} ({format_time(recording.duration)})")
    print("─" * 75)

    frame = coach.start()
    last_chord = None
    last_segment = None
    changes = 0
    while True:
        state = frame.state
        position = (state.segment_index, state.chord_index)
        if state.segment is not None and position != last_chord:
            if state.segment_index != last_segment:
                print()
                print(f"🎼 {state.section} [{state.section_type}]  {state.scale or ''}")
                print(f"   💬 {state.commentary}")
                print(f"   🛠️  {state.technique}")
                print(f"   💡 {state.tip}")
                last_segment = state.segment_index

            line = format_state_line(state)
            if frame.voicing is not None and frame.voicing.is_fallback:
                line += f"  (voicing: {frame.voicing.symbol} {frame.voicing.tier.value})"
            print(line)

            last_chord = position
            changes += 1
            if args.limit is not None and changes >= args.limit:
                coach.stop()
                break

        if not timeline.is_playing:
            break
        frame = coach.tick(step)

    print("─" * 75)
    print(f"⏹️  Stopped at {format_time(timeline.current_time)}")
    return EXIT_OK


def run_recordings(args: argparse.Namespace, settings: EngineSettings) -> int:
    print("Bundled recordings:")
    for recording in load_recordings().values():
        artist = f" - {recording.artist}" if recording.artist else ""
        print(
            f"  • {recording.id:<16} {recording.title}{artist} "
            f"({format_time(recording.duration)}, {len(recording.segments)} segments)"
        )
    return EXIT_OK


COMMANDS = {
    "annotate": run_annotate,
    "voicing": run_voicing,
    "play": run_play,
    "recordings": run_recordings,
}


# =============================================================================
# PART 3: MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        0 on success, 2 on unknown or malformed input
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logger(logging.DEBUG if args.verbose else logging.WARNING)

    if not args.command:
        parser.print_help()
        return EXIT_BAD_INPUT

    try:
        settings = load_settings(args.config)
        logger.debug(f"Settings: {settings.model_dump()}")
        return COMMANDS[args.command](args, settings)
    except NotFound as e:
        print(f"❌ {e}")
        return EXIT_BAD_INPUT
    except (ConfigError, MalformedTimeline) as e:
        print(f"❌ Invalid data: {e}")
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
