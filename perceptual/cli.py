"""Perceptual volume command line.

Usage:
    perceptual to-amp 0.5 75% unity     Control values -> amplitudes
    perceptual to-perc 0.05 1.5         Amplitudes -> control values
    perceptual table --steps 20         Print the curve
    perceptual apply in.wav out.wav --level 50%
                                        Scale an audio file
    perceptual repl                     Interactive slash commands
    perceptual tui                      Textual terminal UI

Global options (before the subcommand):
    --range DB          Dynamic range of levels 0-1 (default from preferences)
    --boost-range DB    Dynamic range of levels 1-2
    --config PATH       Preferences JSON file
    -v, --verbose       Debug logging
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .commands import build_command_table, cmd_amp, cmd_perc, cmd_table, execute
from .config import load_preferences
from .scale import parse_level
from .volume import VolumeControl

logger = logging.getLogger(__name__)


def _level(text: str) -> float:
    """argparse type for levels: 0.5, 50% or a preset name."""
    value = parse_level(text)
    if value is None:
        raise argparse.ArgumentTypeError(f"invalid level '{text}'")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="perceptual",
        description="A smarter volume slider scale",
        epilog="Levels may be fractions (0.5), percents (50%) or presets (quiet, unity, boost).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--range", dest="range_db", type=float, default=None,
                        help="Dynamic range in dB for levels 0-1")
    parser.add_argument("--boost-range", dest="boost_range_db", type=float, default=None,
                        help="Dynamic range in dB for levels 1-2")
    parser.add_argument("--config", type=Path, default=None, help="Preferences JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("to-amp", help="Convert control values to amplitudes")
    p.add_argument("values", nargs="+")

    p = sub.add_parser("to-perc", help="Convert amplitudes to control values")
    p.add_argument("values", nargs="+")

    p = sub.add_parser("table", help="Print the curve")
    p.add_argument("--steps", type=int, default=10)

    p = sub.add_parser("apply", help="Scale an audio file")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    p.add_argument("--level", type=_level, default=None,
                   help="Level to apply (default from preferences)")
    p.add_argument("--fade-to", type=_level, default=None,
                   help="Fade from --level to this level across the file")

    sub.add_parser("repl", help="Interactive slash commands")
    sub.add_parser("tui", help="Textual terminal UI")
    return parser


def _make_control(args: argparse.Namespace) -> VolumeControl:
    prefs = load_preferences(args.config)
    control = VolumeControl.from_preferences(prefs)
    if args.range_db is not None:
        control = VolumeControl(args.range_db, control.boost_range_db, control.level,
                                control.step, control.allow_boost)
    if args.boost_range_db is not None:
        control = VolumeControl(control.range_db, args.boost_range_db, control.level,
                                control.step, control.allow_boost)
    return control


def _emit(result: str) -> int:
    if result.startswith("ERROR:"):
        print(result, file=sys.stderr)
        return 1
    print(result)
    return 0


def run_repl(control: VolumeControl) -> int:
    commands = build_command_table()
    print("Perceptual volume REPL. /help lists commands, /q quits.")
    while True:
        try:
            line = input("vol> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not line:
            continue
        if line.lower() in ("/q", "/quit", "/exit"):
            return 0
        print(execute(control, line, commands))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        control = _make_control(args)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.command == "to-amp":
        return _emit(cmd_amp(control, args.values))
    if args.command == "to-perc":
        return _emit(cmd_perc(control, args.values))
    if args.command == "table":
        return _emit(cmd_table(control, [str(args.steps)]))
    if args.command == "apply":
        from .audio import apply_to_file
        if args.level is not None:
            control.set_level(args.level)
        try:
            frames = apply_to_file(args.input, args.output, control, args.fade_to)
        except (ValueError, RuntimeError, OSError) as e:
            # soundfile raises RuntimeError (LibsndfileError) for unreadable files
            print(f"ERROR: {e}", file=sys.stderr)
            return 1
        print(f"Wrote {frames} frames to {args.output}")
        return 0
    if args.command == "repl":
        return run_repl(control)
    if args.command == "tui":
        from .tui import main as tui_main
        tui_main(control)
        return 0
    parser.error(f"unknown command {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
