"""
Slash commands for the perceptual volume scale.

Each command takes the active VolumeControl and a list of string
arguments and returns a string for display.  Bad input never raises;
it comes back as an "ERROR: ..." string.

Supported commands:

  /amp x...        Control value(s) -> amplitude
  /perc x...       Amplitude(s) -> control value
  /db x            Control value -> dB (or /db set <db> to set the level)
  /vol [x]         Show or set the level (0.5, 50%, or a preset name)
  /up [n]          Move the level up n steps (default 1)
  /down [n]        Move the level down n steps (default 1)
  /mute            Mute (remembers the level)
  /unmute          Restore the level from before /mute
  /table [n]       Print the curve at n+1 evenly spaced levels
  /range [db]      Show or set the dynamic range
  /boost [db|off|on]
                   Show or set the boost range, or disable/enable boost
  /status          Show the current level
  /help            List commands

Values may be fractions on the 0-2 control scale (0.5), percents
(50%) or preset names (quiet, half, unity, boost, max).
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List

import numpy as np

from .scale import (
    LEVEL_PRESETS,
    MAX_LEVEL,
    format_db,
    format_level,
    parse_level,
)
from .volume import VolumeControl, VolumeCurve

logger = logging.getLogger(__name__)

Command = Callable[[VolumeControl, List[str]], str]

DEFAULT_TABLE_STEPS = 10


def _parse_values(args: List[str], op_name: str) -> List[float]:
    """Parse every argument as a level; raise ValueError on the first bad one."""
    if not args:
        raise ValueError(f"/{op_name} requires at least 1 argument")
    values = []
    for token in args:
        value = parse_level(token)
        if value is None:
            raise ValueError(f"invalid value '{token}'")
        values.append(value)
    return values


def _parse_count(args: List[str], default: int = 1) -> int:
    if not args:
        return default
    try:
        return int(args[0])
    except ValueError:
        raise ValueError(f"invalid count '{args[0]}'") from None


def _guarded(func: Command) -> Command:
    """Turn ValueError from a command into an ERROR string."""
    def wrapper(control: VolumeControl, args: List[str]) -> str:
        try:
            return func(control, args)
        except ValueError as exc:
            logger.debug("command %s failed: %s", func.__name__, exc)
            return f"ERROR: {exc}"
    wrapper.__name__ = func.__name__
    wrapper.__doc__ = func.__doc__
    return wrapper


# ============================================================================
# CONVERSIONS
# ============================================================================

@_guarded
def cmd_amp(control: VolumeControl, args: List[str]) -> str:
    """Convert control values to amplitudes.

    Usage: /amp 0.5 75% unity
    """
    values = _parse_values(args, 'amp')
    amps = control.curve.to_amplitude(np.array(values))
    return "\n".join(f"{format_level(v)} -> {a:.6f}" for v, a in zip(values, amps))


@_guarded
def cmd_perc(control: VolumeControl, args: List[str]) -> str:
    """Convert amplitudes to control values.

    Usage: /perc 0.05 1 1.5
    """
    values = _parse_values(args, 'perc')
    levels = control.curve.to_perceptual(np.array(values))
    return "\n".join(f"{a:.6f} -> {p:.6f} ({format_level(p)})" for a, p in zip(values, levels))


@_guarded
def cmd_db(control: VolumeControl, args: List[str]) -> str:
    """Show the dB value of a level, or set the level in dB.

    Usage: /db 0.5
           /db set -20
    """
    if args and args[0].lower() == 'set':
        if len(args) < 2:
            return "ERROR: /db set requires a dB value"
        try:
            db = float(args[1])
        except ValueError:
            return f"ERROR: invalid dB value '{args[1]}'"
        control.set_db(db)
        return control.status()
    values = _parse_values(args, 'db')
    return "\n".join(f"{format_level(v)} -> {format_db(control.curve.to_db(v))}" for v in values)


# ============================================================================
# LEVEL
# ============================================================================

@_guarded
def cmd_vol(control: VolumeControl, args: List[str]) -> str:
    """Show or set the level.

    Usage: /vol
           /vol 75%
    """
    if not args:
        return control.status()
    level = _parse_values(args[:1], 'vol')[0]
    control.set_level(level)
    return control.status()


@_guarded
def cmd_up(control: VolumeControl, args: List[str]) -> str:
    """Usage: /up [n]"""
    control.nudge(_parse_count(args))
    return control.status()


@_guarded
def cmd_down(control: VolumeControl, args: List[str]) -> str:
    """Usage: /down [n]"""
    control.nudge(-_parse_count(args))
    return control.status()


def cmd_mute(control: VolumeControl, args: List[str]) -> str:
    control.mute()
    return control.status()


def cmd_unmute(control: VolumeControl, args: List[str]) -> str:
    control.unmute()
    return control.status()


def cmd_status(control: VolumeControl, args: List[str]) -> str:
    return control.status()


# ============================================================================
# CURVE SETTINGS
# ============================================================================

@_guarded
def cmd_table(control: VolumeControl, args: List[str]) -> str:
    """Print the curve at evenly spaced levels.

    Usage: /table [steps]
    """
    steps = _parse_count(args, DEFAULT_TABLE_STEPS)
    if steps < 1:
        return "ERROR: steps must be >= 1"
    top = control.max_level
    levels = np.linspace(0.0, top, steps + 1)
    amps = control.curve.to_amplitude(levels)
    lines = [f"{'level':>8} {'amplitude':>10} {'gain':>10}"]
    for level, amp in zip(levels, amps):
        db = control.curve.to_db(level)
        lines.append(f"{format_level(level):>8} {amp:>10.4f} {format_db(db):>10}")
    return "\n".join(lines)


@_guarded
def cmd_range(control: VolumeControl, args: List[str]) -> str:
    """Show or set the dynamic range in dB.

    Usage: /range [db]
    """
    if args:
        try:
            value = float(args[0])
        except ValueError:
            return f"ERROR: invalid range '{args[0]}'"
        # Validate before mutating the control
        VolumeCurve(value, control.boost_range_db)
        control.range_db = value
    return f"Range: {control.range_db:g} dB"


@_guarded
def cmd_boost(control: VolumeControl, args: List[str]) -> str:
    """Show or set the boost range in dB, or turn boost off/on.

    Usage: /boost [db|off|on]
    """
    if args:
        arg = args[0].lower()
        if arg == 'off':
            control.allow_boost = False
            if control.level > control.max_level:
                control.set_level(control.max_level)
        elif arg == 'on':
            control.allow_boost = True
        else:
            try:
                value = float(arg)
            except ValueError:
                return f"ERROR: invalid boost range '{args[0]}'"
            VolumeCurve(control.range_db, value)
            control.boost_range_db = value
    state = "on" if control.allow_boost else "off"
    return f"Boost: {control.boost_range_db:g} dB ({state})"


def cmd_help(control: VolumeControl, args: List[str]) -> str:
    presets = ", ".join(sorted(LEVEL_PRESETS))
    return (__doc__.strip() + f"\n\nPresets: {presets}\n"
            f"Levels above 100% boost the gain (max {MAX_LEVEL * 100:.0f}%).")


# ============================================================================
# DISPATCH
# ============================================================================

def build_command_table() -> Dict[str, Command]:
    """Collect all command functions in this module, keyed by name."""
    commands: Dict[str, Command] = {}
    for name, obj in globals().items():
        if name.startswith('cmd_') and callable(obj):
            commands[name[4:]] = obj
    return commands


def execute(control: VolumeControl, line: str, commands: Dict[str, Command]) -> str:
    """Run one command line such as "/vol 50%"."""
    line = line.strip()
    if not line.startswith('/'):
        return 'ERROR: must start with /'
    parts = line[1:].split()
    if not parts:
        return 'ERROR: empty command'
    cmd, args = parts[0].lower(), parts[1:]
    func = commands.get(cmd)
    if func is None:
        return f'Unknown: {cmd}'
    return func(control, args)
