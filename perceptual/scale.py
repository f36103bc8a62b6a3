"""Perceptual Volume Scale.

Our hearing follows a logarithmic scale: we perceive less difference
between loud sounds than between soft ones.  A volume slider that maps
its position straight to amplitude therefore feels wrong, with almost
all of the audible change crammed into the bottom of its travel.

This module maps slider positions ("perceptual" values) to amplitudes
through decibels instead.

SCALING RULES:
--------------
1. 0.0 - 1.0 is the normal range.  It selects a fraction of the dynamic
   range (default 50 dB), so 0.5 -> -25 dB, 1.0 -> 0 dB.
2. 1.0 - 2.0 is the boost range.  It selects a fraction of the boost
   range (default 6 dB), so 1.5 -> +3 dB, 2.0 -> +6 dB.
3. dB becomes amplitude with amplitude = 10 ** (db / 20).
4. 0.0 is silence (amplitude 0), not -range dB.

On the percent scale (perceptual * 100) this reads as
"50% perceived loudness is about 5.6% of the amplitude".

BUILD ID: scale_v1.2
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Union

import numpy as np

logger = logging.getLogger(__name__)

ArrayLike = Union[float, int, np.ndarray, list, tuple]


# ============================================================================
# CORE CONSTANTS
# ============================================================================

# Default standard volume range, in dB
DEFAULT_VOLUME_DYNAMIC_RANGE_DB = 50.0

# Default boost volume range, in dB
DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB = 6.0

LEVEL_MIN = 0.0
UNITY_LEVEL = 1.0
MAX_LEVEL = 2.0


# ============================================================================
# PRESET LEVELS (percent of the perceptual scale)
# ============================================================================

LEVEL_PRESETS = {
    'mute': 0,
    'off': 0,
    'silent': 0,
    'whisper': 10,
    'quiet': 25,
    'soft': 35,
    'half': 50,
    'medium': 50,
    'default': 75,
    'loud': 90,
    'unity': 100,
    'full': 100,
    # Boost presets (explicitly above unity)
    'boost': 150,
    'max': 200,
    'maximum': 200,
}


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def _check_range(value: float, name: str) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a positive finite number of dB, got {value}")
    return value


def _check_non_negative(values: np.ndarray, name: str) -> None:
    if np.isnan(values).any():
        raise ValueError(f"{name} must not be NaN")
    if (values < 0).any():
        raise ValueError(f"{name} must be >= 0, got {values.min()}")


def _as_output(result: np.ndarray, original: ArrayLike) -> Union[float, np.ndarray]:
    """Return a plain float for scalar input, an array otherwise."""
    if np.ndim(original) == 0:
        return float(result)
    return result


# ============================================================================
# CURVE FUNCTIONS
# ============================================================================

def perceptual_to_amplitude(
    perceptual: ArrayLike,
    range_db: float = DEFAULT_VOLUME_DYNAMIC_RANGE_DB,
    boost_range_db: float = DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB,
) -> Union[float, np.ndarray]:
    """Take a user-presented control value and convert it to amplitude.

    Parameters
    ----------
    perceptual : float or array-like
        Control value, normally 0-2 (1 = unity gain)
    range_db : float
        Dynamic range covered by control values 0-1
    boost_range_db : float
        Dynamic range covered by control values 1-2

    Returns
    -------
    float or np.ndarray
        Amplitude, normally 0-2 (float for scalar input)

    Examples
    --------
    >>> perceptual_to_amplitude(1.0)
    1.0
    >>> round(perceptual_to_amplitude(0.5), 4)
    0.0562
    """
    range_db = _check_range(range_db, "range_db")
    boost_range_db = _check_range(boost_range_db, "boost_range_db")
    p = np.asarray(perceptual, dtype=np.float64)
    _check_non_negative(p, "perceptual")

    db = np.where(p > UNITY_LEVEL,
                  (p - UNITY_LEVEL) * boost_range_db,
                  p * range_db - range_db)
    amp = np.where(p == 0.0, 0.0, np.power(10.0, db / 20.0))
    return _as_output(amp, perceptual)


def amplitude_to_perceptual(
    amplitude: ArrayLike,
    range_db: float = DEFAULT_VOLUME_DYNAMIC_RANGE_DB,
    boost_range_db: float = DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB,
) -> Union[float, np.ndarray]:
    """Take a volume amplitude and convert it to a user-presented control value.

    Amplitudes below the bottom of the dynamic range land on 0.0, since
    a slider cannot sit below its end stop.

    Parameters
    ----------
    amplitude : float or array-like
        Amplitude, normally 0-2 (1 = unity gain)
    range_db : float
        Dynamic range covered by control values 0-1
    boost_range_db : float
        Dynamic range covered by control values 1-2

    Returns
    -------
    float or np.ndarray
        Control value, normally 0-2 (float for scalar input)
    """
    range_db = _check_range(range_db, "range_db")
    boost_range_db = _check_range(boost_range_db, "boost_range_db")
    a = np.asarray(amplitude, dtype=np.float64)
    _check_non_negative(a, "amplitude")

    with np.errstate(divide='ignore'):
        db = 20.0 * np.log10(a)
    perceptual = np.where(db > 0.0,
                          db / boost_range_db + UNITY_LEVEL,
                          (range_db + db) / range_db)
    perceptual = np.where(a == 0.0, 0.0, np.maximum(perceptual, LEVEL_MIN))
    return _as_output(perceptual, amplitude)


# ============================================================================
# DECIBEL HELPERS
# ============================================================================

def db_to_amplitude(db: ArrayLike) -> Union[float, np.ndarray]:
    """Convert decibels to amplitude (-inf dB -> 0.0)."""
    d = np.asarray(db, dtype=np.float64)
    if np.isnan(d).any():
        raise ValueError("db must not be NaN")
    return _as_output(np.power(10.0, d / 20.0), db)


def amplitude_to_db(amplitude: ArrayLike, floor_db: float = -math.inf) -> Union[float, np.ndarray]:
    """Convert amplitude to decibels.

    Parameters
    ----------
    amplitude : float or array-like
        Amplitude (>= 0)
    floor_db : float
        Value returned for silence and lower bound for everything else
        (default: -inf)
    """
    a = np.asarray(amplitude, dtype=np.float64)
    _check_non_negative(a, "amplitude")
    with np.errstate(divide='ignore'):
        db = 20.0 * np.log10(a)
    return _as_output(np.maximum(db, floor_db), amplitude)


def perceptual_to_db(
    perceptual: ArrayLike,
    range_db: float = DEFAULT_VOLUME_DYNAMIC_RANGE_DB,
    boost_range_db: float = DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB,
) -> Union[float, np.ndarray]:
    """Control value to gain in dB.  Level 0 is -inf dB."""
    amp = perceptual_to_amplitude(perceptual, range_db, boost_range_db)
    return amplitude_to_db(amp)


def db_to_perceptual(
    db: ArrayLike,
    range_db: float = DEFAULT_VOLUME_DYNAMIC_RANGE_DB,
    boost_range_db: float = DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB,
) -> Union[float, np.ndarray]:
    """Gain in dB to control value."""
    return amplitude_to_perceptual(db_to_amplitude(db), range_db, boost_range_db)


# ============================================================================
# PERCENT SCALE (0-200, 100 = unity)
# ============================================================================

def percent_to_amplitude_percent(
    percent: ArrayLike,
    range_db: float = DEFAULT_VOLUME_DYNAMIC_RANGE_DB,
    boost_range_db: float = DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB,
) -> Union[float, np.ndarray]:
    """Perceived loudness percent to amplitude percent.

    >>> round(percent_to_amplitude_percent(50), 2)
    5.62
    """
    p = np.asarray(percent, dtype=np.float64) / 100.0
    amp = perceptual_to_amplitude(p, range_db, boost_range_db)
    return _as_output(np.asarray(amp) * 100.0, percent)


def amplitude_percent_to_percent(
    percent: ArrayLike,
    range_db: float = DEFAULT_VOLUME_DYNAMIC_RANGE_DB,
    boost_range_db: float = DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB,
) -> Union[float, np.ndarray]:
    """Amplitude percent to perceived loudness percent."""
    a = np.asarray(percent, dtype=np.float64) / 100.0
    perceptual = amplitude_to_perceptual(a, range_db, boost_range_db)
    return _as_output(np.asarray(perceptual) * 100.0, percent)


# ============================================================================
# LEVEL PARSING / CLAMPING
# ============================================================================

def clamp_level(level: float, allow_boost: bool = True) -> float:
    """Clamp a control value to 0-2 (or 0-1 when boost is not allowed)."""
    level = float(level)
    if math.isnan(level):
        raise ValueError("level must not be NaN")
    max_val = MAX_LEVEL if allow_boost else UNITY_LEVEL
    return max(LEVEL_MIN, min(max_val, level))


def is_boosted(level: float) -> bool:
    """Check if a control value is in the boost range (>1)."""
    return level > UNITY_LEVEL


def validate_level(level: float, name: str = "level",
                   allow_boost: bool = True) -> tuple[float, Optional[str]]:
    """Clamp a control value and return any warning message.

    Returns
    -------
    tuple[float, Optional[str]]
        The clamped value and optional warning message
    """
    clamped = clamp_level(level, allow_boost)
    warning = None

    if clamped != level:
        warning = f"WARNING: {name}={level:.2f} clamped to {clamped:.2f}"
    elif is_boosted(clamped):
        warning = f"NOTE: {name}={clamped:.2f} is in boost range (>1) - gain above unity"

    return clamped, warning


def parse_level(value: Union[str, int, float], default: Optional[float] = None) -> Optional[float]:
    """Parse a control value from user input.

    Accepts:
    - Fractions (0.5, "0.5") in the 0-2 control scale
    - Percents with a trailing % ("50%")
    - Preset names ('quiet', 'unity', 'boost', ...)

    Unparseable or non-finite input returns ``default``.  Results are
    not clamped.

    Examples
    --------
    >>> parse_level("75%")
    0.75
    >>> parse_level("unity")
    1.0
    >>> parse_level("garbage", 0.5)
    0.5
    """
    if isinstance(value, bool):
        return default
    result = None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        text = value.lower().strip()
        if text in LEVEL_PRESETS:
            return LEVEL_PRESETS[text] / 100.0
        try:
            if text.endswith('%'):
                result = float(text[:-1]) / 100.0
            else:
                result = float(text)
        except ValueError:
            logger.debug("could not parse level %r", value)

    if result is None or not math.isfinite(result):
        return default
    return result


def get_preset_name(level: float, tolerance: float = 0.01) -> Optional[str]:
    """Get the preset name for a control value if it matches one."""
    for name, preset in LEVEL_PRESETS.items():
        if abs(level - preset / 100.0) <= tolerance:
            return name
    return None


def format_level(level: float, name: str = "") -> str:
    """Format a control value as a percent for display."""
    prefix = f"{name}=" if name else ""
    boost_suffix = " [BOOST]" if is_boosted(level) else ""
    return f"{prefix}{level * 100.0:.0f}%{boost_suffix}"


def format_db(db: float) -> str:
    if math.isinf(db) and db < 0:
        return "-inf dB"
    return f"{db:+.1f} dB"
