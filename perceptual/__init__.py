"""perceptual - a smarter volume slider scale.

Maps volume slider positions to amplitudes through decibels so that
equal slider movements sound like equal loudness changes.

FEATURES:
- Perceptual <-> amplitude curve with a configurable dynamic range (50 dB)
- Boost range above unity gain (levels 1-2, 6 dB)
- Scalar and numpy array inputs
- VolumeControl slider model (steps, mute, perceptual fades)
- JSON preferences, slash commands, CLI, REPL and Textual TUI

QUICK START:
    >>> from perceptual import perceptual_to_amplitude, amplitude_to_perceptual
    >>> perceptual_to_amplitude(1.0)
    1.0
    >>> amplitude_to_perceptual(1.0)
    1.0
"""

__version__ = "1.0.0"

from .scale import (  # noqa: F401
    DEFAULT_VOLUME_DYNAMIC_RANGE_DB,
    DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB,
    MAX_LEVEL,
    UNITY_LEVEL,
    amplitude_to_db,
    amplitude_to_perceptual,
    db_to_amplitude,
    db_to_perceptual,
    perceptual_to_amplitude,
    perceptual_to_db,
)
from .volume import VolumeControl, VolumeCurve, crossfade_gains  # noqa: F401

__all__ = [
    "DEFAULT_VOLUME_DYNAMIC_RANGE_DB",
    "DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB",
    "MAX_LEVEL",
    "UNITY_LEVEL",
    "amplitude_to_db",
    "amplitude_to_perceptual",
    "db_to_amplitude",
    "db_to_perceptual",
    "perceptual_to_amplitude",
    "perceptual_to_db",
    "VolumeControl",
    "VolumeCurve",
    "crossfade_gains",
]
