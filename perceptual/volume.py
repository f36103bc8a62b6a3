"""Volume control built on the perceptual scale.

The VolumeControl object models a volume slider: it holds a perceptual
level, moves in fixed steps, remembers its level across mute/unmute
and applies its gain to numpy audio buffers.  Fades are computed on
the perceptual scale so they sound even instead of dropping off a
cliff at the end.

Buffers are either 1-D (mono) or 2-D with shape (frames, channels).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Tuple, TYPE_CHECKING

import numpy as np

from .scale import (
    DEFAULT_VOLUME_DYNAMIC_RANGE_DB,
    DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB,
    LEVEL_MIN,
    MAX_LEVEL,
    UNITY_LEVEL,
    amplitude_to_db,
    amplitude_to_perceptual,
    clamp_level,
    db_to_perceptual,
    format_db,
    format_level,
    perceptual_to_amplitude,
    validate_level,
)

if TYPE_CHECKING:
    from .config import Preferences

logger = logging.getLogger(__name__)

DEFAULT_STEP = 0.05


# ============================================================================
# CURVE
# ============================================================================

@dataclass(frozen=True)
class VolumeCurve:
    """A perceptual curve with fixed dynamic and boost ranges."""
    range_db: float = DEFAULT_VOLUME_DYNAMIC_RANGE_DB
    boost_range_db: float = DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB

    def __post_init__(self):
        # Raises ValueError on bad ranges
        perceptual_to_amplitude(UNITY_LEVEL, self.range_db, self.boost_range_db)

    def to_amplitude(self, perceptual):
        return perceptual_to_amplitude(perceptual, self.range_db, self.boost_range_db)

    def to_perceptual(self, amplitude):
        return amplitude_to_perceptual(amplitude, self.range_db, self.boost_range_db)

    def to_db(self, perceptual):
        return amplitude_to_db(self.to_amplitude(perceptual))

    def from_db(self, db):
        return db_to_perceptual(db, self.range_db, self.boost_range_db)


# ============================================================================
# VOLUME CONTROL
# ============================================================================

@dataclass
class VolumeControl:
    """Stateful volume slider.

    Attributes
    ----------
    range_db : float
        Dynamic range of levels 0-1, in dB
    boost_range_db : float
        Dynamic range of levels 1-2, in dB
    level : float
        Current perceptual level (0-2, 1 = unity)
    step : float
        Level increment used by nudge()
    allow_boost : bool
        If False, the level is capped at unity
    """
    range_db: float = DEFAULT_VOLUME_DYNAMIC_RANGE_DB
    boost_range_db: float = DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB
    level: float = UNITY_LEVEL
    step: float = DEFAULT_STEP
    allow_boost: bool = True

    # Internal state
    _muted_level: Optional[float] = field(default=None, repr=False)

    def __post_init__(self):
        if not math.isfinite(self.step) or self.step <= 0:
            raise ValueError(f"step must be a positive finite number, got {self.step}")
        VolumeCurve(self.range_db, self.boost_range_db)  # validates the ranges
        self.level = clamp_level(self.level, self.allow_boost)

    @classmethod
    def from_preferences(cls, prefs: "Preferences") -> "VolumeControl":
        return cls(
            range_db=prefs.range_db,
            boost_range_db=prefs.boost_range_db,
            level=prefs.default_level,
            step=prefs.step,
            allow_boost=prefs.allow_boost,
        )

    @property
    def curve(self) -> VolumeCurve:
        return VolumeCurve(self.range_db, self.boost_range_db)

    @property
    def muted(self) -> bool:
        return self._muted_level is not None

    @property
    def amplitude(self) -> float:
        """Current linear gain (0.0 while muted)."""
        if self.muted:
            return 0.0
        return self.curve.to_amplitude(self.level)

    @property
    def db(self) -> float:
        return amplitude_to_db(self.amplitude)

    @property
    def percent(self) -> float:
        return self.level * 100.0

    @property
    def max_level(self) -> float:
        return MAX_LEVEL if self.allow_boost else UNITY_LEVEL

    # ------------------------------------------------------------------
    # Setting the level
    # ------------------------------------------------------------------

    def set_level(self, level: float) -> float:
        """Set the perceptual level (clamped).  Unmutes the control."""
        clamped, warning = validate_level(level, "level", self.allow_boost)
        if warning and warning.startswith("WARNING"):
            logger.warning(warning)
        self._muted_level = None
        self.level = clamped
        logger.debug("level set to %s", format_level(clamped))
        return clamped

    def set_amplitude(self, amplitude: float) -> float:
        return self.set_level(self.curve.to_perceptual(amplitude))

    def set_db(self, db: float) -> float:
        return self.set_level(self.curve.from_db(db))

    def nudge(self, steps: int = 1) -> float:
        """Move the slider by a number of steps (negative = down)."""
        base = self._muted_level if self.muted else self.level
        return self.set_level(base + steps * self.step)

    # ------------------------------------------------------------------
    # Mute
    # ------------------------------------------------------------------

    def mute(self) -> None:
        if not self.muted:
            self._muted_level = self.level
            self.level = LEVEL_MIN

    def unmute(self) -> None:
        if self.muted:
            self.level = clamp_level(self._muted_level, self.allow_boost)
            self._muted_level = None

    def toggle_mute(self) -> bool:
        """Toggle mute.  Returns the new muted state."""
        if self.muted:
            self.unmute()
        else:
            self.mute()
        return self.muted

    # ------------------------------------------------------------------
    # Buffers
    # ------------------------------------------------------------------

    def ramp(self, target: float, num: int) -> np.ndarray:
        """Amplitudes for a fade from the current level to ``target``.

        The levels are spaced evenly on the perceptual scale, so the fade
        sounds linear.  Both endpoints are included.
        """
        if num < 1:
            raise ValueError(f"num must be >= 1, got {num}")
        target = clamp_level(target, self.allow_boost)
        levels = np.linspace(self.level, target, num, dtype=np.float64)
        return self.curve.to_amplitude(levels)

    def apply(self, buffer: np.ndarray) -> np.ndarray:
        """Scale a buffer by the current amplitude."""
        return np.asarray(buffer).astype(np.float64) * self.amplitude

    def fade_to(self, buffer: np.ndarray, target: float) -> np.ndarray:
        """Fade a buffer from the current level to ``target``.

        The control ends up at ``target`` (unmuted).
        """
        buf = np.asarray(buffer).astype(np.float64)
        n = buf.shape[0]
        if n == 0:
            self.set_level(target)
            return buf
        env = self.ramp(target, n)
        if buf.ndim > 1:
            env = env[:, np.newaxis]
        self.set_level(target)
        return buf * env

    def status(self) -> str:
        if self.muted:
            return f"Volume: MUTED (was {format_level(self._muted_level)})"
        return (f"Volume: {format_level(self.level)} | gain {self.amplitude:.4f} "
                f"({format_db(self.db)}) | range {self.range_db:g} dB, "
                f"boost {self.boost_range_db:g} dB")


# ============================================================================
# CROSSFADE
# ============================================================================

def crossfade_gains(
    progress: float,
    range_db: float = DEFAULT_VOLUME_DYNAMIC_RANGE_DB,
    boost_range_db: float = DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB,
) -> Tuple[float, float]:
    """Calculate gains for source and destination during a crossfade.

    Both sides move linearly on the perceptual scale: the source from
    unity to silence, the destination from silence to unity.

    Returns (source_amplitude, dest_amplitude).
    """
    progress = float(progress)
    if math.isnan(progress):
        raise ValueError("progress must not be NaN")
    progress = max(0.0, min(1.0, progress))
    src = perceptual_to_amplitude(UNITY_LEVEL - progress, range_db, boost_range_db)
    dst = perceptual_to_amplitude(progress, range_db, boost_range_db)
    return (src, dst)
