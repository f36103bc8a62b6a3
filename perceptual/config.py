"""User preferences for the perceptual volume scale.

Preferences live in a single JSON file:

    $PERCEPTUAL_HOME/preferences.json     (default: ~/.perceptual)

Example:
    {
        "range_db": 60,
        "boost_range_db": 6,
        "default_level": 0.75,
        "step": 0.05,
        "allow_boost": true
    }

Missing keys fall back to the library defaults.
"""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .scale import (
    DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB,
    DEFAULT_VOLUME_DYNAMIC_RANGE_DB,
    UNITY_LEVEL,
    MAX_LEVEL,
)
from .volume import DEFAULT_STEP, VolumeCurve

logger = logging.getLogger(__name__)

HOME_ENV_VAR = 'PERCEPTUAL_HOME'


# ============================================================================
# PATH CONFIGURATION
# ============================================================================

def get_perceptual_root() -> Path:
    """Get the root user data directory.

    Uses $PERCEPTUAL_HOME when set, ~/.perceptual otherwise.
    The directory is not created here.
    """
    env = os.environ.get(HOME_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path.home() / '.perceptual'


def get_preferences_path() -> Path:
    """Get path to preferences.json file."""
    return get_perceptual_root() / 'preferences.json'


# ============================================================================
# PREFERENCES
# ============================================================================

@dataclass
class Preferences:
    range_db: float = DEFAULT_VOLUME_DYNAMIC_RANGE_DB
    boost_range_db: float = DEFAULT_VOLUME_BOOST_DYNAMIC_RANGE_DB
    default_level: float = UNITY_LEVEL
    step: float = DEFAULT_STEP
    allow_boost: bool = True

    def __post_init__(self):
        self.range_db = float(self.range_db)
        self.boost_range_db = float(self.boost_range_db)
        self.default_level = float(self.default_level)
        self.step = float(self.step)
        if not isinstance(self.allow_boost, bool):
            raise ValueError(f"allow_boost must be true or false, got {self.allow_boost!r}")
        VolumeCurve(self.range_db, self.boost_range_db)
        if not 0.0 <= self.default_level <= MAX_LEVEL:
            raise ValueError(f"default_level must be within 0-{MAX_LEVEL:g}, got {self.default_level}")
        if not math.isfinite(self.step) or self.step <= 0:
            raise ValueError(f"step must be a positive finite number, got {self.step}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preferences":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("ignoring unknown preference keys: %s", ", ".join(unknown))
        try:
            return cls(**{k: v for k, v in data.items() if k in known})
        except TypeError as e:
            raise ValueError(f"invalid preference value: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_preferences(path: Optional[Path] = None) -> Preferences:
    """Load preferences from disk.

    A missing or unreadable file gives the defaults.  A readable file
    with bad values raises ValueError.
    """
    path = Path(path) if path is not None else get_preferences_path()
    if not path.exists():
        logger.debug("no preferences at %s, using defaults", path)
        return Preferences()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning("could not read preferences %s: %s", path, e)
        return Preferences()
    if not isinstance(data, dict):
        logger.warning("preferences %s is not a JSON object, using defaults", path)
        return Preferences()
    return Preferences.from_dict(data)


def save_preferences(prefs: Preferences, path: Optional[Path] = None) -> bool:
    """Save preferences to disk."""
    path = Path(path) if path is not None else get_preferences_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(prefs.to_dict(), f, indent=2)
        return True
    except IOError as e:
        logger.error("could not save preferences %s: %s", path, e)
        return False
