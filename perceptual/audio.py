"""Apply perceptual volume to audio files.

Reads any format soundfile understands, scales it with a VolumeControl
and writes the result.  Float output is not clipped; boosted integer
output is clipped to full scale by soundfile.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np

from .volume import VolumeControl

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def apply_to_file(
    in_path: PathLike,
    out_path: PathLike,
    control: VolumeControl,
    fade_to: Optional[float] = None,
) -> int:
    """Scale an audio file by the control's gain.

    Parameters
    ----------
    in_path : path
        Source audio file
    out_path : path
        Destination audio file (format from extension)
    control : VolumeControl
        Gain source.  With ``fade_to`` the file fades from the control's
        level to ``fade_to`` and the control ends at that level.
    fade_to : float, optional
        Target level for a perceptual fade across the whole file

    Returns
    -------
    int
        Number of frames written
    """
    import soundfile as sf

    out_format = Path(out_path).suffix.lstrip('.').upper()
    if not sf.check_format(out_format):
        raise ValueError(f"unsupported output format for {out_path}")

    audio, sr = sf.read(str(in_path), dtype='float64', always_2d=False)
    subtype = sf.info(str(in_path)).subtype
    logger.info("read %s: %d frames @ %d Hz (%s)", in_path, len(audio), sr, subtype)

    # Keep the source subtype when the output container supports it
    if not sf.check_format(out_format, subtype):
        subtype = None

    if fade_to is None:
        out = control.apply(audio)
    else:
        out = control.fade_to(audio, fade_to)

    peak = float(np.max(np.abs(out))) if out.size else 0.0
    if peak > 1.0:
        logger.warning("output peak %.3f exceeds full scale", peak)

    sf.write(str(out_path), out, sr, subtype=subtype)
    logger.info("wrote %s", out_path)
    return len(out)
