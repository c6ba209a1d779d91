"""Slider position mapping — threshold → visual fill width.

The threshold slider draws a filled bar behind a round thumb.  A linear
fill would slide under the thumb graphic at both ends of the track and
the edge of the fill would disappear, so the linear position is nudged by
small correction bands.  The result is **display-only**: it is derived
fresh from the authoritative threshold on every render and never written
back.
"""

from __future__ import annotations

from typing import Final

#: Threshold at the left end of the track (UNDER minimum).
_TRACK_START: Final[float] = 1.00

#: Track span, ``98.02 − 1.00``.  The same span is used in both roll modes.
_TRACK_SPAN: Final[float] = 97.02

# Correction bands, in percentage points of track width.
_HIGH_BAND_FLOOR: Final[float] = 60.0
_LOW_BAND_CEIL: Final[float] = 6.0
_EDGE_BAND_CEIL: Final[float] = 3.0


def base_percent(threshold: float) -> float:
    """Linear mapping of ``[1.00, 98.02]`` onto ``[0, 100]``."""
    return (threshold - _TRACK_START) / _TRACK_SPAN * 100.0


def slider_position(threshold: float) -> float:
    """Fill width (percent of track) for ``threshold``.

    Bands applied to the linear position ``p``:

    ========================  ==========
    ``p > 60``                ``p − 1``
    ``3 < p <= 6``            ``p + 1``
    ``p <= 3``                ``p + 2``
    ========================  ==========

    Examples::

        slider_position(1.00)  → 2.00
        slider_position(49.51) → 50.00
        slider_position(98.02) → 99.00
    """
    percent = base_percent(threshold)
    if percent > _HIGH_BAND_FLOOR:
        return percent - 1.0
    if _EDGE_BAND_CEIL < percent <= _LOW_BAND_CEIL:
        return percent + 1.0
    if percent <= _EDGE_BAND_CEIL:
        return percent + 2.0
    return percent
