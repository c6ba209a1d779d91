"""Dice odds mathematics — the single source of truth.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement the payout formula locally in
the state machine, the adapter or the API.

The three pillars exposed are:

1. **Win chance** — threshold + roll mode → probability (percent).
2. **Payout** — fair odds ``100 / chance`` shaded by the house edge.
3. **Profit** — stake × (payout − 1), truncated to the cent.

Design decisions
----------------
* Percentages, not fractions.  Thresholds, win chances and the roll space
  are all expressed on the 0–99.99 scale the player sees, so
  ``win_chance(UNDER, t) == t`` holds without conversions.
* Profit is **truncated**, never rounded.  The displayed profit is a
  preview of what settlement will credit; settlement floors the integer
  payout (see :mod:`dicebet.core.settlement`), so a rounded preview could
  promise one cent more than the bet actually pays.
* The payout is evaluated as ``(1 − edge) · 100 / chance`` rather than
  ``(1 / (chance / 100)) · (1 − edge)``.  The two are algebraically equal;
  the first keeps the common cases (49.50 → 2.00×) exact in binary floating
  point.

Run tests with::

    pytest tests/test_odds_math.py -v
"""

from __future__ import annotations

import math
from typing import Final, Optional

from dicebet.core.game_config import DEFAULT_CONFIG, RollMode

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

#: Fraction of the fair payout kept by the house.
HOUSE_EDGE: Final[float] = DEFAULT_CONFIG.house_edge

#: Width of the roll outcome space.
ROLL_SPACE_MAX: Final[float] = DEFAULT_CONFIG.roll_space_max

#: Decimal places kept before truncating to the cent.  A product such as
#: ``10 * 0.98`` evaluates to ``9.799999999999999`` in binary; rounding the
#: cent count to this many places first stops :func:`floor2` from
#: dropping a whole cent on representation error alone.
_CENT_NOISE_DIGITS: Final[int] = 6


# ---------------------------------------------------------------------------
# Rounding helpers
# ---------------------------------------------------------------------------


def round2(x: float) -> float:
    """Round to two decimals, half-up.

    Python's :func:`round` uses banker's rounding; the settlement side
    rounds halves up, so this does too.
    """
    scaled = x * 100
    if not math.isfinite(scaled):
        # Beyond cent resolution; there is nothing left to round.
        return x
    return math.floor(scaled + 0.5) / 100


def floor2(x: float) -> float:
    """Truncate to two decimals (toward −∞), never rounding up.

    Examples::

        floor2(9.8099)  → 9.80
        floor2(0.0999)  → 0.09
        floor2(9.7999999999999998) → 9.80   (float noise, not a real shortfall)
    """
    scaled = x * 100
    if not math.isfinite(scaled):
        return x
    return math.floor(round(scaled, _CENT_NOISE_DIGITS)) / 100


# ---------------------------------------------------------------------------
# Odds calculator
# ---------------------------------------------------------------------------


def win_chance(
    mode: RollMode,
    threshold: float,
    *,
    roll_space_max: float = ROLL_SPACE_MAX,
) -> float:
    """Probability of winning, as a percentage of the roll space.

    Args:
        mode: Roll UNDER or OVER the threshold.
        threshold: Boundary roll value.  Must be inside the mode's legal
            range (see :class:`~dicebet.core.game_config.DiceConfig`).

    Returns:
        ``threshold`` for UNDER; ``roll_space_max − threshold`` for OVER.

    Examples::

        win_chance(RollMode.UNDER, 49.50) → 49.50
        win_chance(RollMode.OVER,  50.49) → 49.50
    """
    if mode is RollMode.UNDER:
        return threshold
    return roll_space_max - threshold


def payout_multiplier(
    win_chance_pct: float,
    *,
    house_edge: float = HOUSE_EDGE,
) -> float:
    """Stake multiplier paid on a win.

    The fair multiplier for a ``p%`` chance is ``100 / p``; the house keeps
    ``house_edge`` of it::

        payout · (p / 100) = 1 − house_edge                     (fair-odds identity)

    Args:
        win_chance_pct: Win chance in percent, ``> 0``.
        house_edge: Fraction kept by the house.

    Returns:
        Multiplier ≥ 1.0 inside the legal threshold ranges.

    Raises:
        ValueError: If ``win_chance_pct <= 0``.  The state machine never
            calls this outside the legal range; reaching this is a bug in
            the caller.

    Examples::

        payout_multiplier(49.50) → 2.0000
        payout_multiplier(98.02) → 1.0100
        payout_multiplier(1.00)  → 99.0000
    """
    if win_chance_pct <= 0.0:
        raise ValueError(
            f"win_chance_pct must be > 0, got {win_chance_pct!r}. "
            "Callers must keep the threshold inside the mode's legal range."
        )
    return (1.0 - house_edge) * 100.0 / win_chance_pct


def profit(stake: float, multiplier: float) -> Optional[float]:
    """Net gain on a win, truncated to the cent.

    Args:
        stake: Amount wagered (≥ 0).
        multiplier: Output of :func:`payout_multiplier`.

    Returns:
        ``floor2(stake · (multiplier − 1))``, or ``None`` when that is
        exactly zero.  ``None`` is the "empty" sentinel: the widget shows a
        blank field rather than a bare ``0``.
    """
    amount = floor2(stake * (multiplier - 1.0))
    if amount == 0:
        return None
    return amount


# ---------------------------------------------------------------------------
# Mode complement
# ---------------------------------------------------------------------------


def toggle_threshold(
    threshold: float,
    *,
    roll_space_max: float = ROLL_SPACE_MAX,
) -> float:
    """Map a threshold onto the opposite roll mode.

    The UNDER and OVER ranges are complementary, so the transform is an
    involution on two-decimal thresholds::

        toggle_threshold(toggle_threshold(t)) == t

    Examples::

        toggle_threshold(49.50) → 50.49
        toggle_threshold(98.02) →  1.97
    """
    return round2(roll_space_max - threshold)


def in_bounds(mode: RollMode, threshold: float, config=DEFAULT_CONFIG) -> bool:
    """Return True if ``threshold`` is legal for ``mode`` under ``config``."""
    lo, hi = config.bounds(mode)
    return lo <= threshold <= hi
