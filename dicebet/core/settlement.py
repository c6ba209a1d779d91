"""Settlement mathematics at the integer-hundredths wire scale.

The wagering backend settles a bet in integers: wagers in cents,
thresholds and roll results in hundredths of a roll unit.  This module
reproduces that arithmetic so the configurator's profit preview can be
checked against what settlement will actually credit.

Wire contract
-------------
Request::

    {mode, threshold (int hundredths), stake (int cents), clientSeed}

Response::

    {won, result (int hundredths), deltaCents, serverSeed?}

Rolls are drawn uniformly from the 10,000 outcomes ``0 … 9999``.  An UNDER
bet on ``t`` wins on ``result < t`` (``t`` outcomes); an OVER bet wins on
``result > t`` (``9999 − t`` outcomes).  The number of winning outcomes is
therefore exactly :func:`~dicebet.core.odds_math.win_chance` scaled by
100, and the integer payout below equals the calculator's multiplier at
the cent.

Everything here is pure; the random roll itself is produced by the
backend and is not reproduced.
"""

from __future__ import annotations

import math
from typing import Final, Optional

from dicebet.core.game_config import DEFAULT_CONFIG, HUNDREDTHS, DiceConfig, RollMode

#: Number of distinct roll outcomes (``0 … 9999``).
ROLL_OUTCOMES: Final[int] = 10_000


class SettlementError(ValueError):
    """A bet the backend would reject, with the message it would show."""


def to_hundredths(x: float) -> int:
    """Scale a two-decimal amount to the integer wire representation.

    Raises:
        SettlementError: If ``x`` has no finite wire representation.
    """
    scaled = x * HUNDREDTHS
    if not math.isfinite(scaled):
        raise SettlementError(f"amount out of range: {x!r}")
    return round(scaled)


def from_hundredths(n: int) -> float:
    return n / HUNDREDTHS


def win_space_hundredths(
    mode: RollMode,
    threshold_h: int,
    config: DiceConfig = DEFAULT_CONFIG,
) -> int:
    """Winning outcomes out of :data:`ROLL_OUTCOMES` for a threshold."""
    if mode is RollMode.UNDER:
        return threshold_h
    return config.roll_space_hundredths - threshold_h


def payout_cents(
    wager_cents: int,
    win_space_h: int,
    house_edge_pct: int = DEFAULT_CONFIG.house_edge_pct,
) -> int:
    """Total amount returned on a win, floored to the cent.

    ``wager · (10000 / win_space) · (1 − edge)``, evaluated in integers so
    the result is identical on every platform.

    Raises:
        ValueError: If ``win_space_h <= 0``.
    """
    if win_space_h <= 0:
        raise ValueError(f"win_space_h must be > 0, got {win_space_h!r}")
    return (wager_cents * ROLL_OUTCOMES * (100 - house_edge_pct)) // (win_space_h * 100)


def win_delta_cents(
    mode: RollMode,
    threshold_h: int,
    wager_cents: int,
    config: DiceConfig = DEFAULT_CONFIG,
) -> int:
    """Net balance change if the bet wins."""
    space = win_space_hundredths(mode, threshold_h, config)
    return payout_cents(wager_cents, space, config.house_edge_pct) - wager_cents


def outcome_won(mode: RollMode, threshold_h: int, result_h: int) -> bool:
    """Whether a roll of ``result_h`` wins a bet on ``threshold_h``."""
    if mode is RollMode.UNDER:
        return result_h < threshold_h
    return result_h > threshold_h


def validate_bet(
    mode: RollMode,
    threshold_h: int,
    wager_cents: int,
    client_seed: str,
    balance_cents: Optional[int] = None,
    config: DiceConfig = DEFAULT_CONFIG,
) -> None:
    """Apply the backend's pre-roll checks in the backend's order.

    Raises:
        SettlementError: With the message the backend would return for the
            first failing check: threshold range, balance, table maximum,
            then client seed length.  ``balance_cents=None`` skips the
            balance check (no account context).
    """
    lo, hi = config.bounds(mode)
    lo_h, hi_h = to_hundredths(lo), to_hundredths(hi)
    direction = "under" if mode is RollMode.UNDER else "over"
    if threshold_h < lo_h:
        raise SettlementError(
            f"invalid threshold: minimum amount to roll {direction} is {lo_h}, "
            f"but got {threshold_h}"
        )
    if threshold_h > hi_h:
        raise SettlementError(
            f"invalid threshold: maximum amount to roll {direction} is {hi_h}, "
            f"but got {threshold_h}"
        )

    if balance_cents is not None and wager_cents > balance_cents:
        raise SettlementError(
            f"insufficient balance: you only have {balance_cents / 100:.2f} "
            f"but you're trying to bet {wager_cents / 100:.2f}!"
        )
    if wager_cents > config.max_bet_cents:
        raise SettlementError(
            f"invalid bet: the maximum bet is {config.max_bet_cents / 100:.2f}, "
            f"but you're trying to bet {wager_cents / 100:.2f}!"
        )

    n = len(client_seed)
    if n < config.client_seed_min_length or n > config.client_seed_max_length:
        raise SettlementError(
            f"incorrect client seed length: got {n}, but must be within interval "
            f"[{config.client_seed_min_length}, {config.client_seed_max_length}]"
        )
