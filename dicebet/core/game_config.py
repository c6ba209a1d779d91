"""Game-level configuration — every dice constant in one place.

This module is the **registry** for the constants shared by the odds
calculator, the state machine and the settlement maths.  Nowhere else in
the codebase should the house edge, the roll space or the per-mode
threshold bounds be hard-coded.

Architecture
------------
:class:`DiceConfig` is a frozen dataclass carrying all constants.
:data:`DEFAULT_CONFIG` is the production instance.  To run a variant
(e.g. a promotional 0.5% edge table) build a copy::

    from dataclasses import replace
    from dicebet.core.game_config import DEFAULT_CONFIG

    promo_cfg = replace(DEFAULT_CONFIG, house_edge=0.005)

Threshold bounds
----------------
The UNDER and OVER ranges are complementary under the toggle transform
``t' = roll_space_max − 0.01 − t``::

    UNDER [1.00, 98.02]  ⇄  OVER [1.97, 98.99]

The lower UNDER bound keeps the win chance at or above 1% (payout ceiling
≈ 99×); the upper bound keeps the payout multiplier above 1.01×.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Final


class RollMode(str, enum.Enum):
    """Whether a bet wins when the roll lands below or above the threshold.

    The value doubles as the human-readable label shown on the toggle.
    """

    UNDER = "UNDER"
    OVER = "OVER"

    @property
    def is_under(self) -> bool:
        return self is RollMode.UNDER

    def flipped(self) -> RollMode:
        return RollMode.OVER if self is RollMode.UNDER else RollMode.UNDER


#: Settlement scale: every amount and threshold crosses the wire as an
#: integer number of hundredths.
HUNDREDTHS: Final[int] = 100


@dataclass(frozen=True)
class DiceConfig:
    """Immutable constants bundle for a single dice table.

    Attributes:
        house_edge: Fraction removed from the fair payout (0.01 = 1%).
        roll_space_max: Width of the roll outcome space.  Rolls are drawn
            in hundredths from ``[0, roll_space_max]``.
        under_min: Lowest legal UNDER threshold.
        under_max: Highest legal UNDER threshold.
        over_min: Lowest legal OVER threshold.  Also the win-chance entry
            floor while in OVER mode.
        over_max: Highest legal OVER threshold.
        under_default: Threshold restored by recovery in UNDER mode.
        over_default: Threshold restored by recovery in OVER mode
            (the complement of ``under_default``).
        max_bet_cents: Table maximum wager, in cents.
        client_seed_min_length: Shortest client seed the backend accepts.
        client_seed_max_length: Longest client seed the backend accepts.
    """

    house_edge: float = 0.01
    roll_space_max: float = 99.99

    under_min: float = 1.00
    under_max: float = 98.02
    over_min: float = 1.97
    over_max: float = 98.99

    under_default: float = 49.50
    over_default: float = 50.49

    max_bet_cents: int = 300000_00
    client_seed_min_length: int = 6
    client_seed_max_length: int = 32

    def bounds(self, mode: RollMode) -> tuple[float, float]:
        """Return the inclusive ``(lo, hi)`` threshold range for ``mode``."""
        if mode is RollMode.UNDER:
            return self.under_min, self.under_max
        return self.over_min, self.over_max

    def default_threshold(self, mode: RollMode) -> float:
        """Threshold used at start-up and by recovery for ``mode``."""
        return self.under_default if mode is RollMode.UNDER else self.over_default

    def min_win_chance(self, mode: RollMode) -> float:
        """Smallest win chance a user may type before the entry is invalid."""
        return self.under_min if mode is RollMode.UNDER else self.over_min

    @property
    def house_edge_pct(self) -> int:
        """House edge as the whole percentage the settlement maths uses."""
        return round(self.house_edge * 100)

    @property
    def roll_space_hundredths(self) -> int:
        return round(self.roll_space_max * HUNDREDTHS)

    def __repr__(self) -> str:
        return (
            f"DiceConfig(house_edge={self.house_edge}, "
            f"under=[{self.under_min}, {self.under_max}], "
            f"over=[{self.over_min}, {self.over_max}])"
        )


DEFAULT_CONFIG: Final[DiceConfig] = DiceConfig()
