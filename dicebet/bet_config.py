"""
Bet configuration state machine.

Owns the authoritative fields of a dice bet (stake, roll mode, threshold,
validity) and keeps the derived displays (win chance, payout, profit,
slider position) in agreement while the user edits any one of them.

States
------
    Valid    — threshold is inside the mode's range; every display shown.
    Invalid  — the user typed a win chance below the mode's floor.  The
               threshold is left untouched, threshold/payout/profit are
               blanked and the mode toggle is locked until a recovery
               action (slider drag, valid win chance, or recover()).

The machine has no terminal state and no I/O.  One instance per widget:
nothing here is module-global, so independent widgets never interfere.

Render contract
---------------
:meth:`BetConfigMachine.dispatch` returns the freshly derived view plus the
display field whose raw input caused the action.  The adapter pushes the
view to every surface *except* that one, so a half-typed value ("0.",
"12.") is never overwritten under the user's cursor.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Type

from dicebet.core import odds_math
from dicebet.core.game_config import DEFAULT_CONFIG, DiceConfig, RollMode
from dicebet.core.slider import slider_position

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class BetConfiguration:
    """Authoritative, mutable bet settings for one widget."""

    stake: float = 0.0
    mode: RollMode = RollMode.UNDER
    threshold: float = DEFAULT_CONFIG.under_default
    valid: bool = True


@dataclass(frozen=True)
class DerivedView:
    """Everything a render pass shows, recomputed from a BetConfiguration.

    Threshold, win chance and payout are ``None`` while invalid; profit is
    also ``None`` when it truncates to zero.
    """

    valid: bool
    mode: RollMode
    stake: float
    threshold: Optional[float]
    win_chance: Optional[float]
    payout_multiplier: Optional[float]
    profit: Optional[float]
    slider_value: float
    slider_min: float
    slider_max: float
    slider_position: float


class DisplayField(str, Enum):
    """Observable display surfaces of the widget."""

    STAKE = "stake"
    MODE_LABEL = "mode_label"
    SLIDER = "slider"
    SLIDER_FILL = "slider_fill"
    THRESHOLD = "threshold"
    WIN_CHANCE = "win_chance"
    PAYOUT = "payout"
    PROFIT = "profit"


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ToggleMode:
    pass


@dataclass(frozen=True)
class SetThreshold:
    value: float


@dataclass(frozen=True)
class SetWinChance:
    value: float


@dataclass(frozen=True)
class SetStake:
    amount: float


@dataclass(frozen=True)
class Recover:
    pass


# The display each action originates from; that display is skipped by the
# render pass that follows the action.
_EXCLUDED_FIELD: Dict[Type, Optional[DisplayField]] = {
    ToggleMode: None,
    SetThreshold: DisplayField.SLIDER,
    SetWinChance: DisplayField.WIN_CHANCE,
    SetStake: DisplayField.STAKE,
    Recover: None,
}


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------

class BetConfigMachine:
    """
    Keeps stake, mode, threshold, win chance, payout and profit consistent.

    Usage:
        machine = BetConfigMachine()
        view, exclude = machine.dispatch(SetWinChance(25.0))
        # push `view` to every display except `exclude`
    """

    def __init__(
        self,
        config: Optional[DiceConfig] = None,
        state: Optional[BetConfiguration] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.state = state or BetConfiguration(
            threshold=self.config.default_threshold(RollMode.UNDER),
        )

    # ------------------------------------------------------------------ #
    #  Actions                                                             #
    # ------------------------------------------------------------------ #

    def toggle_mode(self) -> None:
        """Flip UNDER/OVER, mapping the threshold onto its complement."""
        if not self.state.valid:
            logger.debug("toggle ignored: configuration is invalid")
            return
        self.state.mode = self.state.mode.flipped()
        self.state.threshold = odds_math.toggle_threshold(
            self.state.threshold, roll_space_max=self.config.roll_space_max,
        )
        logger.debug("mode -> %s, threshold -> %.2f", self.state.mode.value, self.state.threshold)

    def set_threshold(self, threshold: float) -> None:
        """Slider drag.  Always leaves the configuration valid.

        A slider cannot leave its track, so the value is clamped to the
        mode's range and a drag is a recovery action even from Invalid.
        """
        lo, hi = self.config.bounds(self.state.mode)
        self.state.threshold = min(max(threshold, lo), hi)
        self.state.valid = True

    def set_win_chance(self, chance: float) -> None:
        """Direct win-chance entry; below the mode's floor goes Invalid."""
        mode = self.state.mode
        if chance < self.config.min_win_chance(mode):
            if self.state.valid:
                logger.debug("win chance %.2f below %s floor: invalid", chance, mode.value)
            self.state.valid = False
            return
        if mode is RollMode.UNDER:
            self.state.threshold = chance
        else:
            self.state.threshold = odds_math.round2(self.config.roll_space_max - chance)
        self.state.valid = True

    def set_stake(self, amount: float) -> None:
        # Stakes are non-negative; a typed "-5" stakes nothing.
        self.state.stake = max(amount, 0.0)

    def recover(self) -> None:
        """Leave the Invalid state by restoring the mode's default threshold."""
        if self.state.valid:
            return
        self.state.threshold = self.config.default_threshold(self.state.mode)
        self.state.valid = True
        logger.debug("recovered: threshold reset to %.2f", self.state.threshold)

    # ------------------------------------------------------------------ #
    #  Render                                                              #
    # ------------------------------------------------------------------ #

    def view(self) -> DerivedView:
        """Derive every display value from the current state.

        A state whose threshold leaves no winning outcomes (only reachable
        from a hand-built BetConfiguration) renders as Invalid.
        """
        s = self.state
        slider_min, slider_max = self.config.bounds(s.mode)
        chance = odds_math.win_chance(
            s.mode, s.threshold, roll_space_max=self.config.roll_space_max,
        )

        if not s.valid or chance <= 0.0:
            return DerivedView(
                valid=False,
                mode=s.mode,
                stake=s.stake,
                threshold=None,
                win_chance=None,
                payout_multiplier=None,
                profit=None,
                slider_value=slider_min,
                slider_min=slider_min,
                slider_max=slider_max,
                slider_position=0.0,
            )

        multiplier = odds_math.payout_multiplier(chance, house_edge=self.config.house_edge)
        return DerivedView(
            valid=True,
            mode=s.mode,
            stake=s.stake,
            threshold=s.threshold,
            win_chance=chance,
            payout_multiplier=multiplier,
            profit=odds_math.profit(s.stake, multiplier),
            # A typed win chance can exceed the track; the thumb stops at the end.
            slider_value=min(max(s.threshold, slider_min), slider_max),
            slider_min=slider_min,
            slider_max=slider_max,
            slider_position=slider_position(s.threshold),
        )

    def dispatch(self, action) -> Tuple[DerivedView, Optional[DisplayField]]:
        """Apply one action and return ``(view, field_to_skip)``.

        Raises:
            TypeError: If ``action`` is not one of the action types above.
        """
        if isinstance(action, ToggleMode):
            self.toggle_mode()
        elif isinstance(action, SetThreshold):
            self.set_threshold(action.value)
        elif isinstance(action, SetWinChance):
            self.set_win_chance(action.value)
        elif isinstance(action, SetStake):
            self.set_stake(action.amount)
        elif isinstance(action, Recover):
            self.recover()
        else:
            raise TypeError(f"Unknown action {action!r}")
        return self.view(), _EXCLUDED_FIELD[type(action)]
