"""
Widget adapter between raw UI input and the bet configuration machine.

The machine only understands numbers and actions.  This layer:

    1. Parses untrusted raw input (strings from text boxes, slider values)
       with a zero fallback, so no keystroke can raise.
    2. Translates UI events into machine actions.
    3. Formats the derived view into two-decimal display strings.
    4. Pushes the render pass to every display except the one being edited.
    5. Decides *when* to recover from the Invalid state: any click that
       lands outside the win-chance and payout controls.

``BetWidget.displays`` is the observable surface — a dict a UI binding
(Streamlit, a web template, a test) reads after each event.
"""

import logging
import math
import re
from typing import Dict, Iterable, Optional, Union

from dicebet.bet_config import (
    BetConfigMachine,
    BetConfiguration,
    DerivedView,
    DisplayField,
    Recover,
    SetStake,
    SetThreshold,
    SetWinChance,
    ToggleMode,
)
from dicebet.core.game_config import DiceConfig
from dicebet.core.settlement import SettlementError, to_hundredths
from dicebet.schemas import SettlementRequest

logger = logging.getLogger(__name__)

RawInput = Union[str, int, float, None]

# Leading numeric prefix, the way browsers' parseFloat reads "12.5abc" or "0."
_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Displays refreshed while the configuration is invalid: everything that
# depends on a representable threshold is blanked or pinned.
_INVALID_FIELDS = (
    DisplayField.THRESHOLD,
    DisplayField.PAYOUT,
    DisplayField.PROFIT,
    DisplayField.SLIDER,
    DisplayField.SLIDER_FILL,
)

# Clicking these while invalid does not trigger recovery; the user is
# still working on the entry that made the configuration invalid.
_RECOVERY_EXEMPT = frozenset({DisplayField.WIN_CHANCE, DisplayField.PAYOUT})


# ---------------------------------------------------------------------------
# Parsing and formatting
# ---------------------------------------------------------------------------

def parse_number(raw: RawInput) -> float:
    """
    Parse untrusted input to a float, returning 0.0 on any failure.

    Thousands separators are dropped and a leading numeric prefix is
    accepted, so partial entries like "0." or "12.5x" parse as 0.0 and 12.5.
    NaN and infinities collapse to 0.0 as well.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        match = _NUMBER_PREFIX.match(str(raw).replace(",", ""))
        if not match:
            return 0.0
        try:
            value = float(match.group(1))
        except ValueError:
            return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def _fmt(value: Optional[float]) -> str:
    return "" if value is None else f"{value:.2f}"


def format_view(view: DerivedView) -> Dict[DisplayField, str]:
    """Render a derived view as display strings, one per surface."""
    return {
        DisplayField.STAKE: _fmt(view.stake) if view.stake else "",
        DisplayField.MODE_LABEL: view.mode.value,
        DisplayField.SLIDER: _fmt(view.slider_value),
        DisplayField.SLIDER_FILL: _fmt(view.slider_position),
        DisplayField.THRESHOLD: _fmt(view.threshold),
        DisplayField.WIN_CHANCE: _fmt(view.win_chance),
        DisplayField.PAYOUT: _fmt(view.payout_multiplier),
        DisplayField.PROFIT: _fmt(view.profit),
    }


def fields_to_push(view: DerivedView, exclude: Optional[DisplayField]) -> Iterable[DisplayField]:
    """Displays a render pass refreshes for ``view``, skipping ``exclude``."""
    candidates = _INVALID_FIELDS if not view.valid else tuple(DisplayField)
    return [f for f in candidates if f is not exclude]


# ---------------------------------------------------------------------------
# Widget
# ---------------------------------------------------------------------------

class BetWidget:
    """
    One dice bet widget: a machine plus its observable display surface.

    Every ``on_*`` handler runs one action to completion and then one
    render pass; handlers never call each other.
    """

    def __init__(
        self,
        config: Optional[DiceConfig] = None,
        state: Optional[BetConfiguration] = None,
    ):
        self.machine = BetConfigMachine(config=config, state=state)
        self.displays: Dict[DisplayField, str] = {}
        self._render(self.machine.view(), None)

    @property
    def state(self) -> BetConfiguration:
        return self.machine.state

    @property
    def view(self) -> DerivedView:
        return self.machine.view()

    # ------------------------------------------------------------------ #
    #  Event handlers                                                      #
    # ------------------------------------------------------------------ #

    def on_stake_input(self, raw: RawInput) -> Optional[DisplayField]:
        return self._apply(SetStake(parse_number(raw)))

    def on_slider_input(self, raw: RawInput) -> Optional[DisplayField]:
        return self._apply(SetThreshold(parse_number(raw)))

    def on_win_chance_input(self, raw: RawInput) -> Optional[DisplayField]:
        return self._apply(SetWinChance(parse_number(raw)))

    def on_toggle(self) -> Optional[DisplayField]:
        return self._apply(ToggleMode())

    def on_max_click(self, balance: RawInput, max_bet: RawInput = None) -> None:
        """Stake the lesser of balance and table maximum.

        The stake display is refreshed too: the value came from a button,
        not from typing.  A missing or unparseable maximum means no cap.
        """
        cap = parse_number(max_bet) or math.inf
        view, _ = self.machine.dispatch(SetStake(min(parse_number(balance), cap)))
        self._render(view, None)

    def on_click(self, target: Optional[DisplayField]) -> bool:
        """Page-level click.  Returns True if it triggered a recovery."""
        if self.machine.state.valid or target in _RECOVERY_EXEMPT:
            return False
        self._apply(Recover())
        return True

    # ------------------------------------------------------------------ #
    #  Settlement                                                          #
    # ------------------------------------------------------------------ #

    def settlement_request(self, client_seed: str) -> SettlementRequest:
        """Build the wire payload for the current configuration.

        Raises:
            SettlementError: If the configuration is invalid; there is no
                representable threshold to send.
        """
        s = self.machine.state
        if not s.valid:
            raise SettlementError("bet configuration is invalid: enter a valid win chance first")
        return SettlementRequest(
            mode=s.mode,
            threshold=to_hundredths(s.threshold),
            stake=to_hundredths(s.stake),
            client_seed=client_seed,
        )

    # ------------------------------------------------------------------ #
    #  Internals                                                           #
    # ------------------------------------------------------------------ #

    def _apply(self, action) -> Optional[DisplayField]:
        view, exclude = self.machine.dispatch(action)
        self._render(view, exclude)
        return exclude

    def _render(self, view: DerivedView, exclude: Optional[DisplayField]) -> None:
        formatted = format_view(view)
        for f in fields_to_push(view, exclude):
            self.displays[f] = formatted[f]
