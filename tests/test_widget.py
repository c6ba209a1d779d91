"""Tests for the widget adapter: raw input parsing, render exclusion, recovery."""

import math

import pytest

from dicebet.bet_config import DisplayField
from dicebet.core.game_config import RollMode
from dicebet.core.settlement import SettlementError
from dicebet.services.widget import BetWidget, format_view, parse_number


# ---------------------------------------------------------------------------
# parse_number
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("raw, expected", [
    ("12.5", 12.5),
    ("  7 ", 7.0),
    ("0.", 0.0),
    (".5", 0.5),
    ("12.5abc", 12.5),
    ("1,234.50", 1234.5),
    ("-3", -3.0),
    ("1e2", 100.0),
    ("", 0.0),
    ("abc", 0.0),
    ("nan", 0.0),
    ("inf", 0.0),
    (None, 0.0),
    (42, 42.0),
    (3.25, 3.25),
    (math.nan, 0.0),
    (math.inf, 0.0),
    (True, 0.0),
])
def test_parse_number(raw, expected):
    assert parse_number(raw) == expected


def test_parse_number_never_raises_on_junk():
    for raw in ["--1", "+", ".", "1e", "1e999", "\x00", "½"]:
        assert isinstance(parse_number(raw), float)


# ---------------------------------------------------------------------------
# Initial render
# ---------------------------------------------------------------------------

def test_initial_displays():
    w = BetWidget()
    d = w.displays

    assert d[DisplayField.STAKE] == ""
    assert d[DisplayField.MODE_LABEL] == "UNDER"
    assert d[DisplayField.THRESHOLD] == "49.50"
    assert d[DisplayField.WIN_CHANCE] == "49.50"
    assert d[DisplayField.PAYOUT] == "2.00"
    assert d[DisplayField.PROFIT] == ""
    assert d[DisplayField.SLIDER] == "49.50"


def test_format_view_two_decimals():
    w = BetWidget()
    w.on_stake_input("10")
    formatted = format_view(w.view)

    assert formatted[DisplayField.STAKE] == "10.00"
    assert formatted[DisplayField.PROFIT] == "10.00"


# ---------------------------------------------------------------------------
# Render exclusion
# ---------------------------------------------------------------------------

class TestRenderExclusion:

    def test_stake_input_does_not_overwrite_stake_display(self):
        w = BetWidget()
        w.displays[DisplayField.STAKE] = "10."      # what the user has typed
        exclude = w.on_stake_input("10.")

        assert exclude is DisplayField.STAKE
        assert w.displays[DisplayField.STAKE] == "10."
        assert w.displays[DisplayField.PROFIT] == "10.00"

    def test_win_chance_input_does_not_overwrite_win_chance(self):
        w = BetWidget()
        w.displays[DisplayField.WIN_CHANCE] = "25"
        w.on_win_chance_input("25")

        assert w.displays[DisplayField.WIN_CHANCE] == "25"
        assert w.displays[DisplayField.THRESHOLD] == "25.00"
        assert w.displays[DisplayField.PAYOUT] == "3.96"

    def test_slider_input_updates_everything_but_slider(self):
        w = BetWidget()
        w.displays[DisplayField.SLIDER] = "dragging"
        w.on_slider_input("30")

        assert w.displays[DisplayField.SLIDER] == "dragging"
        assert w.displays[DisplayField.WIN_CHANCE] == "30.00"
        assert w.displays[DisplayField.THRESHOLD] == "30.00"

    def test_toggle_refreshes_all(self):
        w = BetWidget()
        w.on_toggle()

        assert w.displays[DisplayField.MODE_LABEL] == "OVER"
        assert w.displays[DisplayField.THRESHOLD] == "50.49"
        assert w.displays[DisplayField.WIN_CHANCE] == "49.50"
        assert w.displays[DisplayField.SLIDER] == "50.49"


# ---------------------------------------------------------------------------
# Invalid state and recovery
# ---------------------------------------------------------------------------

class TestInvalidState:

    def test_partial_win_chance_goes_invalid(self):
        w = BetWidget()
        w.on_stake_input("10")
        w.displays[DisplayField.WIN_CHANCE] = "0."
        w.on_win_chance_input("0.")

        assert not w.state.valid
        assert w.displays[DisplayField.WIN_CHANCE] == "0."
        assert w.displays[DisplayField.THRESHOLD] == ""
        assert w.displays[DisplayField.PAYOUT] == ""
        assert w.displays[DisplayField.PROFIT] == ""
        assert w.displays[DisplayField.SLIDER] == "1.00"
        assert w.displays[DisplayField.SLIDER_FILL] == "0.00"

    def test_invalid_render_leaves_stake_alone(self):
        w = BetWidget()
        w.on_max_click(10, None)
        w.on_win_chance_input("0.5")

        assert w.displays[DisplayField.STAKE] == "10.00"
        assert w.displays[DisplayField.MODE_LABEL] == "UNDER"

    def test_continuing_to_type_recovers(self):
        w = BetWidget()
        w.on_win_chance_input("0.")
        w.on_win_chance_input("0.5")
        w.on_win_chance_input("5")

        assert w.state.valid
        assert w.displays[DisplayField.THRESHOLD] == "5.00"

    def test_toggle_locked_while_invalid(self):
        w = BetWidget()
        w.on_win_chance_input("0")
        w.on_toggle()

        assert w.state.mode is RollMode.UNDER

    @pytest.mark.parametrize("target", [DisplayField.WIN_CHANCE, DisplayField.PAYOUT])
    def test_click_on_win_chance_controls_does_not_recover(self, target):
        w = BetWidget()
        w.on_win_chance_input("0")

        assert w.on_click(target) is False
        assert not w.state.valid

    @pytest.mark.parametrize("target", [None, DisplayField.STAKE, DisplayField.MODE_LABEL])
    def test_click_elsewhere_recovers(self, target):
        w = BetWidget()
        w.on_win_chance_input("0")

        assert w.on_click(target) is True
        assert w.state.valid
        assert w.displays[DisplayField.THRESHOLD] == "49.50"
        assert w.displays[DisplayField.WIN_CHANCE] == "49.50"

    def test_click_while_valid_is_ignored(self):
        w = BetWidget()
        w.on_slider_input("30")

        assert w.on_click(None) is False
        assert w.state.threshold == 30.0

    def test_over_recovery_midpoint(self):
        w = BetWidget()
        w.on_toggle()
        w.on_win_chance_input("1")
        w.on_click(None)

        assert w.displays[DisplayField.THRESHOLD] == "50.49"


# ---------------------------------------------------------------------------
# Max bet and settlement payload
# ---------------------------------------------------------------------------

class TestMaxClick:

    def test_stakes_balance_when_below_cap(self):
        w = BetWidget()
        w.on_max_click("250.00", 3000)

        assert w.state.stake == 250.0
        assert w.displays[DisplayField.STAKE] == "250.00"

    def test_capped_by_table_maximum(self):
        w = BetWidget()
        w.on_max_click(5000, "3,000")

        assert w.state.stake == 3000.0

    def test_missing_cap_means_balance(self):
        w = BetWidget()
        w.on_max_click(75, None)

        assert w.state.stake == 75.0


class TestSettlementRequest:

    def test_scaled_to_hundredths(self):
        w = BetWidget()
        w.on_stake_input("12.34")
        w.on_toggle()
        req = w.settlement_request("a1b2c3d4e5f6")

        assert req.mode is RollMode.OVER
        assert req.threshold == 5049
        assert req.stake == 1234
        assert req.client_seed == "a1b2c3d4e5f6"

    def test_wire_payload_uses_backend_keys(self):
        w = BetWidget()
        w.on_stake_input("1")
        payload = w.settlement_request("seed-123").wire_payload()

        assert payload == {
            "rollUnder": True,
            "threshold": 4950,
            "wagerCents": 100,
            "clientSeed": "seed-123",
        }

    def test_invalid_configuration_cannot_be_submitted(self):
        w = BetWidget()
        w.on_win_chance_input("0")

        with pytest.raises(SettlementError):
            w.settlement_request("a1b2c3d4")


# ---------------------------------------------------------------------------
# Totality over raw input
# ---------------------------------------------------------------------------

_RAW_INPUTS = ["", "abc", "0", "0.", "-5", "-1e308", "99.99", "150", "1e307", "1e308", None]


class TestTotality:
    """No raw value reaching a handler can raise, in either mode."""

    @pytest.mark.parametrize("mode", [RollMode.UNDER, RollMode.OVER])
    @pytest.mark.parametrize("raw", _RAW_INPUTS)
    @pytest.mark.parametrize("handler", ["on_stake_input", "on_slider_input", "on_win_chance_input"])
    def test_handlers_never_raise(self, mode, raw, handler):
        w = BetWidget()
        if mode is RollMode.OVER:
            w.on_toggle()

        getattr(w, handler)(raw)
        w.on_toggle()
        w.on_click(None)
        w.on_max_click(raw, raw)

        assert set(w.displays) == set(DisplayField)

    @pytest.mark.parametrize("raw", ["", "abc", "0", "-1"])
    def test_junk_slider_lands_on_track_start(self, raw):
        w = BetWidget()
        w.on_slider_input(raw)

        assert w.state.valid
        assert w.state.threshold == 1.00
        assert w.displays[DisplayField.WIN_CHANCE] == "1.00"
        assert w.displays[DisplayField.PAYOUT] == "99.00"

    def test_over_slider_past_end_is_clamped(self):
        w = BetWidget()
        w.on_toggle()
        w.on_slider_input("99.99")

        assert w.state.threshold == 98.99
        assert w.displays[DisplayField.PAYOUT] == "99.00"

    def test_huge_values_through_every_handler(self):
        w = BetWidget()
        w.on_stake_input("1e307")
        w.on_win_chance_input("1e308")
        w.on_toggle()
        w.on_win_chance_input("1e308")
        w.on_toggle()

        assert w.state.valid
        assert w.state.stake == 1e307

    def test_unrepresentable_stake_cannot_be_submitted(self):
        w = BetWidget()
        w.on_stake_input("1e307")

        with pytest.raises(SettlementError):
            w.settlement_request("a1b2c3d4")
