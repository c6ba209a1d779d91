"""
Tests for the dice odds calculator
Run with: pytest tests/test_odds_math.py -v
"""

import pytest

from dicebet.core.game_config import DEFAULT_CONFIG, RollMode
from dicebet.core.odds_math import (
    HOUSE_EDGE,
    floor2,
    in_bounds,
    payout_multiplier,
    profit,
    round2,
    toggle_threshold,
    win_chance,
)


class TestWinChance:
    """Win chance is the threshold (UNDER) or its complement (OVER)"""

    @pytest.mark.parametrize("threshold", [1.00, 12.34, 49.50, 75.00, 98.02])
    def test_under_equals_threshold(self, threshold):
        assert win_chance(RollMode.UNDER, threshold) == threshold

    @pytest.mark.parametrize("threshold", [1.97, 25.00, 50.49, 98.99])
    def test_over_is_complement(self, threshold):
        assert win_chance(RollMode.OVER, threshold) == pytest.approx(99.99 - threshold)

    def test_default_thresholds_have_equal_chance(self):
        under = win_chance(RollMode.UNDER, DEFAULT_CONFIG.under_default)
        over = win_chance(RollMode.OVER, DEFAULT_CONFIG.over_default)
        assert under == pytest.approx(over)


class TestPayoutMultiplier:
    """Fair odds shaded by the 1% house edge"""

    def test_even_chance_pays_double(self):
        # 99 / 49.5
        assert payout_multiplier(49.50) == pytest.approx(2.0)

    def test_highest_under_threshold(self):
        assert payout_multiplier(98.02) == pytest.approx(1.0100, abs=1e-4)

    def test_lowest_chance_pays_99x(self):
        assert payout_multiplier(1.00) == pytest.approx(99.0)

    @pytest.mark.parametrize("chance", [1.00, 1.97, 10.0, 33.33, 49.50, 80.0, 98.02])
    def test_fair_odds_identity(self, chance):
        assert payout_multiplier(chance) * chance / 100 == pytest.approx(1 - HOUSE_EDGE)

    def test_custom_house_edge(self):
        assert payout_multiplier(50.0, house_edge=0.0) == pytest.approx(2.0)

    @pytest.mark.parametrize("chance", [0.0, -5.0])
    def test_non_positive_chance_raises(self, chance):
        with pytest.raises(ValueError):
            payout_multiplier(chance)


class TestProfit:
    """Profit is truncated to the cent and blank when zero"""

    def test_even_chance_profit(self):
        assert profit(10.00, payout_multiplier(49.50)) == 10.00

    def test_truncates_never_rounds_up(self):
        # 10 * 0.0099979... = 0.0999 -> 0.09, not 0.10
        assert profit(10.00, payout_multiplier(98.02)) == 0.09

    def test_zero_stake_is_empty(self):
        assert profit(0.0, payout_multiplier(49.50)) is None

    def test_sub_cent_profit_is_empty(self):
        assert profit(0.50, payout_multiplier(98.02)) is None

    def test_float_noise_does_not_drop_a_cent(self):
        # 10 * (1.98 - 1) is 9.799999999999999 in binary
        assert profit(10.00, 1.98) == 9.80

    @pytest.mark.parametrize("threshold", [1.00, 20.00, 49.50, 98.02])
    def test_monotonic_in_stake(self, threshold):
        multiplier = payout_multiplier(threshold)
        previous = 0.0
        for cents in range(0, 5001, 37):
            p = profit(cents / 100, multiplier) or 0.0
            assert p >= previous
            previous = p

    @pytest.mark.parametrize("stake", [0.01, 1.23, 10.00, 99.99, 1234.56])
    @pytest.mark.parametrize("threshold", [1.00, 33.33, 49.50, 98.02])
    def test_never_exceeds_exact_profit(self, stake, threshold):
        multiplier = payout_multiplier(threshold)
        p = profit(stake, multiplier) or 0.0
        assert p <= stake * (multiplier - 1) + 1e-9


class TestRounding:

    def test_round2_half_up(self):
        assert round2(0.125) == 0.13

    def test_round2_cleans_float_noise(self):
        assert round2(99.99 - 49.50) == 50.49

    def test_floor2_truncates(self):
        assert floor2(9.8099) == 9.80
        assert floor2(0.0999) == 0.09

    @pytest.mark.parametrize("x", [1e307, -1e307, 1.7e308])
    def test_beyond_cent_resolution_returned_unchanged(self, x):
        assert round2(x) == x
        assert floor2(x) == x

    def test_huge_stake_profit_does_not_overflow(self):
        assert profit(1e305, payout_multiplier(1.00)) == pytest.approx(9.8e306)


class TestToggleThreshold:
    """UNDER and OVER thresholds are complementary"""

    def test_default_maps_to_default(self):
        assert toggle_threshold(49.50) == 50.49
        assert toggle_threshold(50.49) == 49.50

    def test_bounds_map_onto_each_other(self):
        assert toggle_threshold(DEFAULT_CONFIG.under_min) == DEFAULT_CONFIG.over_max
        assert toggle_threshold(DEFAULT_CONFIG.under_max) == DEFAULT_CONFIG.over_min

    @pytest.mark.parametrize("threshold", [1.00, 1.97, 7.77, 49.50, 50.49, 66.60, 98.02, 98.99])
    def test_double_toggle_is_identity(self, threshold):
        assert toggle_threshold(toggle_threshold(threshold)) == threshold


class TestInBounds:

    @pytest.mark.parametrize("mode, threshold, expected", [
        (RollMode.UNDER, 1.00, True),
        (RollMode.UNDER, 0.99, False),
        (RollMode.UNDER, 98.02, True),
        (RollMode.UNDER, 98.03, False),
        (RollMode.OVER, 1.96, False),
        (RollMode.OVER, 1.97, True),
        (RollMode.OVER, 98.99, True),
        (RollMode.OVER, 99.00, False),
    ])
    def test_bounds(self, mode, threshold, expected):
        assert in_bounds(mode, threshold) is expected
