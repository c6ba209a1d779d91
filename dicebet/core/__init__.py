"""Core mathematics and configuration for the dice bet configurator.

This package contains pure building blocks:

- ``game_config`` — roll modes and per-table constants (edge, bounds)
- ``odds_math``   — win chance, payout multiplier, profit, mode toggle
- ``slider``      — threshold → slider fill position (display only)
- ``settlement``  — integer-hundredths payout maths shared with the backend

Nothing in this package imports from ``dicebet.services`` or
``dicebet.bet_config``.  All modules are side-effect-free and
unit-testable in isolation.
"""
