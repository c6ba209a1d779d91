"""
Pydantic request/response schemas for the dice configurator API and the
wagering backend wire contract.

Wire models use the backend's camelCase keys as aliases; Python code uses
snake_case attribute names.
"""

from __future__ import annotations

from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from dicebet.core import odds_math
from dicebet.core.game_config import DEFAULT_CONFIG, RollMode


# ---------------------------------------------------------------------------
# Settlement contract
# ---------------------------------------------------------------------------

class SettlementRequest(BaseModel):
    """
    Bet submitted to the wagering backend.

    Threshold and stake are integer hundredths: 49.50 → 4950, $10.00 → 1000.
    """

    model_config = ConfigDict(populate_by_name=True)

    mode: RollMode
    threshold: int = Field(..., ge=0, description="Threshold in hundredths")
    stake: int = Field(..., ge=0, description="Wager in cents")
    client_seed: str = Field(..., alias="clientSeed", max_length=64)

    def wire_payload(self) -> Dict:
        """Body for the backend's ``bet`` action."""
        return {
            "rollUnder": self.mode is RollMode.UNDER,
            "threshold": self.threshold,
            "wagerCents": self.stake,
            "clientSeed": self.client_seed,
        }


class SettlementResult(BaseModel):
    """Backend answer to a settled bet."""

    model_config = ConfigDict(populate_by_name=True)

    won: bool
    result: int = Field(..., ge=0, description="Roll in hundredths")
    delta_cents: int = Field(..., alias="deltaCents")
    server_seed: Optional[str] = Field(None, alias="serverSeed")


class SettlementPreviewResponse(BaseModel):
    """What a bet would pay, checked against the backend's rules."""

    accepted: bool
    error: Optional[str] = None
    win_delta_cents: Optional[int] = None
    loss_delta_cents: Optional[int] = None


# ---------------------------------------------------------------------------
# Odds quote
# ---------------------------------------------------------------------------

class OddsQuote(BaseModel):
    mode: RollMode
    threshold: float
    stake: float
    win_chance: float
    payout_multiplier: float
    profit: Optional[float] = Field(None, description="Empty when it truncates to zero")
    slider_position: float


# ---------------------------------------------------------------------------
# Widget dispatch
# ---------------------------------------------------------------------------

class BetConfigurationModel(BaseModel):
    """Round-tripped widget state; the API keeps none between calls."""

    stake: float = Field(0.0, ge=0, allow_inf_nan=False)
    mode: RollMode = RollMode.UNDER
    threshold: float = Field(DEFAULT_CONFIG.under_default, allow_inf_nan=False)
    valid: bool = True

    @model_validator(mode="after")
    def check_winnable(self):
        # A valid configuration must leave at least one winning outcome.
        if self.valid and odds_math.win_chance(self.mode, self.threshold) <= 0:
            raise ValueError(
                f"threshold {self.threshold} leaves no winning rolls {self.mode.value}"
            )
        return self


ActionType = Literal[
    "toggle_mode",
    "set_threshold",
    "set_win_chance",
    "set_stake",
    "recover",
]


class WidgetAction(BaseModel):
    type: ActionType
    value: Optional[str] = Field(
        None, max_length=64, description="Raw, unparsed input for set_* actions"
    )

    @field_validator("value", mode="before")
    @classmethod
    def coerce_raw(cls, v):
        # Browsers send numbers for range inputs and strings for text boxes.
        if v is None or isinstance(v, str):
            return v
        return str(v)


class DispatchRequest(BaseModel):
    state: BetConfigurationModel = Field(default_factory=BetConfigurationModel)
    action: WidgetAction


class DispatchResponse(BaseModel):
    state: BetConfigurationModel
    displays: Dict[str, str]
    exclude: Optional[str] = None
