"""
FastAPI application for the dice bet configurator.

Exposes the odds calculator and the bet configuration state machine over
HTTP.  The server keeps no widget state: clients send the configuration
with every dispatch and receive the updated configuration back.
"""

from dataclasses import asdict
from datetime import datetime
import logging

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from dicebet import settings
from dicebet.bet_config import (
    BetConfigMachine,
    BetConfiguration,
    Recover,
    SetStake,
    SetThreshold,
    SetWinChance,
    ToggleMode,
)
from dicebet.core import odds_math
from dicebet.core.game_config import DEFAULT_CONFIG, RollMode
from dicebet.core.settlement import SettlementError, validate_bet, win_delta_cents
from dicebet.core.slider import slider_position
from dicebet.schemas import (
    BetConfigurationModel,
    DispatchRequest,
    DispatchResponse,
    OddsQuote,
    SettlementPreviewResponse,
    SettlementRequest,
    WidgetAction,
)
from dicebet.services.widget import fields_to_push, format_view, parse_number

# Logging setup
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0"

app = FastAPI(
    title="Dice Bet Configurator",
    description="Provably-fair dice odds and bet configuration",
    version=APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """Health check"""
    return {
        "app": "Dice Bet Configurator",
        "version": APP_VERSION,
        "status": "operational",
        "timestamp": datetime.utcnow().isoformat(),
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "house_edge": DEFAULT_CONFIG.house_edge,
        "bounds": {
            RollMode.UNDER.value: DEFAULT_CONFIG.bounds(RollMode.UNDER),
            RollMode.OVER.value: DEFAULT_CONFIG.bounds(RollMode.OVER),
        },
    }


# ============================================================================
# ODDS
# ============================================================================

@app.get("/api/odds", response_model=OddsQuote)
async def get_odds(
    mode: RollMode = Query(default=RollMode.UNDER),
    threshold: float = Query(default=DEFAULT_CONFIG.under_default),
    stake: float = Query(default=0.0, ge=0),
):
    """Quote win chance, payout and profit for one configuration."""
    if not odds_math.in_bounds(mode, threshold):
        lo, hi = DEFAULT_CONFIG.bounds(mode)
        raise HTTPException(
            status_code=422,
            detail=f"threshold {threshold:.2f} outside {mode.value} range [{lo:.2f}, {hi:.2f}]",
        )

    chance = odds_math.win_chance(mode, threshold)
    multiplier = odds_math.payout_multiplier(chance)
    return OddsQuote(
        mode=mode,
        threshold=threshold,
        stake=stake,
        win_chance=chance,
        payout_multiplier=multiplier,
        profit=odds_math.profit(stake, multiplier),
        slider_position=slider_position(threshold),
    )


# ============================================================================
# WIDGET
# ============================================================================

def _to_machine_action(action: WidgetAction):
    value = parse_number(action.value)
    if action.type == "toggle_mode":
        return ToggleMode()
    if action.type == "set_threshold":
        return SetThreshold(value)
    if action.type == "set_win_chance":
        return SetWinChance(value)
    if action.type == "set_stake":
        return SetStake(value)
    return Recover()


@app.post("/api/widget/dispatch", response_model=DispatchResponse)
async def dispatch_widget_action(payload: DispatchRequest):
    """
    Apply one widget action to a client-held configuration.

    ``displays`` holds only the surfaces this render pass refreshes;
    ``exclude`` names the one the client is editing and must not overwrite.
    """
    machine = BetConfigMachine(state=BetConfiguration(**payload.state.model_dump()))
    view, exclude = machine.dispatch(_to_machine_action(payload.action))

    formatted = format_view(view)
    displays = {f.value: formatted[f] for f in fields_to_push(view, exclude)}

    return DispatchResponse(
        state=BetConfigurationModel(**asdict(machine.state)),
        displays=displays,
        exclude=exclude.value if exclude else None,
    )


# ============================================================================
# SETTLEMENT
# ============================================================================

@app.post("/api/settlement/preview", response_model=SettlementPreviewResponse)
async def preview_settlement(request: SettlementRequest):
    """
    Check a bet against the backend's rules and report what it would pay.

    Rejections are reported in the body, not as HTTP errors: the preview
    itself succeeded.
    """
    try:
        validate_bet(request.mode, request.threshold, request.stake, request.client_seed)
    except SettlementError as exc:
        return SettlementPreviewResponse(accepted=False, error=str(exc))

    return SettlementPreviewResponse(
        accepted=True,
        win_delta_cents=win_delta_cents(request.mode, request.threshold, request.stake),
        loss_delta_cents=-request.stake,
    )
