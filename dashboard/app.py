"""
Streamlit front end for the dice bet configurator.

Binds a BetWidget (one per browser session) to Streamlit inputs and
submits bets to the wagering backend.  Streamlit has no page-level click
listener, so every input callback other than the win-chance box counts as
a click outside the win-chance/payout controls and triggers recovery.
"""

import os
import secrets
from datetime import datetime

import pandas as pd
import streamlit as st
from dotenv import load_dotenv

from dicebet.bet_config import DisplayField
from dicebet.core.settlement import SettlementError, outcome_won
from dicebet.services.wager_client import WagerBackendError, WagerClient, WagerRejectedError
from dicebet.services.widget import BetWidget

load_dotenv()

AUTH_MESSAGE = os.getenv("WAGER_AUTH_MESSAGE", "")
AUTH_SIGNATURE = os.getenv("WAGER_AUTH_SIGNATURE", "")

st.set_page_config(
    page_title="Dice",
    page_icon="🎲",
    layout="centered",
)

# Zero-width space keeps a blanked metric from collapsing
_BLANK = "\u200b"

# Session keys of the editable inputs, per display surface
_INPUT_KEYS = {
    DisplayField.STAKE: "stake_input",
    DisplayField.WIN_CHANCE: "win_chance_input",
}


# ==============================================================================
# WIDGET BINDING
# ==============================================================================

def _widget() -> BetWidget:
    if "widget" not in st.session_state:
        st.session_state["widget"] = BetWidget()
        st.session_state["bets"] = []
        _sync_inputs(None)
    return st.session_state["widget"]


def _sync_inputs(exclude):
    """Copy the render pass into the editable inputs, skipping `exclude`."""
    w = st.session_state["widget"]
    for field, key in _INPUT_KEYS.items():
        if field is not exclude and field in w.displays:
            st.session_state[key] = w.displays[field]
    if exclude is not DisplayField.SLIDER:
        st.session_state["slider"] = float(w.view.slider_value)


def _on_stake():
    w = _widget()
    w.on_click(DisplayField.STAKE)
    _sync_inputs(w.on_stake_input(st.session_state["stake_input"]))


def _on_win_chance():
    w = _widget()
    _sync_inputs(w.on_win_chance_input(st.session_state["win_chance_input"]))


def _on_slider():
    w = _widget()
    _sync_inputs(w.on_slider_input(st.session_state["slider"]))


def _on_toggle():
    w = _widget()
    w.on_click(DisplayField.MODE_LABEL)
    _sync_inputs(w.on_toggle())


def _on_max():
    w = _widget()
    w.on_click(DisplayField.STAKE)
    w.on_max_click(st.session_state.get("balance", 0.0), _max_bet())
    _sync_inputs(None)


@st.cache_data(ttl=300)
def _max_bet():
    try:
        return WagerClient().max_bet_cents() / 100
    except WagerBackendError:
        return None


# ==============================================================================
# SIDEBAR
# ==============================================================================

widget = _widget()

with st.sidebar:
    st.title("🎲 Dice")
    st.number_input("Balance", min_value=0.0, step=1.0, key="balance")
    max_bet = _max_bet()
    st.caption(f"Max bet: {max_bet:,.2f}" if max_bet else "Max bet: unavailable")


# ==============================================================================
# CONFIGURATOR
# ==============================================================================

st.title("Dice")

col_stake, col_max = st.columns([4, 1])
with col_stake:
    st.text_input("Bet amount", key="stake_input", on_change=_on_stake, placeholder="Bet")
with col_max:
    st.button("MAX", on_click=_on_max, use_container_width=True)

view = widget.view
d = widget.displays

st.slider(
    f"Roll {d[DisplayField.MODE_LABEL]}",
    min_value=float(view.slider_min),
    max_value=float(view.slider_max),
    step=0.01,
    key="slider",
    on_change=_on_slider,
)
st.progress(min(max(float(d[DisplayField.SLIDER_FILL] or 0) / 100, 0.0), 1.0))

c1, c2, c3, c4 = st.columns(4)
with c1:
    st.metric(f"Roll {d[DisplayField.MODE_LABEL].lower()}", d[DisplayField.THRESHOLD] or _BLANK)
    st.button("⇄ Toggle", on_click=_on_toggle, disabled=not view.valid)
with c2:
    st.text_input("Win chance %", key="win_chance_input", on_change=_on_win_chance)
with c3:
    st.metric("Payout", f"{d[DisplayField.PAYOUT]}×" if d[DisplayField.PAYOUT] else _BLANK)
with c4:
    st.metric("Profit on win", d[DisplayField.PROFIT] or _BLANK)

if not view.valid:
    st.warning("Win chance is below the minimum. Click anywhere else to reset.")


# ==============================================================================
# ROLL
# ==============================================================================

def _on_roll():
    w = _widget()
    w.on_click(None)
    try:
        request = w.settlement_request(secrets.token_hex(16))
        result = WagerClient().place_bet(request, AUTH_MESSAGE, AUTH_SIGNATURE)
    except SettlementError as exc:
        st.session_state["last_result"] = ("error", f"Invalid bet: {exc}", None)
        return
    except WagerRejectedError as exc:
        st.session_state["last_result"] = ("error", f"Bet rejected: {exc}", None)
        return
    except WagerBackendError as exc:
        st.session_state["last_result"] = ("error", f"Could not reach the dice server: {exc}", None)
        return

    st.session_state["balance"] = max(st.session_state.get("balance", 0.0) + result.delta_cents / 100, 0.0)
    rolled = result.result / 100
    if result.won:
        text = f"YOU WON! Rolled {rolled:.2f}  (+{result.delta_cents / 100:.2f})"
    else:
        text = f"YOU LOST! Rolled {rolled:.2f}  ({result.delta_cents / 100:.2f})"
    if outcome_won(request.mode, request.threshold, result.result) != result.won:
        text += "  Result does not match the bet threshold; check the server seed."
    st.session_state["last_result"] = ("success" if result.won else "lost", text, result.server_seed)
    st.session_state["bets"].insert(0, {
        "time": datetime.now().strftime("%H:%M:%S"),
        "bet": request.stake / 100,
        "target": f"{'<' if request.mode.is_under else '>'} {request.threshold / 100:.2f}",
        "roll": rolled,
        "profit": result.delta_cents / 100,
    })


st.button("Roll", type="primary", on_click=_on_roll, disabled=not view.valid)

last = st.session_state.get("last_result")
if last:
    kind, text, server_seed = last
    if kind == "success":
        st.success(text)
    else:
        st.error(text)
    if server_seed:
        st.caption(f"Server seed: {server_seed}")

if st.session_state["bets"]:
    st.markdown("---")
    st.subheader("Recent Bets")
    st.dataframe(pd.DataFrame(st.session_state["bets"]), use_container_width=True)
