"""
Environment configuration for the dice configurator services.

Values come from the process environment, with a ``.env`` file loaded
first for local development.  Game constants (edge, bounds) are not read
here; they live in :class:`dicebet.core.game_config.DiceConfig`.
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Wagering backend (single JSON endpoint, action-dispatched)
WAGER_BACKEND_URL = os.getenv("WAGER_BACKEND_URL", "http://127.0.0.1:8000")
WAGER_CONNECT_TIMEOUT = float(os.getenv("WAGER_CONNECT_TIMEOUT", "5"))
WAGER_TIMEOUT = float(os.getenv("WAGER_TIMEOUT", "15"))
WAGER_MAX_RETRIES = int(os.getenv("WAGER_MAX_RETRIES", "2"))
WAGER_RETRY_BACKOFF_SEC = float(os.getenv("WAGER_RETRY_BACKOFF_SEC", "0.5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def cors_origins() -> List[str]:
    """Comma-separated ``CORS_ORIGINS``; defaults to the local dashboard."""
    raw = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8501")
    return [o.strip() for o in raw.split(",") if o.strip()]
