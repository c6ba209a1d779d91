"""
Client for the external wagering backend.

The backend exposes a single JSON endpoint; every request is a POST whose
body carries an ``action`` key (``ping``, ``max_bet``, ``bet`` …).  A
rejected request comes back as ``{"error": "<human-readable message>"}``.

Failure classes
---------------
* :class:`WagerRejectedError` — the backend answered and said no
  (insufficient balance, bad threshold, expired signature).  The message
  is the backend's own and is safe to show to the user verbatim.
* :class:`WagerBackendError` — the backend could not be reached or
  answered with something that is not the protocol (HTTP 5xx, empty or
  non-JSON body).

Transport failures are retried.  Bet placement is only retried when the
connection was never established: a timeout after the request was sent
may already have settled the bet, so it is surfaced instead of replayed.

Nothing in this module touches a :class:`~dicebet.bet_config.BetConfiguration`.
"""

import logging
import time
from typing import Dict, Optional

import requests

from dicebet import settings
from dicebet.core.settlement import validate_bet
from dicebet.schemas import SettlementRequest, SettlementResult

logger = logging.getLogger(__name__)


class WagerBackendError(Exception):
    """The wagering backend was unreachable or broke protocol."""


class WagerRejectedError(WagerBackendError):
    """The wagering backend refused the request."""


class WagerClient:
    """Thin JSON-over-HTTP client for the wagering backend."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        connect_timeout: Optional[float] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_backoff: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url or settings.WAGER_BACKEND_URL
        self.connect_timeout = connect_timeout if connect_timeout is not None else settings.WAGER_CONNECT_TIMEOUT
        self.timeout = timeout if timeout is not None else settings.WAGER_TIMEOUT
        self.max_retries = max_retries if max_retries is not None else settings.WAGER_MAX_RETRIES
        self.retry_backoff = retry_backoff if retry_backoff is not None else settings.WAGER_RETRY_BACKOFF_SEC
        self.session = session or requests.Session()

    # ------------------------------------------------------------------ #
    #  Actions                                                             #
    # ------------------------------------------------------------------ #

    def ping(self) -> str:
        data = self._call("ping")
        return str(data.get("response", ""))

    def max_bet_cents(self) -> int:
        """Table maximum, in cents."""
        data = self._call("max_bet")
        try:
            return int(data["maxBetCents"])
        except (KeyError, TypeError, ValueError):
            raise WagerBackendError("malformed max_bet response from wagering service")

    def place_bet(
        self,
        request: SettlementRequest,
        message: str,
        signature: str,
    ) -> SettlementResult:
        """
        Submit a bet for settlement.

        The request is checked against the backend's own rules first so an
        out-of-range threshold never leaves the process.

        Raises:
            SettlementError: Local pre-check failed.
            WagerRejectedError: Backend refused the bet.
            WagerBackendError: Backend unreachable or response malformed.
        """
        validate_bet(request.mode, request.threshold, request.stake, request.client_seed)

        payload = {"message": message, "signature": signature, **request.wire_payload()}
        data = self._call("bet", payload, idempotent=False)
        try:
            result = SettlementResult.model_validate(data)
        except ValueError as exc:
            raise WagerBackendError(f"malformed bet response from wagering service: {exc}")

        logger.info(
            "Bet settled: %s %.2f @ %.2f -> %s (result %.2f, delta %+d cents)",
            request.mode.value, request.stake / 100, request.threshold / 100,
            "won" if result.won else "lost", result.result / 100, result.delta_cents,
        )
        return result

    # ------------------------------------------------------------------ #
    #  Transport                                                           #
    # ------------------------------------------------------------------ #

    def _call(self, action: str, payload: Optional[Dict] = None, idempotent: bool = True) -> Dict:
        body = {"action": action, **(payload or {})}
        # ConnectTimeout is a ConnectionError: the request never left.
        retryable = (
            (requests.exceptions.ConnectionError, requests.exceptions.Timeout)
            if idempotent
            else (requests.exceptions.ConnectionError,)
        )

        attempt = 0
        while True:
            try:
                response = self.session.post(
                    self.base_url,
                    json=body,
                    timeout=(self.connect_timeout, self.timeout),
                )
                break
            except retryable as exc:
                attempt += 1
                if attempt > self.max_retries:
                    logger.error("Wagering service %s failed after %d attempts: %s", action, attempt, exc)
                    raise WagerBackendError(f"wagering service unreachable: {exc}")
                logger.warning("Wagering service %s attempt %d failed: %s; retrying", action, attempt, exc)
                time.sleep(self.retry_backoff * attempt)
            except requests.exceptions.Timeout as exc:
                logger.error("Wagering service %s timed out after send: %s", action, exc)
                raise WagerBackendError(
                    "wagering service timed out; the bet may have been placed, "
                    "check your bet history before retrying"
                )
            except requests.exceptions.RequestException as exc:
                logger.error("Wagering service %s error: %s", action, exc)
                raise WagerBackendError(f"wagering service request failed: {exc}")

        return self._decode(action, response)

    @staticmethod
    def _decode(action: str, response: requests.Response) -> Dict:
        if not response.content:
            raise WagerBackendError("empty response from wagering service")
        try:
            data = response.json()
        except ValueError:
            raise WagerBackendError(
                f"malformed response from wagering service (HTTP {response.status_code})"
            )

        if isinstance(data, dict) and data.get("error"):
            logger.info("Wagering service rejected %s: %s", action, data["error"])
            raise WagerRejectedError(str(data["error"]))
        if response.status_code >= 400:
            raise WagerBackendError(f"wagering service returned HTTP {response.status_code}")
        if not isinstance(data, dict):
            raise WagerBackendError("malformed response from wagering service")
        return data
