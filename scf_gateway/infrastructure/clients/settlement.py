"""Settlement webhook client with exponential backoff retry logic"""

import asyncio
import logging
from typing import Any, Dict

import httpx

from scf_gateway.config import settings
from scf_gateway.domain.exceptions import SettlementAPIError
from scf_gateway.infrastructure.observability.metrics import (
    settlement_failure_counter,
    settlement_latency_histogram,
)


class SettlementClient:
    """
    Client for handing funding events to the settlement collaborator.

    The collaborator moves the funds and reports back through the explicit
    status endpoints (invoice paid, installment paid); nothing here touches
    ledger state.
    """

    def __init__(self, webhook_url: str | None = None, timeout: float | None = None):
        self.webhook_url = webhook_url or settings.settlement_webhook_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base

    async def send_settlement_event(self, payload: Dict[str, Any]) -> None:
        """
        Send a funding event with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^(attempt-1))
        - Retries on HTTP errors and network failures
        - Tracks latency histogram and failure counter

        Raises:
            SettlementAPIError: all attempts failed
        """
        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with settlement_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    settlement_failure_counter.inc()

                    if attempt >= self.max_retries:
                        raise SettlementAPIError(
                            f"Settlement delivery failed after {attempt} attempts"
                        ) from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)


async def dispatch_settlement(client: SettlementClient, payload: Dict[str, Any]) -> None:
    """Background task entry: a failed delivery is logged for reconciliation, not raised into the response"""
    try:
        await client.send_settlement_event(payload)
    except SettlementAPIError:
        logging.exception("Settlement event undelivered", extra={"event": payload.get("event")})
