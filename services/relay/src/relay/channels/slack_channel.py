"""
Slack delivery channel for the relay.

Posts rendered AppNeta messages to a Slack incoming webhook, retrying
transport failures, rate limiting (429) and server errors (5xx) with
exponential back-off.
"""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp
import structlog
from slack_sdk.webhook.async_client import AsyncWebhookClient
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .base import AlertChannel

logger = structlog.get_logger()

_DEFAULT_MAX_ATTEMPTS = 3
_DEFAULT_TIMEOUT_S = 10


class SlackRetryableError(Exception):
    """Slack answered with a status worth retrying (429 or 5xx)."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Slack responded {status_code}: {body}")


class SlackChannel(AlertChannel):
    """Send Block Kit messages via a Slack incoming webhook.

    Args:
        webhook_url: Slack incoming-webhook URL.
        max_attempts: Number of delivery attempts (default 3).
        timeout: Per-request timeout in seconds (default 10).
        max_wait_s: Upper bound on the back-off between attempts.
    """

    name: str = "slack"

    def __init__(
        self,
        webhook_url: str,
        *,
        max_attempts: int = _DEFAULT_MAX_ATTEMPTS,
        timeout: int = _DEFAULT_TIMEOUT_S,
        max_wait_s: float = 10.0,
    ) -> None:
        self.webhook_url = webhook_url
        self.max_attempts = max_attempts
        self.max_wait_s = max_wait_s
        self._client = AsyncWebhookClient(url=webhook_url, timeout=timeout)

    async def _post(self, message: dict[str, Any]) -> Any:
        response = await self._client.send(
            text=message.get("text"),
            blocks=message.get("blocks"),
        )
        if response.status_code == 429 or response.status_code >= 500:
            raise SlackRetryableError(response.status_code, str(response.body))
        return response

    async def _post_with_retry(self, message: dict[str, Any]) -> Any:
        """POST *message*, retrying per ``max_attempts``.

        The retrying controller is built per call so ``max_attempts`` can be
        set at construction time rather than module-import time.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, max=self.max_wait_s),
            retry=retry_if_exception_type(
                (SlackRetryableError, aiohttp.ClientError, asyncio.TimeoutError),
            ),
            reraise=True,
        )
        return await retrying(self._post, message)

    async def send(self, message: dict[str, Any]) -> bool:
        """Deliver *message* to Slack.

        Returns:
            ``True`` on a 200 response, ``False`` once retries are exhausted
            or Slack rejects the payload.
        """
        log = logger.bind(channel=self.name)
        if not self.webhook_url:
            log.error("slack_webhook_not_configured")
            return False
        try:
            response = await self._post_with_retry(message)
        except (SlackRetryableError, aiohttp.ClientError, asyncio.TimeoutError, RetryError) as exc:
            log.error("slack_delivery_failed", error=str(exc))
            return False
        if response.status_code == 200:
            log.info("slack_delivered")
            return True
        log.warning("slack_non_200", status=response.status_code, body=response.body)
        return False

    async def close(self) -> None:
        """No persistent resources to clean up."""
