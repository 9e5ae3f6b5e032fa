"""
Abstract base class for relay delivery channels.

Defines the AlertChannel interface that every outbound transport
implements, so the webhook entry point can deliver a rendered message
without knowing where it goes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class AlertChannel(ABC):
    """Base class every delivery channel must implement.

    Attributes:
        name: Channel name used in delivery logs.
    """

    name: str = "base"

    @abstractmethod
    async def send(self, message: dict[str, Any]) -> bool:
        """Deliver a rendered *message* to the channel's backend.

        Args:
            message: Slack-style ``{"text": ..., "blocks": [...]}`` payload.

        Returns:
            ``True`` if delivery succeeded, ``False`` otherwise.
        """

    async def close(self) -> None:
        """Release any resources held by the channel (override if needed)."""
