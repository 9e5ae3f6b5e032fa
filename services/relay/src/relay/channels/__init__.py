"""
Delivery channel implementations for the relay.

Contains the abstract AlertChannel base class and the Slack webhook
channel.
"""

from .base import AlertChannel
from .slack_channel import SlackChannel

__all__ = [
    "AlertChannel",
    "SlackChannel",
]
