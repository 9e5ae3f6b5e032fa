"""
relay-common: Shared library for the AppNeta alert relay.

Provides the AppNeta event models, configuration management, the
error taxonomy, structured logging setup, and the Redis client wrapper
used by the relay service.
"""

from relay_common.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
