"""
Messaging utilities for the AppNeta relay.

This package provides the async Redis client wrapper that backs the
deduplication store.
"""
