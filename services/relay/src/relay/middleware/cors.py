"""
CORS middleware configuration for the relay webhook.

AppNeta posts from its own origin; browsers issue an ``OPTIONS``
preflight first, which Starlette's CORS middleware answers.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


def add_cors(app: FastAPI) -> None:
    """Attach CORS middleware allowing any origin to ``POST``."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["*"],
    )
