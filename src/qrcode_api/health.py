"""Liveness probe for qrcode-api.

Signals that the process is up and serving; it does not exercise the
encoder or renderer.
"""

from __future__ import annotations

from typing import Literal

from typing_extensions import TypedDict


class HealthResponse(TypedDict):
    """Response for the liveness probe."""

    status: Literal["ok"]


def healthz() -> HealthResponse:
    """Liveness probe - always returns ok."""
    return {"status": "ok"}


__all__ = ["HealthResponse", "healthz"]
