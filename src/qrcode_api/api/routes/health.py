from __future__ import annotations

from fastapi import APIRouter

from ...health import HealthResponse, healthz


def build_router() -> APIRouter:
    """Build health router with the /api/health liveness endpoint."""
    router = APIRouter()

    def _health() -> HealthResponse:
        return healthz()

    router.add_api_route("/api/health", _health, methods=["GET"])
    return router


__all__ = ["build_router"]
