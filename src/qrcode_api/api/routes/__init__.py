"""QR code API routes.

Endpoints:
    Health:
        GET  /api/health   - Liveness probe (always returns ok)

    QR Generation:
        GET  /api/qrcode   - Render query parameters as a PNG, JPEG or GIF QR code
"""

from __future__ import annotations

from .health import build_router as build_health_router
from .qr import build_router as build_qr_router

__all__ = [
    "build_health_router",
    "build_qr_router",
]
