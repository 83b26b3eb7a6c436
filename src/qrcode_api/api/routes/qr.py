from __future__ import annotations

from fastapi import APIRouter, Request
from starlette.responses import Response

from ...dispatcher import generate_image
from ...types import Defaults, GenerationRequest
from ...validators import decode_generation_request


def build_router(defaults: Defaults) -> APIRouter:
    router = APIRouter()

    # Sync handler; FastAPI runs it in the threadpool.
    def _qr_handler(request: Request) -> Response:
        req: GenerationRequest = decode_generation_request(request.query_params, defaults)
        image = generate_image(req)
        return Response(content=image["content"], media_type=image["media_type"])

    router.add_api_route("/api/qrcode", _qr_handler, methods=["GET"])
    return router


__all__ = ["build_router"]
