from __future__ import annotations

import time
from typing import Final

from .encoder import encode_symbol
from .errors import AppError, EncodingFailure, ErrorCode, RenderFailure
from .logging import get_logger
from .renderer import media_type_for, render_raster
from .types import EncodedImage, GenerationRequest

ERROR_GENERATION: Final[str] = "An error occurred while generating the QR code"

_logger = get_logger(__name__)


def generate_image(request: GenerationRequest) -> EncodedImage:
    """Encode and render a validated request.

    A single attempt is made. Encoding and rendering failures are logged with
    full detail and surface as a generic internal error.
    """
    t0 = time.perf_counter()
    try:
        media_type = media_type_for(request["image_type"])
        matrix = encode_symbol(
            request["contents"], request["size"], request["size"], request["correction"]
        )
        content = render_raster(matrix, request["image_type"])
    except (EncodingFailure, RenderFailure) as exc:
        _logger.error(
            "qr_generation_failed",
            extra={
                "error_type": type(exc).__name__,
                "error_message": str(exc),
                "image_type": request["image_type"],
                "size": request["size"],
                "correction": request["correction"],
            },
            exc_info=True,
        )
        raise AppError(ErrorCode.INTERNAL_ERROR, ERROR_GENERATION) from exc

    _logger.info(
        "qr_generated",
        extra={
            "image_type": request["image_type"],
            "size": request["size"],
            "correction": request["correction"],
            "bytes": len(content),
            "latency_ms": int((time.perf_counter() - t0) * 1000.0),
        },
    )
    return {"content": content, "media_type": media_type}


__all__ = ["ERROR_GENERATION", "generate_image"]
