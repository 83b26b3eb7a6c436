from __future__ import annotations

import io
from typing import Final

from PIL import Image

from .errors import RenderFailure
from .types import ImageType, MediaType, QrMatrix

_MEDIA_TYPES: Final[dict[str, MediaType]] = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
}

_PIL_FORMATS: Final[dict[ImageType, str]] = {
    "png": "PNG",
    "jpeg": "JPEG",
    "gif": "GIF",
}

# Module value to 8-bit luminance: dark -> black, light -> white.
_TO_GRAY: Final[bytes] = bytes.maketrans(b"\x00\x01", b"\xff\x00")


def media_type_for(image_type: str) -> MediaType:
    """Content type for a raster format name (case-insensitive)."""
    media_type = _MEDIA_TYPES.get(image_type.lower())
    if media_type is None:
        raise RenderFailure(f"No media type for image type {image_type!r}")
    return media_type


def _to_image(matrix: QrMatrix) -> Image.Image:
    size = matrix["size"]
    rows = matrix["rows"]
    if len(rows) != size or any(len(row) != size for row in rows):
        raise RenderFailure(f"Matrix is not {size}x{size}")
    pixels = b"".join(row.translate(_TO_GRAY) for row in rows)
    return Image.frombytes("L", (size, size), pixels)


def render_raster(matrix: QrMatrix, image_type: ImageType) -> bytes:
    """Serialize a QR matrix as a black and white raster image.

    Raises:
        RenderFailure: if the format is unknown or the encoder rejects the image.
    """
    pil_format = _PIL_FORMATS.get(image_type)
    if pil_format is None:
        raise RenderFailure(f"Unsupported image type {image_type!r}")
    image = _to_image(matrix)
    buf = io.BytesIO()
    try:
        image.save(buf, format=pil_format)
    except (KeyError, OSError, ValueError) as exc:
        raise RenderFailure(f"Could not write {pil_format} image: {exc}") from exc
    return buf.getvalue()


__all__ = ["media_type_for", "render_raster"]
