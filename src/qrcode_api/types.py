from __future__ import annotations

from typing import Literal, TypedDict

ImageType = Literal["png", "jpeg", "gif"]
CorrectionLevel = Literal["L", "M", "Q", "H"]
MediaType = Literal["image/png", "image/jpeg", "image/gif"]
RequestField = Literal["contents", "size", "correction", "type"]


class Defaults(TypedDict):
    size: int
    image_type: ImageType
    correction: CorrectionLevel


class GenerationRequest(TypedDict, total=True):
    contents: str
    size: int  # pixels, validated to [150, 350]
    image_type: ImageType
    correction: CorrectionLevel


class QrMatrix(TypedDict):
    size: int
    rows: tuple[bytes, ...]  # one byte per pixel: 1 dark, 0 light


class EncodedImage(TypedDict):
    content: bytes
    media_type: MediaType


__all__ = [
    "CorrectionLevel",
    "Defaults",
    "EncodedImage",
    "GenerationRequest",
    "ImageType",
    "MediaType",
    "QrMatrix",
    "RequestField",
]
