from __future__ import annotations

import unicodedata
from collections.abc import Mapping
from typing import Final

from .errors import ValidationError
from .types import CorrectionLevel, Defaults, GenerationRequest, ImageType

ERROR_IMAGE_CONTENTS: Final[str] = "Contents cannot be null or blank"
ERROR_IMAGE_SIZE: Final[str] = "Image size must be between 150 and 350 pixels"
ERROR_IMAGE_CORRECTION: Final[str] = "Permitted error correction levels are L, M, Q, H"
ERROR_IMAGE_TYPE: Final[str] = "Only png, jpeg and gif image types are supported"

MIN_SIZE: Final[int] = 150
MAX_SIZE: Final[int] = 350

DEFAULTS: Final[Defaults] = {"size": 250, "image_type": "png", "correction": "L"}

# Typed lookups give closed Literal values without casts.
_CORRECTION_LEVELS: Final[dict[str, CorrectionLevel]] = {"L": "L", "M": "M", "Q": "Q", "H": "H"}
_IMAGE_TYPES: Final[dict[str, ImageType]] = {"png": "png", "jpeg": "jpeg", "gif": "gif"}

_CONTROL_WHITESPACE: Final[frozenset[str]] = frozenset("\t\n\x0b\x0c\r\x1c\x1d\x1e\x1f")
_NO_BREAK_SPACES: Final[frozenset[str]] = frozenset("\u00a0\u2007\u202f")


def _is_blank_char(ch: str) -> bool:
    if ch in _CONTROL_WHITESPACE:
        return True
    return unicodedata.category(ch) in ("Zs", "Zl", "Zp") and ch not in _NO_BREAK_SPACES


def validate_contents(contents: str | None) -> bool:
    """True when contents are present and not blank.

    No-break spaces (U+00A0, U+2007, U+202F) and NEL count as content.
    """
    return contents is not None and not all(_is_blank_char(ch) for ch in contents)


def validate_size(size: int) -> bool:
    return MIN_SIZE <= size <= MAX_SIZE


def validate_correction(correction: str) -> bool:
    """True for a single character in L, M, Q, H (any case)."""
    return len(correction) == 1 and correction.upper() in _CORRECTION_LEVELS


def validate_type(image_type: str) -> bool:
    return image_type.lower() in _IMAGE_TYPES


def _param(params: Mapping[str, str], key: str) -> str | None:
    """Query value, with an empty value treated the same as an absent one."""
    value = params.get(key)
    if value is None or value == "":
        return None
    return value


def _parse_size(raw: str | None, default: int) -> int | None:
    if raw is None:
        return default
    text = raw.strip()
    digits = text[1:] if text[:1] in ("+", "-") else text
    if not digits.isascii() or not digits.isdigit():
        return None
    try:
        return int(text)
    except ValueError:
        # digit count beyond the interpreter conversion limit
        return None


def decode_generation_request(
    params: Mapping[str, str], defaults: Defaults = DEFAULTS
) -> GenerationRequest:
    """Apply defaults, validate and normalise raw query parameters.

    Checks run in the order contents, size, correction, type; the first
    failing check raises ``ValidationError`` and the rest are not evaluated.
    """
    contents = params.get("contents")
    if contents is None or not validate_contents(contents):
        raise ValidationError("contents", ERROR_IMAGE_CONTENTS)

    size = _parse_size(_param(params, "size"), defaults["size"])
    if size is None or not validate_size(size):
        raise ValidationError("size", ERROR_IMAGE_SIZE)

    correction_raw = _param(params, "correction")
    correction = correction_raw if correction_raw is not None else defaults["correction"]
    if not validate_correction(correction):
        raise ValidationError("correction", ERROR_IMAGE_CORRECTION)

    type_raw = _param(params, "type")
    image_type = type_raw if type_raw is not None else defaults["image_type"]
    if not validate_type(image_type):
        raise ValidationError("type", ERROR_IMAGE_TYPE)

    return {
        "contents": contents,
        "size": size,
        "image_type": _IMAGE_TYPES[image_type.lower()],
        "correction": _CORRECTION_LEVELS[correction.upper()],
    }


__all__ = [
    "DEFAULTS",
    "ERROR_IMAGE_CONTENTS",
    "ERROR_IMAGE_CORRECTION",
    "ERROR_IMAGE_SIZE",
    "ERROR_IMAGE_TYPE",
    "MAX_SIZE",
    "MIN_SIZE",
    "decode_generation_request",
    "validate_contents",
    "validate_correction",
    "validate_size",
    "validate_type",
]
