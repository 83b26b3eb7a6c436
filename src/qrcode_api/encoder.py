from __future__ import annotations

from collections.abc import Callable, Sequence
from importlib import import_module
from types import ModuleType
from typing import Final, Protocol, TypeGuard

from .errors import EncodingFailure
from .types import CorrectionLevel, QrMatrix

# Light modules required around the symbol on every side.
QUIET_ZONE: Final[int] = 4


class _SegnoQRCode(Protocol):
    @property
    def matrix(self) -> Sequence[bytearray]:
        """Symbol modules without border, 0x1 for dark."""


class _SegnoModule(Protocol):
    def make(
        self, content: str, *, error: str, micro: bool, boost_error: bool
    ) -> _SegnoQRCode:
        """Create a QR code object."""


# Hook for testing - allows injecting a fake module loader.
_import_module: Callable[[str], ModuleType] = import_module


def _is_segno_module(candidate: ModuleType) -> TypeGuard[_SegnoModule]:
    return hasattr(candidate, "make")


def _load_segno_module() -> _SegnoModule:
    module = _import_module("segno")
    if not _is_segno_module(module):
        raise RuntimeError("segno module does not expose make()")
    return module


def _scale_symbol(modules: Sequence[bytes | bytearray], width: int, height: int) -> QrMatrix:
    """Scale a bare symbol onto a square canvas of at least ``width`` pixels.

    Each module becomes a square block of whole pixels; the remainder is
    split evenly around the symbol, with the odd pixel on the trailing side.
    """
    input_size = len(modules)
    padded = input_size + 2 * QUIET_ZONE
    output = max(width, height, padded)
    multiple = output // padded
    padding = (output - input_size * multiple) // 2
    trailing = output - padding - input_size * multiple

    blank = bytes(output)
    rows: list[bytes] = [blank] * padding
    lead = bytes(padding)
    tail = bytes(trailing)
    for module_row in modules:
        scaled = b"".join(b"\x01" * multiple if cell else b"\x00" * multiple for cell in module_row)
        rows.extend([lead + scaled + tail] * multiple)
    rows.extend([blank] * trailing)
    return {"size": output, "rows": tuple(rows)}


def encode_symbol(
    contents: str, width: int, height: int, correction: CorrectionLevel
) -> QrMatrix:
    """Encode ``contents`` into a square module grid of ``width`` x ``height`` pixels.

    Raises:
        EncodingFailure: if the dimensions are not a positive square or the
            contents exceed the symbol capacity at the requested level.
    """
    if width != height or width <= 0:
        raise EncodingFailure(f"Requested dimensions are not a positive square: {width}x{height}")
    module = _load_segno_module()
    try:
        qr = module.make(contents, error=correction, micro=False, boost_error=False)
    except ValueError as exc:
        # segno.DataOverflowError subclasses ValueError
        raise EncodingFailure(f"Could not encode contents: {exc}") from exc
    return _scale_symbol(qr.matrix, width, height)


__all__ = ["QUIET_ZONE", "encode_symbol"]
