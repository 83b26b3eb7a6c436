"""Test hooks for qrcode-api - allows injecting test dependencies."""

from __future__ import annotations

import os
from collections.abc import Callable


def _default_get_env(key: str) -> str | None:
    """Production implementation - reads from os.environ, blank counts as unset."""
    value = os.getenv(key)
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed if trimmed != "" else None


# Config hook for reading environment variables.
# Tests can replace this to return test values.
get_env: Callable[[str], str | None] = _default_get_env
