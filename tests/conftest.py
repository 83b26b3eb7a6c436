from __future__ import annotations

from collections.abc import Generator

import pytest

import qrcode_api.encoder as encoder_mod
from qrcode_api import _test_hooks
from qrcode_api.settings import Settings


@pytest.fixture(autouse=True)
def _restore_hooks() -> Generator[None, None, None]:
    """Restore all hooks after each test."""
    original_env = _test_hooks.get_env
    original_import = encoder_mod._import_module
    yield
    _test_hooks.get_env = original_env
    encoder_mod._import_module = original_import


@pytest.fixture
def settings() -> Settings:
    return {"log_level": "INFO", "log_format": "text", "service_name": "qrcode-api"}
