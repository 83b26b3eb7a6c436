from __future__ import annotations

import pytest

from qrcode_api import _test_hooks
from qrcode_api.settings import load_settings


def test_load_settings_returns_defaults() -> None:
    _test_hooks.get_env = lambda key: None

    s = load_settings()

    assert s["log_level"] == "INFO"
    assert s["log_format"] == "json"
    assert s["service_name"] == "qrcode-api"


def test_load_settings_respects_overrides() -> None:
    env_values = {
        "QR_LOG_LEVEL": "debug",
        "QR_LOG_FORMAT": "TEXT",
        "QR_SERVICE_NAME": "qr-edge",
    }
    _test_hooks.get_env = lambda key: env_values.get(key)

    s = load_settings()

    assert s["log_level"] == "DEBUG"
    assert s["log_format"] == "text"
    assert s["service_name"] == "qr-edge"


def test_load_settings_unknown_values_fall_back() -> None:
    env_values = {"QR_LOG_LEVEL": "LOUD", "QR_LOG_FORMAT": "xml"}
    _test_hooks.get_env = lambda key: env_values.get(key)

    s = load_settings()

    assert s["log_level"] == "INFO"
    assert s["log_format"] == "json"


def test_default_get_env_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("QR_SERVICE_NAME", "   ")
    assert _test_hooks._default_get_env("QR_SERVICE_NAME") is None
    monkeypatch.setenv("QR_SERVICE_NAME", " named ")
    assert _test_hooks._default_get_env("QR_SERVICE_NAME") == "named"
