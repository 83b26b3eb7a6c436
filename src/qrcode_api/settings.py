from __future__ import annotations

from typing import Final, TypedDict

from . import _test_hooks
from .logging import LogFormat, LogLevel

_DEFAULT_LOG_LEVEL: Final[LogLevel] = "INFO"
_DEFAULT_LOG_FORMAT: Final[LogFormat] = "json"
_DEFAULT_SERVICE_NAME: Final[str] = "qrcode-api"

_LOG_LEVELS: Final[dict[str, LogLevel]] = {
    "DEBUG": "DEBUG",
    "INFO": "INFO",
    "WARNING": "WARNING",
    "ERROR": "ERROR",
    "CRITICAL": "CRITICAL",
}
_LOG_FORMATS: Final[dict[str, LogFormat]] = {"json": "json", "text": "text"}


class Settings(TypedDict):
    log_level: LogLevel
    log_format: LogFormat
    service_name: str


def _get_str(key: str, default: str) -> str:
    """Get string config value via hook, with default."""
    val = _test_hooks.get_env(key)
    return val if val is not None else default


def _parse_log_level(key: str, default: LogLevel) -> LogLevel:
    val = _test_hooks.get_env(key)
    if val is None:
        return default
    return _LOG_LEVELS.get(val.upper(), default)


def _parse_log_format(key: str, default: LogFormat) -> LogFormat:
    val = _test_hooks.get_env(key)
    if val is None:
        return default
    return _LOG_FORMATS.get(val.lower(), default)


def load_settings() -> Settings:
    """Load service settings from environment variables.

    Unknown log levels and formats fall back to their defaults.
    """
    return {
        "log_level": _parse_log_level("QR_LOG_LEVEL", _DEFAULT_LOG_LEVEL),
        "log_format": _parse_log_format("QR_LOG_FORMAT", _DEFAULT_LOG_FORMAT),
        "service_name": _get_str("QR_SERVICE_NAME", _DEFAULT_SERVICE_NAME),
    }


__all__ = ["Settings", "load_settings"]
