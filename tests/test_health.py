from __future__ import annotations

from types import ModuleType

from fastapi.testclient import TestClient

import qrcode_api.encoder as encoder_mod
from qrcode_api.api.main import create_app
from qrcode_api.health import HealthResponse, healthz
from qrcode_api.json_utils import load_json_str
from qrcode_api.settings import Settings


def test_healthz_returns_ok() -> None:
    result: HealthResponse = healthz()
    assert result == {"status": "ok"}


def test_health_route_via_client(settings: Settings) -> None:
    client = TestClient(create_app(settings))
    r = client.get("/api/health")
    assert r.status_code == 200
    assert load_json_str(r.text) == {"status": "ok"}


def test_health_ignores_encoder_state(settings: Settings) -> None:
    def _import_stub(name: str) -> ModuleType:
        raise ImportError(name)

    encoder_mod._import_module = _import_stub
    client = TestClient(create_app(settings))
    assert client.get("/api/health").status_code == 200
