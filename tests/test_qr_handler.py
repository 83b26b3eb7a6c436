from __future__ import annotations

import io
from types import ModuleType

import pytest
from fastapi.testclient import TestClient
from PIL import Image

import qrcode_api.encoder as encoder_mod
from qrcode_api.api.main import create_app
from qrcode_api.dispatcher import ERROR_GENERATION
from qrcode_api.json_utils import load_json_str, narrow_json_to_dict
from qrcode_api.settings import Settings
from qrcode_api.validators import (
    ERROR_IMAGE_CONTENTS,
    ERROR_IMAGE_CORRECTION,
    ERROR_IMAGE_SIZE,
    ERROR_IMAGE_TYPE,
)


def _client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings))


def _error_message(text: str) -> str:
    body = narrow_json_to_dict(load_json_str(text))
    assert list(body) == ["error"]
    message = body["error"]
    assert isinstance(message, str)
    return message


def test_qrcode_png_success(settings: Settings) -> None:
    client = _client(settings)
    r = client.get(
        "/api/qrcode", params={"contents": "hello", "size": "200", "type": "png", "correction": "M"}
    )
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/png"
    img = Image.open(io.BytesIO(r.content))
    assert img.format == "PNG"
    assert img.size == (200, 200)


def test_qrcode_defaults_to_250_png(settings: Settings) -> None:
    client = _client(settings)
    r = client.get("/api/qrcode", params={"contents": "hello"})
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/png"
    assert Image.open(io.BytesIO(r.content)).size == (250, 250)


@pytest.mark.parametrize(
    ("image_type", "media_type", "pil_format"),
    [
        ("jpeg", "image/jpeg", "JPEG"),
        ("JPEG", "image/jpeg", "JPEG"),
        ("gif", "image/gif", "GIF"),
        ("Png", "image/png", "PNG"),
    ],
)
def test_qrcode_formats(
    settings: Settings, image_type: str, media_type: str, pil_format: str
) -> None:
    client = _client(settings)
    r = client.get("/api/qrcode", params={"contents": "hello", "size": "300", "type": image_type})
    assert r.status_code == 200
    assert r.headers["content-type"] == media_type
    img = Image.open(io.BytesIO(r.content))
    assert img.format == pil_format
    assert img.size == (300, 300)


def test_qrcode_missing_contents(settings: Settings) -> None:
    client = _client(settings)
    r = client.get("/api/qrcode", params={"size": "200"})
    assert r.status_code == 400
    assert r.headers["content-type"].startswith("application/json")
    assert _error_message(r.text) == ERROR_IMAGE_CONTENTS
    assert r.text == '{"error":"Contents cannot be null or blank"}'


def test_qrcode_size_too_small(settings: Settings) -> None:
    client = _client(settings)
    r = client.get("/api/qrcode", params={"contents": "hi", "size": "100"})
    assert r.status_code == 400
    assert r.text == '{"error":"Image size must be between 150 and 350 pixels"}'


@pytest.mark.parametrize(
    ("params", "message"),
    [
        ({"contents": "   "}, ERROR_IMAGE_CONTENTS),
        ({"contents": "hi", "size": "351"}, ERROR_IMAGE_SIZE),
        ({"contents": "hi", "size": "big"}, ERROR_IMAGE_SIZE),
        ({"contents": "hi", "size": "9" * 5000}, ERROR_IMAGE_SIZE),
        ({"contents": "hi", "correction": "X"}, ERROR_IMAGE_CORRECTION),
        ({"contents": "hi", "type": "bmp"}, ERROR_IMAGE_TYPE),
        ({"contents": "", "size": "1000"}, ERROR_IMAGE_CONTENTS),
        ({"contents": "hi", "size": "1000", "type": "bmp"}, ERROR_IMAGE_SIZE),
        ({"contents": "hi", "correction": "Z", "type": "bmp"}, ERROR_IMAGE_CORRECTION),
    ],
)
def test_qrcode_validation_errors(
    settings: Settings, params: dict[str, str], message: str
) -> None:
    client = _client(settings)
    r = client.get("/api/qrcode", params=params)
    assert r.status_code == 400
    assert _error_message(r.text) == message


def test_qrcode_repeated_requests_identical(settings: Settings) -> None:
    client = _client(settings)
    params = {"contents": "repeat me", "size": "220", "type": "gif", "correction": "q"}
    bodies = {client.get("/api/qrcode", params=params).content for _ in range(3)}
    assert len(bodies) == 1


def test_qrcode_capacity_overflow_is_opaque_500(settings: Settings) -> None:
    client = _client(settings)
    r = client.get("/api/qrcode", params={"contents": "x" * 3000, "correction": "H"})
    assert r.status_code == 500
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text == ERROR_GENERATION


def test_qrcode_unexpected_failure_hides_detail(settings: Settings) -> None:
    class _Exploding(ModuleType):
        def make(self, content: str, *, error: str, micro: bool, boost_error: bool) -> None:
            raise RuntimeError("secret internal detail")

    def _import_stub(name: str) -> ModuleType:
        return _Exploding("segno_stub")

    encoder_mod._import_module = _import_stub
    client = TestClient(create_app(settings), raise_server_exceptions=False)
    r = client.get("/api/qrcode", params={"contents": "hello"})
    assert r.status_code == 500
    assert "secret" not in r.text
    assert r.text == "Internal server error"


def test_qrcode_rejects_post(settings: Settings) -> None:
    client = _client(settings)
    r = client.post("/api/qrcode", params={"contents": "hello"})
    assert r.status_code == 405
