from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Protocol

from starlette.datastructures import State

# Context variable for request ID tracking across async boundaries.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_HeaderList = list[tuple[bytes, bytes]]


class _ASGIScope(Protocol):
    """Minimal ASGI scope for HTTP requests."""

    def get(
        self, key: str, default: str | _HeaderList | None = None
    ) -> str | _HeaderList | None: ...


class _HeadersMutable(Protocol):
    def __setitem__(self, key: str, value: str) -> None: ...


class _RequestAdapter(Protocol):
    """Protocol for FastAPI/Starlette Request in middleware decorator."""

    @property
    def scope(self) -> _ASGIScope: ...

    @property
    def state(self) -> State: ...


class _StatefulRequest(Protocol):
    @property
    def state(self) -> State: ...


class _ResponseAdapter(Protocol):
    """Protocol for FastAPI/Starlette Response returned by call_next."""

    @property
    def headers(self) -> _HeadersMutable: ...


class _CallNext(Protocol):
    async def __call__(self, request: _RequestAdapter) -> _ResponseAdapter: ...


class _CallNextMiddleware(Protocol):
    async def __call__(
        self, request: _RequestAdapter, call_next: _CallNext
    ) -> _ResponseAdapter: ...


class _MiddlewareDecorator(Protocol):
    def __call__(self, func: _CallNextMiddleware) -> _CallNextMiddleware: ...


class _FastAPIAppProto(Protocol):
    """Minimal FastAPI app protocol for installing middleware."""

    def middleware(self, name: str) -> _MiddlewareDecorator: ...


def install_request_id_middleware(app: _FastAPIAppProto) -> None:
    """Install request ID middleware using FastAPI's decorator API.

    The incoming ``x-request-id`` header is reused when present, otherwise a
    fresh UUID is generated. The id is echoed on the response.
    """

    decorator = app.middleware("http")

    @decorator
    async def _middleware(request: _RequestAdapter, call_next: _CallNext) -> _ResponseAdapter:
        rid = _decode_request_id(request.scope)
        request.state.request_id = rid
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
            response.headers["x-request-id"] = rid
            return response
        finally:
            request_id_var.reset(token)


def request_id_for(request: _StatefulRequest) -> str:
    """Request ID from the current context, else the one stored on the request.

    Handlers for unhandled exceptions run outside the middleware, after the
    context variable has been reset; the request state still holds the ID.
    """
    rid = request_id_var.get()
    if rid != "":
        return rid
    stored = getattr(request.state, "request_id", "")
    return stored if isinstance(stored, str) else ""


def _decode_request_id(scope: _ASGIScope) -> str:
    """Extract request ID from ASGI scope headers or generate new UUID."""
    headers_raw = scope.get("headers")
    if not isinstance(headers_raw, list):
        return str(uuid.uuid4())

    for header_name_bytes, header_value_bytes in headers_raw:
        header_name = header_name_bytes.decode("latin1").lower()
        if header_name == "x-request-id":
            value = header_value_bytes.decode("latin1").strip()
            if value:
                return value

    return str(uuid.uuid4())


__all__ = [
    "_decode_request_id",
    "install_request_id_middleware",
    "request_id_for",
    "request_id_var",
]
