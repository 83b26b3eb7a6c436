from __future__ import annotations

from fastapi import FastAPI

from .. import __version__
from ..errors import install_exception_handlers
from ..logging import setup_logging
from ..settings import Settings, load_settings
from ..types import Defaults
from ..validators import DEFAULTS
from .routes import health as routes_health
from .routes import qr as routes_qr


def create_app(settings: Settings | None = None, defaults: Defaults = DEFAULTS) -> FastAPI:
    s = settings or load_settings()
    setup_logging(
        level=s["log_level"],
        format_mode=s["log_format"],
        service_name=s["service_name"],
        instance_id=None,
        extra_fields=["request_id"],
    )
    app = FastAPI(title=s["service_name"], version=__version__)
    install_exception_handlers(app, logger_name=s["service_name"])

    app.include_router(routes_health.build_router())
    app.include_router(routes_qr.build_router(defaults))

    return app


__all__ = ["create_app"]
