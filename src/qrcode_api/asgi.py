from __future__ import annotations

from .api.main import create_app
from .request_context import install_request_id_middleware

app = create_app()
install_request_id_middleware(app)

__all__ = ["app"]
