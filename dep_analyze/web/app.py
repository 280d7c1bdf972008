"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from dep_analyze.web.api import router
from dep_analyze.web.state import ServiceState


def create_app() -> FastAPI:
    app = FastAPI(title="dep-analyze", version="0.1.0")
    app.state.service = ServiceState()
    app.include_router(router)
    return app
