"""FastAPI application factory with lifespan for Rosa."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from rosa import __version__
from rosa.settings import get_settings
from rosa.storage.database import build_engine, build_session_factory, create_all_tables
from rosa.templating.store import TemplateStore


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: engine + schema, session factory, shared HTTP client. Shutdown: close both."""
    settings = get_settings()
    engine = build_engine(settings)
    await create_all_tables(engine)
    app.state.sessions = build_session_factory(engine)
    app.state.http = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    app.state.templates = TemplateStore()
    try:
        yield
    finally:
        await app.state.http.aclose()
        await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
    )

    # ── mount routers ──
    from rosa.api.routes import health, lex

    app.include_router(health.router)
    app.include_router(lex.router, tags=["lex"])

    return app
