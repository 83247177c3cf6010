"""FastAPI application: routers, error handlers, per-request log context, health check."""

import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from sqlalchemy import text

from stockroom import __version__, config
from stockroom.api.errors import register_exception_handlers
from stockroom.api.routes import ROUTERS
from stockroom.db import get_engine, init_db
from stockroom.utils.logger import get_logger, scoped_context
from stockroom.utils.tracing import init_tracing, shutdown_tracing

logger = get_logger("stockroom.api")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    init_tracing()
    init_db()
    logger.info("api.startup", version=__version__)
    try:
        yield
    finally:
        shutdown_tracing()
        logger.info("api.shutdown")


def create_app() -> FastAPI:
    app = FastAPI(title="Stockroom", version=__version__, lifespan=_lifespan)
    register_exception_handlers(app)

    @app.middleware("http")
    async def _request_context(request: Request, call_next):
        request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex[:12]
        with scoped_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            caller=request.headers.get(config.IDENTITY_HEADER),
        ):
            response = await call_next(request)
            logger.debug("api.request", status_code=response.status_code)
        response.headers["X-Request-Id"] = request_id
        return response

    for router in ROUTERS:
        app.include_router(router)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, Any]:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ok", "version": __version__, "database": get_engine().dialect.name}

    return app


app = create_app()
