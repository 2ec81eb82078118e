"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from resume_builder.api.routes import router
from resume_builder.api.services import Services, build_services
from resume_builder.config import AppConfig, load_config

logger = logging.getLogger(__name__)


async def _prune_metrics(services: Services) -> None:
    """Periodically drop call metrics past the retention horizon."""
    interval = services.config.monitor.cleanup_interval_minutes * 60
    while True:
        await asyncio.sleep(interval)
        services.monitor.clear_old_metrics(services.config.monitor.retention_hours)


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(_prune_metrics(app.state.services))
    try:
        yield
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse({"error": "Invalid request", "details": problems}, status_code=400)


async def _storage_error(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.error("Storage error on %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


async def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse({"error": "Internal server error", "details": str(exc)}, status_code=500)


def create_app(config: AppConfig | None = None, *, services: Services | None = None) -> FastAPI:
    if services is None:
        services = build_services(config or load_config())
    app = FastAPI(title="Resume Builder API", lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(sqlite3.Error, _storage_error)
    app.add_exception_handler(Exception, _unexpected_error)
    app.include_router(router)
    return app
