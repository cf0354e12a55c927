"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.mandi_bidding.api.router import router as bids_router
from src.mandi_catalog.api.router import router as products_router
from src.mandi_common.errors import AppError, InternalError
from src.mandi_common.logging_setup import configure_logging
from src.mandi_common.response import error_response
from src.mandi_gateway.middleware.request_log import RequestLogMiddleware
from src.mandi_notify.api.router import router as notifications_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB connection. Shutdown: dispose the pool."""
    if settings.STORE_BACKEND != "sql":
        logger.info("Using in-memory store; no database checks")
        yield
        return

    from src.mandi_common.database import check_connection, engine

    await check_connection()
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s (code=%d) on %s", exc.message, exc.code, request.url.path)
    resp = error_response(exc.code, exc.message, getattr(request.state, "request_id", None))
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    err = InternalError()
    return JSONResponse(
        status_code=err.http_status,
        content=error_response(
            err.code, err.message, getattr(request.state, "request_id", None)
        ).model_dump(),
    )


app.include_router(products_router, prefix="/api/v1")
app.include_router(bids_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0", "store": settings.STORE_BACKEND}
