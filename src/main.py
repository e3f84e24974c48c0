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
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.sb_common.database import engine
from src.sb_common.errors import AppError, InternalError, ValidationError
from src.sb_common.http_client import close_http_client
from src.sb_common.request_log import RequestLogMiddleware
from src.sb_common.response import error_response
from src.sb_games.api.router import router as games_router
from src.sb_identity.api.router import router as identity_router
from src.sb_settlement.api.router import router as settlement_router
from src.sb_wager.api.router import my_wagers_router
from src.sb_wager.api.router import router as wager_router

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB connection. Shutdown: dispose pool + provider client."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    yield
    await close_http_client()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _error_json(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.kind, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s on %s: %s", exc.kind, request.url.path, exc.message)
    return _error_json(request, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return _error_json(request, ValidationError(problems or "Invalid request"))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _error_json(request, InternalError())


app.include_router(identity_router, prefix="/api/v1")
app.include_router(games_router, prefix="/api/v1")
app.include_router(wager_router, prefix="/api/v1")
app.include_router(settlement_router, prefix="/api/v1")
app.include_router(my_wagers_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": VERSION}
