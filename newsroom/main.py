"""
Newsroom API

FastAPI service for bilingual article content and machine translation.
"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from newsroom.config import get_settings
from newsroom.dependencies import get_store, get_translator
from newsroom.middleware import (
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    configure_logging,
)
from newsroom.routers import articles, translation
from newsroom.services.errors import ArticleError, ContentTooLarge
from newsroom.services.http_client import close_shared_client

logger = logging.getLogger(__name__)

settings = get_settings()

# Health check cache: (result_dict, timestamp)
_health_cache: tuple[dict[str, Any], float] | None = None
_HEALTH_CACHE_TTL = 30  # seconds


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging and indexes on startup, close clients on shutdown."""
    configure_logging(get_settings().log_level)
    store = get_store()
    try:
        await store.ensure_indexes()
    except Exception:
        logger.exception("Could not ensure article indexes")
    yield
    await store.close()
    await close_shared_client()


app = FastAPI(
    title="Newsroom API",
    description="Bilingual article content with machine translation",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(SecurityHeadersMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Admin-Key", "X-Request-ID"],
)

# Request ID (added last, so it is the outermost middleware)
app.add_middleware(RequestIDMiddleware)

# Routers
app.include_router(articles.router, prefix="/api/newsroom")
app.include_router(translation.router, prefix="/api/newsroom")


@app.exception_handler(ArticleError)
async def article_error_handler(request: Request, exc: ArticleError) -> JSONResponse:
    """Translate engine errors into JSON responses with their HTTP status."""
    body: dict[str, Any] = {"detail": exc.message, "error": type(exc).__name__}
    if isinstance(exc, ContentTooLarge):
        body["field"] = exc.field
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=body)


def _check_config() -> str:
    """Verify required configuration is loaded. Returns 'ok' or 'fail'."""
    s = get_settings()
    if s.mongodb_database and s.mongodb_collection:
        return "ok"
    return "fail"


async def _run_health_checks() -> dict[str, Any]:
    """Run all health checks, returning the full response body."""
    global _health_cache
    now = time.time()
    if _health_cache is not None:
        cached_result, cached_at = _health_cache
        if now - cached_at < _HEALTH_CACHE_TTL:
            return cached_result

    config_status = _check_config()
    storage_status = "ok" if await get_store().ping() else "fail"
    translator = get_translator()
    translation_status = "ok" if translator.configured else "passthrough"

    checks = {"config": config_status, "storage": storage_status}
    failed = [k for k, v in checks.items() if v != "ok"]

    if failed:
        overall = "degraded"
        logger.warning("Health check degraded, failed: %s", ", ".join(failed))
    else:
        overall = "ok"

    result: dict[str, Any] = {
        "status": overall,
        "service": "newsroom-api",
        "version": "0.1.0",
        "checks": {**checks, "translation": translation_status},
    }
    _health_cache = (result, now)
    return result


@app.get("/api/newsroom/health")
async def health_check() -> JSONResponse:
    """Health check verifying service dependencies."""
    result = await _run_health_checks()
    status_code = 200 if result["status"] == "ok" else 503
    return JSONResponse(content=result, status_code=status_code)
