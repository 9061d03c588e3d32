"""ASGI application for the ads targeting service.

Run with `uvicorn adsintel.main:app` (or `python -m adsintel.main`, which
binds HOST/PORT from the environment). Logs go to stdout.

Every response carries X-Request-ID; an incoming header is reused so a
caller can trace one analysis across services. Errors are returned as
{"error": str, "code": str, "request_id": str}. Completed requests are
logged at INFO, 4xx at WARNING and 5xx at ERROR.
"""

import json
import logging
import signal
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from adsintel.api.v1 import router as api_v1_router
from adsintel.core.config import Settings, get_settings
from adsintel.core.database import db_manager
from adsintel.core.logging import get_logger, setup_logging
from adsintel.core.redis import redis_manager
from adsintel.integrations.claude import close_claude, init_claude

setup_logging()
logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

REDACTED_KEYS = frozenset({"password", "token", "secret", "api_key", "authorization"})


def sanitize_body(body: Any) -> Any:
    """Copy of a JSON body with credential-like keys replaced by ****."""
    if isinstance(body, dict):
        return {
            key: "****" if key.lower() in REDACTED_KEYS else sanitize_body(value)
            for key, value in body.items()
        }
    if isinstance(body, list):
        return [sanitize_body(item) for item in body]
    return body


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _error_response(status_code: int, error: str, code: str, request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "code": code, "request_id": _request_id(request)},
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns the request id and logs each request with its timing."""

    async def _log_body(self, request: Request, request_id: str) -> None:
        raw = await request.body()
        if not raw:
            return
        try:
            body: Any = sanitize_body(json.loads(raw))
        except json.JSONDecodeError:
            body = f"<{len(raw)} bytes, not JSON>"
        logger.debug("Request body", extra={"request_id": request_id, "body": body})

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.monotonic()

        logger.info(
            "%s %s",
            request.method,
            request.url.path,
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "query_params": str(request.query_params) or None,
            },
        )
        if request.method in ("POST", "PUT", "PATCH") and logger.isEnabledFor(logging.DEBUG):
            await self._log_body(request, request_id)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        code = response.status_code
        if code >= 500:
            level = logging.ERROR
        elif code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            "%s %s -> %d",
            request.method,
            request.url.path,
            code,
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": code,
                "duration_ms": round((time.monotonic() - started) * 1000, 2),
            },
        )
        return response


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    logger.warning(
        "Request validation failed",
        extra={"request_id": _request_id(request), "errors": message},
    )
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY, message, "VALIDATION_ERROR", request
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        extra={
            "request_id": _request_id(request),
            "error_type": type(exc).__name__,
            "error_message": str(exc),
        },
        exc_info=True,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An internal error occurred. Please try again later.",
        "INTERNAL_ERROR",
        request,
    )


health_router = APIRouter(prefix="/health", tags=["Health"])


@health_router.get("")
async def health_check() -> dict[str, str]:
    return {"status": "ok"}


@health_router.get("/db")
async def database_health() -> dict[str, str | bool]:
    healthy = await db_manager.check_connection()
    return {"status": "ok" if healthy else "error", "database": healthy}


@health_router.get("/redis")
async def redis_health() -> dict[str, str | bool]:
    """Redis is optional, so a missing cache reports "unavailable" with 200."""
    healthy = await redis_manager.check_health()
    return {"status": "ok" if healthy else "unavailable", "redis": healthy}


@health_router.get("/integrations")
async def integrations_health(
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    return {
        "claude": {
            "api_key_set": bool(settings.anthropic_api_key),
            "model": settings.claude_model,
        },
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the database, the optional cache and the Claude client."""
    settings = get_settings()
    logger.info(
        "Starting %s",
        settings.app_name,
        extra={"version": settings.app_version, "environment": settings.environment},
    )

    db_manager.init_db()
    await db_manager.create_tables()

    if not await redis_manager.init_redis():
        logger.info("Running without the content cache")

    claude_client = await init_claude()
    if not claude_client.available:
        logger.warning(
            "ANTHROPIC_API_KEY not set, targeting will use the rule-based path"
        )

    def on_sigterm(*_: Any) -> None:
        logger.info("SIGTERM received, draining requests")

    try:
        signal.signal(signal.SIGTERM, on_sigterm)
    except ValueError:
        logger.debug("Not on the main thread, SIGTERM handler not installed")

    yield

    await close_claude()
    await redis_manager.close()
    await db_manager.close()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url] if settings.frontend_url else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health_router)
    app.include_router(api_v1_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("adsintel.main:app", host=settings.host, port=settings.port, reload=settings.debug)
