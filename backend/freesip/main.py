from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from freesip.api.api_v1 import api_router
from freesip.api.deps import get_client_ip
from freesip.core.config import settings
from freesip.core.errors import INVALID_FORM_DATA, ContactAPIError, RateLimitExceeded
from freesip.core.logging import setup_logging
from freesip.core.rate_limit import RateLimiter
from freesip.db.base import Base
from freesip.db.session import engine

import freesip.models

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
}


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def create_app(
    *,
    api_limiter: Optional[RateLimiter] = None,
    contact_limiter: Optional[RateLimiter] = None,
) -> FastAPI:
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.PROJECT_NAME)
    app.state.api_limiter = api_limiter or RateLimiter(
        settings.API_RATE_LIMIT, settings.API_RATE_WINDOW_SECONDS
    )
    app.state.contact_limiter = contact_limiter or RateLimiter(
        settings.CONTACT_RATE_LIMIT, settings.CONTACT_RATE_WINDOW_SECONDS
    )
    allowed_origins = set(settings.CORS_ORIGINS)

    @app.middleware("http")
    async def api_rate_limit_middleware(request: Request, call_next):
        if request.url.path.startswith(f"{settings.API_PREFIX}/"):
            result = request.app.state.api_limiter.hit(get_client_ip(request) or "unknown")
            if not result.allowed:
                return _error(
                    429,
                    RateLimitExceeded.message,
                    headers={"Retry-After": str(result.retry_after)},
                )
        return await call_next(request)

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        origin = request.headers.get("origin")
        if origin and origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Methods"] = ", ".join(settings.CORS_METHODS)
            response.headers["Access-Control-Allow-Headers"] = ", ".join(settings.CORS_HEADERS)
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Vary"] = "Origin"

        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.exception_handler(ContactAPIError)
    async def contact_api_error_handler(request: Request, exc: ContactAPIError) -> JSONResponse:
        headers = None
        if isinstance(exc, RateLimitExceeded) and exc.retry_after is not None:
            headers = {"Retry-After": str(exc.retry_after)}
        return _error(exc.status_code, exc.message, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Rejected malformed request body on %s: %s", request.url.path, exc.errors())
        return _error(400, INVALID_FORM_DATA)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # Unknown method on a known path is treated like an unknown path.
        if exc.status_code in (404, 405):
            return _error(404, "Endpoint not found")
        return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return _error(500, "Internal server error")

    @app.get("/")
    def root() -> dict:
        return {
            "message": "Contact Form API Server",
            "status": "Running",
            "timestamp": _utc_timestamp(),
        }

    @app.get("/health")
    def health() -> dict:
        return {
            "status": "OK",
            "timestamp": _utc_timestamp(),
            "uptime": time.monotonic() - STARTED_AT,
        }

    @app.on_event("startup")
    def on_startup() -> None:
        Base.metadata.create_all(bind=engine)
        logger.info("Connected to store, environment: %s", settings.ENVIRONMENT)

    @app.on_event("shutdown")
    def on_shutdown() -> None:
        logger.info("Shutting down gracefully...")
        engine.dispose()

    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    logger.info("Server running on port %s", settings.PORT)
    logger.info("Environment: %s", settings.ENVIRONMENT)
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
