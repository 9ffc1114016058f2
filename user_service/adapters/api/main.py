# user_service/adapters/api/main.py
import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_service.adapters.api import responses
from user_service.core.domain.exceptions import DomainError

# Import Routers
# Note: We import the modules directly to ensure 'container.wire' works correctly
from user_service.adapters.api.routers import health, users
from user_service.shared.config import settings
from user_service.shared.container import container
from user_service.shared.logging_config import configure_logging
from user_service.shared.observability import setup_observability

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manages the application lifecycle.
    1. Startup: connects the repository (and migrates the schema if enabled).
    2. Shutdown: releases the connection pool.
    """
    logger.info("app_startup", env=settings.APP_ENV.value, storage=settings.STORAGE_BACKEND.value)

    # Fail fast: a service that cannot reach its storage must not start.
    repository = container.user_repository()
    try:
        await repository.connect()
    except Exception as e:
        logger.error("repository_connection_failed", error=str(e))
        raise

    yield

    logger.info("app_shutdown")
    await repository.disconnect()


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{location}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return responses.from_domain_error(exc, "Failed to process request")

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return responses.failure(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request",
            error={"code": "invalid_request", "detail": _format_validation_errors(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return responses.failure(
                status.HTTP_404_NOT_FOUND,
                "Endpoint not found",
                error={"code": "not_found", "detail": f"{request.method} {request.url.path}"},
            )
        return responses.failure(
            exc.status_code,
            str(exc.detail),
            error={"code": "http_error", "detail": str(exc.detail)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_exception",
            method=request.method,
            path=request.url.path,
            error=str(exc),
            exc_info=exc,
        )
        return responses.failure(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            error={"code": "internal", "detail": "Internal server error"},
        )


def create_app() -> FastAPI:
    """Factory function to create the FastAPI application."""

    configure_logging()

    # We must explicitly tell the container which modules use the @inject decorator.
    container.wire(modules=[
        "user_service.adapters.api.routers.users",
        "user_service.adapters.api.routers.health",
        "user_service.adapters.api.dependencies",
    ])

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="User Service (Hexagonal Architecture)",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url=None,
    )

    # Global Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
        )
        return response

    register_exception_handlers(app)

    # Register Routers
    app.include_router(health.router)
    app.include_router(users.router, prefix=settings.API_PREFIX)

    setup_observability(app)

    return app


# Entry point for local debugging (e.g. `python -m user_service.adapters.api.main`)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "user_service.adapters.api.main:create_app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        factory=True,
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT_SEC,
    )
