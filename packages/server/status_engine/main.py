"""
Status Engine API Server

Entry point for the FastAPI application.
"""

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from status_engine.api.v1 import router as api_v1_router
from status_engine.core.config import get_settings
from status_engine.core.database import engine
from status_engine.core.errors import error_response
from status_engine.core.logging import configure_logging
from status_engine.core.middleware import RequestContextMiddleware

settings = get_settings()
log = structlog.get_logger()


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Status Engine",
        description="Organization rosters, roles and access requests.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Middleware (outermost first)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        log.info("request.failed", status=exc.status_code, message=str(exc.detail))
        return error_response(exc.status_code, str(exc.detail), getattr(exc, "code", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        log.info("request.invalid", message=message)
        return error_response(400, message)

    # API routes
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for liveness probes."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check():
        """Readiness check endpoint for startup probes."""
        return {"status": "ready"}

    @app.on_event("startup")
    async def on_startup():
        log.info("status_engine.starting", database=engine.url.render_as_string(hide_password=True))

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("status_engine.shutting_down")
        await engine.dispose()

    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    uvicorn.run(
        "status_engine.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
