"""
FastAPI Application Entry Point

This module initializes the FastAPI application and configures:
- API routes
- Middleware (logging, CORS)
- Error rendering ({"error": "..."} bodies)
- Startup/shutdown of the in-memory store and audit logger

Design Decisions:
- create_app() builds an independent app (own store) per call; `app` is the
  process-wide instance served by uvicorn
- Routes, middleware, and app config are separate
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlink.api import endpoints
from shortlink.core.setting import Settings, settings
from shortlink.core.store_manager import initialize_services, shutdown_services
from shortlink.middleware.logging import add_logging_middleware

logger = logging.getLogger(__name__)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


def add_exception_handlers(app: FastAPI) -> None:
    """Render every error response as {"error": message}."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _format_validation_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application.

    Args:
        config: Settings to use (module-level settings by default)

    Returns:
        Configured FastAPI app
    """
    config = config or settings

    app = FastAPI(
        title="Short Link Service",
        description="URL shortening with expiring links and click analytics",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.config = config

    add_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.FRONTEND_ORIGIN],
        allow_credentials=config.FRONTEND_ORIGIN != "*",
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_exception_handlers(app)

    # Health endpoints defined before router to match before catch-all route
    @app.get("/", tags=["Health"])
    async def root():
        """Service information."""
        return {
            "message": "Short Link Service",
            "version": "1.0.0",
            "docs": "/docs"
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for monitoring."""
        return {"status": "OK"}

    app.include_router(endpoints.router, tags=["Short Links"])

    @app.on_event("startup")
    async def startup_event():
        """Initialize services on startup."""
        await initialize_services(app, config)

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown."""
        await shutdown_services(app)

    return app


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()
