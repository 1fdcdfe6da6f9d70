"""
FastAPI application factory.

Creates the app with a lifespan that opens the connection pool, builds the
ingestion components and tears them down again on shutdown.
"""
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog_ingest.api.dependencies import initialize_components, shutdown_components
from catalog_ingest.api.routes.sessions import router as sessions_router
from catalog_ingest.config.settings import Settings
from catalog_ingest.database.connection import close_pool, init_pool
from catalog_ingest.gateway.exceptions import ValidationError
from catalog_ingest.logging.logger import Log
from catalog_ingest.sessions.exceptions import SessionNotFoundError


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and return the configured FastAPI application."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        Log.info("Starting up, initializing ingestion components")
        init_pool(settings)
        initialize_components(settings)
        Log.info("Startup complete. API is ready.")
        yield
        Log.info("Shutting down")
        shutdown_components()
        close_pool()

    app = FastAPI(
        title="Catalog Ingest API",
        description="Upload menu documents and turn them into draft catalog products.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(sessions_router)

    @app.exception_handler(ValidationError)
    async def upload_rejected(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found(request: Request, exc: SessionNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "Session not found"})

    @app.exception_handler(RequestValidationError)
    async def request_invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=400, content={"error": message})

    @app.get("/health", tags=["health"], summary="Health check")
    def health() -> dict:
        return {"status": "ok", "service": "catalog-ingest"}

    return app
