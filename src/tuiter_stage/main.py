# src/tuiter_stage/main.py
"""Main entry point for the Tuiter application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from tuiter_stage import __version__
from tuiter_stage.api.v1 import (
    auth_router,
    likes_router,
    media_router,
    tuits_router,
    users_router,
)
from tuiter_stage.core.errors import TuiterError
from tuiter_stage.core.settings import settings
from tuiter_stage.db.session import create_tables
from tuiter_stage.services.registry import ServiceRegistry

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Users, tuits, likes and their attached media",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
    expose_headers=["X-Session-Token"],
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(tuits_router, prefix="/api/v1")
app.include_router(likes_router, prefix="/api/v1")
app.include_router(media_router, prefix="/api/v1")


@app.exception_handler(TuiterError)
async def tuiter_error_handler(request: Request, exc: TuiterError) -> JSONResponse:
    """Translate domain errors into their client-visible status and message."""
    logger.debug("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.on_event("startup")
async def on_startup() -> None:
    if settings.auto_create_tables:
        create_tables()
    app.state.registry = ServiceRegistry.build(settings)
    if not settings.cloudinary_configured:
        logger.warning("Cloudinary credentials are not set; media uploads will fail")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("tuiter_stage.main:app", host="0.0.0.0", port=4000, reload=settings.debug)
