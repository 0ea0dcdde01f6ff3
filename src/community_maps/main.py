# src/community_maps/main.py
"""Main entry point for the Community Maps application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from community_maps.api.v1 import (
    auth_router,
    locations_router,
    maps_router,
    system_router,
    uploads_router,
    users_router,
    votes_router,
)
from community_maps.core.errors import MapsError, StorageError
from community_maps.core.settings import settings

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Community-curated maps of places worth visiting",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(maps_router, prefix="/api")
app.include_router(votes_router, prefix="/api")
app.include_router(locations_router, prefix="/api")
app.include_router(uploads_router, prefix="/api")
app.include_router(system_router)


@app.exception_handler(MapsError)
async def maps_error_handler(request: Request, exc: MapsError) -> JSONResponse:
    """Translate domain errors into JSON responses with their status code."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Report database failures that escaped the service layer as storage errors."""
    logger.error("%s %s hit a database error", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=StorageError.status_code,
        content={"detail": StorageError.default_detail},
    )


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("community_maps.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
