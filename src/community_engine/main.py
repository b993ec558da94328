# src/community_engine/main.py
"""Main entry point for the community engine HTTP surface."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from community_engine.api.v1 import communities_router, memberships_router
from community_engine.core.settings import settings
from community_engine.db.session import create_tables
from community_engine.services.community import StorageError

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Communities, memberships and role management",
    version=settings.app_version,
)

# Include API routers
app.include_router(communities_router, prefix="/api/v1")
app.include_router(memberships_router, prefix="/api/v1")


@app.exception_handler(StorageError)
async def storage_error_handler(_request: Request, exc: StorageError) -> JSONResponse:
    """Report store failures separately from rule rejections."""
    logger.error("Request failed: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage unavailable"},
    )


@app.on_event("startup")
async def on_startup() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    create_tables()
    logger.info("%s %s ready", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("community_engine.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
