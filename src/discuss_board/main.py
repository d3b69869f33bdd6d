# src/discuss_board/main.py
"""Main entry point for the discussion board application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from discuss_board.api.v1 import (
    appeals_router,
    auth_router,
    members_router,
    moderation_actions_router,
    moderation_logs_router,
    moderators_router,
    notifications_router,
    posts_router,
    reactions_router,
    reports_router,
)
from discuss_board.core.errors import setup_exception_handlers
from discuss_board.core.logging import configure_logging
from discuss_board.core.settings import settings
from discuss_board.db.session import create_tables

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Discussion board API with moderation, appeals and audit trails",
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

setup_exception_handlers(app)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(moderation_actions_router, prefix="/api/v1")
app.include_router(appeals_router, prefix="/api/v1")
app.include_router(moderation_logs_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(members_router, prefix="/api/v1")
app.include_router(moderators_router, prefix="/api/v1")
app.include_router(reactions_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.create_tables_on_startup:
        create_tables()
        logger.info("database tables ensured")
    logger.info("%s %s started", settings.app_name, settings.app_version)


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
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("discuss_board.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
