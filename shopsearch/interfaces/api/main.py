"""
FastAPI Main Application - Search API entry point.

Run with: uvicorn shopsearch.interfaces.api.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shopsearch import __version__
from shopsearch.config import get_settings

from .deps import cleanup_services, init_services
from .middleware import ErrorHandlerMiddleware, SearchTraceMiddleware
from .routes import health, search

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("Starting ShopSearch API...")
    logger.info("  Catalog API: %s", settings.api_base_url)
    logger.info("  Storage: %s", settings.storage_path)

    await init_services()
    logger.info("  Search session opened")

    yield

    logger.info("Shutting down ShopSearch API...")
    await cleanup_services()


def create_app() -> FastAPI:
    """Create FastAPI application."""
    app = FastAPI(
        title="ShopSearch API",
        description="Storefront product search with suggestions and recent searches",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added is outermost: tracing wraps error conversion
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(SearchTraceMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(search.router, prefix="/api/search", tags=["Search"])

    return app


app = create_app()
