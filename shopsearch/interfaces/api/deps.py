"""
API Dependencies - Dependency injection for FastAPI routes.

Provides singleton instances of the storefront client and search session.
"""

from __future__ import annotations

from functools import lru_cache

from shopsearch.adapters.storefront import StorefrontClient
from shopsearch.config import get_settings
from shopsearch.domains.search import SearchSession
from shopsearch.interfaces.wiring import create_client, create_session


@lru_cache
def get_storefront_client() -> StorefrontClient:
    """Get storefront client singleton."""
    return create_client(get_settings())


@lru_cache
def get_search_session() -> SearchSession:
    """Get search session singleton (one search surface per process)."""
    return create_session(get_settings(), client=get_storefront_client())


async def init_services() -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler.
    """
    await get_search_session().open()


async def cleanup_services() -> None:
    """Cleanup services on shutdown."""
    await get_search_session().close()
    await get_storefront_client().close()
