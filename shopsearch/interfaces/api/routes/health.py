"""
Health Routes - Search session status.
"""

from typing import Any

from fastapi import APIRouter, Depends

from shopsearch import __version__
from shopsearch.domains.search import SearchSession, SortOrder
from shopsearch.interfaces.api.deps import get_search_session

router = APIRouter()


@router.get("/health")
async def health_check(session: SearchSession = Depends(get_search_session)) -> dict[str, Any]:
    """
    Session health.

    ``degraded`` means the catalog snapshot is empty, so only backend
    search can produce results.
    """
    products = session.index.size
    return {
        "status": "healthy" if products else "degraded",
        "service": "shopsearch",
        "catalog_products": products,
        "session_state": session.state.value,
        "cache": session.cache.stats(),
    }


@router.get("/api")
async def api_info() -> dict[str, Any]:
    return {
        "name": "ShopSearch API",
        "version": __version__,
        "sort_orders": [order.value for order in SortOrder],
        "endpoints": ["/api/search", "/api/search/suggestions", "/api/search/recent"],
        "docs": "/docs",
    }
