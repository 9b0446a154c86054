"""
Search Routes - Product search, suggestions and recent searches.

One search session backs the process, matching the single-user search
panel it models; concurrent requests supersede each other.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field

from shopsearch.domains.search import (
    Category,
    Product,
    SearchSession,
    SortOrder,
    coerce_sort_order,
)
from shopsearch.interfaces.api.deps import get_search_session
from shopsearch.interfaces.api.middleware import CACHE_HEADER, SEQUENCE_HEADER

router = APIRouter()


class SearchResultItem(BaseModel):
    """Single result row with membership decoration."""

    product: Product
    in_cart: bool = False
    in_wishlist: bool = False


class SearchResponse(BaseModel):
    """Search response."""

    query: str
    sort: SortOrder
    results: list[SearchResultItem]
    total: int
    from_cache: bool = False
    remote_error: str | None = None
    superseded: bool = False
    did_you_mean: list[str] = Field(default_factory=list)


class SuggestionsResponse(BaseModel):
    """Suggestions response."""

    query: str
    products: list[str]
    categories: list[Category]


class RecentSearchesResponse(BaseModel):
    """Recent searches, most recent first."""

    items: list[str]


def _rows(session: SearchSession, products: list[Product]) -> list[SearchResultItem]:
    return [
        SearchResultItem(
            product=p,
            in_cart=session.is_in_cart(p.id),
            in_wishlist=session.is_in_wishlist(p.id),
        )
        for p in products
    ]


@router.get("", response_model=SearchResponse)
async def search(
    response: Response,
    q: str = Query("", description="Search text"),
    sort: str = Query(SortOrder.RELEVANCE.value, description="relevance|price|newest|rating|popularity"),
    limit: int = Query(40, ge=1, le=200),
    session: SearchSession = Depends(get_search_session),
):
    """
    Search products.

    - **q**: Free-text query (empty returns no results)
    - **sort**: Result order
    - **limit**: Maximum rows returned

    A request replaced by a newer one before it settled comes back empty
    with ``superseded`` set.
    """
    order = coerce_sort_order(sort)
    outcome = await session.search(q, order)
    response.headers[SEQUENCE_HEADER] = str(outcome.sequence)
    response.headers[CACHE_HEADER] = "hit" if outcome.from_cache else "miss"

    return SearchResponse(
        query=outcome.query,
        sort=outcome.sort,
        results=_rows(session, outcome.products[:limit]),
        total=len(outcome.products),
        from_cache=outcome.from_cache,
        remote_error=outcome.remote_error,
        superseded=outcome.superseded,
        # Alternatives describe the session's current query only
        did_you_mean=session.did_you_mean() if outcome is session.outcome else [],
    )


@router.get("/suggestions", response_model=SuggestionsResponse)
async def suggestions(
    q: str = Query("", description="Search text"),
    session: SearchSession = Depends(get_search_session),
):
    """Product-name and category quick picks."""
    result = session.suggestions(q)
    return SuggestionsResponse(
        query=q,
        products=[p.name for p in result.products],
        categories=result.categories,
    )


@router.get("/recent", response_model=RecentSearchesResponse)
async def recent_searches(session: SearchSession = Depends(get_search_session)):
    """Recent searches, most recent first."""
    return RecentSearchesResponse(items=session.recent_searches)


@router.post("/membership/changed", response_model=dict)
async def membership_changed(session: SearchSession = Depends(get_search_session)):
    """Announce a cart/wishlist change so result rows refresh."""
    snapshot = await session.membership.notify_changed()
    return {
        "cart": sorted(snapshot.cart_ids),
        "wishlist": sorted(snapshot.wishlist_ids),
    }
