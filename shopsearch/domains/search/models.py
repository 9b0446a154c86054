"""
Search Models - Data types for search domain.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _coerce_identity(data: Any) -> Any:
    """Backend documents carry ``_id`` and/or ``id``; ``_id`` wins."""
    if not isinstance(data, dict):
        return data
    raw_id = data.get("_id")
    if raw_id is None:
        raw_id = data.get("id")
    if raw_id is None:
        return data
    return {**data, "id": str(raw_id)}


class SortOrder(str, Enum):
    """Result ordering selected by the user."""

    RELEVANCE = "relevance"
    PRICE = "price"
    NEWEST = "newest"
    RATING = "rating"
    POPULARITY = "popularity"


class CandidateSource(str, Enum):
    """Where a candidate came from before merging."""

    LOCAL = "local"
    REMOTE = "remote"


class SessionState(str, Enum):
    """Query orchestrator lifecycle."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    IN_FLIGHT = "in_flight"
    SETTLED = "settled"


class Product(BaseModel):
    """Storefront product, read-only to the search core."""

    id: str
    name: str = ""
    description: str | None = None
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    price: float = Field(default=0.0, ge=0)
    original_price: float | None = Field(default=None, alias="originalPrice")
    rating: float | None = Field(default=None, ge=0, le=5)
    reviews: int | None = Field(default=None, ge=0)
    created_at: str | None = Field(default=None, alias="createdAt")
    images: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def coerce_identity(cls, data: Any) -> Any:
        return _coerce_identity(data)


class Category(BaseModel):
    """Product category used for category suggestions."""

    id: str
    name: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def coerce_identity(cls, data: Any) -> Any:
        return _coerce_identity(data)


class Query(BaseModel):
    """One submitted query cycle."""

    raw: str
    normalized: str
    terms: tuple[str, ...]
    sequence: int
    sort: SortOrder = SortOrder.RELEVANCE

    model_config = {"frozen": True}


class ScoredCandidate(BaseModel):
    """A product paired with a provisional score before merging."""

    product: Product
    source: CandidateSource
    score: int | None = None  # only meaningful for local candidates

    model_config = {"frozen": True}


class SearchOutcome(BaseModel):
    """A rendered result list for one query and sort order."""

    query: str
    sort: SortOrder = SortOrder.RELEVANCE
    sequence: int = 0
    products: list[Product] = Field(default_factory=list)
    local_count: int = 0
    remote_count: int = 0
    from_cache: bool = False
    remote_error: str | None = None
    superseded: bool = False  # a later submission replaced this one before it settled

    @property
    def empty(self) -> bool:
        """True when the settled list has no products ("no products found")."""
        return not self.products


class Suggestions(BaseModel):
    """Quick-pick product names and categories for the current query."""

    products: list[Product] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
