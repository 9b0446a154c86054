"""
Search Domain - Hybrid local/remote product search.

This domain handles:
- Fixed-band fuzzy scoring
- Local index matching with synonym expansion
- Trust-ordered merge and sort orders
- Debounced, supersession-safe query orchestration
- Product and category suggestions
"""

from .cache import CacheEntry, ResultCache
from .contracts import CatalogSource, RemoteSearch
from .matcher import LocalIndex, build_search_text, match_products
from .models import (
    CandidateSource,
    Category,
    Product,
    Query,
    ScoredCandidate,
    SearchOutcome,
    SessionState,
    SortOrder,
    Suggestions,
)
from .orchestrator import SearchSession, coerce_sort_order
from .ranking import merge_results, rank_results, sort_products
from .scoring import score
from .suggestions import did_you_mean, suggest_categories, suggest_products
from .synonyms import DEFAULT_SYNONYMS, expand_terms, normalize_query

__all__ = [
    # Contracts
    "CatalogSource",
    "RemoteSearch",
    # Models
    "CandidateSource",
    "Category",
    "Product",
    "Query",
    "ScoredCandidate",
    "SearchOutcome",
    "SessionState",
    "SortOrder",
    "Suggestions",
    "CacheEntry",
    # Implementations
    "LocalIndex",
    "ResultCache",
    "SearchSession",
    "build_search_text",
    "coerce_sort_order",
    "did_you_mean",
    "expand_terms",
    "match_products",
    "merge_results",
    "normalize_query",
    "rank_results",
    "score",
    "sort_products",
    "suggest_categories",
    "suggest_products",
    "DEFAULT_SYNONYMS",
]
