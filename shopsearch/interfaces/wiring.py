"""
Wiring - Build a search session and its collaborators from settings.
"""

from __future__ import annotations

from shopsearch.adapters.storage import JsonFileStorage
from shopsearch.adapters.storefront import StorefrontClient
from shopsearch.config import Settings
from shopsearch.domains.history import KeyValueStorage, RecentSearchStore
from shopsearch.domains.membership import MembershipTracker
from shopsearch.domains.search import SearchSession


def create_client(settings: Settings) -> StorefrontClient:
    return StorefrontClient(
        base_url=settings.api_base_url,
        account_base_url=settings.account_api_base_url,
        auth_token=settings.auth_token,
        timeout=settings.request_timeout,
        retry_attempts=settings.retry_attempts,
        featured_limit=settings.featured_limit,
        bestseller_limit=settings.bestseller_limit,
    )


def create_recent_store(
    settings: Settings,
    storage: KeyValueStorage | None = None,
) -> RecentSearchStore:
    return RecentSearchStore(
        storage or JsonFileStorage(settings.storage_path),
        key=settings.recent_searches_key,
        max_size=settings.recent_searches_max,
    )


def create_session(
    settings: Settings,
    client: StorefrontClient | None = None,
    recent: RecentSearchStore | None = None,
) -> SearchSession:
    """
    Assemble a SearchSession backed by the storefront client.

    Args:
        settings: Application settings
        client: Existing client to share (created if omitted)
        recent: Existing recent-search store (created if omitted)

    Returns:
        Unopened session; call ``await session.open()`` before searching
    """
    client = client or create_client(settings)
    return SearchSession(
        catalog=client,
        remote=client,
        recent=recent or create_recent_store(settings),
        membership=MembershipTracker(client),
        synonyms=settings.synonyms,
        debounce_ms=settings.debounce_ms,
        persist_delay_ms=settings.recent_persist_delay_ms,
        local_limit=settings.local_candidate_limit,
        local_min_score=settings.local_min_score,
        suggestion_limit=settings.suggestion_limit,
        trending_limit=settings.trending_limit,
    )
