"""
Query Orchestrator - Debounced, cache-aware, supersession-safe search session.

Lifecycle per session (one per mount of the search surface):

    Idle -> Debouncing -> In-Flight -> Settled
      ^________ text cleared ___________|

Every submission takes the next sequence number. Work from an older
sequence may still complete, but its results are never rendered or
cached. A cache hit for the query at the current sort order is rendered
immediately while the debounce still runs to refresh it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from shopsearch.config.errors import SearchError
from shopsearch.domains.history import RecentSearchStore
from shopsearch.domains.membership import MembershipSnapshot, MembershipTracker

from .cache import CacheEntry, ResultCache
from .contracts import CatalogSource, OutcomeListener, RemoteSearch
from .matcher import LocalIndex
from .models import Category, Product, Query, SearchOutcome, SessionState, SortOrder, Suggestions
from .ranking import merge_results, sort_products
from .suggestions import build_trending_pool, did_you_mean, suggest
from .synonyms import expand_terms, normalize_query

logger = logging.getLogger(__name__)

__all__ = ["SearchSession", "coerce_sort_order"]


def coerce_sort_order(value: SortOrder | str) -> SortOrder:
    """Parse a sort order name, raising SearchError for unknown names."""
    try:
        return SortOrder(value)
    except ValueError as e:
        raise SearchError(
            f"Unknown sort order: {value!r}",
            {"allowed": [order.value for order in SortOrder]},
        ) from e


class SearchSession:
    """
    Product search session combining local fuzzy matching with remote search.

    All mutating methods must be called from the running event loop.

    Example:
        >>> session = SearchSession(client, client, RecentSearchStore(storage))
        >>> await session.open()
        >>> session.set_query("sneakers")
        >>> outcome = await session.wait_settled()
    """

    def __init__(
        self,
        catalog: CatalogSource,
        remote: RemoteSearch,
        recent: RecentSearchStore,
        membership: MembershipTracker | None = None,
        *,
        synonyms: Mapping[str, Sequence[str]] | None = None,
        debounce_ms: int = 100,
        persist_delay_ms: int = 400,
        local_limit: int = 40,
        local_min_score: int = 10,
        suggestion_limit: int = 6,
        trending_limit: int = 20,
    ) -> None:
        """
        Initialize search session.

        Args:
            catalog: Product/category data source
            remote: Authoritative backend search
            recent: Recent-search store
            membership: Cart/wishlist tracker used to decorate results
            synonyms: Token -> synonyms map (None uses the built-in map)
            debounce_ms: Quiet period before a search is issued
            persist_delay_ms: Idle window before a settled query is recorded
            local_limit: Local candidate cap
            local_min_score: Local noise threshold
            suggestion_limit: Per-list suggestion cap
            trending_limit: Trending pool cap
        """
        self._catalog = catalog
        self._remote = remote
        self._recent = recent
        self._membership = membership or MembershipTracker()
        self._synonyms = synonyms
        self._debounce = debounce_ms / 1000
        self._persist_delay = persist_delay_ms / 1000
        self._local_limit = local_limit
        self._local_min_score = local_min_score
        self._suggestion_limit = suggestion_limit
        self._trending_limit = trending_limit

        # Read-only snapshots, replaced on open()
        self._index = LocalIndex()
        self._trending: list[Product] = []
        self._categories: list[Category] = []

        self._cache = ResultCache()
        self._query = ""
        self._sort = SortOrder.RELEVANCE
        self._sequence = 0
        self._state = SessionState.IDLE
        self._loading = False
        self._outcome = SearchOutcome(query="")
        self._listeners: list[OutcomeListener] = []

        self._debounce_task: asyncio.Task[None] | None = None
        self._cycle_task: asyncio.Task[None] | None = None
        self._persist_task: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()

        self._membership.subscribe(self._on_membership_changed)

    # --- Snapshot loading ---

    async def open(self) -> None:
        """Load the local index, trending pool, categories and membership."""
        products, featured, bestsellers, categories, _ = await asyncio.gather(
            self._catalog.fetch_all_products(),
            self._catalog.fetch_featured_products(),
            self._catalog.fetch_bestseller_products(),
            self._catalog.fetch_categories(),
            self._membership.refresh(),
            return_exceptions=True,
        )

        self._index = LocalIndex(self._loaded(products, "products"))
        self._trending = build_trending_pool(
            self._loaded(featured, "featured products"),
            self._loaded(bestsellers, "bestseller products"),
            limit=self._trending_limit,
        )
        self._categories = self._loaded(categories, "categories")

        logger.info(
            "Search session opened: products=%d trending=%d categories=%d",
            self._index.size,
            len(self._trending),
            len(self._categories),
        )

    @staticmethod
    def _loaded(result: Any, what: str) -> list[Any]:
        if isinstance(result, BaseException):
            logger.warning("Failed to load %s: %s", what, result)
            return []
        return list(result or [])

    # --- Input ---

    def set_query(self, text: str) -> None:
        """Handle new input text (one call per keystroke)."""
        self._query = text or ""
        self._submit()

    def set_sort(self, order: SortOrder | str) -> None:
        """
        Change the sort order.

        A query with cached results is re-sorted from cache without a
        remote call; otherwise a fresh cycle is started.
        """
        order = coerce_sort_order(order)
        if order == self._sort:
            return
        self._sort = order

        normalized = normalize_query(self._query)
        if not normalized:
            return

        entry = self._cached_entry(normalized, order)
        if entry is None:
            self._submit()
            return

        # Supersede anything still running for the previous order
        self._sequence += 1
        self._cancel_debounce()
        self._cycle_task = None
        self._state = SessionState.SETTLED
        self._loading = False
        self._render(
            SearchOutcome(
                query=self._query.strip(),
                sort=order,
                sequence=self._sequence,
                products=list(entry.products),
                from_cache=True,
            )
        )

    def choose_suggestion(self, text: str) -> None:
        """Re-seed the query from a suggestion or recent search."""
        self.set_query(text)

    async def search(self, text: str, sort: SortOrder | str | None = None) -> SearchOutcome:
        """
        Submit ``text`` and wait until it settles.

        Returns the last outcome rendered for this submission. If a later
        submission supersedes it before anything was rendered, an empty
        outcome marked ``superseded`` is returned instead.
        """
        order = self._sort if sort is None else coerce_sort_order(sort)
        sequence = self._sequence + 1
        own: list[SearchOutcome] = []

        def capture(outcome: SearchOutcome) -> None:
            if outcome.sequence == sequence:
                own.append(outcome)

        self.subscribe(capture)
        try:
            self._sort = order
            self.set_query(text)
            await self.wait_settled()
        finally:
            self.unsubscribe(capture)

        if own:
            return own[-1]
        logger.debug("Search superseded before settling: seq=%d q=%r", sequence, text)
        return SearchOutcome(query=(text or "").strip(), sort=order, sequence=sequence, superseded=True)

    async def wait_settled(self) -> SearchOutcome:
        """
        Wait for the current cycle and its recent-search write.

        Superseded in-flight work is not awaited.
        """
        while True:
            pending = [
                task
                for task in (self._debounce_task, self._cycle_task, self._persist_task)
                if task is not None and not task.done()
            ]
            if not pending:
                return self._outcome
            await asyncio.wait(pending)

    async def close(self) -> None:
        """Stop timers, drop in-flight work and detach from membership."""
        self._sequence += 1
        self._cancel_debounce()
        self._cancel_persist()
        for task in list(self._inflight):
            task.cancel()
        if self._inflight:
            await asyncio.gather(*self._inflight, return_exceptions=True)
        self._cycle_task = None
        self._membership.unsubscribe(self._on_membership_changed)
        self._listeners.clear()
        self._state = SessionState.IDLE
        self._loading = False

    # --- Cycle ---

    def _submit(self) -> None:
        self._sequence += 1
        sequence = self._sequence
        self._cancel_debounce()
        self._cancel_persist()
        self._cycle_task = None

        normalized = normalize_query(self._query)
        if not normalized:
            self._state = SessionState.IDLE
            self._loading = False
            self._render(SearchOutcome(query="", sort=self._sort, sequence=sequence))
            return

        query = Query(
            raw=self._query.strip(),
            normalized=normalized,
            terms=expand_terms(self._query, self._synonyms),
            sequence=sequence,
            sort=self._sort,
        )

        entry = self._cached_entry(normalized, self._sort)
        if entry is not None:
            self._loading = False
            self._render(
                SearchOutcome(
                    query=query.raw,
                    sort=query.sort,
                    sequence=sequence,
                    products=list(entry.products),
                    from_cache=True,
                )
            )
        else:
            self._loading = True

        self._state = SessionState.DEBOUNCING
        self._debounce_task = asyncio.create_task(self._debounce_then_run(query))

    async def _debounce_then_run(self, query: Query) -> None:
        await asyncio.sleep(self._debounce)
        if query.sequence != self._sequence:
            return
        task = asyncio.create_task(self._execute(query))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        self._cycle_task = task

    async def _execute(self, query: Query) -> None:
        if query.sequence != self._sequence:
            return
        self._state = SessionState.IN_FLIGHT

        remote_task = asyncio.create_task(self._fetch_remote(query.raw))
        local = self._index.match(
            query.terms,
            limit=self._local_limit,
            min_score=self._local_min_score,
        )
        remote, remote_error = await remote_task

        if query.sequence != self._sequence:
            logger.debug(
                "Discarding superseded search seq=%d (current=%d) q=%r",
                query.sequence,
                self._sequence,
                query.raw,
            )
            return

        relevance = merge_results(local, remote)
        ranked = sort_products(relevance, query.sort)
        self._cache.set(query.normalized, SortOrder.RELEVANCE, relevance)
        if query.sort != SortOrder.RELEVANCE:
            self._cache.set(query.normalized, query.sort, ranked)

        outcome = SearchOutcome(
            query=query.raw,
            sort=query.sort,
            sequence=query.sequence,
            products=ranked,
            local_count=len(local),
            remote_count=len(remote),
            remote_error=remote_error,
        )
        self._state = SessionState.SETTLED
        self._loading = False

        logger.info(
            "Search settled: q=%r seq=%d sort=%s local=%d remote=%d final=%d",
            query.raw,
            query.sequence,
            query.sort.value,
            outcome.local_count,
            outcome.remote_count,
            len(ranked),
        )

        self._render(outcome)
        self._schedule_persist(query.raw)

    async def _fetch_remote(self, text: str) -> tuple[list[Product], str | None]:
        """Remote failures degrade to an empty list plus an error message."""
        try:
            products = list(await self._remote.search(text) or [])
        except Exception as e:
            logger.warning("Remote search failed for %r, using local results: %s", text, e)
            return [], str(e)

        valid = [p for p in products if isinstance(p, Product)]
        if len(valid) != len(products):
            logger.warning("Dropped %d malformed remote results for %r", len(products) - len(valid), text)
        return valid, None

    def _cached_entry(self, normalized: str, order: SortOrder) -> CacheEntry | None:
        """Entry for ``order``, derived from the cached relevance list when missing."""
        entry = self._cache.get(normalized, order)
        if entry is None and order != SortOrder.RELEVANCE:
            base = self._cache.get(normalized, SortOrder.RELEVANCE)
            if base is not None:
                entry = self._cache.set(normalized, order, sort_products(base.products, order))
        return entry

    def _schedule_persist(self, text: str) -> None:
        self._cancel_persist()
        self._persist_task = asyncio.create_task(self._persist_after_idle(text))

    async def _persist_after_idle(self, text: str) -> None:
        await asyncio.sleep(self._persist_delay)
        self._recent.record(text)

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    def _cancel_persist(self) -> None:
        if self._persist_task is not None and not self._persist_task.done():
            self._persist_task.cancel()
        self._persist_task = None

    # --- Rendering ---

    def subscribe(self, listener: OutcomeListener) -> None:
        """Receive every rendered outcome, including cache hits."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: OutcomeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _render(self, outcome: SearchOutcome) -> None:
        self._outcome = outcome
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception:
                logger.exception("Search listener failed")

    def _on_membership_changed(self, snapshot: MembershipSnapshot) -> None:
        # Re-deliver the current list so rows pick up new cart/wishlist state
        self._render(self._outcome)

    # --- Read-only views ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def query(self) -> str:
        return self._query

    @property
    def sort(self) -> SortOrder:
        return self._sort

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def outcome(self) -> SearchOutcome:
        return self._outcome

    @property
    def results(self) -> list[Product]:
        return list(self._outcome.products)

    @property
    def trending(self) -> list[Product]:
        return list(self._trending)

    @property
    def categories(self) -> list[Category]:
        return list(self._categories)

    @property
    def index(self) -> LocalIndex:
        return self._index

    @property
    def cache(self) -> ResultCache:
        return self._cache

    @property
    def recent_searches(self) -> list[str]:
        return self._recent.items

    @property
    def membership(self) -> MembershipTracker:
        return self._membership

    def suggestions(self, text: str | None = None) -> Suggestions:
        """Product-name and category quick picks for ``text`` (default: current query)."""
        return suggest(
            self._query if text is None else text,
            self._trending,
            self._outcome.products,
            self._categories,
            limit=self._suggestion_limit,
        )

    def did_you_mean(self) -> list[str]:
        """Alternatives shown when a settled query found nothing."""
        if self._state != SessionState.SETTLED or not self._outcome.empty:
            return []
        return did_you_mean(self._query, self._trending)

    def is_in_cart(self, product_id: str) -> bool:
        return self._membership.snapshot.in_cart(product_id)

    def is_in_wishlist(self, product_id: str) -> bool:
        return self._membership.snapshot.in_wishlist(product_id)
