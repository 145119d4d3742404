"""Federated search session: one user's search term, filters and results.

Every operation that reaches the backend is a coroutine. Nothing here raises
on backend failure; errors are logged and the session settles in a stable
state. Responses that arrive after a newer dispatch (or after
``clear_search``) are discarded.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from unisearch.auth import AuthStatusProvider, Subscription
from unisearch.config import get_max_results
from unisearch.favorites import FavoriteTracker
from unisearch.gateway import DictionaryGateway
from unisearch.models import SearchResult, Source, default_filters
from unisearch.statistics import StatisticsCache

logger = logging.getLogger(__name__)


class SearchStatus(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    RESULTS = "results"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class SearchSessionState:
    search_term: str
    results: tuple[SearchResult, ...]
    loading: bool
    has_searched: bool
    selected_result: Optional[SearchResult]
    status: SearchStatus


class SearchSession:
    def __init__(
        self,
        gateway: DictionaryGateway,
        auth: AuthStatusProvider,
        *,
        max_results: Optional[int] = None,
        filters: Optional[dict[Source, bool]] = None,
        rng: Optional[random.Random] = None,
    ):
        self._gateway = gateway
        self._auth = auth
        self._rng = rng or random.Random()
        self._subscription: Optional[Subscription] = None
        self._sequence = 0

        self.search_term = ""
        self.results: list[SearchResult] = []
        self.loading = False
        self.has_searched = False
        self.selected_result: Optional[SearchResult] = None
        self.status = SearchStatus.IDLE
        self.last_error: Optional[Exception] = None

        self.filters = default_filters()
        if filters:
            self.filters.update(filters)
        self.max_results = max_results or get_max_results()

        self.favorites = FavoriteTracker(gateway, auth)
        self.statistics = StatisticsCache(gateway)

    # --- lifecycle ---

    async def start(self) -> None:
        """Subscribe to auth changes and load statistics."""
        if self._subscription is None:
            self._subscription = self._auth.subscribe(self._on_auth_change)
        await self.statistics.refresh()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def __aenter__(self) -> "SearchSession":
        await self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        self.close()

    @property
    def is_authenticated(self) -> bool:
        return self._auth.get_current_auth_status()

    def _on_auth_change(self, authenticated: bool) -> None:
        self.favorites.handle_auth_change(authenticated, self.results)

    # --- state ---

    @property
    def state(self) -> SearchSessionState:
        return SearchSessionState(
            search_term=self.search_term,
            results=tuple(self.results),
            loading=self.loading,
            has_searched=self.has_searched,
            selected_result=self.selected_result,
            status=self.status,
        )

    def _next_token(self) -> int:
        self._sequence += 1
        return self._sequence

    def _is_stale(self, token: int) -> bool:
        return token != self._sequence

    def active_sources(self) -> list[Source]:
        return [s for s in Source if self.filters.get(s)]

    def has_active_source(self) -> bool:
        return any(self.filters.values())

    # --- search ---

    async def perform_search(
        self,
        term: Optional[str] = None,
        active_sources: Optional[Iterable[Source]] = None,
        max_results: Optional[int] = None,
    ) -> None:
        """Search all active sources for ``term`` and replace the results.

        ``term`` defaults to ``search_term``; ``active_sources`` to the enabled
        filters; ``max_results`` to the session limit.
        """
        if term is not None:
            self.search_term = term
        query = self.search_term.strip()
        if not query:
            # Invalidate anything still in flight for the previous term.
            self._next_token()
            self.results = []
            self.has_searched = False
            self.loading = False
            self.status = SearchStatus.IDLE
            return

        sources = list(active_sources) if active_sources is not None else self.active_sources()
        if not sources:
            logger.debug("No active source; search for %r not dispatched", query)
            return

        limit = max_results if max_results is not None else self.max_results
        if limit <= 0:
            logger.warning("Ignoring search with non-positive limit %d", limit)
            return

        self.favorites.flush_owed()
        token = self._next_token()
        self.loading = True
        self.status = SearchStatus.SEARCHING
        try:
            results = await self._gateway.search_across_sources(query, sources, limit)
        except Exception as e:
            if self._is_stale(token):
                logger.debug("Discarding stale search failure for %r", query)
                return
            logger.exception("Search error for %r", query)
            self.last_error = e
            self.results = []
            self.status = SearchStatus.FAILED
        else:
            if self._is_stale(token):
                logger.debug("Discarding stale results for %r", query)
                return
            self.last_error = None
            self.results = list(results)
            self.status = SearchStatus.RESULTS if self.results else SearchStatus.EMPTY
            self.favorites.schedule_reconcile(self.results)
        self.loading = False
        self.has_searched = True

    async def get_random_entry(self, source: Optional[Source] = None) -> None:
        """Show one random entry, from ``source`` or a random active source."""
        if source is None:
            active = self.active_sources()
            if not active:
                logger.warning("No active source; random entry not requested")
                return
            source = self._rng.choice(active)

        token = self._next_token()
        self.loading = True
        self.status = SearchStatus.SEARCHING
        try:
            entry = await self._gateway.get_random_entry(source)
        except Exception as e:
            if self._is_stale(token):
                return
            logger.exception("Random entry error for %s", source.value)
            self.last_error = e
            self.loading = False
            self._settle_status()
            return
        if self._is_stale(token):
            logger.debug("Discarding stale random entry %s", entry.global_id)
            return
        self.last_error = None
        self.results = [entry]
        self.search_term = entry.word
        self.has_searched = True
        self.loading = False
        self.status = SearchStatus.RESULTS
        self.favorites.schedule_reconcile(self.results)

    def _settle_status(self) -> None:
        if self.results:
            self.status = SearchStatus.RESULTS
        elif self.has_searched:
            self.status = SearchStatus.EMPTY
        else:
            self.status = SearchStatus.IDLE

    def clear_search(self) -> None:
        self._next_token()
        self.search_term = ""
        self.results = []
        self.has_searched = False
        self.selected_result = None
        self.loading = False
        self.status = SearchStatus.IDLE

    async def set_source_enabled(self, source: Source, enabled: bool) -> None:
        self.filters[source] = enabled
        await self.on_source_filter_change()

    async def on_source_filter_change(self) -> None:
        """Re-run the current search with the new filters, if there is one."""
        if self.search_term.strip():
            await self.perform_search()

    # --- selection ---

    def select_result(self, result: SearchResult) -> None:
        self.selected_result = result

    def close_detail_view(self) -> None:
        self.selected_result = None

    # --- favorites ---

    def is_favorited(self, result: SearchResult) -> bool:
        return self.favorites.is_favorited(result)

    async def toggle_favorite(self, result: SearchResult) -> bool:
        return await self.favorites.toggle(result)

    # --- summaries ---

    def results_summary(self) -> str:
        if self.loading:
            return "Searching..."
        if not self.has_searched:
            return "Enter a search term to find entries across all dictionaries"
        if not self.results:
            return f'No results found for "{self.search_term}"'
        names = ", ".join(s.value for s in self.active_sources())
        return f'{len(self.results)} results for "{self.search_term}" in {names}'
