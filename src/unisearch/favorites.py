"""Per-result favorite state, reconciled against the dictionary backend.

The flag kept here is best-effort and eventually consistent: ``toggle``
decides between add and remove from the in-memory flag at call time and
does not re-query the backend, so a toggle racing an in-flight
reconciliation can briefly show the older value.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from unisearch.auth import AuthStatusProvider
from unisearch.gateway import DictionaryGateway
from unisearch.models import FavoriteRequest, SearchResult, collection_name

logger = logging.getLogger(__name__)


class FavoriteTracker:
    def __init__(self, gateway: DictionaryGateway, auth: AuthStatusProvider):
        self._gateway = gateway
        self._auth = auth
        self._status: dict[str, bool] = {}
        # Bumped on clear(); writes from checks started earlier are dropped.
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()
        # Results whose reconciliation could not be scheduled yet.
        self._owed: Optional[list[SearchResult]] = None

    @property
    def is_authenticated(self) -> bool:
        return self._auth.get_current_auth_status()

    def is_favorited(self, result: SearchResult) -> bool:
        return self._status.get(result.global_id, False)

    def snapshot(self) -> dict[str, bool]:
        return dict(self._status)

    def clear(self) -> None:
        self._generation += 1
        self._status = {}
        self._owed = None

    async def reconcile(self, results: Iterable[SearchResult]) -> None:
        """Re-derive the favorite flag of every result from the backend.

        Checks run concurrently; a failed check marks its own entry as not
        favorited and leaves the others alone.
        """
        if not self.is_authenticated:
            self.clear()
            return
        generation = self._generation
        await asyncio.gather(*(self._check(r, generation) for r in results))

    async def _check(self, result: SearchResult, generation: int) -> None:
        try:
            favorited = await self._gateway.is_entry_favorited(
                collection_name(result.source), result.entry_key
            )
        except Exception:
            logger.warning("Error checking favorite status of %s", result.global_id, exc_info=True)
            favorited = False
        if generation != self._generation:
            logger.debug("Dropping stale favorite status for %s", result.global_id)
            return
        self._status[result.global_id] = favorited

    def schedule_reconcile(self, results: Iterable[SearchResult]) -> asyncio.Task:
        """Start ``reconcile`` in the background and return its task."""
        self._owed = None
        task = asyncio.get_running_loop().create_task(self.reconcile(list(results)))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def reconcile_owed(self) -> bool:
        return self._owed is not None

    def flush_owed(self) -> None:
        """Schedule a reconciliation deferred by ``handle_auth_change``, if any."""
        if self._owed is not None:
            self.schedule_reconcile(self._owed)

    async def drain(self) -> None:
        """Run any owed reconciliation, then wait for every scheduled one."""
        self.flush_owed()
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def handle_auth_change(self, authenticated: bool, results: list[SearchResult]) -> None:
        if not authenticated:
            self.clear()
            return
        if not results:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # Notified outside the event loop; flush_owed() runs it later.
            logger.info("No running event loop; favorite reconciliation deferred")
            self._owed = list(results)
            return
        self.schedule_reconcile(results)

    async def toggle(self, result: SearchResult) -> bool:
        """Flip the favorite flag of ``result``; returns the flag afterwards."""
        if not self.is_authenticated:
            logger.info("User must be authenticated to save favorites")
            return self.is_favorited(result)

        global_id = result.global_id
        generation = self._generation
        if self._status.get(global_id, False):
            try:
                removed = await self._gateway.remove_from_favorites(result.source, result.entry_key)
            except Exception:
                logger.exception("Error removing favorite %s", global_id)
                return self.is_favorited(result)
            if removed and generation == self._generation:
                self._status[global_id] = False
        else:
            try:
                await self._gateway.add_to_favorites(FavoriteRequest.for_result(result))
            except Exception:
                logger.exception("Error adding favorite %s", global_id)
                return self.is_favorited(result)
            if generation == self._generation:
                self._status[global_id] = True
        return self.is_favorited(result)
