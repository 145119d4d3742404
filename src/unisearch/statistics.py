"""Aggregate entry counts and entry types per source."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from unisearch.gateway import DictionaryGateway
from unisearch.models import VERB_SOURCE, Statistics

logger = logging.getLogger(__name__)


class StatisticsCache:
    """Statistics and available types, each replaced wholesale on refresh.

    A failed fetch keeps whatever value was cached before.
    """

    def __init__(self, gateway: DictionaryGateway):
        self._gateway = gateway
        self.statistics: Optional[Statistics] = None
        self.available_types: dict[str, list[str]] = {}

    async def refresh(self) -> None:
        await asyncio.gather(self._load_statistics(), self._load_available_types())

    async def _load_statistics(self) -> None:
        try:
            self.statistics = await self._gateway.get_statistics()
        except Exception:
            logger.exception("Error loading statistics")

    async def _load_available_types(self) -> None:
        try:
            self.available_types = await self._gateway.get_available_types()
        except Exception:
            logger.exception("Error loading types")

    def dictionary_sources_only(self) -> list[str]:
        if self.statistics is None:
            return []
        return [s for s in self.statistics.entries_by_source if s != VERB_SOURCE.display_name]

    def total_dictionary_entries(self) -> str:
        """Entries across dictionary sources (verbs excluded), thousands-grouped."""
        if self.statistics is None:
            return "0"
        by_source = self.statistics.entries_by_source
        total = sum(by_source.get(s, 0) for s in self.dictionary_sources_only())
        return f"{total:,}"
