"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from unisearch.auth import AuthState
from unisearch.models import MatchType, SearchResult, Source, Statistics


def make_result(
    id: str = "1",
    source: Source = Source.AQELEI,
    word: str = "aman",
    translation: str = "water",
    type: str = "noun",
    match_type: MatchType = MatchType.EXACT_WORD,
) -> SearchResult:
    return SearchResult(
        id=id,
        source=source,
        word=word,
        translation=translation,
        type=type,
        relevance_score=1.0,
        match_type=match_type,
    )


@pytest.fixture
def sample_statistics():
    return Statistics(
        total_entries=10000,
        entries_by_source={"Aqelɛi": 5000, "Waryaghri": 3000, "Verbs": 2000},
        available_types={"Aqelɛi": ["noun", "verb"], "Waryaghri": ["nom", "verbe"], "Verbs": ["verbe"]},
    )


@pytest.fixture
def gateway(sample_statistics):
    """Gateway double with harmless defaults for every operation."""
    gw = AsyncMock()
    gw.search_across_sources.return_value = []
    gw.get_random_entry.return_value = make_result(id="7", source=Source.VERBS, word="ari")
    gw.get_statistics.return_value = sample_statistics
    gw.get_available_types.return_value = dict(sample_statistics.available_types)
    gw.is_entry_favorited.return_value = False
    gw.remove_from_favorites.return_value = True
    return gw


@pytest.fixture
def auth():
    return AuthState(authenticated=True)


@pytest.fixture
def anonymous():
    return AuthState(authenticated=False)
