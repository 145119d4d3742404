"""Tests for search data models."""

import pytest

from unisearch.models import (
    FavoriteRecord,
    FavoriteRequest,
    MatchType,
    SearchResult,
    Source,
    Statistics,
    collection_name,
    default_filters,
    match_type_display,
)


class TestSource:
    def test_collection_names(self):
        assert collection_name(Source.AQELEI) == "dictionary_aqelɛi"
        assert collection_name(Source.WARYAGHRI) == "dictionary_waryaghri"
        assert collection_name(Source.VERBS) == "verbs"

    def test_collection_name_from_wire_value(self):
        assert collection_name("AQELEI") == "dictionary_aqelɛi"

    def test_unknown_source_falls_back_to_lowercase(self):
        assert collection_name("MASSIN") == "massin"

    def test_every_source_has_mappings(self):
        for source in Source:
            assert source.display_name
            assert source.collection_name
            assert source.badge_style

    def test_display_names(self):
        assert Source.AQELEI.display_name == "Aqelɛi"
        assert Source.VERBS.display_name == "Verbs"

    def test_parse(self):
        assert Source.parse("waryaghri") == Source.WARYAGHRI
        assert Source.parse("Aqelɛi") == Source.AQELEI
        assert Source.parse(Source.VERBS) is Source.VERBS

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown source"):
            Source.parse("klingon")

    def test_default_filters(self):
        assert default_filters() == {
            Source.AQELEI: True,
            Source.WARYAGHRI: True,
            Source.VERBS: False,
        }


class TestMatchType:
    def test_display(self):
        assert MatchType.EXACT_WORD.display == "Exact word match"
        assert MatchType.FUZZY.display == "Similar match"
        assert match_type_display("random") == "Random entry"

    def test_unknown_display(self):
        assert match_type_display("phonetic") == "Match found"
        assert match_type_display(None) == "Match found"


class TestSearchResult:
    def test_from_dict(self):
        r = SearchResult.from_dict({
            "id": "1",
            "source": "AQELEI",
            "sourceDisplayName": "Aqelɛi",
            "word": "aman",
            "translation": "water",
            "type": "noun",
            "relevanceScore": 0.9,
            "matchType": "exact_word",
            "highlightedText": None,
            "globalId": "dictionary_aqelɛi:1",
        })
        assert r.source is Source.AQELEI
        assert r.match_type is MatchType.EXACT_WORD
        assert r.global_id == "dictionary_aqelɛi:1"
        assert r.relevance_score == 0.9
        assert r.highlighted_text is None

    def test_global_id_derived_when_missing(self):
        r = SearchResult(id="42", source=Source.WARYAGHRI, word="tazart")
        assert r.global_id == "dictionary_waryaghri:42"
        assert r.source_display_name == "Waryaghri"

    def test_entry_key_falls_back_to_word(self):
        r = SearchResult(id="", source=Source.VERBS, word="ari")
        assert r.entry_key == "ari"
        assert r.global_id == "verbs:ari"

    def test_global_id_is_fixed(self):
        r = SearchResult(id="1", source=Source.AQELEI, word="aman", global_id="x:1")
        with pytest.raises(AttributeError):
            r.global_id = "y:2"
        assert r.global_id == "x:1"

    def test_unknown_source_and_match_type_kept_raw(self):
        r = SearchResult.from_dict({"id": "3", "source": "MASSIN", "word": "w", "matchType": "odd"})
        assert r.source == "MASSIN"
        assert r.global_id == "massin:3"
        assert r.match_display == "Match found"


class TestFavorites:
    def test_request_for_result(self):
        r = SearchResult(id="", source=Source.AQELEI, word="aman", translation="water", type="noun")
        req = FavoriteRequest.for_result(r)
        assert req.to_dict() == {
            "sourceCollection": "dictionary_aqelɛi",
            "entryId": "aman",
            "entryWord": "aman",
            "entryTranslation": "water",
            "entryType": "noun",
        }

    def test_record_from_dict(self):
        rec = FavoriteRecord.from_dict({"sourceCollection": "verbs", "entryId": "7"})
        assert rec.global_id == "verbs:7"
        assert rec.is_favorited


class TestStatistics:
    def test_from_dict(self):
        s = Statistics.from_dict({
            "totalEntries": 10,
            "entriesBySource": {"Aqelɛi": 6, "Verbs": 4},
            "availableTypes": {"Verbs": ["verbe"]},
        })
        assert s.total_entries == 10
        assert list(s.entries_by_source) == ["Aqelɛi", "Verbs"]
        assert s.available_types == {"Verbs": ["verbe"]}

    def test_empty(self):
        s = Statistics.from_dict({})
        assert s.total_entries == 0
        assert s.entries_by_source == {}
