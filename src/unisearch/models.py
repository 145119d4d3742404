"""Data models for federated dictionary search."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Source(str, Enum):
    """A dictionary or verb data source known to the backend."""

    AQELEI = "AQELEI"
    WARYAGHRI = "WARYAGHRI"
    VERBS = "VERBS"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def collection_name(self) -> str:
        return collection_name(self)

    @property
    def badge_style(self) -> str:
        return _BADGE_STYLES[self]

    @classmethod
    def parse(cls, value: Union[str, "Source"]) -> "Source":
        """Parse a wire value or display name, case-insensitively."""
        if isinstance(value, Source):
            return value
        key = value.strip().upper()
        for source in cls:
            if key == source.value or key == source.display_name.upper():
                return source
        raise ValueError(f"Unknown source: {value}")


_DISPLAY_NAMES = {
    Source.AQELEI: "Aqelɛi",
    Source.WARYAGHRI: "Waryaghri",
    Source.VERBS: "Verbs",
}

_COLLECTION_NAMES = {
    Source.AQELEI: "dictionary_aqelɛi",
    Source.WARYAGHRI: "dictionary_waryaghri",
}

_BADGE_STYLES = {
    Source.AQELEI: "bold magenta",
    Source.WARYAGHRI: "bold green",
    Source.VERBS: "bold blue",
}

# Statistics are keyed by display name; the verb source is not a dictionary.
VERB_SOURCE = Source.VERBS


def collection_name(source: Union[Source, str]) -> str:
    """Collection name used by every favorite-related backend call.

    Unknown sources fall back to their lowercase name.
    """
    if isinstance(source, Source):
        return _COLLECTION_NAMES.get(source, source.value.lower())
    try:
        return collection_name(Source(source))
    except ValueError:
        return source.lower()


def default_filters() -> dict[Source, bool]:
    return {Source.AQELEI: True, Source.WARYAGHRI: True, Source.VERBS: False}


class MatchType(str, Enum):
    EXACT_WORD = "exact_word"
    EXACT_TRANSLATION = "exact_translation"
    STARTS_WORD = "starts_word"
    STARTS_TRANSLATION = "starts_translation"
    CONTAINS_WORD = "contains_word"
    CONTAINS_TRANSLATION = "contains_translation"
    FUZZY = "fuzzy_match"
    RANDOM = "random"

    @property
    def display(self) -> str:
        return _MATCH_DISPLAY[self]


_MATCH_DISPLAY = {
    MatchType.EXACT_WORD: "Exact word match",
    MatchType.EXACT_TRANSLATION: "Exact translation match",
    MatchType.STARTS_WORD: "Word starts with query",
    MatchType.STARTS_TRANSLATION: "Translation starts with query",
    MatchType.CONTAINS_WORD: "Word contains query",
    MatchType.CONTAINS_TRANSLATION: "Translation contains query",
    MatchType.FUZZY: "Similar match",
    MatchType.RANDOM: "Random entry",
}


def match_type_display(match_type: Union[MatchType, str, None]) -> str:
    if isinstance(match_type, MatchType):
        return match_type.display
    try:
        return MatchType(match_type).display
    except ValueError:
        return "Match found"


@dataclass(frozen=True)
class SearchResult:
    """A single entry returned by any source."""

    id: str
    source: Union[Source, str]
    word: str
    translation: str = ""
    type: str = ""
    source_display_name: str = ""
    relevance_score: float = 0.0
    match_type: Union[MatchType, str] = MatchType.FUZZY
    highlighted_text: Optional[str] = None
    global_id: str = ""

    def __post_init__(self):
        # Frozen: fill derived fields once, never recomputed afterwards.
        if not self.source_display_name:
            name = self.source.display_name if isinstance(self.source, Source) else self.source
            object.__setattr__(self, "source_display_name", name)
        if not self.global_id:
            object.__setattr__(
                self, "global_id", f"{collection_name(self.source)}:{self.entry_key}"
            )

    @property
    def entry_key(self) -> str:
        """The identifier the backend uses for favorites: id, else word."""
        return self.id or self.word

    @property
    def match_display(self) -> str:
        return match_type_display(self.match_type)

    @classmethod
    def from_dict(cls, data: dict) -> "SearchResult":
        raw_source = data.get("source", "")
        try:
            source: Union[Source, str] = Source(raw_source)
        except ValueError:
            source = raw_source
        raw_match = data.get("matchType") or ""
        try:
            match_type: Union[MatchType, str] = MatchType(raw_match)
        except ValueError:
            match_type = raw_match
        return cls(
            id=str(data.get("id") or ""),
            source=source,
            word=data.get("word") or "",
            translation=data.get("translation") or "",
            type=data.get("type") or "",
            source_display_name=data.get("sourceDisplayName") or "",
            relevance_score=float(data.get("relevanceScore") or 0.0),
            match_type=match_type,
            highlighted_text=data.get("highlightedText"),
            global_id=data.get("globalId") or "",
        )


@dataclass(frozen=True)
class FavoriteRecord:
    global_id: str
    is_favorited: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "FavoriteRecord":
        global_id = data.get("globalId") or ""
        if not global_id and data.get("sourceCollection"):
            global_id = f"{data['sourceCollection']}:{data.get('entryId', '')}"
        return cls(global_id=global_id, is_favorited=data.get("isFavorited", True))


@dataclass(frozen=True)
class FavoriteRequest:
    """Denormalized snapshot of an entry, sent when adding a favorite."""

    source_collection: str
    entry_id: str
    entry_word: str
    entry_translation: str = ""
    entry_type: str = ""

    @classmethod
    def for_result(cls, result: SearchResult) -> "FavoriteRequest":
        return cls(
            source_collection=collection_name(result.source),
            entry_id=result.entry_key,
            entry_word=result.word,
            entry_translation=result.translation,
            entry_type=result.type,
        )

    def to_dict(self) -> dict:
        return {
            "sourceCollection": self.source_collection,
            "entryId": self.entry_id,
            "entryWord": self.entry_word,
            "entryTranslation": self.entry_translation,
            "entryType": self.entry_type,
        }


@dataclass(frozen=True)
class Statistics:
    """Aggregate counts per source. Replaced wholesale, never merged."""

    total_entries: int = 0
    entries_by_source: dict[str, int] = field(default_factory=dict)
    available_types: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "Statistics":
        return cls(
            total_entries=int(data.get("totalEntries") or 0),
            entries_by_source={
                k: int(v or 0) for k, v in (data.get("entriesBySource") or {}).items()
            },
            available_types={
                k: list(v or []) for k, v in (data.get("availableTypes") or {}).items()
            },
        )
