"""Dictionary backend gateway: federated search, random entries, statistics and favorites."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol
from urllib.parse import quote

import httpx
from tenacity import retry, retry_if_result, stop_after_attempt, wait_exponential

from unisearch.config import get_api_token, get_api_url, get_timeout
from unisearch.models import FavoriteRecord, FavoriteRequest, SearchResult, Source, Statistics

logger = logging.getLogger(__name__)

API_PREFIX = "/api/unified-dictionary"


class DictionaryGateway(Protocol):
    """Operations the search session consumes from the dictionary backend."""

    async def search_across_sources(
        self, term: str, sources: Iterable[Source], limit: int
    ) -> list[SearchResult]: ...

    async def get_random_entry(self, source: Optional[Source] = None) -> SearchResult: ...

    async def get_statistics(self) -> Statistics: ...

    async def get_available_types(self) -> dict[str, list[str]]: ...

    async def add_to_favorites(self, request: FavoriteRequest) -> FavoriteRecord: ...

    async def remove_from_favorites(self, source: Source | str, id_or_word: str) -> bool: ...

    async def is_entry_favorited(self, collection: str, id_or_word: str) -> bool: ...


def _source_param(source: Source | str) -> str:
    return source.value if isinstance(source, Source) else str(source)


class HttpDictionaryGateway:
    """JSON/REST client for the unified dictionary API.

    Pass ``transport`` to route requests somewhere other than the network
    (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        base_url = (base_url or get_api_url()).rstrip("/")
        token = token if token is not None else get_api_token()
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url + API_PREFIX,
            headers=headers,
            timeout=timeout if timeout is not None else get_timeout(),
            transport=transport,
        )

    async def __aenter__(self) -> "HttpDictionaryGateway":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @retry(
        retry=retry_if_result(lambda r: r.status_code == 429),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry_error_callback=lambda state: state.outcome.result(),
    )
    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        logger.debug("%s %s%s", method, self._client.base_url, path)
        return await self._client.request(method, path, **kwargs)

    async def _json(self, method: str, path: str, **kwargs):
        resp = await self._send(method, path, **kwargs)
        resp.raise_for_status()
        return resp.json()

    async def search_across_sources(
        self, term: str, sources: Iterable[Source], limit: int
    ) -> list[SearchResult]:
        params = {
            "query": term,
            "sources": ",".join(_source_param(s) for s in sources),
            "limit": limit,
        }
        data = await self._json("GET", "/search", params=params)
        return [SearchResult.from_dict(item) for item in data or []]

    async def get_random_entry(self, source: Optional[Source] = None) -> SearchResult:
        params = {"source": _source_param(source)} if source is not None else None
        data = await self._json("GET", "/random", params=params)
        return SearchResult.from_dict(data)

    async def get_statistics(self) -> Statistics:
        return Statistics.from_dict(await self._json("GET", "/statistics"))

    async def get_available_types(self) -> dict[str, list[str]]:
        data = await self._json("GET", "/types") or {}
        return {k: list(v or []) for k, v in data.items()}

    async def add_to_favorites(self, request: FavoriteRequest) -> FavoriteRecord:
        data = await self._json("POST", "/favorites", json=request.to_dict())
        return FavoriteRecord.from_dict(data or request.to_dict())

    async def remove_from_favorites(self, source: Source | str, id_or_word: str) -> bool:
        path = f"/favorites/{quote(_source_param(source), safe='')}/{quote(id_or_word, safe='')}"
        data = await self._json("DELETE", path)
        return bool((data or {}).get("removed", False))

    async def is_entry_favorited(self, collection: str, id_or_word: str) -> bool:
        data = await self._json(
            "GET",
            "/favorites/check",
            params={"sourceCollection": collection, "entryId": id_or_word},
        )
        return bool((data or {}).get("isFavorited", False))
