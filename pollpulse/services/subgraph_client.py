"""
Network-aware GraphQL client for the PollPulse subgraph.

Routes requests to the subgraph endpoint of a chain and keeps fetched
records in a client-side cache. Paginated poll lists are merged into one
cache entry per (filter, sort field, sort direction).
"""
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Dict, Hashable, List, Optional, Set

import httpx

from pollpulse.config.network_config import NetworkConfig
from pollpulse.exceptions import SubgraphQueryError
from pollpulse.utils.logger import logger

from .subgraph_queries import (
    GET_GLOBAL_STATS,
    GET_POLL,
    GET_POLL_FUNDINGS,
    GET_POLLS,
    GLOBAL_STATS_ID,
)

DEFAULT_PAGE_SIZE = 20
DEFAULT_ORDER_BY = "createdAt"
DEFAULT_ORDER_DIRECTION = "desc"


# ==================
# Endpoint Resolution
# ==================

@dataclass(frozen=True)
class EndpointResolution:
    url: str
    requested_chain_id: int
    chain_id: int
    used_fallback: bool


def resolve_subgraph_endpoint(chain_id: int, network_config: Optional[NetworkConfig] = None) -> EndpointResolution:
    """
    Get the subgraph URL for a chain.

    Chains without a configured endpoint fall back to the designated
    fallback chain; the fallback is logged and flagged on the result.
    """
    config = network_config or NetworkConfig()
    url = config.get_subgraph_url(chain_id)
    if url:
        return EndpointResolution(url=url, requested_chain_id=chain_id, chain_id=chain_id, used_fallback=False)

    fallback = config.fallback_chain_id
    logger.warning(
        f"[Subgraph] No subgraph URL configured for chainId {chain_id}, "
        f"falling back to {config.get_network_name(fallback)}"
    )
    return EndpointResolution(
        url=config.get_subgraph_url(fallback),
        requested_chain_id=chain_id,
        chain_id=fallback,
        used_fallback=True,
    )


# ==================
# Cache
# ==================

class FetchPolicy(str, Enum):
    CACHE_FIRST = "cache-first"
    CACHE_AND_NETWORK = "cache-and-network"
    NETWORK_ONLY = "network-only"


def merge_pages(existing: Optional[List[Any]], incoming: List[Any]) -> List[Any]:
    """
    Append an incoming page to the records already cached.

    Pages must arrive in page order; records are not deduplicated.
    """
    return [*(existing or []), *incoming]


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


@dataclass(frozen=True)
class PageKey:
    """Cache key of a paginated field; page size and offset are not part of it."""
    field: str
    where: str
    order_by: Optional[str]
    order_direction: Optional[str]

    @classmethod
    def build(
        cls,
        field: str,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        order_direction: Optional[str] = None,
    ) -> "PageKey":
        return cls(field=field, where=_canonical(where or {}), order_by=order_by, order_direction=order_direction)


def query_key(name: str, variables: Optional[Dict[str, Any]] = None) -> tuple:
    """Cache key of a non-paginated query."""
    return (name, _canonical(variables or {}))


class QueryCache:
    """
    In-memory cache of raw subgraph results.

    Paginated entries only ever grow: every page is appended with
    `merge_pages`. An entry is marked complete once a page comes back shorter
    than requested. `evict` is the only way to start an entry over.
    """

    def __init__(self):
        self._entries: Dict[Hashable, Any] = {}
        self._complete: Set[Hashable] = set()

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def read(self, key: Hashable) -> Optional[Any]:
        return self._entries.get(key)

    def write(self, key: Hashable, value: Any) -> Any:
        self._entries[key] = value
        return value

    def write_page(self, key: Hashable, records: List[Any], requested: int) -> List[Any]:
        """
        Append one page of a paginated field and return the merged records.

        Args:
            key: Entry the page belongs to
            records: Records returned for the page
            requested: Page size asked for; a shorter page marks the entry complete
        """
        merged = merge_pages(self._entries.get(key), records)
        self._entries[key] = merged
        if len(records) < requested:
            self._complete.add(key)
        return merged

    def is_complete(self, key: Hashable) -> bool:
        return key in self._complete

    def evict(self, key: Hashable) -> None:
        self._entries.pop(key, None)
        self._complete.discard(key)

    def clear(self) -> None:
        self._entries.clear()
        self._complete.clear()


# ==================
# Client
# ==================

class SubgraphClient:
    """
    GraphQL client bound to the subgraph endpoint of one chain.

    One-shot queries default to cache-first; watched queries yield cached
    data first and then the network result.
    """

    default_query_policy = FetchPolicy.CACHE_FIRST
    default_watch_policy = FetchPolicy.CACHE_AND_NETWORK

    def __init__(
        self,
        chain_id: int,
        network_config: Optional[NetworkConfig] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        cache: Optional[QueryCache] = None,
    ):
        """
        Initialize the subgraph client.

        Args:
            chain_id: Chain whose subgraph to query (falls back when unconfigured)
            network_config: Endpoint table (default loaded from the environment)
            timeout: Request timeout in seconds (default 30.0)
            transport: Optional httpx transport (used by tests)
            cache: Optional pre-populated cache
        """
        resolution = resolve_subgraph_endpoint(chain_id, network_config)
        self.chain_id = chain_id
        self.endpoint = resolution.url
        self.used_fallback = resolution.used_fallback
        self.cache = cache or QueryCache()
        self.http = httpx.AsyncClient(timeout=timeout, transport=transport)
        logger.info(f"[Subgraph] Creating client for chainId {chain_id}: {self.endpoint}")

    def _handle_response(self, response: httpx.Response) -> Dict[str, Any]:
        """
        Parse a GraphQL response and raise on HTTP or GraphQL errors.

        Returns:
            The `data` object of the response
        """
        try:
            payload = response.json()
        except ValueError:
            payload = {"errors": [{"message": "Failed to parse response", "raw": response.text[:500]}]}

        if not isinstance(payload, dict):
            raise SubgraphQueryError("Unexpected response shape", status_code=response.status_code)

        errors = payload.get("errors")
        if response.status_code >= 400 or errors:
            message = errors[0].get("message", "Unknown error") if errors else response.reason_phrase
            raise SubgraphQueryError(message, status_code=response.status_code, errors=errors)

        return payload.get("data") or {}

    async def request(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Send a GraphQL document to the subgraph and return its `data`."""
        try:
            response = await self.http.post(
                self.endpoint,
                json={"query": document, "variables": variables or {}},
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error(f"[Subgraph] Request to {self.endpoint} failed: {e}")
            raise SubgraphQueryError(str(e)) from e
        return self._handle_response(response)

    async def query(
        self,
        name: str,
        document: str,
        variables: Optional[Dict[str, Any]] = None,
        fetch_policy: Optional[FetchPolicy] = None,
    ) -> Dict[str, Any]:
        """Run a non-paginated query under the given fetch policy."""
        policy = fetch_policy or self.default_query_policy
        key = query_key(name, variables)
        if policy is not FetchPolicy.NETWORK_ONLY and key in self.cache:
            logger.debug(f"[Subgraph] Cache HIT for {name}")
            return self.cache.read(key)

        data = await self.request(document, variables)
        return self.cache.write(key, data)

    # -------------------------
    # Paginated polls
    # -------------------------
    async def _fetch_polls_page(
        self,
        first: int,
        skip: int,
        where: Optional[Dict[str, Any]],
        order_by: Optional[str],
        order_direction: Optional[str],
    ) -> List[Dict[str, Any]]:
        variables = {
            "first": first,
            "skip": skip,
            "where": where or {},
            "orderBy": order_by,
            "orderDirection": order_direction,
        }
        data = await self.request(GET_POLLS, variables)
        return data.get("polls") or []

    async def query_polls(
        self,
        first: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = DEFAULT_ORDER_BY,
        order_direction: Optional[str] = DEFAULT_ORDER_DIRECTION,
        fetch_policy: Optional[FetchPolicy] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get polls for a filter/sort combination.

        Under cache-first a cached entry (all pages merged so far) is returned
        without touching the network. Network-only evicts the entry and starts
        it over from the fetched page.
        """
        policy = fetch_policy or self.default_query_policy
        key = PageKey.build("polls", where, order_by, order_direction)
        if policy is FetchPolicy.NETWORK_ONLY:
            self.cache.evict(key)
        elif key in self.cache:
            logger.debug(f"[Subgraph] Cache HIT for {key}")
            return self.cache.read(key)

        records = await self._fetch_polls_page(first, skip, where, order_by, order_direction)
        return self.cache.write_page(key, records, first)

    async def fetch_more_polls(
        self,
        skip: int,
        first: int = DEFAULT_PAGE_SIZE,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = DEFAULT_ORDER_BY,
        order_direction: Optional[str] = DEFAULT_ORDER_DIRECTION,
    ) -> List[Dict[str, Any]]:
        """
        Fetch the next page and append it to the cached entry.

        Callers must await each page before requesting the next one for the
        same filter/sort, otherwise pages can be merged out of order.
        """
        key = PageKey.build("polls", where, order_by, order_direction)
        records = await self._fetch_polls_page(first, skip, where, order_by, order_direction)
        return self.cache.write_page(key, records, first)

    def has_all_polls(
        self,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = DEFAULT_ORDER_BY,
        order_direction: Optional[str] = DEFAULT_ORDER_DIRECTION,
    ) -> bool:
        """True once a short page has shown the cached entry holds every poll."""
        return self.cache.is_complete(PageKey.build("polls", where, order_by, order_direction))

    async def watch_polls(
        self,
        first: int = DEFAULT_PAGE_SIZE,
        skip: int = 0,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = DEFAULT_ORDER_BY,
        order_direction: Optional[str] = DEFAULT_ORDER_DIRECTION,
        fetch_policy: Optional[FetchPolicy] = None,
    ) -> AsyncIterator[List[Dict[str, Any]]]:
        """
        Yield the cached polls immediately (if any), then the network result.

        The network leg refetches at least as many records as were cached, so
        the refreshed entry never holds fewer polls than the cached one did
        unless the subgraph itself shrank.
        """
        policy = fetch_policy or self.default_watch_policy
        key = PageKey.build("polls", where, order_by, order_direction)
        cached = self.cache.read(key)
        if cached is not None and policy is not FetchPolicy.NETWORK_ONLY:
            yield cached
            if policy is FetchPolicy.CACHE_FIRST:
                return

        window = max(skip + first, len(cached or []))
        records = await self._fetch_polls_page(window, 0, where, order_by, order_direction)
        self.cache.evict(key)
        yield self.cache.write_page(key, records, window)

    async def iter_poll_pages(
        self,
        page_size: int = 100,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = DEFAULT_ORDER_BY,
        order_direction: Optional[str] = DEFAULT_ORDER_DIRECTION,
    ) -> AsyncIterator[List[Dict[str, Any]]]:
        """
        Walk every poll page by page.

        Records already cached are yielded first; the walk then continues from
        the end of the cached entry until a short page, appending as it goes.
        """
        key = PageKey.build("polls", where, order_by, order_direction)
        records = self.cache.read(key) or []
        for start in range(0, len(records), page_size):
            yield records[start:start + page_size]

        while not self.cache.is_complete(key):
            page = await self._fetch_polls_page(page_size, len(records), where, order_by, order_direction)
            records = self.cache.write_page(key, page, page_size)
            if page:
                yield page

    # -------------------------
    # Single-shot queries
    # -------------------------
    async def get_poll(self, poll_id: str, fetch_policy: Optional[FetchPolicy] = None) -> Optional[Dict[str, Any]]:
        data = await self.query("poll", GET_POLL, {"pollId": str(poll_id)}, fetch_policy)
        polls = data.get("polls") or []
        return polls[0] if polls else None

    async def get_poll_fundings(
        self,
        poll_id: str,
        first: int = 100,
        fetch_policy: Optional[FetchPolicy] = None,
    ) -> List[Dict[str, Any]]:
        data = await self.query("fundings", GET_POLL_FUNDINGS, {"pollId": str(poll_id), "first": first}, fetch_policy)
        return data.get("fundings") or []

    async def get_global_stats(self, fetch_policy: Optional[FetchPolicy] = None) -> Optional[Dict[str, Any]]:
        data = await self.query("globalStats", GET_GLOBAL_STATS, {"id": GLOBAL_STATS_ID}, fetch_policy)
        return data.get("globalStats")

    async def close(self):
        """Close the HTTP client."""
        await self.http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class SubgraphClientFactory:
    """Creates one SubgraphClient per chain and reuses it afterwards."""

    def __init__(
        self,
        network_config: Optional[NetworkConfig] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.network_config = network_config or NetworkConfig()
        self.timeout = timeout
        self.transport = transport
        self._clients: Dict[int, SubgraphClient] = {}

    def get(self, chain_id: int) -> SubgraphClient:
        client = self._clients.get(chain_id)
        if client is None:
            client = SubgraphClient(
                chain_id,
                network_config=self.network_config,
                timeout=self.timeout,
                transport=self.transport,
            )
            self._clients[chain_id] = client
        return client

    def is_chain_supported(self, chain_id: int) -> bool:
        return self.network_config.get_subgraph_url(chain_id) is not None

    async def close_all(self) -> None:
        for client in self._clients.values():
            await client.close()
        self._clients.clear()
