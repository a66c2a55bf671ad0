"""Bounded pool of provider SDK clients keyed by API key."""

from collections import OrderedDict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Generic, TypeVar

from ..logger import get_logger

logger = get_logger(__name__)

C = TypeVar("C")


class _PooledClient(Generic[C]):
    __slots__ = ("client", "holders", "retired")

    def __init__(self, client: C) -> None:
        self.client = client
        self.holders = 0
        self.retired = False


class ClientPool(Generic[C]):
    """
    Reuses one SDK client per API key and keeps at most ``max_clients`` of them.

    When the pool is full the least recently used client is evicted and closed.
    A client that is still serving a request when it is evicted is closed once
    that request finishes. Clients are leased with ``async with pool.lease(key)``.
    """

    def __init__(
        self,
        factory: Callable[[str], C],
        closer: Callable[[C], Awaitable[None]],
        max_clients: int = 16,
    ) -> None:
        """
        Args:
            factory: Builds a client from an API key.
            closer: Releases the connections held by a client.
            max_clients: Capacity of the pool.
        """
        if max_clients < 1:
            raise ValueError("max_clients must be at least 1")
        self.max_clients = max_clients
        self._factory = factory
        self._closer = closer
        self._entries: "OrderedDict[str, _PooledClient[C]]" = OrderedDict()

    @asynccontextmanager
    async def lease(self, api_key: str) -> AsyncIterator[C]:
        entry = self._entries.get(api_key)
        if entry is None:
            entry = _PooledClient(self._factory(api_key))
            self._entries[api_key] = entry
        self._entries.move_to_end(api_key)
        entry.holders += 1
        try:
            await self._evict()
            yield entry.client
        finally:
            entry.holders -= 1
            if entry.retired and entry.holders == 0:
                await self._close(entry)

    async def aclose(self) -> None:
        """Evict every client. Clients still in use are closed when released."""
        entries = list(self._entries.values())
        self._entries.clear()
        for entry in entries:
            await self._retire(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, api_key: object) -> bool:
        return api_key in self._entries

    async def _evict(self) -> None:
        while len(self._entries) > self.max_clients:
            _, entry = self._entries.popitem(last=False)
            logger.debug("Evicting least recently used LLM client")
            await self._retire(entry)

    async def _retire(self, entry: "_PooledClient[C]") -> None:
        entry.retired = True
        if entry.holders == 0:
            await self._close(entry)

    async def _close(self, entry: "_PooledClient[C]") -> None:
        try:
            await self._closer(entry.client)
        except Exception as e:
            logger.warning(f"Error closing LLM client: {e}")
