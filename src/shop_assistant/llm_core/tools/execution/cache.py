"""TTL and size bounded cache for results of read-only tools."""

import hashlib
import json
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

from ...logger import get_logger

logger = get_logger(__name__)

V = TypeVar("V")


def make_cache_key(tool_name: str, arguments: Dict[str, Any]) -> str:
    """Stable key for a tool call: ``tool:<name>:<sha256 of canonical JSON arguments>``."""
    canonical = json.dumps(arguments or {}, sort_keys=True, separators=(",", ":"), default=str)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"tool:{tool_name}:{digest}"


class ToolResultCache(Generic[V]):
    """
    Thread-safe cache with per-entry expiry and least-recently-used eviction.

    Entries expire ``ttl`` seconds after being stored. When ``max_entries`` is
    reached the least recently used entry is evicted.
    """

    def __init__(self, ttl: float = 300.0, max_entries: int = 1024, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl: Lifetime of an entry in seconds.
            max_entries: Capacity of the cache.
            clock: Monotonic time source, injectable for tests.
        """
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, V]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[V]:
        """Return the live entry for ``key`` or None. Expired entries are dropped."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + self.ttl, value)
            self._entries.move_to_end(key)
            self._evict()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict(self) -> None:
        now = self._clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted cache entry {evicted}")
