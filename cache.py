"""Time-bounded in-memory cache with an injectable clock."""

import logging
import time
from collections import OrderedDict
from typing import Callable, Generic, Iterator, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


class TTLCache(Generic[K, V]):
    """Key/value cache whose entries expire a fixed time after their last write.

    The cache is owned by whoever creates it; there is no module-level
    instance. Expired entries are dropped on every read or write.
    When max_entries is set, the least recently written entry is evicted on
    overflow.
    """

    def __init__(
        self,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
        max_entries: Optional[int] = None,
        on_evict: Optional[Callable[[K, V], None]] = None,
    ):
        """Create a cache.

        Args:
            ttl: Seconds an entry stays valid after set() or touch()
            clock: Returns the current time in seconds
            max_entries: Optional size limit
            on_evict: Called with (key, value) for every expired or overflowed entry
        """
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self.ttl = ttl
        self.clock = clock
        self.max_entries = max_entries
        self.on_evict = on_evict
        self._entries: "OrderedDict[K, Tuple[float, V]]" = OrderedDict()

    def set(self, key: K, value: V) -> None:
        self.purge()
        self._entries.pop(key, None)
        self._entries[key] = (self.clock() + self.ttl, value)
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                old_key, (_, old_value) = self._entries.popitem(last=False)
                self._evicted(old_key, old_value)

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            return default
        expires_at, value = entry
        if expires_at <= self.clock():
            del self._entries[key]
            self._evicted(key, value)
            return default
        return value

    def touch(self, key: K) -> bool:
        """Restart the expiry timer of a live entry."""
        value = self.get(key)
        if value is None:
            return False
        self.set(key, value)
        return True

    def pop(self, key: K, default: Optional[V] = None) -> Optional[V]:
        entry = self._entries.pop(key, None)
        if entry is None:
            return default
        return entry[1]

    def purge(self) -> List[K]:
        """Drop every expired entry.

        Returns:
            Keys that were evicted
        """
        now = self.clock()
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            _, value = self._entries.pop(key)
            self._evicted(key, value)
        return expired

    def values(self) -> List[V]:
        self.purge()
        return [value for _, value in self._entries.values()]

    def _evicted(self, key: K, value: V) -> None:
        logger.debug(f"Evicted cache entry {key}")
        if self.on_evict:
            try:
                self.on_evict(key, value)
            except Exception as e:
                logger.error(f"Error in eviction callback: {e}", exc_info=True)

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        self.purge()
        return len(self._entries)

    def __iter__(self) -> Iterator[K]:
        self.purge()
        return iter(list(self._entries))
