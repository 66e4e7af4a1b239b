from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, List, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    stored_at: float
    source_mtime: Optional[int] = None


class LookupCache(Generic[K, V]):
    """
    Process-local cache for derived lookups with a time-to-live.

    ttl_seconds == 0 disables caching entirely.
    """

    def __init__(self, *, ttl_seconds: float = 300.0, clock: Callable[[], float] = time.time):
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: Dict[K, CacheEntry[V]] = {}

    def get(self, key: K) -> Optional[CacheEntry[V]]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if (self._clock() - entry.stored_at) > self.ttl_seconds:
            del self._entries[key]
            return None
        return entry

    def set(self, key: K, value: V, *, source_mtime: Optional[int] = None) -> None:
        if self.ttl_seconds <= 0:
            return
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock(), source_mtime=source_mtime)

    def delete(self, key: K) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> List[K]:
        return list(self._entries.keys())

    def __len__(self) -> int:
        return len(self._entries)
