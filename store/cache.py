"""
Bounded TTL response cache with insertion-order eviction.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Any
    stored_at: float


@dataclass(frozen=True)
class CacheHit:
    payload: Any
    age_seconds: float


class ResponseCache:
    """One logical cache.

    Entries are valid while ``now - stored_at < ttl``. At capacity the oldest
    inserted entry is evicted; reads never reorder entries. Re-putting a key
    moves it to the back with a fresh timestamp.
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float,
        max_entries: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"cache {name} needs room for at least one entry")
        self.name = name
        self.ttl_seconds = float(ttl_seconds)
        self.max_entries = int(max_entries)
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: str) -> Optional[CacheHit]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                log.debug("cache %s miss: %s", self.name, key)
                return None
            age = now - entry.stored_at
            if age >= self.ttl_seconds:
                del self._entries[key]
                self._misses += 1
                log.debug("cache %s expired: %s (age %.1fs)", self.name, key, age)
                return None
            self._hits += 1
        log.debug("cache %s hit: %s (age %.1fs)", self.name, key, age)
        return CacheHit(payload=entry.payload, age_seconds=age)

    def put(self, key: str, payload: Any) -> None:
        now = self._clock()
        with self._lock:
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                log.debug("cache %s evicted: %s", self.name, evicted)
            self._entries[key] = CacheEntry(key=key, payload=payload, stored_at=now)

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "name": self.name,
                "entries": len(self._entries),
                "max_entries": self.max_entries,
                "ttl_seconds": self.ttl_seconds,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }
