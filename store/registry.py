"""
Registry of the logical response caches, one bounded cache per query family.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Sequence

from config import settings
from store.cache import ResponseCache

log = logging.getLogger(__name__)


class CacheRegistry:
    def __init__(
        self,
        limits: Optional[Mapping[str, Sequence[float]]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        limits = settings.cache_limits if limits is None else limits
        self._caches: Dict[str, ResponseCache] = {}
        for name, (ttl, max_entries) in limits.items():
            self._caches[name] = ResponseCache(name, ttl, int(max_entries), clock=clock)
        log.debug("response caches configured: %s", ", ".join(self._caches))

    def get(self, name: str) -> ResponseCache:
        try:
            return self._caches[name]
        except KeyError:
            raise KeyError(f"unknown cache: {name}") from None

    def __getitem__(self, name: str) -> ResponseCache:
        return self.get(name)

    def __iter__(self) -> Iterator[ResponseCache]:
        return iter(self._caches.values())

    def names(self) -> List[str]:
        return list(self._caches)

    def clear(self) -> None:
        for cache in self._caches.values():
            cache.clear()

    def stats(self) -> Dict[str, Dict[str, object]]:
        return {name: cache.stats() for name, cache in self._caches.items()}
