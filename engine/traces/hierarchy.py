"""
Span hierarchy reconstruction: root selection, parent -> children index and overall duration.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from api.responses import Span
from config import settings
from engine.enums import RootSpanPolicy

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpanHierarchy:
    spans: List[Span]
    root: Optional[Span]
    candidates: List[Span]
    _children: Dict[Optional[str], List[Span]] = field(default_factory=dict, repr=False)

    @property
    def root_candidates(self) -> int:
        return len(self.candidates)

    @property
    def start(self) -> Optional[float]:
        starts = [s.start for s in self.spans if s.start is not None]
        return min(starts) if starts else None

    @property
    def end(self) -> Optional[float]:
        ends = [s.end for s in self.spans if s.end is not None]
        return max(ends) if ends else None

    def children_of(self, span_key: Optional[str]) -> List[Span]:
        return list(self._children.get(span_key, []))

    def duration_ms(self) -> float:
        """Root span duration when a timed root was selected, else the covered window."""
        if self.root is not None and self.root.duration_ms > 0:
            return self.root.duration_ms
        start, end = self.start, self.end
        if start is None or end is None:
            return 0.0
        return max(0.0, (end - start) * 1000.0)


def _select_root(candidates: List[Span], policy: RootSpanPolicy) -> Optional[Span]:
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]
    if policy == RootSpanPolicy.none:
        return None
    if policy == RootSpanPolicy.earliest:
        timed = [s for s in candidates if s.start is not None]
        if timed:
            return min(timed, key=lambda s: s.start)
    return candidates[0]


def build_hierarchy(spans: List[Span], policy: Optional[RootSpanPolicy | str] = None) -> SpanHierarchy:
    policy = RootSpanPolicy(policy or settings.root_span_policy)
    known = {s.span_key for s in spans if s.span_key}

    children: Dict[Optional[str], List[Span]] = defaultdict(list)
    candidates: List[Span] = []
    for s in spans:
        if s.parent_span_key is None:
            candidates.append(s)
            continue
        if s.parent_span_key not in known:
            log.debug("span %s references unknown parent %s", s.span_key, s.parent_span_key)
        children[s.parent_span_key].append(s)

    if len(candidates) > 1:
        log.warning("%d parentless spans in one trace; root policy %s", len(candidates), policy.value)

    return SpanHierarchy(
        spans=list(spans),
        root=_select_root(candidates, policy),
        candidates=candidates,
        _children=dict(children),
    )
