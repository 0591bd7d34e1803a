"""
Blocking-chain reconstruction: turns a flat list of blocked/blocking sessions
into a forest of wait-for trees, with a flat discovery-order chain view.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""


from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple

from api.responses import BlockingNode, BlockingSession

log = logging.getLogger(__name__)

SessionKey = Tuple[int, int]


@dataclass(frozen=True)
class BlockingForest:
    sessions: List[BlockingSession]
    roots: List[BlockingNode]
    chain: List[BlockingSession]
    orphans: List[BlockingSession]
    _children: Dict[SessionKey, List[SessionKey]] = field(default_factory=dict, repr=False)
    _parents: Dict[SessionKey, SessionKey] = field(default_factory=dict, repr=False)

    def children_of(self, key: SessionKey) -> List[SessionKey]:
        return list(self._children.get(key, []))

    def path_to_root(self, key: SessionKey) -> List[SessionKey]:
        path: List[SessionKey] = [key]
        seen: Set[SessionKey] = {key}
        node = key
        while node in self._parents:
            node = self._parents[node]
            if node in seen:
                break
            seen.add(node)
            path.append(node)
        return path

    def depth(self) -> int:
        return max((s.level for s in self.chain), default=-1) + 1


def _dedupe(sessions: Iterable[BlockingSession]) -> Dict[SessionKey, BlockingSession]:
    nodes: Dict[SessionKey, BlockingSession] = {}
    for session in sessions:
        if session.key in nodes:
            log.debug("duplicate blocking session %s; keeping later record", session.key)
        nodes[session.key] = session
    return nodes


def build_forest(sessions: Iterable[BlockingSession]) -> BlockingForest:
    nodes = _dedupe(sessions)

    children: Dict[SessionKey, List[SessionKey]] = defaultdict(list)
    parents: Dict[SessionKey, SessionKey] = {}
    roots: List[SessionKey] = []
    for key, session in nodes.items():
        blocker = session.blocked_by
        if blocker is None:
            roots.append(key)
        elif blocker != key:
            children[blocker].append(key)
            parents[key] = blocker

    placed: Set[SessionKey] = set()
    chain: List[BlockingSession] = []
    tree: List[BlockingNode] = []

    for root in roots:
        stack: List[Tuple[SessionKey, int, Optional[BlockingNode]]] = [(root, 0, None)]
        while stack:
            key, level, parent = stack.pop()
            if key in placed:
                log.warning("blocking cycle detected at session %s; not descending again", key)
                continue
            placed.add(key)
            session = nodes[key]
            if session.level != level:
                session = session.model_copy(update={"level": level})
            node = BlockingNode(session=session)
            if parent is None:
                tree.append(node)
            else:
                parent.children.append(node)
            chain.append(session)
            for child in reversed(children.get(key, [])):
                if child not in placed:
                    stack.append((child, level + 1, node))

    orphans = [s for key, s in nodes.items() if key not in placed]
    if orphans:
        log.debug("%d blocked sessions unreachable from any root blocker", len(orphans))

    return BlockingForest(
        sessions=list(nodes.values()),
        roots=tree,
        chain=chain,
        orphans=orphans,
        _children=dict(children),
        _parents=parents,
    )
