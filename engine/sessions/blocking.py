"""
Blocking session report: wait-for forest, dependency chain and summary.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, List, Optional

from api.responses import BlockingReport, BlockingSession, BlockingSummary
from engine.normalize.records import blocking_sessions, message_of
from engine.topology import build_forest

HEALTHY_MARKERS = ("no blocking", "no sessions", "healthy")


def summarize(sessions: List[BlockingSession]) -> BlockingSummary:
    blocked = [s for s in sessions if not s.is_root]
    users: List[str] = []
    for s in blocked:
        if s.username not in users:
            users.append(s.username)
    return BlockingSummary(
        total_blocked=len(blocked),
        root_blockers=len(sessions) - len(blocked),
        max_wait_time=max((s.wait_time_secs for s in sessions), default=0.0),
        affected_users=users,
    )


def build_report(payload: Any, database: str) -> Optional[BlockingReport]:
    """``None`` when the payload carries no session structure at all.

    An empty list, or a plain message saying nothing is blocked, yields an
    empty report.
    """
    sessions = blocking_sessions(payload)
    if sessions is None:
        message = (message_of(payload) or "").lower()
        if not any(marker in message for marker in HEALTHY_MARKERS):
            return None
        sessions = []
    forest = build_forest(sessions)
    return BlockingReport(
        database=database,
        sessions=forest.chain,
        tree=forest.roots,
        orphans=forest.orphans,
        summary=summarize(forest.sessions),
    )
