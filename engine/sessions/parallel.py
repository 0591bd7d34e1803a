"""
Parallel execution: DOP efficiency, server usage and downgrade tracking.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from api.responses import DopDowngrade, ParallelReport, PxSession
from config import settings
from engine.enums import SessionStatus
from engine.normalize.fields import has_any
from engine.normalize.records import PX_SESSION_KEYS, dop_downgrades, parallel_system_stats, px_sessions


def dop_efficiency(sessions: List[PxSession]) -> float:
    """Aggregate ratio of granted to requested DOP over active sessions, as a percentage.

    This is sum(actual) / sum(requested), not the mean of per-session ratios.
    """
    active = [s for s in sessions if s.status == SessionStatus.active]
    requested = sum(s.requested_dop for s in active)
    if requested <= 0:
        return 100.0
    actual = sum(s.actual_dop for s in active)
    return round(actual / requested * 100, 2)


def inferred_downgrades(sessions: List[PxSession]) -> List[DopDowngrade]:
    now = datetime.now(timezone.utc).isoformat()
    return [
        DopDowngrade(
            timestamp=now,
            sql_id=s.sql_id,
            requested_dop=s.requested_dop,
            actual_dop=s.actual_dop,
            reason="Insufficient parallel servers",
            qc_sid=s.qc_sid,
        )
        for s in sessions
        if s.is_downgraded
    ]


def build_report(payload: Any, database: str) -> Optional[ParallelReport]:
    stats = parallel_system_stats(payload)
    if stats is None and not has_any(payload, *PX_SESSION_KEYS):
        return None

    sessions = px_sessions(payload)
    active = [s for s in sessions if s.status == SessionStatus.active]

    downgrades = dop_downgrades(payload) or inferred_downgrades(sessions)

    if stats is not None:
        max_servers = stats.max_parallel_servers
        in_use = stats.servers_in_use
    else:
        max_servers = settings.px_default_max_servers
        in_use = sum(s.servers_allocated for s in active)

    return ParallelReport(
        database=database,
        sessions=sessions,
        recent_downgrades=downgrades,
        max_parallel_servers=max_servers,
        servers_in_use=in_use,
        servers_available=max(0, max_servers - in_use),
        active_px_sessions=len(active),
        dop_efficiency_percent=dop_efficiency(sessions),
    )
