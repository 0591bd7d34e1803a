"""
Wait-event profile: top events, AWR snapshots, load profile and resource manager state.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Optional

from api.responses import LoadProfile, ResourceManagerInfo, WaitEventReport
from config import settings
from engine.normalize.fields import has_any
from engine.normalize.records import (
    SNAPSHOT_KEYS,
    WAIT_EVENT_KEYS,
    awr_snapshots,
    load_profile,
    resource_manager,
    wait_events,
)


def build_report(payload: Any, database: str, limit: Optional[int] = None) -> Optional[WaitEventReport]:
    if not has_any(payload, *WAIT_EVENT_KEYS, *SNAPSHOT_KEYS):
        return None
    limit = settings.wait_events_limit if limit is None else limit
    # upstream already ranks events by time waited
    events = wait_events(payload)
    return WaitEventReport(
        database=database,
        top_events=events[:limit],
        snapshots=awr_snapshots(payload),
        load_profile=load_profile(payload) or LoadProfile(),
        resource_manager=resource_manager(payload) or ResourceManagerInfo(),
    )
