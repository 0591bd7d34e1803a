"""
Session-level diagnostics: blocking chains, parallel execution, SQL monitor and wait-event profiles.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.sessions.blocking import build_report as build_blocking_report
from engine.sessions.parallel import build_report as build_parallel_report, dop_efficiency
from engine.sessions.sqlmon import build_report as build_sql_monitor_report, is_hung, velocity
from engine.sessions.waits import build_report as build_wait_event_report

__all__ = [
    "build_blocking_report",
    "build_parallel_report",
    "build_sql_monitor_report",
    "build_wait_event_report",
    "dop_efficiency",
    "is_hung",
    "velocity",
]
