"""
SQL monitor: row velocity, hang detection and execution summary.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from api.responses import SqlExecution, SqlMonitorReport, SqlMonitorSummary
from config import settings
from engine.enums import ExecutionStatus
from engine.normalize.fields import has_any
from engine.normalize.records import SQL_EXECUTION_KEYS, sql_executions

log = logging.getLogger(__name__)


def velocity(rows_processed: float, elapsed_secs: float) -> Optional[float]:
    """Rows per second; undefined when nothing has elapsed."""
    if elapsed_secs <= 0:
        return None
    return rows_processed / elapsed_secs


def is_hung(
    status: ExecutionStatus,
    elapsed_secs: float,
    rows_per_sec: Optional[float],
    elapsed_threshold: Optional[float] = None,
    velocity_threshold: Optional[float] = None,
) -> bool:
    elapsed_threshold = settings.hang_elapsed_threshold_seconds if elapsed_threshold is None else elapsed_threshold
    velocity_threshold = settings.hang_velocity_threshold if velocity_threshold is None else velocity_threshold
    if status != ExecutionStatus.executing:
        return False
    if rows_per_sec is None:
        return False
    return elapsed_secs > elapsed_threshold and rows_per_sec < velocity_threshold


def enrich(execution: SqlExecution) -> SqlExecution:
    rate = velocity(execution.rows_processed, execution.elapsed_time_secs)
    hung = is_hung(execution.status, execution.elapsed_time_secs, rate)
    if hung:
        log.debug("sql %s exec %s looks hung (%.2f rows/s)", execution.sql_id, execution.sql_exec_id, rate)
    return execution.model_copy(update={"velocity": rate, "is_hung": hung})


def summarize(executions: List[SqlExecution]) -> SqlMonitorSummary:
    executing = [e for e in executions if e.status == ExecutionStatus.executing]
    avg = 0.0
    if executing:
        avg = round(sum(e.elapsed_time_secs for e in executing) / len(executing))
    return SqlMonitorSummary(
        total_executing=len(executing),
        total_hung=sum(1 for e in executions if e.is_hung),
        avg_elapsed_time=float(avg),
    )


def build_report(payload: Any, database: str) -> Optional[SqlMonitorReport]:
    if not has_any(payload, *SQL_EXECUTION_KEYS):
        return None
    executions = [enrich(e) for e in sql_executions(payload)]
    return SqlMonitorReport(database=database, executions=executions, summary=summarize(executions))
