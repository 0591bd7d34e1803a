"""
Canonical record builders for diagnostic payloads.

Each builder reads one raw upstream object through the alias lists below and
returns an immutable canonical record. Builders never raise; absent or
malformed fields take the documented defaults.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from api.responses import (
    AwrSnapshot,
    BlockingSession,
    DopDowngrade,
    LoadProfile,
    ParallelSystemStats,
    PxSession,
    ResourceManagerInfo,
    SqlExecution,
    WaitEvent,
)
from config import settings
from engine.enums import ExecutionStatus, SessionStatus
from engine.normalize.fields import RawRecord, as_record, collection

ROOT_WAIT_EVENT = "SQL*Net message from client"
BLOCKED_WAIT_EVENT = "enq: TX - row lock contention"

ROOT_BLOCKER_KEYS = ("root_blockers", "ROOT_BLOCKERS")
BLOCKED_SESSION_KEYS = ("blocked_sessions", "blocking_sessions", "BLOCKED_SESSIONS")
MIXED_SESSION_KEYS = ("sessions", "SESSIONS")
PX_SESSION_KEYS = ("sessions", "px_sessions", "parallel_sessions")
DOWNGRADE_KEYS = ("downgrades", "recent_downgrades", "dop_downgrades")
SQL_EXECUTION_KEYS = ("executions", "sql_monitor", "active_sql")
WAIT_EVENT_KEYS = ("wait_events", "events", "top_events")
SNAPSHOT_KEYS = ("snapshots", "awr_snapshots")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def blocking_session(raw: Any, root: Optional[bool] = None) -> BlockingSession:
    """Canonical blocking session.

    ``root=True`` marks a record listed among root blockers, whose blocker
    reference is ignored. Otherwise a session is a root iff it carries no
    blocker reference.
    """
    rec = as_record(raw)
    blocker = None if root else rec.optional_integer("blocking_session", "BLOCKING_SESSION", "blocked_by")
    is_root = blocker is None
    blocker_inst = None
    if blocker is not None:
        blocker_inst = rec.integer("blocking_instance", "BLOCKING_INSTANCE", default=1)
    return BlockingSession(
        sid=rec.integer("sid", "SID"),
        serial=rec.integer("serial", "SERIAL#", "serial_number"),
        inst_id=rec.integer("inst_id", "INST_ID", default=1),
        username=rec.text("username", "USERNAME", default="UNKNOWN"),
        sql_id=rec.optional_text("sql_id", "SQL_ID"),
        wait_event=rec.text(
            "wait_event", "WAIT_EVENT",
            default=ROOT_WAIT_EVENT if is_root else BLOCKED_WAIT_EVENT,
        ),
        wait_time_secs=rec.number("seconds_in_wait", "SECONDS_IN_WAIT", "wait_time_secs", "wait"),
        blocking_session=blocker,
        blocking_instance=blocker_inst,
        level=0 if is_root else 1,
        is_root=is_root,
    )


def blocking_sessions(payload: Any) -> Optional[List[BlockingSession]]:
    """All blocking sessions in a payload, or ``None`` when no session structure exists."""
    rec = as_record(payload)
    if not rec.present(*ROOT_BLOCKER_KEYS, *BLOCKED_SESSION_KEYS, *MIXED_SESSION_KEYS):
        return None
    sessions = [blocking_session(r, root=True) for r in collection(rec, *ROOT_BLOCKER_KEYS)]
    sessions.extend(blocking_session(r, root=False) for r in collection(rec, *BLOCKED_SESSION_KEYS))
    sessions.extend(blocking_session(r) for r in collection(rec, *MIXED_SESSION_KEYS))
    return sessions


def px_session(raw: Any) -> PxSession:
    rec = as_record(raw)
    requested = rec.integer("requested_dop", "REQUESTED_DOP", "req_dop", default=1)
    actual = rec.integer("actual_dop", "ACTUAL_DOP", "degree", default=1)
    return PxSession(
        qc_sid=rec.integer("qc_sid", "QC_SID", "sid"),
        qc_serial=rec.integer("qc_serial", "QC_SERIAL", "serial"),
        sql_id=rec.text("sql_id", "SQL_ID"),
        username=rec.text("username", "USERNAME", "parsing_schema_name", default="UNKNOWN"),
        requested_dop=requested,
        actual_dop=actual,
        servers_allocated=rec.integer("servers_allocated", "SERVERS_ALLOCATED", "px_servers"),
        servers_busy=rec.integer("servers_busy", "SERVERS_BUSY"),
        elapsed_seconds=rec.number("elapsed_seconds", "ELAPSED_SECONDS", "elapsed_time_secs"),
        status=rec.choice(SessionStatus.parse, "status", "STATUS"),
        is_downgraded=actual < requested,
    )


def px_sessions(payload: Any) -> List[PxSession]:
    return [px_session(r) for r in collection(payload, *PX_SESSION_KEYS)]


def dop_downgrade(raw: Any) -> DopDowngrade:
    rec = as_record(raw)
    return DopDowngrade(
        timestamp=rec.text("timestamp", "TIMESTAMP", default=_now_iso()),
        sql_id=rec.text("sql_id", "SQL_ID"),
        requested_dop=rec.integer("requested_dop", "REQUESTED_DOP"),
        actual_dop=rec.integer("actual_dop", "ACTUAL_DOP"),
        reason=rec.text("reason", "REASON", "downgrade_reason", default="Unknown"),
        qc_sid=rec.integer("qc_sid", "QC_SID"),
    )


def dop_downgrades(payload: Any) -> List[DopDowngrade]:
    return [dop_downgrade(r) for r in collection(payload, *DOWNGRADE_KEYS)]


def parallel_system_stats(payload: Any) -> Optional[ParallelSystemStats]:
    rec = as_record(payload)
    stats = rec.record("system_stats", "parallel_stats") or rec
    if not stats.present("max_parallel_servers", "servers_in_use"):
        return None
    return ParallelSystemStats(
        max_parallel_servers=stats.integer(
            "max_parallel_servers", "MAX_PARALLEL_SERVERS", "parallel_max_servers",
            default=settings.px_default_max_servers,
        ),
        servers_in_use=stats.integer("servers_in_use", "SERVERS_IN_USE", "parallel_servers_busy"),
    )


def sql_execution(raw: Any) -> SqlExecution:
    rec = as_record(raw)
    return SqlExecution(
        sql_id=rec.text("sql_id", "SQL_ID"),
        sql_exec_id=rec.integer("sql_exec_id", "SQL_EXEC_ID"),
        status=rec.choice(ExecutionStatus.parse, "status", "STATUS"),
        username=rec.text("username", "USERNAME", "parsing_schema_name", default="UNKNOWN"),
        sql_text=rec.text("sql_text", "SQL_TEXT", "sql_fulltext")[: settings.sql_text_max_length],
        elapsed_time_secs=rec.number("elapsed_time_secs", "elapsed_seconds", "ELAPSED_TIME", "elapsed_time"),
        cpu_time_secs=rec.number("cpu_time_secs", "cpu_seconds", "CPU_TIME", "cpu_time"),
        buffer_gets=rec.integer("buffer_gets", "BUFFER_GETS"),
        disk_reads=rec.integer("disk_reads", "DISK_READS", "physical_read_requests"),
        rows_processed=rec.integer("rows_processed", "ROWS_PROCESSED", "output_rows"),
        dop=rec.integer("dop", "DOP", "degree_of_parallelism", default=1),
        px_servers_allocated=rec.integer("px_servers_allocated", "PX_SERVERS_ALLOCATED"),
        last_refresh_time=rec.optional_text("last_refresh_time", "LAST_REFRESH_TIME"),
    )


def sql_executions(payload: Any) -> List[SqlExecution]:
    return [sql_execution(r) for r in collection(payload, *SQL_EXECUTION_KEYS)]


def wait_event(raw: Any) -> WaitEvent:
    rec = as_record(raw)
    return WaitEvent(
        event=rec.text("event", "event_name", "EVENT", default="Unknown"),
        waits=rec.integer("waits", "total_waits", "WAITS"),
        time_waited_secs=rec.number("time_waited_secs", "time_waited_seconds", "TIME_WAITED"),
        pct_db_time=rec.number("pct_db_time", "percent_of_total", "PCT_DB_TIME"),
        wait_class=rec.text("wait_class", "WAIT_CLASS", default="Other"),
    )


def wait_events(payload: Any) -> List[WaitEvent]:
    return [wait_event(r) for r in collection(payload, *WAIT_EVENT_KEYS)]


def awr_snapshot(raw: Any) -> AwrSnapshot:
    rec = as_record(raw)
    return AwrSnapshot(
        snap_id=rec.integer("snap_id", "SNAP_ID"),
        end_time=rec.text("end_time", "END_TIME"),
        db_time=rec.number("db_time", "DB_TIME"),
        cpu_time=rec.number("cpu_time", "CPU_TIME"),
        wait_time=rec.number("wait_time", "WAIT_TIME"),
    )


def awr_snapshots(payload: Any) -> List[AwrSnapshot]:
    return [awr_snapshot(r) for r in collection(payload, *SNAPSHOT_KEYS)]


def load_profile(payload: Any) -> Optional[LoadProfile]:
    rec = as_record(payload)
    profile = rec.record("load_profile", "loadProfile") or rec
    if not profile.present("db_time_per_sec", "cpu_per_sec"):
        return None
    return LoadProfile(
        db_time_per_sec=profile.number("db_time_per_sec", "DB_TIME_PER_SEC"),
        cpu_per_sec=profile.number("cpu_per_sec", "CPU_PER_SEC"),
        redo_per_sec=profile.number("redo_per_sec", "REDO_PER_SEC"),
        logical_reads_per_sec=profile.number("logical_reads_per_sec", "LOGICAL_READS_PER_SEC"),
    )


def resource_manager(payload: Any) -> Optional[ResourceManagerInfo]:
    rm = as_record(payload).record("resource_manager", "resourceManager")
    if not rm.present("throttle_pct", "consumer_group"):
        return None
    return ResourceManagerInfo(
        throttle_pct=rm.number("throttle_pct", "THROTTLE_PCT"),
        consumer_group=rm.text("consumer_group", "CONSUMER_GROUP"),
        cpu_limit=rm.number("cpu_limit", "CPU_LIMIT", default=100.0),
    )


def message_of(payload: Any) -> Optional[str]:
    return RawRecord(payload).optional_text("message", "response", "detail")
