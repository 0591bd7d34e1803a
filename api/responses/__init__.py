"""
Response models for API endpoints and canonical engine records.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_serializer

from engine.enums import (
    CheckLocation,
    ExecutionStatus,
    QualityCheckType,
    SecurityCheckType,
    SessionStatus,
    Severity,
    StageStatus,
    TraceStatus,
    TrendDirection,
)


def _coerce(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _coerce(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_coerce(v) for v in obj]
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    return obj


class NpModel(BaseModel):

    @model_serializer(mode="wrap")
    def _serialize(self, handler: Any) -> Any:
        return _coerce(handler(self))


class Record(NpModel):
    """Canonical record; immutable once normalized."""

    model_config = ConfigDict(frozen=True)


# blocking sessions

class BlockingSession(Record):

    sid: int
    serial: int = 0
    inst_id: int = 1
    username: str = "UNKNOWN"
    sql_id: Optional[str] = None
    wait_event: str = ""
    wait_time_secs: float = 0.0
    blocking_session: Optional[int] = None
    blocking_instance: Optional[int] = None
    level: int = 0
    is_root: bool = True

    @property
    def key(self) -> Tuple[int, int]:
        return (self.sid, self.inst_id)

    @property
    def blocked_by(self) -> Optional[Tuple[int, int]]:
        if self.blocking_session is None:
            return None
        return (self.blocking_session, self.blocking_instance if self.blocking_instance is not None else 1)


class BlockingNode(NpModel):

    session: BlockingSession
    children: List[BlockingNode] = Field(default_factory=list)


class BlockingSummary(NpModel):

    total_blocked: int = 0
    root_blockers: int = 0
    max_wait_time: float = 0.0
    affected_users: List[str] = Field(default_factory=list)


class BlockingReport(NpModel):

    database: str
    sessions: List[BlockingSession] = Field(default_factory=list)
    tree: List[BlockingNode] = Field(default_factory=list)
    orphans: List[BlockingSession] = Field(default_factory=list)
    summary: BlockingSummary = Field(default_factory=BlockingSummary)


# parallel execution

class PxSession(Record):

    qc_sid: int = 0
    qc_serial: int = 0
    sql_id: str = ""
    username: str = "UNKNOWN"
    requested_dop: int = 1
    actual_dop: int = 1
    servers_allocated: int = 0
    servers_busy: int = 0
    elapsed_seconds: float = 0.0
    status: SessionStatus = SessionStatus.done
    is_downgraded: bool = False


class DopDowngrade(Record):

    timestamp: str
    sql_id: str = ""
    requested_dop: int = 0
    actual_dop: int = 0
    reason: str = "Unknown"
    qc_sid: int = 0


class ParallelSystemStats(Record):

    max_parallel_servers: int
    servers_in_use: int


class ParallelReport(NpModel):

    database: str
    sessions: List[PxSession] = Field(default_factory=list)
    recent_downgrades: List[DopDowngrade] = Field(default_factory=list)
    max_parallel_servers: int = 0
    servers_in_use: int = 0
    servers_available: int = 0
    active_px_sessions: int = 0
    dop_efficiency_percent: float = 100.0


# sql monitor

class SqlExecution(Record):

    sql_id: str = ""
    sql_exec_id: int = 0
    status: ExecutionStatus = ExecutionStatus.done
    username: str = "UNKNOWN"
    sql_text: str = ""
    elapsed_time_secs: float = 0.0
    cpu_time_secs: float = 0.0
    buffer_gets: int = 0
    disk_reads: int = 0
    rows_processed: int = 0
    dop: int = 1
    px_servers_allocated: int = 0
    last_refresh_time: Optional[str] = None
    velocity: Optional[float] = None
    is_hung: bool = False


class SqlMonitorSummary(NpModel):

    total_executing: int = 0
    total_hung: int = 0
    avg_elapsed_time: float = 0.0


class SqlMonitorReport(NpModel):

    database: str
    executions: List[SqlExecution] = Field(default_factory=list)
    summary: SqlMonitorSummary = Field(default_factory=SqlMonitorSummary)


# wait events / awr

class WaitEvent(Record):

    event: str = "Unknown"
    waits: int = 0
    time_waited_secs: float = 0.0
    pct_db_time: float = 0.0
    wait_class: str = "Other"


class AwrSnapshot(Record):

    snap_id: int = 0
    end_time: str = ""
    db_time: float = 0.0
    cpu_time: float = 0.0
    wait_time: float = 0.0


class LoadProfile(Record):

    db_time_per_sec: float = 0.0
    cpu_per_sec: float = 0.0
    redo_per_sec: float = 0.0
    logical_reads_per_sec: float = 0.0


class ResourceManagerInfo(Record):

    throttle_pct: float = 0.0
    consumer_group: str = ""
    cpu_limit: float = 100.0


class WaitEventReport(NpModel):

    database: str
    top_events: List[WaitEvent] = Field(default_factory=list)
    snapshots: List[AwrSnapshot] = Field(default_factory=list)
    load_profile: LoadProfile = Field(default_factory=LoadProfile)
    resource_manager: ResourceManagerInfo = Field(default_factory=ResourceManagerInfo)


# traces

class Span(Record):

    span_key: str
    parent_span_key: Optional[str] = None
    span_name: str = ""
    operation_name: str = ""
    service_name: str = ""
    start: Optional[float] = None
    end: Optional[float] = None
    duration_ms: float = 0.0
    is_error: bool = False
    tags: Dict[str, str] = Field(default_factory=dict)

    def label_contains(self, fragment: str) -> bool:
        needle = fragment.lower()
        return needle in self.span_name.lower() or needle in self.operation_name.lower()


class ToolCall(NpModel):

    tool_name: str
    duration_ms: float
    status: StageStatus


class StageExecution(NpModel):

    stage_id: str
    stage_name: str
    span_keys: List[str]
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    duration_ms: float = 0.0
    status: StageStatus = StageStatus.success
    tool_calls: List[ToolCall] = Field(default_factory=list)

    @property
    def is_error(self) -> bool:
        return self.status == StageStatus.error


class WorkflowTrace(NpModel):

    trace_key: str
    total_duration_ms: float = 0.0
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    status: TraceStatus = TraceStatus.pending
    routing_type: str = "WORKFLOW"
    stages: List[StageExecution] = Field(default_factory=list)
    query: Optional[str] = None
    response: Optional[str] = None
    span_count: int = 0
    root_span_key: Optional[str] = None
    root_candidates: int = 0


class WorkflowAggregate(NpModel):

    trace_count: int = 0
    error_count: int = 0
    error_rate: float = 0.0
    mean_duration_ms: float = 0.0
    p50_duration_ms: float = 0.0
    p95_duration_ms: float = 0.0
    stage_mean_duration_ms: Dict[str, float] = Field(default_factory=dict)


class WorkflowReport(NpModel):

    source: str
    traces: List[WorkflowTrace] = Field(default_factory=list)
    aggregate: WorkflowAggregate = Field(default_factory=WorkflowAggregate)


# quality / security checks

class Trend(NpModel):

    direction: TrendDirection = TrendDirection.stable
    percent_change: float = 0.0


class Pagination(NpModel):

    total: int = 0
    limit: int = 50
    offset: int = 0
    has_more: bool = False


class QualityCheck(Record):

    check_id: str
    trace_id: str = ""
    span_id: str = ""
    check_type: QualityCheckType
    score: float = 0.0
    passed: bool = False
    severity: Severity = Severity.low
    details: str = ""
    timestamp: str = ""
    model: Optional[str] = None
    provider: Optional[str] = None


class QualityTypeSummary(NpModel):

    total: int
    passed: int
    failed: int
    avg_score: float


class QualitySummary(NpModel):

    total_checks: int = 0
    passed_checks: int = 0
    failed_checks: int = 0
    pass_rate: float = 0.0
    by_type: Dict[str, QualityTypeSummary] = Field(default_factory=dict)
    by_severity: Dict[str, int] = Field(default_factory=dict)
    trend: Trend = Field(default_factory=Trend)


class QualityReport(NpModel):

    checks: List[QualityCheck] = Field(default_factory=list)
    summary: QualitySummary = Field(default_factory=QualitySummary)
    pagination: Pagination = Field(default_factory=Pagination)
    filters: Dict[str, Any] = Field(default_factory=dict)


class SecurityCheck(Record):

    check_id: str
    trace_id: str = ""
    span_id: str = ""
    check_type: SecurityCheckType
    detected: bool = False
    severity: Severity = Severity.low
    confidence: float = 0.0
    location: CheckLocation = CheckLocation.input
    details: str = ""
    timestamp: str = ""
    remediation: Optional[str] = None
    model: Optional[str] = None
    provider: Optional[str] = None
    blocked: bool = False


class SecurityTypeSummary(NpModel):

    total: int
    detected: int
    blocked: int


class SecuritySummary(NpModel):

    total_checks: int = 0
    detected_issues: int = 0
    blocked_requests: int = 0
    by_type: Dict[str, SecurityTypeSummary] = Field(default_factory=dict)
    by_severity: Dict[str, int] = Field(default_factory=dict)
    by_location: Dict[str, int] = Field(default_factory=dict)
    risk_score: int = 0
    trend: Trend = Field(default_factory=Trend)


class SecurityReport(NpModel):

    checks: List[SecurityCheck] = Field(default_factory=list)
    summary: SecuritySummary = Field(default_factory=SecuritySummary)
    pagination: Pagination = Field(default_factory=Pagination)
    filters: Dict[str, Any] = Field(default_factory=dict)


# coordinator

class CoordinatorStatus(NpModel):

    state: str = "offline"
    uptime_seconds: float = 0.0
    agents: Dict[str, Any] = Field(default_factory=dict)
    mcp_servers: Dict[str, Any] = Field(default_factory=dict)
    tools_count: int = 0
    detailed_tools: List[Dict[str, Any]] = Field(default_factory=list)
