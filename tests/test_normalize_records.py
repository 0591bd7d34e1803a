"""
Tests for canonical diagnostic record builders.
"""

from __future__ import annotations

from engine.enums import ExecutionStatus, SessionStatus
from engine.normalize import records


def test_blocking_session_uppercase_aliases_and_defaults():
    s = records.blocking_session({"SID": "145", "SERIAL#": 9, "BLOCKING_SESSION": 287})
    assert s.sid == 145
    assert s.serial == 9
    assert s.inst_id == 1
    assert s.username == "UNKNOWN"
    assert s.blocking_session == 287
    assert s.blocking_instance == 1
    assert s.is_root is False
    assert s.wait_event == records.BLOCKED_WAIT_EVENT


def test_root_blocker_ignores_blocker_reference():
    s = records.blocking_session({"sid": 1, "blocking_session": 5}, root=True)
    assert s.is_root
    assert s.blocking_session is None
    assert s.wait_event == records.ROOT_WAIT_EVENT


def test_blocking_sessions_returns_none_without_structure():
    assert records.blocking_sessions({"message": "hello"}) is None
    assert records.blocking_sessions({"sessions": []}) == []


def test_blocking_sessions_combines_root_and_blocked_lists():
    payload = {
        "root_blockers": [{"sid": 1}],
        "blocked_sessions": [{"sid": 2, "blocking_session": 1}],
    }
    sessions = records.blocking_sessions(payload)
    assert [s.sid for s in sessions] == [1, 2]
    assert [s.is_root for s in sessions] == [True, False]


def test_px_session_downgrade_and_status():
    s = records.px_session({"QC_SID": 10, "req_dop": 8, "degree": 4, "STATUS": "executing"})
    assert s.qc_sid == 10
    assert s.requested_dop == 8
    assert s.actual_dop == 4
    assert s.is_downgraded
    assert s.status == SessionStatus.active


def test_sql_execution_truncates_text_and_parses_status():
    s = records.sql_execution({"SQL_TEXT": "x" * 900, "STATUS": "DONE (ERROR)", "ELAPSED_TIME": 12})
    assert len(s.sql_text) == 500
    assert s.status == ExecutionStatus.done_error
    assert s.elapsed_time_secs == 12.0
    assert s.velocity is None and s.is_hung is False


def test_wait_event_aliases():
    e = records.wait_event({"event_name": "db file sequential read", "total_waits": 0, "WAITS": 5})
    assert e.event == "db file sequential read"
    assert e.waits == 0
    assert e.wait_class == "Other"


def test_parallel_system_stats_nested_and_absent():
    stats = records.parallel_system_stats({"system_stats": {"max_parallel_servers": 64, "servers_in_use": 12}})
    assert stats.max_parallel_servers == 64
    assert stats.servers_in_use == 12
    assert records.parallel_system_stats({"sessions": []}) is None


def test_load_profile_and_resource_manager_optional():
    assert records.load_profile({}) is None
    assert records.resource_manager({}) is None
    rm = records.resource_manager({"resource_manager": {"consumer_group": "LOW", "throttle_pct": 5}})
    assert rm.consumer_group == "LOW"
    assert rm.cpu_limit == 100.0
