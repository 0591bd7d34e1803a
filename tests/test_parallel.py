"""
Tests for parallel execution efficiency and the parallel report.
"""

from __future__ import annotations

from api.responses import PxSession
from engine.enums import SessionStatus
from engine.sessions.parallel import build_report, dop_efficiency


def _px(requested, actual, status=SessionStatus.active, allocated=0):
    return PxSession(
        requested_dop=requested,
        actual_dop=actual,
        status=status,
        servers_allocated=allocated,
        is_downgraded=actual < requested,
    )


def test_efficiency_is_aggregate_ratio_not_mean():
    assert dop_efficiency([_px(2, 2), _px(4, 2)]) == 66.67


def test_efficiency_ignores_inactive_sessions():
    sessions = [_px(4, 4), _px(16, 1, status=SessionStatus.done)]
    assert dop_efficiency(sessions) == 100.0


def test_efficiency_defaults_to_100_without_requested_dop():
    assert dop_efficiency([]) == 100.0
    assert dop_efficiency([_px(0, 0)]) == 100.0
    assert dop_efficiency([_px(8, 2, status=SessionStatus.idle)]) == 100.0


def test_report_derives_usage_and_infers_downgrades():
    payload = {
        "sessions": [
            {"qc_sid": 1, "sql_id": "q1", "requested_dop": 8, "actual_dop": 4, "servers_allocated": 8, "status": "ACTIVE"},
            {"qc_sid": 2, "sql_id": "q2", "requested_dop": 4, "actual_dop": 4, "servers_allocated": 8, "status": "ACTIVE"},
            {"qc_sid": 3, "sql_id": "q3", "requested_dop": 2, "actual_dop": 2, "servers_allocated": 4, "status": "DONE"},
        ]
    }
    report = build_report(payload, "db1")
    assert report.active_px_sessions == 2
    assert report.servers_in_use == 16
    assert report.max_parallel_servers == 128
    assert report.servers_available == 112
    assert report.dop_efficiency_percent == 66.67
    assert [d.sql_id for d in report.recent_downgrades] == ["q1"]
    assert report.recent_downgrades[0].reason == "Insufficient parallel servers"


def test_report_prefers_upstream_stats_and_downgrades():
    payload = {
        "sessions": [],
        "system_stats": {"max_parallel_servers": 32, "servers_in_use": 40},
        "downgrades": [{"sql_id": "z", "requested_dop": 8, "actual_dop": 2, "reason": "Resource manager"}],
    }
    report = build_report(payload, "db1")
    assert report.max_parallel_servers == 32
    assert report.servers_in_use == 40
    assert report.servers_available == 0
    assert report.recent_downgrades[0].reason == "Resource manager"


def test_report_none_without_sessions_or_stats():
    assert build_report({"message": "unavailable"}, "db1") is None
