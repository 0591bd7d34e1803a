"""
Tests for SQL monitor hang detection and summaries.
"""

from __future__ import annotations

import pytest

from engine.enums import ExecutionStatus
from engine.sessions.sqlmon import build_report, is_hung, velocity


def _hung(elapsed, rate, status=ExecutionStatus.executing):
    return is_hung(status, elapsed, rate)


@pytest.mark.parametrize(
    "elapsed,rate,expected",
    [
        (601, 9, True),
        (600, 0, False),
        (601, 10, False),
        (5000, 9.99, True),
    ],
)
def test_hang_boundaries(elapsed, rate, expected):
    assert _hung(elapsed, rate) is expected


def test_only_executing_statements_can_hang():
    for status in (ExecutionStatus.done, ExecutionStatus.done_error, ExecutionStatus.queued):
        assert _hung(10_000, 0.1, status) is False


def test_velocity_undefined_without_elapsed_time():
    assert velocity(100, 0) is None
    assert velocity(0, 50) == 0.0
    assert _hung(601, None) is False


def test_zero_rows_after_long_run_is_hung():
    assert _hung(601, velocity(0, 601)) is True


def test_report_enriches_and_summarizes():
    payload = {
        "executions": [
            {"sql_id": "a", "status": "EXECUTING", "elapsed_time_secs": 700, "rows_processed": 70},
            {"sql_id": "b", "status": "EXECUTING", "elapsed_time_secs": 100, "rows_processed": 100000},
            {"sql_id": "c", "status": "DONE", "elapsed_time_secs": 5000, "rows_processed": 1},
        ]
    }
    report = build_report(payload, "db1")
    by_id = {e.sql_id: e for e in report.executions}
    assert by_id["a"].is_hung is True
    assert by_id["a"].velocity == pytest.approx(0.1)
    assert by_id["b"].is_hung is False
    assert by_id["c"].is_hung is False
    assert report.summary.total_executing == 2
    assert report.summary.total_hung == 1
    assert report.summary.avg_elapsed_time == 400


def test_report_none_without_execution_list():
    assert build_report({"message": "nothing"}, "db1") is None
    empty = build_report({"executions": []}, "db1")
    assert empty.summary.total_executing == 0
    assert empty.summary.avg_elapsed_time == 0
