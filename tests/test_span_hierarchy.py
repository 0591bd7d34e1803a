"""
Tests for span normalization and hierarchy reconstruction.
"""

from __future__ import annotations

import pytest

from engine.enums import RootSpanPolicy
from engine.traces.hierarchy import build_hierarchy
from engine.traces.spans import span, spans


def test_apm_span_fields():
    s = span({
        "spanKey": "s1",
        "parentSpanKey": None,
        "spanName": "input_node",
        "operationName": "enhance",
        "serviceName": "coordinator",
        "timeStarted": "2024-01-01T00:00:00Z",
        "timeEnded": "2024-01-01T00:00:01.500Z",
        "durationInMs": 1500,
        "isError": False,
        "tags": {"query": "hello", "n": 3},
    })
    assert s.span_key == "s1"
    assert s.parent_span_key is None
    assert s.duration_ms == 1500
    assert s.end - s.start == 1.5
    assert s.tags == {"query": "hello", "n": "3"}


def test_tempo_span_attributes_and_error_status():
    s = span({
        "spanId": "abc",
        "parentSpanId": "",
        "name": "tool_execution",
        "startTimeUnixNano": "1700000000000000000",
        "endTimeUnixNano": "1700000000250000000",
        "attributes": [
            {"key": "tool.name", "value": {"stringValue": "list_compartments"}},
            {"key": "status.code", "value": {"stringValue": "STATUS_CODE_ERROR"}},
        ],
    })
    assert s.span_key == "abc"
    assert s.parent_span_key is None
    assert s.duration_ms == pytest.approx(250, abs=0.01)
    assert s.tags["tool.name"] == "list_compartments"
    assert s.is_error is True


def test_status_mapping_marks_error():
    assert span({"spanKey": "x", "status": {"code": "ERROR"}}).is_error
    assert span({"spanKey": "x", "status": "ok"}).is_error is False


def _spans():
    return spans({"spans": [
        {"spanKey": "b", "spanName": "second_root", "timeStarted": 1_700_000_000, "timeEnded": 1_700_000_004, "durationInMs": 4000},
        {"spanKey": "a", "spanName": "first_root", "timeStarted": 1_699_999_999, "timeEnded": 1_700_000_001, "durationInMs": 2000},
        {"spanKey": "c", "parentSpanKey": "a", "spanName": "child", "timeStarted": 1_700_000_000, "timeEnded": 1_700_000_001, "durationInMs": 1000},
    ]})


def test_root_policy_first_and_earliest():
    h = build_hierarchy(_spans(), RootSpanPolicy.first)
    assert h.root.span_key == "b"
    assert h.root_candidates == 2
    assert h.duration_ms() == 4000

    h = build_hierarchy(_spans(), "earliest")
    assert h.root.span_key == "a"
    assert h.duration_ms() == 2000


def test_root_policy_none_refuses_ambiguity_and_uses_window():
    h = build_hierarchy(_spans(), RootSpanPolicy.none)
    assert h.root is None
    assert h.root_candidates == 2
    assert h.duration_ms() == 5000


def test_single_root_selected_regardless_of_policy():
    only = [s for s in _spans() if s.span_key != "b"]
    h = build_hierarchy(only, RootSpanPolicy.none)
    assert h.root.span_key == "a"
    assert [c.span_key for c in h.children_of("a")] == ["c"]


def test_empty_span_list():
    h = build_hierarchy([], RootSpanPolicy.first)
    assert h.root is None
    assert h.root_candidates == 0
    assert h.duration_ms() == 0.0
