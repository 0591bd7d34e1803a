"""
Test cases for enums used by the derivation engine: severity weighting and ordering, and lenient parsing of upstream status strings.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import pytest

from engine.enums import ExecutionStatus, QualityCheckType, QueryStatus, SessionStatus, Severity


def test_severity_weight_and_rank():
    assert Severity.low.weight() < Severity.medium.weight() < Severity.high.weight() < Severity.critical.weight()
    assert [s.rank() for s in Severity] == [0, 1, 2, 3]


@pytest.mark.parametrize("raw, expected", [("HIGH", Severity.high), (" critical ", Severity.critical), ("bogus", Severity.low), (None, Severity.low)])
def test_severity_parse(raw, expected):
    assert Severity.parse(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("EXECUTING", ExecutionStatus.executing),
        ("running", ExecutionStatus.executing),
        ("DONE (ERROR)", ExecutionStatus.done_error),
        ("QUEUED", ExecutionStatus.queued),
        ("DONE (ALL ROWS)", ExecutionStatus.done),
        (None, ExecutionStatus.done),
    ],
)
def test_execution_status_parse(raw, expected):
    assert ExecutionStatus.parse(raw) == expected


def test_session_status_parse():
    assert SessionStatus.parse("active") == SessionStatus.active
    assert SessionStatus.parse("IDLE") == SessionStatus.idle
    assert SessionStatus.parse("") == SessionStatus.done


def test_query_status_values():
    assert [s.value for s in QueryStatus] == ["connected", "mock", "error", "pending_config"]


def test_lower_is_better_types():
    assert QualityCheckType.toxicity.lower_is_better()
    assert not QualityCheckType.relevance.lower_is_better()
