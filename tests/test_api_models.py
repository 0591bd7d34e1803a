import numpy as np
import pytest
from pydantic import ValidationError

from api.requests import CheckQuery, Query, QualityQuery, TraceQuery
from api.responses import BlockingSession, CoordinatorStatus, WorkflowAggregate
from engine.enums import QualityCheckType, Severity


def test_numpy_values_serialize_as_builtins():
    status = CoordinatorStatus(agents={"db": {"calls": np.int64(3), "share": np.float32(0.5)}})
    dumped = status.model_dump()
    assert type(dumped["agents"]["db"]["calls"]) is int
    assert type(dumped["agents"]["db"]["share"]) is float

    agg = WorkflowAggregate(mean_duration_ms=np.float64(1.5))
    assert type(agg.model_dump()["mean_duration_ms"]) is float


def test_records_are_immutable():
    session = BlockingSession(sid=1)
    with pytest.raises(ValidationError):
        session.sid = 2


def test_trace_query_validates_policy():
    assert TraceQuery(root_policy="earliest").root_policy == "earliest"
    with pytest.raises(ValidationError):
        TraceQuery(root_policy="latest")


def test_check_query_params():
    q = QualityQuery(severity="high", check_type="toxicity", model="m", limit=5)
    assert q.upstream_params()["severity"] == "high"
    assert q.upstream_params()["checkType"] == "toxicity"
    assert q.filters()["check_type"] == QualityCheckType.toxicity
    assert "skip_cache" not in q.cache_params()
    assert CheckQuery(severity=Severity.low).filters()["severity"] == Severity.low


def test_query_defaults():
    q = Query(kind="blocking")
    assert q.parameters == {}
    assert q.options.skip_cache is False
    with pytest.raises(ValidationError):
        Query(kind="blocking", options={"limit": 0})
