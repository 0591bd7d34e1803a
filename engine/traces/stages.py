"""
Maps flat span lists onto the ordered stages of the agent workflow pipeline.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional

from api.responses import Span, StageExecution, ToolCall
from config import STAGE_PATTERNS
from engine.enums import StageStatus

TOOL_MARKERS = ("tool", "mcp")


def _matches(span: Span, patterns: Iterable[str]) -> bool:
    return any(span.label_contains(p) for p in patterns)


def _span_order(span: Span) -> tuple:
    return (math.inf if span.start is None else span.start, span.span_key)


def tool_calls(spans: Iterable[Span]) -> List[ToolCall]:
    calls = []
    for s in spans:
        name = s.span_name.lower()
        if not any(marker in name for marker in TOOL_MARKERS):
            continue
        calls.append(
            ToolCall(
                tool_name=s.tags.get("tool.name") or s.operation_name or "unknown",
                duration_ms=s.duration_ms,
                status=StageStatus.error if s.is_error else StageStatus.success,
            )
        )
    return calls


def stage_execution(stage_id: str, matched: List[Span]) -> StageExecution:
    matched = sorted(matched, key=_span_order)
    starts = [s.start for s in matched if s.start is not None]
    ends = [s.end for s in matched if s.end is not None]
    return StageExecution(
        stage_id=stage_id,
        stage_name=stage_id.capitalize(),
        span_keys=[s.span_key for s in matched],
        start_time=min(starts) if starts else None,
        end_time=max(ends) if ends else None,
        duration_ms=sum(s.duration_ms for s in matched),
        status=StageStatus.error if any(s.is_error for s in matched) else StageStatus.success,
        tool_calls=tool_calls(matched),
    )


def map_stages(spans: List[Span], patterns: Optional[Dict[str, List[str]]] = None) -> List[StageExecution]:
    """One execution per stage with at least one matching span, ordered by start time.

    A span can feed several stages. Stages without a start time sort last;
    ties keep the stage table order.
    """
    patterns = STAGE_PATTERNS if patterns is None else patterns
    stages: List[StageExecution] = []
    for stage_id, fragments in patterns.items():
        matched = [s for s in spans if _matches(s, fragments)]
        if matched:
            stages.append(stage_execution(stage_id, matched))
    stages.sort(key=lambda st: math.inf if st.start_time is None else st.start_time)
    return stages
