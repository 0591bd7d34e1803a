"""
Package for trace analysis: span normalization, hierarchy, stage mapping and workflow aggregates.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.traces.demo import demo_traces
from engine.traces.hierarchy import SpanHierarchy, build_hierarchy
from engine.traces.spans import span, spans
from engine.traces.stages import map_stages
from engine.traces.workflow import aggregate, build_workflow_traces

__all__ = [
    "SpanHierarchy",
    "aggregate",
    "build_hierarchy",
    "build_workflow_traces",
    "demo_traces",
    "map_stages",
    "span",
    "spans",
]
