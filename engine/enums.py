"""
Enumerations for Severity, Query Status, Session/Execution States, and Workflow Stages

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum

from config import SEVERITY_WEIGHTS

_SEVERITY_ORDER = ("low", "medium", "high", "critical")


class Severity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"

    def weight(self) -> int:
        return SEVERITY_WEIGHTS[self.value]

    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self.value)

    @classmethod
    def parse(cls, value: object, default: Severity | None = None) -> Severity:
        text = str(value or "").strip().lower()
        if text in cls._value2member_map_:
            return cls(text)
        return default if default is not None else cls.low


class QueryStatus(str, Enum):
    connected = "connected"
    mock = "mock"
    error = "error"
    pending_config = "pending_config"


class SessionStatus(str, Enum):
    active = "ACTIVE"
    idle = "IDLE"
    done = "DONE"

    @classmethod
    def parse(cls, value: object) -> SessionStatus:
        text = str(value or "").upper()
        if "ACTIVE" in text or "EXECUTING" in text or "RUNNING" in text:
            return cls.active
        if "IDLE" in text or "WAITING" in text:
            return cls.idle
        return cls.done


class ExecutionStatus(str, Enum):
    executing = "EXECUTING"
    done = "DONE"
    done_error = "DONE (ERROR)"
    queued = "QUEUED"

    @classmethod
    def parse(cls, value: object) -> ExecutionStatus:
        text = str(value or "").upper()
        if "EXECUTING" in text or "RUNNING" in text:
            return cls.executing
        if "ERROR" in text or "FAILED" in text:
            return cls.done_error
        if "QUEUED" in text or "WAITING" in text:
            return cls.queued
        return cls.done


class TraceStatus(str, Enum):
    success = "success"
    error = "error"
    pending = "pending"


class StageStatus(str, Enum):
    success = "success"
    error = "error"
    skipped = "skipped"


class RootSpanPolicy(str, Enum):
    first = "first"
    earliest = "earliest"
    none = "none"


class TrendDirection(str, Enum):
    improving = "improving"
    declining = "declining"
    worsening = "worsening"
    stable = "stable"


class QualityCheckType(str, Enum):
    hallucination = "hallucination"
    relevance = "relevance"
    coherence = "coherence"
    factual_accuracy = "factual_accuracy"
    toxicity = "toxicity"
    bias = "bias"

    def lower_is_better(self) -> bool:
        return self in (QualityCheckType.hallucination, QualityCheckType.toxicity, QualityCheckType.bias)


class SecurityCheckType(str, Enum):
    prompt_injection = "prompt_injection"
    pii_detection = "pii_detection"
    jailbreak = "jailbreak"
    data_leakage = "data_leakage"
    harmful_content = "harmful_content"
    credential_exposure = "credential_exposure"


class CheckLocation(str, Enum):
    input = "input"
    output = "output"
    both = "both"
