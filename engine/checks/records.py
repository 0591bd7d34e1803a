"""
Canonical quality and security check records.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional, Type, TypeVar

from api.responses import QualityCheck, SecurityCheck
from engine.enums import CheckLocation, QualityCheckType, SecurityCheckType, Severity
from engine.normalize.fields import as_record, collection

log = logging.getLogger(__name__)

CHECK_KEYS = ("checks", "results", "items")

_E = TypeVar("_E", bound=Enum)


def _member(enum: Type[_E], value: Optional[str]) -> Optional[_E]:
    text = (value or "").strip().lower()
    try:
        return enum(text)
    except ValueError:
        return None


def quality_check(raw: Any) -> Optional[QualityCheck]:
    rec = as_record(raw)
    check_type = _member(QualityCheckType, rec.optional_text("checkType", "check_type", "type"))
    if check_type is None:
        log.debug("skipping quality check with unknown type: %r", raw)
        return None
    meta = rec.record("metadata")
    return QualityCheck(
        check_id=rec.text("checkId", "check_id", "id"),
        trace_id=rec.text("traceId", "trace_id"),
        span_id=rec.text("spanId", "span_id"),
        check_type=check_type,
        score=rec.number("score"),
        passed=rec.flag("passed"),
        severity=Severity.parse(rec.optional_text("severity")),
        details=rec.text("details", "message"),
        timestamp=rec.text("timestamp", "time"),
        model=rec.optional_text("model") or meta.optional_text("model"),
        provider=rec.optional_text("provider") or meta.optional_text("provider"),
    )


def security_check(raw: Any) -> Optional[SecurityCheck]:
    rec = as_record(raw)
    check_type = _member(SecurityCheckType, rec.optional_text("checkType", "check_type", "type"))
    if check_type is None:
        log.debug("skipping security check with unknown type: %r", raw)
        return None
    meta = rec.record("metadata")
    return SecurityCheck(
        check_id=rec.text("checkId", "check_id", "id"),
        trace_id=rec.text("traceId", "trace_id"),
        span_id=rec.text("spanId", "span_id"),
        check_type=check_type,
        detected=rec.flag("detected"),
        severity=Severity.parse(rec.optional_text("severity")),
        confidence=rec.number("confidence"),
        location=_member(CheckLocation, rec.optional_text("location")) or CheckLocation.input,
        details=rec.text("details", "message"),
        timestamp=rec.text("timestamp", "time"),
        remediation=rec.optional_text("remediation"),
        model=rec.optional_text("model") or meta.optional_text("model"),
        provider=rec.optional_text("provider") or meta.optional_text("provider"),
        blocked=rec.flag("blocked", "blockedContent") or meta.flag("blockedContent", "blocked"),
    )


def quality_checks(payload: Any) -> List[QualityCheck]:
    return [c for c in (quality_check(r) for r in collection(payload, *CHECK_KEYS)) if c is not None]


def security_checks(payload: Any) -> List[SecurityCheck]:
    return [c for c in (security_check(r) for r in collection(payload, *CHECK_KEYS)) if c is not None]
